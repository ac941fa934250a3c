"""
Document Generator Service
Renders a MathTest as a printable exam paper (.docx) with an optional answer key.
"""
from typing import Optional
from docx import Document
from docx.shared import Pt, Inches

from mathquiz.schemas import Difficulty, MathTest, QuestionType
from mathquiz.services.grader import strip_option_label

EXAM_DURATION = "40 phút"


def _add_multiple_choice(doc: Document, question) -> None:
    for index, option in enumerate(question.options):
        p_opt = doc.add_paragraph()
        p_opt.paragraph_format.left_indent = Inches(0.5)
        p_opt.add_run(f"{chr(ord('A') + index)}. {strip_option_label(option)}")


def _add_answer_line(doc: Document) -> None:
    p_line = doc.add_paragraph()
    p_line.paragraph_format.left_indent = Inches(0.5)
    p_line.add_run("Trả lời: ........................................................")


def _add_header(doc: Document, test: MathTest, difficulty: Optional[Difficulty]) -> None:
    heading = doc.add_heading(test.title, 0)
    heading.alignment = 1  # Center

    p_student = doc.add_paragraph()
    p_student.add_run("Họ và tên: ").bold = True
    p_student.add_run("." * 40)
    p_student.add_run("   Lớp: ").bold = True
    p_student.add_run("." * 15)

    p_info = doc.add_paragraph()
    if difficulty is not None:
        p_info.add_run(f"Độ khó: {difficulty.value}").bold = True
        p_info.add_run(" | ")
    p_info.add_run(f"Thời gian làm bài: {EXAM_DURATION}")

    # Score / teacher comment box
    box = doc.add_table(rows=2, cols=2)
    box.style = 'Table Grid'
    box.rows[0].cells[0].text = "Điểm"
    box.rows[0].cells[1].text = "Lời phê của giáo viên"

    doc.add_paragraph("_" * 50).alignment = 1  # Divider


def _add_answer_key(doc: Document, test: MathTest) -> None:
    doc.add_page_break()
    doc.add_heading("Đáp án và lời giải", level=1)

    table = doc.add_table(rows=1, cols=3)
    table.style = 'Table Grid'
    hdr_cells = table.rows[0].cells
    hdr_cells[0].text = 'Câu'
    hdr_cells[1].text = 'Đáp án'
    hdr_cells[2].text = 'Lời giải'

    for number, question in enumerate(test.questions, start=1):
        row_cells = table.add_row().cells
        row_cells[0].text = str(number)
        row_cells[1].text = question.correct_answer
        row_cells[2].text = question.explanation or "-"


def generate_docx(
    test: MathTest,
    output_path: str,
    difficulty: Optional[Difficulty] = None,
    show_answers: bool = False,
) -> None:
    """
    Generates a .docx exam paper from a MathTest.

    Args:
        test: The test to print.
        output_path: Absolute path where the .docx file should be saved.
        difficulty: Printed in the header when given.
        show_answers: Append the answer key on a separate page.
    """
    print(f"\n[Publisher] Generating DOCX at {output_path}...")
    doc = Document()

    doc.core_properties.title = test.title
    doc.core_properties.subject = "Toán"

    style = doc.styles['Normal']
    style.font.size = Pt(14)

    _add_header(doc, test, difficulty)

    for number, question in enumerate(test.questions, start=1):
        p = doc.add_paragraph()
        p.paragraph_format.space_before = Pt(12)
        run = p.add_run(f"Câu {number}. {question.content}")
        run.bold = True

        if question.type == QuestionType.MULTIPLE_CHOICE and question.options:
            _add_multiple_choice(doc, question)
        else:
            _add_answer_line(doc)

    if show_answers:
        _add_answer_key(doc, test)

    doc.save(output_path)
    print("[Publisher] Done! File saved.")
