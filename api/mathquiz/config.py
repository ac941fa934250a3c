"""
Configuration Module for Math Quiz Gen
Centralizes environment variables, API settings, topic catalog, prompt templates
and localized feedback messages.
"""
import os
from dotenv import load_dotenv

# --- API Configuration ---
MODEL_NAME = "gemini-3-flash-preview"

# Allowed number of questions per generated test (inclusive)
COUNT_RANGE = (5, 20)

DEFAULT_TITLE = "Bài kiểm tra Toán Lớp 2"


def get_api_key() -> str:
    """
    Validates and returns the Gemini API Key.

    Raises:
        ValueError: If GEMINI_API_KEY is not found in environment.
    """
    # Load environment variables fresh (for testing and reload scenarios)
    load_dotenv()
    api_key = os.getenv("GEMINI_API_KEY")

    if not api_key:
        raise ValueError(
            "GEMINI_API_KEY not found. "
            "Please create a .env file with your API key."
        )
    return api_key


# --- Topic Catalog (Grade 2 curriculum) ---
TOPICS = [
    "Số và phép tính phạm vi 100",
    "Số và phép tính phạm vi 1000",
    "Cộng trừ có nhớ (phạm vi 100)",
    "Bảng nhân 2, 5",
    "Bảng chia 2, 5",
    "Hình học (Khối trụ, cầu, tứ giác)",
    "Đo lường (cm, dm, m, kg, lít)",
    "Thời gian (Ngày, giờ, tháng)",
    "Giải toán có lời văn",
]

# --- Prompt Templates ---
PROMPT_TEMPLATES = {
    "generator": """Hãy tạo một bài kiểm tra Toán lớp 2 cho học sinh Việt Nam.
Tiêu đề: {title}
Các chủ đề cần bao quát: {topics}
Số lượng câu hỏi: {count}
Độ khó: {difficulty}

Yêu cầu:
1. Câu hỏi phải phù hợp chính xác với chương trình Toán lớp 2 (Bộ sách Kết nối tri thức, Chân trời sáng tạo hoặc Cánh diều).
2. Bao gồm đa dạng các loại câu hỏi: Trắc nghiệm, Điền vào chỗ trống, Đặt tính rồi tính, Bài toán có lời văn.
3. Trường `type` phải là một trong: {question_types}
4. Câu hỏi Trắc nghiệm có đúng 4 lựa chọn dạng "A. ...", "B. ...", "C. ...", "D. ..." và `correctAnswer` là một chữ cái A/B/C/D.
5. Các câu hỏi khác không có `options`; `correctAnswer` là đáp số ngắn gọn.
6. Mỗi câu hỏi có `id` duy nhất.
7. Trả về đúng định dạng JSON yêu cầu."""
}


def get_prompt(template_name: str, **kwargs) -> str:
    """
    Retrieves a formatted prompt template.

    Args:
        template_name: Name of the template ("generator").
        **kwargs: Variables to format into the template.

    Returns:
        Formatted prompt string.

    Raises:
        KeyError: If template_name is not found in templates.
    """
    if template_name not in PROMPT_TEMPLATES:
        raise KeyError(f"Prompt template '{template_name}' not found.")

    return PROMPT_TEMPLATES[template_name].format(**kwargs)


# --- Feedback Messages (keyed by feedback tier value) ---
FEEDBACK_MESSAGES = {
    "perfect": [
        "Tuyệt đối! Em làm đúng tất cả các câu, thật xuất sắc!",
        "Điểm 10 tròn trĩnh! Em là nhà toán học nhí thực thụ!",
        "Hoàn hảo! Không có câu nào làm khó được em.",
        "Quá giỏi! Em đã chinh phục trọn vẹn bài kiểm tra này.",
    ],
    "excellent": [
        "Tuyệt vời! Em đã nắm vững kiến thức rất tốt.",
        "Rất giỏi! Chỉ còn một chút nữa là đạt điểm tối đa rồi.",
        "Em làm bài rất tốt, hãy xem lại vài câu sai nhé!",
        "Giỏi lắm! Cố gắng thêm chút nữa để đạt điểm 10 nhé.",
    ],
    "good": [
        "Khá tốt! Em hãy ôn lại những phần còn sai nhé.",
        "Em đã làm được hơn một nửa, cố lên nào!",
        "Bài làm ổn, luyện tập thêm em sẽ tiến bộ nhanh thôi.",
        "Hãy xem lại đáp án chi tiết để rút kinh nghiệm cho lần sau nhé!",
    ],
    "needsImprovement": [
        "Đừng nản lòng! Hãy xem lại lời giải và thử lại nhé.",
        "Em cần cố gắng thêm, mỗi lần luyện tập là một lần tiến bộ.",
        "Hãy đọc kỹ đề bài hơn và làm lại bài nhé!",
        "Không sao cả, hãy ôn lại bài cùng bố mẹ hoặc thầy cô nhé.",
    ],
}
