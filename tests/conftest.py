"""
Pytest Configuration & Shared Fixtures
"""
import json
import pytest
from unittest.mock import MagicMock
from mathquiz.schemas import MathTest, Question, QuestionType


def first_choice(candidates):
    """Deterministic feedback chooser."""
    return candidates[0]


@pytest.fixture
def pick_first():
    return first_choice


@pytest.fixture
def generated_payload():
    """Raw JSON payload as Gemini returns it (camelCase, no createdAt)."""
    return {
        "title": "Bài kiểm tra Toán Lớp 2",
        "questions": [
            {
                "id": "1",
                "type": "Trắc nghiệm",
                "content": "Số liền sau của 49 là số nào?",
                "options": ["A. 48", "B. 50", "C. 51", "D. 59"],
                "correctAnswer": "B",
                "explanation": "49 + 1 = 50",
            },
            {
                "id": "2",
                "type": "Bài toán có lời văn",
                "content": "Lan có 5 quả táo, mẹ cho thêm 3 quả. Hỏi Lan có mấy quả táo?",
                "correctAnswer": "8 quả táo",
                "explanation": "5 + 3 = 8",
            },
        ],
    }


@pytest.fixture
def mock_gemini_client(generated_payload):
    """Mock Gemini client to avoid real API calls."""
    client = MagicMock()
    response = MagicMock()
    response.text = json.dumps(generated_payload, ensure_ascii=False)
    client.models.generate_content.return_value = response
    return client


@pytest.fixture
def sample_test():
    """Returns a 10-question MathTest mixing every question type."""
    questions = [
        Question(
            id="q1",
            type=QuestionType.MULTIPLE_CHOICE,
            content="35 + 15 = ?",
            options=["A. 50", "B. 60", "C. 40", "D. 45"],
            correct_answer="A",
            explanation="35 + 15 = 50",
        ),
        Question(
            id="q2",
            type=QuestionType.MULTIPLE_CHOICE,
            content="Số nào lớn nhất?",
            options=["A. 19", "B. 91", "C. 90", "D. 9"],
            correct_answer="B. 91",
        ),
        Question(
            id="q3",
            type=QuestionType.MULTIPLE_CHOICE,
            content="Có bao nhiêu quả cam?",
            options=["A. 12 quả cam", "B. 21 quả cam", "C. 10 quả cam", "D. 2 quả cam"],
            correct_answer="12 quả",
        ),
        Question(
            id="q4",
            type=QuestionType.FILL_IN_THE_BLANK,
            content="5 x 4 = ...",
            correct_answer="20",
        ),
        Question(
            id="q5",
            type=QuestionType.FILL_IN_THE_BLANK,
            content="1 dm = ... cm",
            correct_answer="10cm",
        ),
        Question(
            id="q6",
            type=QuestionType.CALCULATION,
            content="Đặt tính rồi tính: 47 + 25",
            correct_answer="72",
        ),
        Question(
            id="q7",
            type=QuestionType.CALCULATION,
            content="Đặt tính rồi tính: 90 - 36",
            correct_answer="54.",
        ),
        Question(
            id="q8",
            type=QuestionType.WORD_PROBLEM,
            content="Mỗi hộp có 5 cái bút. 3 hộp có bao nhiêu cái bút?",
            correct_answer="15 cái bút",
        ),
        Question(
            id="q9",
            type=QuestionType.WORD_PROBLEM,
            content="Bao gạo nặng 30 kg, đã dùng 12 kg. Còn lại bao nhiêu?",
            correct_answer="18 kg",
        ),
        Question(
            id="q10",
            type=QuestionType.WORD_PROBLEM,
            content="Một tuần có mấy ngày?",
            correct_answer="7 ngày",
        ),
    ]
    return MathTest(title="Bài kiểm tra Toán Lớp 2", questions=questions)


@pytest.fixture
def all_correct_answers():
    return {
        "q1": "A",
        "q2": "B",
        "q3": "A",
        "q4": "20",
        "q5": "10 cm",
        "q6": "72",
        "q7": "54",
        "q8": "15",
        "q9": "18kg",
        "q10": "7 ngày.",
    }
