"""
Test AI Engine
Tests test acquisition against a mocked Gemini client.
"""
import json
import os
import pytest
from datetime import datetime
from unittest.mock import MagicMock, patch
from google.genai import types

from mathquiz.config import MODEL_NAME
from mathquiz.schemas import Question, QuestionType, TestConfig
from mathquiz.services.ai_engine import (
    TestGenerationError,
    build_response_schema,
    ensure_unique_ids,
    generate_math_test,
    get_client,
    parse_test_payload,
)
from mathquiz.services.grader import grade


def _config(count=5):
    return TestConfig(topics=["Số và phép tính phạm vi 100"], count=count)


def test_generate_math_test(mock_gemini_client):
    test = generate_math_test(mock_gemini_client, _config())

    assert test.title == "Bài kiểm tra Toán Lớp 2"
    assert [question.id for question in test.questions] == ["1", "2"]
    assert test.questions[0].options == ["A. 48", "B. 50", "C. 51", "D. 59"]
    assert test.questions[1].type == QuestionType.WORD_PROBLEM
    assert datetime.fromisoformat(test.created_at).tzinfo is not None


def test_generate_math_test_request(mock_gemini_client):
    generate_math_test(mock_gemini_client, _config(count=7))

    kwargs = mock_gemini_client.models.generate_content.call_args.kwargs
    assert kwargs["model"] == MODEL_NAME
    assert "Số lượng câu hỏi: 7" in kwargs["contents"]
    assert kwargs["config"].response_mime_type == "application/json"
    assert kwargs["config"].response_schema.required == ["title", "questions"]


def test_generate_math_test_propagates_sdk_errors():
    client = MagicMock()
    client.models.generate_content.side_effect = RuntimeError("quota exceeded")

    with pytest.raises(RuntimeError, match="quota exceeded"):
        generate_math_test(client, _config())


def test_response_schema_shape():
    schema = build_response_schema()
    question_schema = schema.properties["questions"].items

    assert schema.type == types.Type.OBJECT
    assert set(question_schema.properties) == {
        "id", "type", "content", "options", "correctAnswer", "explanation"
    }
    assert question_schema.required == ["id", "type", "content", "correctAnswer"]


@pytest.mark.parametrize("text", [None, "", "not json", "[1, 2]"])
def test_parse_rejects_unusable_text(text):
    with pytest.raises(TestGenerationError):
        parse_test_payload(text, "Fallback")


def test_parse_rejects_empty_question_list():
    with pytest.raises(TestGenerationError, match="no questions"):
        parse_test_payload(json.dumps({"title": "T", "questions": []}), "Fallback")


def test_parse_rejects_malformed_question():
    payload = {"title": "T", "questions": [{"id": "1", "type": "Trắc nghiệm", "correctAnswer": "A"}]}
    with pytest.raises(TestGenerationError, match="Malformed question"):
        parse_test_payload(json.dumps(payload), "Fallback")


def test_parse_keeps_question_with_unsupported_type(generated_payload, pick_first):
    generated_payload["questions"][1]["type"] = "Tính toán"
    generated_payload["questions"].append({
        "id": "3",
        "type": "Toán đố",
        "content": "Có 4 con gà, thêm 2 con. Có tất cả mấy con?",
        "correctAnswer": "6 con gà",
    })

    test = parse_test_payload(json.dumps(generated_payload, ensure_ascii=False), "Fallback")

    assert [question.id for question in test.questions] == ["1", "2", "3"]
    assert test.questions[0].type == QuestionType.MULTIPLE_CHOICE
    assert test.questions[1].type == QuestionType.CALCULATION
    assert test.questions[2].type == QuestionType.FILL_IN_THE_BLANK

    result = grade(test, {"1": "B", "2": "8", "3": "6"}, chooser=pick_first)
    assert result.correct_count == 3


def test_parse_uses_fallback_title(generated_payload):
    generated_payload["title"] = ""
    test = parse_test_payload(json.dumps(generated_payload), "Đề dự phòng")
    assert test.title == "Đề dự phòng"


def test_ensure_unique_ids_keeps_unique():
    questions = [
        Question(id="a", type=QuestionType.CALCULATION, content="?", correct_answer="1"),
        Question(id="b", type=QuestionType.CALCULATION, content="?", correct_answer="2"),
    ]
    assert ensure_unique_ids(questions) is questions


@pytest.mark.parametrize("ids", [["1", "1", "2"], ["1", " ", "3"]])
def test_ensure_unique_ids_reindexes(ids):
    questions = [
        Question(id=question_id, type=QuestionType.CALCULATION, content="?", correct_answer=str(index))
        for index, question_id in enumerate(ids)
    ]
    fixed = ensure_unique_ids(questions)
    assert [question.id for question in fixed] == ["q1", "q2", "q3"]
    assert [question.correct_answer for question in fixed] == ["0", "1", "2"]


def test_get_client_prefers_explicit_key():
    with patch("mathquiz.services.ai_engine.genai.Client") as client_cls:
        get_client("  header-key ")
    client_cls.assert_called_once_with(api_key="header-key")


def test_get_client_falls_back_to_env():
    with patch.dict(os.environ, {"GEMINI_API_KEY": "env-key"}):
        with patch("mathquiz.config.load_dotenv"):
            with patch("mathquiz.services.ai_engine.genai.Client") as client_cls:
                get_client(None)
    client_cls.assert_called_once_with(api_key="env-key")
