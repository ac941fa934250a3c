"""
AI Engine Service
Handles all interactions with Google Gemini API for math test generation.
"""
import json
from datetime import datetime, timezone
from typing import List, Optional
from google import genai
from google.genai import types
from pydantic import ValidationError

from mathquiz.config import get_api_key, get_prompt, MODEL_NAME
from mathquiz.schemas import QUESTION_TYPE_VALUES, MathTest, Question, QuestionType, TestConfig


class TestGenerationError(Exception):
    """Raised when Gemini returns an empty or unusable test."""
    __test__ = False


def get_client(api_key: Optional[str] = None) -> genai.Client:
    """
    Creates and returns a configured Gemini API client.

    Args:
        api_key: Key supplied by the caller (e.g. request header). Falls back
            to GEMINI_API_KEY from the environment when blank.

    Returns:
        genai.Client: Authenticated Gemini client.

    Raises:
        ValueError: If API key is not configured.
    """
    resolved_key = api_key.strip() if api_key else ""
    if not resolved_key:
        resolved_key = get_api_key()
    return genai.Client(api_key=resolved_key)


def build_test_prompt(config: TestConfig) -> str:
    """Render the generator prompt for a configuration."""
    return get_prompt(
        "generator",
        title=config.title,
        topics=", ".join(config.topics),
        count=config.count,
        difficulty=config.difficulty.value,
        question_types=", ".join(question_type.value for question_type in QuestionType),
    )


def build_response_schema() -> types.Schema:
    """JSON schema Gemini must follow: a title plus an array of questions."""
    question_schema = types.Schema(
        type=types.Type.OBJECT,
        properties={
            "id": types.Schema(type=types.Type.STRING),
            "type": types.Schema(
                type=types.Type.STRING,
                description="One of: " + ", ".join(q_type.value for q_type in QuestionType),
            ),
            "content": types.Schema(type=types.Type.STRING),
            "options": types.Schema(
                type=types.Type.ARRAY,
                items=types.Schema(type=types.Type.STRING),
                description="Only for Multiple Choice questions",
            ),
            "correctAnswer": types.Schema(type=types.Type.STRING),
            "explanation": types.Schema(type=types.Type.STRING),
        },
        required=["id", "type", "content", "correctAnswer"],
    )
    return types.Schema(
        type=types.Type.OBJECT,
        properties={
            "title": types.Schema(type=types.Type.STRING),
            "questions": types.Schema(type=types.Type.ARRAY, items=question_schema),
        },
        required=["title", "questions"],
    )


def ensure_unique_ids(questions: List[Question]) -> List[Question]:
    """
    Reassign ids q1..qN when the model returned blank or duplicate ids.

    Answers are keyed by question id, so ids must be unique within a test.
    Lists that already have unique ids are returned unchanged.
    """
    ids = [question.id.strip() for question in questions]
    if all(ids) and len(set(ids)) == len(ids):
        return questions

    print("[Generator] Duplicate or blank question ids, reindexing...")
    return [
        question.model_copy(update={"id": f"q{index}"})
        for index, question in enumerate(questions, start=1)
    ]


def parse_test_payload(text: Optional[str], fallback_title: str) -> MathTest:
    """
    Converts Gemini's JSON text into a MathTest stamped with the current time.

    Raises:
        TestGenerationError: If the text is empty, not JSON, or has no valid questions.
    """
    if not text:
        raise TestGenerationError("[Generator] Empty response from Gemini")

    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        raise TestGenerationError(f"[Generator] Response is not valid JSON: {e}") from e

    if not isinstance(raw, dict):
        raise TestGenerationError("[Generator] Response is not a JSON object")

    raw_questions = raw.get("questions") or []
    for item in raw_questions:
        if isinstance(item, dict) and item.get("type") not in QUESTION_TYPE_VALUES:
            print(f"[Generator] Unsupported question type {item.get('type')!r}, mapping to a supported type")

    try:
        questions = [Question.model_validate(item) for item in raw_questions]
    except ValidationError as e:
        raise TestGenerationError(f"[Generator] Malformed question: {e}") from e

    if not questions:
        raise TestGenerationError("[Generator] Response contains no questions")

    return MathTest(
        title=raw.get("title") or fallback_title,
        questions=ensure_unique_ids(questions),
        created_at=datetime.now(timezone.utc).isoformat(),
    )


def generate_math_test(client: genai.Client, config: TestConfig) -> MathTest:
    """
    Asks Gemini for a complete test matching `config`.

    Args:
        client: Authenticated Gemini client.
        config: Topics, question count, difficulty and title.

    Returns:
        MathTest with `created_at` set.

    Raises:
        TestGenerationError: If the response cannot be turned into a test.
        Exception: If the Gemini call itself fails.
    """
    print(f"\n[Generator] Requesting {config.count} questions ({config.difficulty.value})...")

    try:
        response = client.models.generate_content(
            model=MODEL_NAME,
            contents=build_test_prompt(config),
            config=types.GenerateContentConfig(
                response_mime_type="application/json",
                response_schema=build_response_schema(),
            )
        )
    except Exception as e:
        print(f"[Generator] Error: {e}")
        raise e

    test = parse_test_payload(response.text, config.title)
    if len(test.questions) != config.count:
        print(f"[Generator] Requested {config.count} questions, received {len(test.questions)}")
    return test
