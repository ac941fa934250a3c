"""
Data Schemas for Math Quiz Gen
Pydantic models for type-safe data validation across the application.
Wire format is camelCase (matching the generated test JSON), attributes are snake_case.
"""
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator
from pydantic.alias_generators import to_camel

from mathquiz.config import COUNT_RANGE, DEFAULT_TITLE


class CamelModel(BaseModel):
    """Base model serializing to camelCase while accepting both spellings."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Difficulty(str, Enum):
    """Difficulty levels offered in the configuration panel."""
    EASY = "Dễ"
    MEDIUM = "Trung bình"
    HARD = "Khó (Nâng cao)"


class QuestionType(str, Enum):
    """Supported question types. Everything but MULTIPLE_CHOICE is graded as free text."""
    MULTIPLE_CHOICE = "Trắc nghiệm"
    FILL_IN_THE_BLANK = "Điền vào chỗ trống"
    CALCULATION = "Đặt tính rồi tính"
    WORD_PROBLEM = "Bài toán có lời văn"


QUESTION_TYPE_VALUES = {question_type.value for question_type in QuestionType}

# Other spellings the model uses for the same question types (lowercased)
QUESTION_TYPE_ALIASES = {
    "trắc nghiệm": QuestionType.MULTIPLE_CHOICE,
    "multiple choice": QuestionType.MULTIPLE_CHOICE,
    "multiple_choice": QuestionType.MULTIPLE_CHOICE,
    "điền vào chỗ trống": QuestionType.FILL_IN_THE_BLANK,
    "điền số": QuestionType.FILL_IN_THE_BLANK,
    "tính toán": QuestionType.CALCULATION,
    "đặt tính rồi tính": QuestionType.CALCULATION,
    "bài toán có lời văn": QuestionType.WORD_PROBLEM,
    "giải toán có lời văn": QuestionType.WORD_PROBLEM,
}


class FeedbackTier(str, Enum):
    """Selects the pool of feedback messages shown after grading."""
    PERFECT = "perfect"
    EXCELLENT = "excellent"
    GOOD = "good"
    NEEDS_IMPROVEMENT = "needsImprovement"


class Rank(str, Enum):
    """Badge label shown next to the score."""
    OUTSTANDING = "Xuất Sắc"
    VERY_GOOD = "Giỏi"
    GOOD = "Khá"
    KEEP_TRYING = "Cần Cố Gắng"


class Question(CamelModel):
    """A single generated question. `options` is only set for multiple choice."""
    id: str = Field(..., description="Unique identifier within a test")
    type: QuestionType = Field(..., description="Question format type")
    content: str = Field(..., description="The question text")
    options: Optional[List[str]] = Field(
        None,
        description="Answer choices, optionally labelled 'A. ...' (multiple choice only)"
    )
    correct_answer: str = Field(
        ...,
        description="Free-form correct answer (a letter, a number, a number with units, a sentence)"
    )
    explanation: str = Field("", description="Worked solution shown after grading")

    @field_validator("type", mode="before")
    @classmethod
    def _fallback_type(cls, value):
        # Unknown labels from the model are graded as free text, like every non-MC type
        if isinstance(value, QuestionType):
            return value
        if isinstance(value, str) and value not in QUESTION_TYPE_VALUES:
            return QUESTION_TYPE_ALIASES.get(value.strip().lower(), QuestionType.FILL_IN_THE_BLANK)
        return value

    @field_validator("id", "correct_answer", mode="before")
    @classmethod
    def _coerce_to_str(cls, value):
        # The model occasionally emits bare numbers for ids and answers
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("explanation", mode="before")
    @classmethod
    def _none_to_empty(cls, value):
        return "" if value is None else value


class MathTest(CamelModel):
    """A generated test. Immutable once created."""
    model_config = ConfigDict(frozen=True)

    title: str = Field(..., description="Test title")
    questions: List[Question] = Field(
        ...,
        min_length=1,
        description="Questions in presentation and grading order"
    )
    created_at: Optional[str] = Field(None, description="ISO-8601 creation timestamp")


class TestConfig(CamelModel):
    """Options collected by the configuration panel."""
    __test__ = False

    topics: List[str] = Field(..., min_length=1, description="Topics to cover")
    count: int = Field(
        10,
        ge=COUNT_RANGE[0],
        le=COUNT_RANGE[1],
        description="Number of questions to generate"
    )
    difficulty: Difficulty = Field(Difficulty.MEDIUM, description="Target difficulty")
    title: str = Field(DEFAULT_TITLE, description="Title printed on the test")

    @field_validator("topics")
    @classmethod
    def _strip_blank_topics(cls, value: List[str]) -> List[str]:
        topics = [topic.strip() for topic in value if topic.strip()]
        if not topics:
            raise ValueError("at least one topic is required")
        return topics


class QuestionVerdict(CamelModel):
    """Correctness decision for one question."""
    model_config = ConfigDict(frozen=True)

    question_id: str
    correct: bool
    user_answer: str
    correct_answer: str
    explanation: str = ""


class GradeResult(CamelModel):
    """Aggregate result of one grading run. `score` is kept unrounded."""
    model_config = ConfigDict(frozen=True)

    correct_count: int
    total_count: int
    score: float = Field(..., ge=0, le=10)
    tier: FeedbackTier
    rank: Rank
    message: str
    verdicts: List[QuestionVerdict]

    @computed_field
    @property
    def display_score(self) -> str:
        return f"{self.score:.1f}"
