"""
Exam Session State
Holds the answer sheet for one sitting of a test. No UI code.
"""
import random
from typing import Dict, Optional

from pydantic import BaseModel, Field

from mathquiz.schemas import GradeResult, MathTest
from mathquiz.services.grader import Chooser, grade


class SessionLockedError(RuntimeError):
    """Raised when an answer sheet is modified after it has been graded."""


class ExamSession(BaseModel):
    """
    Answer sheet for one attempt at a test.

    Attributes:
        test:    The test being taken.
        answers: Question id -> submitted answer.
        result:  Set once the session is submitted; None while answering.
    """

    test: MathTest
    answers: Dict[str, str] = Field(default_factory=dict)
    result: Optional[GradeResult] = None

    @property
    def is_graded(self) -> bool:
        return self.result is not None

    def answer(self, question_id: str, value: str) -> None:
        """Records (or overwrites) the answer for one question."""
        if self.is_graded:
            raise SessionLockedError("Test already graded; reset to try again.")
        if all(question.id != question_id for question in self.test.questions):
            raise KeyError(f"Unknown question id '{question_id}'")
        self.answers[question_id] = value

    def submit(self, chooser: Chooser = random.choice) -> GradeResult:
        """Grades a snapshot of the current answers and locks the session."""
        if self.is_graded:
            raise SessionLockedError("Test already graded; reset to try again.")
        self.result = grade(self.test, dict(self.answers), chooser=chooser)
        return self.result

    def reset(self) -> None:
        """Discards the answers and result so the same test can be retried."""
        self.answers = {}
        self.result = None
