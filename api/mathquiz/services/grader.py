"""
Grading Engine
Decides whether submitted answers match the generated answer key and scores the test.

The answer key is produced by a language model, so `correct_answer` may be a bare
letter, a letter plus text, a number, a number with units or a full sentence.
Every question type has an ordered tuple of matchers; the first one that returns
True marks the answer correct. All functions here are pure.
"""
import random
import re
from typing import Callable, List, Mapping, Optional, Sequence, Tuple

from mathquiz.config import FEEDBACK_MESSAGES
from mathquiz.schemas import (
    FeedbackTier,
    GradeResult,
    MathTest,
    Question,
    QuestionType,
    QuestionVerdict,
    Rank,
)
from mathquiz.services.normalization import extract_numbers, normalize

Chooser = Callable[[Sequence[str]], str]
Matcher = Callable[[str, str, Sequence[str]], bool]

# "A.", "B)", "C. " ...
_OPTION_LABEL = re.compile(r"^[A-D][.)]\s*")


def strip_option_label(text: str) -> str:
    """Removes a leading "A." / "A)" style label and trims the rest."""
    return _OPTION_LABEL.sub("", text).strip()


def _selected_option_text(user_value: str, options: Sequence[str]) -> Optional[str]:
    user_value = user_value.strip()
    if not user_value:
        return None
    index = ord(user_value[0].lower()) - ord("a")
    if index < 0 or index >= len(options):
        return None
    return strip_option_label(options[index])


def _contains_either_way(first: str, second: str) -> bool:
    return first in second or second in first


# --- Multiple choice matchers ---

def match_letter_prefix(user_value: str, correct_answer: str, options: Sequence[str]) -> bool:
    """Handles answer keys like "A", "A.", "A. 50" and "A) 50"."""
    user = user_value.strip().lower()
    if not user:
        return False
    correct = correct_answer.strip().lower()
    return correct.startswith(user + ".") or correct.startswith(user + ")") or correct == user


def match_option_text(user_value: str, correct_answer: str, options: Sequence[str]) -> bool:
    """The chosen option's text equals the answer key's text."""
    selected = _selected_option_text(user_value, options)
    if selected is None:
        return False
    return normalize(selected) == normalize(strip_option_label(correct_answer))


def match_option_numbers(user_value: str, correct_answer: str, options: Sequence[str]) -> bool:
    """The chosen option and the answer key carry the same numbers, in order."""
    selected = _selected_option_text(user_value, options)
    if selected is None:
        return False
    selected_numbers = extract_numbers(normalize(selected))
    correct_numbers = extract_numbers(normalize(strip_option_label(correct_answer)))
    return bool(selected_numbers) and bool(correct_numbers) and selected_numbers == correct_numbers


def match_option_containment(user_value: str, correct_answer: str, options: Sequence[str]) -> bool:
    """One of the chosen option and the answer key contains the other ("số 63" vs "63")."""
    selected = _selected_option_text(user_value, options)
    if selected is None:
        return False
    return _contains_either_way(normalize(selected), normalize(strip_option_label(correct_answer)))


MULTIPLE_CHOICE_MATCHERS: Tuple[Matcher, ...] = (
    match_letter_prefix,
    match_option_text,
    match_option_numbers,
    match_option_containment,
)


# --- Free text matchers (fill in the blank, calculation, word problem) ---

def match_exact_text(user_value: str, correct_answer: str, options: Sequence[str] = ()) -> bool:
    return normalize(user_value) == normalize(correct_answer)


def match_joined_numbers(user_value: str, correct_answer: str, options: Sequence[str] = ()) -> bool:
    """
    Compares all digit runs joined together, so "12 cm" matches "12cm".

    Looser than `match_option_numbers`: ["1", "23"] and ["12", "3"] both join to "123".
    """
    user_numbers = extract_numbers(normalize(user_value))
    correct_numbers = extract_numbers(normalize(correct_answer))
    if not user_numbers or not correct_numbers:
        return False
    return "".join(user_numbers) == "".join(correct_numbers)


def match_text_containment(user_value: str, correct_answer: str, options: Sequence[str] = ()) -> bool:
    """One of the answer and the key contains the other ("Số 63" vs "63")."""
    user = normalize(user_value)
    if not user:
        # Unanswered; only `match_exact_text` can accept it (when the key normalizes to "")
        return False
    return _contains_either_way(user, normalize(correct_answer))


FREE_TEXT_MATCHERS: Tuple[Matcher, ...] = (
    match_exact_text,
    match_joined_numbers,
    match_text_containment,
)


def matchers_for(question_type: QuestionType) -> Tuple[Matcher, ...]:
    if question_type == QuestionType.MULTIPLE_CHOICE:
        return MULTIPLE_CHOICE_MATCHERS
    return FREE_TEXT_MATCHERS


def is_correct(question: Question, user_value: str) -> bool:
    """Runs the question type's matchers in order until one accepts the answer."""
    options = question.options or []
    return any(
        matcher(user_value, question.correct_answer, options)
        for matcher in matchers_for(question.type)
    )


# --- Aggregate scoring ---

def get_feedback_tier(score: float) -> FeedbackTier:
    if score >= 10:
        return FeedbackTier.PERFECT
    if score >= 8:
        return FeedbackTier.EXCELLENT
    if score >= 5:
        return FeedbackTier.GOOD
    return FeedbackTier.NEEDS_IMPROVEMENT


def get_rank(score: float) -> Rank:
    # Thresholds differ from the feedback tiers on purpose (9 vs 8)
    if score >= 9:
        return Rank.OUTSTANDING
    if score >= 8:
        return Rank.VERY_GOOD
    if score >= 5:
        return Rank.GOOD
    return Rank.KEEP_TRYING


def choose_feedback(tier: FeedbackTier, chooser: Chooser = random.choice) -> str:
    """Picks one message from the tier's pool using `chooser`."""
    return chooser(FEEDBACK_MESSAGES[tier.value])


def grade(
    test: MathTest,
    submission: Mapping[str, str],
    chooser: Chooser = random.choice,
) -> GradeResult:
    """
    Grades every question of `test` against `submission`.

    Args:
        test: The generated test. Must contain at least one question.
        submission: Mapping of question id to the submitted answer. Missing
            entries count as empty answers. Never modified.
        chooser: Picks the feedback message from a candidate list. Defaults
            to `random.choice`; pass a deterministic picker in tests.

    Returns:
        GradeResult with the unrounded score (0-10), tier, rank and per-question verdicts.
    """
    verdicts: List[QuestionVerdict] = []
    for question in test.questions:
        user_value = submission.get(question.id) or ""
        verdicts.append(
            QuestionVerdict(
                question_id=question.id,
                correct=is_correct(question, user_value),
                user_answer=user_value,
                correct_answer=question.correct_answer,
                explanation=question.explanation,
            )
        )

    correct_count = sum(1 for verdict in verdicts if verdict.correct)
    total_count = len(test.questions)
    score = (correct_count / total_count) * 10
    tier = get_feedback_tier(score)

    return GradeResult(
        correct_count=correct_count,
        total_count=total_count,
        score=score,
        tier=tier,
        rank=get_rank(score),
        message=choose_feedback(tier, chooser),
        verdicts=verdicts,
    )
