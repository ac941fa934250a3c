"""
Answer Normalization
Reduces raw answer strings to a comparable canonical form.
"""
import re
from typing import List

# Sentence punctuation dropped from the end of an answer
_TRAILING_PUNCTUATION = ".,;!"
_DIGIT_RUN = re.compile(r"[0-9]+")


def normalize(text: str) -> str:
    """
    Lowercases, drops trailing `.,;!` and trims whitespace.

    Internal whitespace and punctuation are left untouched, so
    "A, B" becomes "a, b" while "50." becomes "50".
    """
    text = text.lower()
    # Single backwards scan; whitespace mixed into the trailing run goes too ("50. " -> "50")
    end = len(text)
    while end and (text[end - 1] in _TRAILING_PUNCTUATION or text[end - 1].isspace()):
        end -= 1
    return text[:end].strip()


def extract_numbers(text: str) -> List[str]:
    """
    Returns every maximal run of digits in order of appearance.

    Runs are kept as strings to preserve their exact textual form
    (e.g. leading zeros).
    """
    return _DIGIT_RUN.findall(text)
