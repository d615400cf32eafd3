"""
Player name normalization

- comparison keys for similarity scoring
- abbreviated-name detection ("J. Silva")
- invalid-name detection
"""
import re
from typing import Optional


# =============================================================================
# Patterns (single source of truth)
# =============================================================================

# Single uppercase letter, period, whitespace: "J. Silva"
ABBREVIATED_PATTERN = r"^[A-Z]\.\s"
INVALID_NAME_PATTERN = r"^\s*$"

_ABBREVIATED_RE = re.compile(ABBREVIATED_PATTERN)
_NON_LETTER_RE = re.compile(r"[^a-z\s]")
_WHITESPACE_RE = re.compile(r"\s+")
# Characters that must be escaped for both Python re and POSIX regex
_REGEX_SPECIAL_RE = re.compile(r"([.*+?^${}()|\[\]\\])")


def normalize_name(name: Optional[str]) -> str:
    """
    Comparison key: lowercase, ASCII letters and single spaces only.

    Accented letters are deleted rather than folded ("José" -> "jos").
    """
    if not name:
        return ""
    key = _NON_LETTER_RE.sub("", name.lower())
    return _WHITESPACE_RE.sub(" ", key).strip()


def is_abbreviated(name: Optional[str]) -> bool:
    """True for names like "J. Silva" """
    if not name:
        return False
    return _ABBREVIATED_RE.search(name) is not None


def is_invalid_name(name: Optional[str]) -> bool:
    """Missing, empty or whitespace-only names"""
    if name is None:
        return True
    if not isinstance(name, str):
        return False
    return re.match(INVALID_NAME_PATTERN, name) is not None


def escape_pattern(text: str) -> str:
    """Escape regex metacharacters so `text` matches literally"""
    return _REGEX_SPECIAL_RE.sub(r"\\\1", text)
