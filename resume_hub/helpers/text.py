import re
from typing import List

_NON_ALNUM = re.compile(r"[^a-z0-9]+")
_SENTENCE_END = re.compile(r"[.!?]\s+")


def normalize_text(text: str) -> str:
    """Lowercase, turn every non-alphanumeric run into one space, trim."""
    if not text:
        return ""
    return _NON_ALNUM.sub(" ", text.lower()).strip()


def tokenize(text: str) -> List[str]:
    normalized = normalize_text(text)
    return normalized.split(" ") if normalized else []


def split_sentences(text: str) -> List[str]:
    """Split on '.', '!' or '?' followed by whitespace; drops empty pieces."""
    if not text:
        return []
    return [s.strip() for s in _SENTENCE_END.split(text) if s.strip()]


def non_empty_lines(text: str) -> List[str]:
    if not text:
        return []
    return [ln.strip() for ln in text.splitlines() if ln.strip()]
