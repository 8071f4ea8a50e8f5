"""
Rule-based field extraction for resumes.

Everything here is a pure function of the input text: no I/O, no shared
state, and malformed input yields empty fields instead of exceptions.
Skill extraction is a chain of strategies tried in order; the first one
that finds anything wins.
"""
import re
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from resume_hub.helpers.text import non_empty_lines, tokenize
from resume_hub.models.models import ParsedFields
from resume_hub.utils.logging_config import get_logger, log_function_call

logger = get_logger(__name__)

MAX_SKILLS = 20
MAX_EXPERIENCE = 10
MAX_EDUCATION = 5
MIN_SECTION_LINE = 10
MAX_SKILL_LENGTH = 40
MAX_HEADING_WORDS = 4
SUMMARY_LINES = 3
SUMMARY_CHARS = 200

EMAIL_RE = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")
PHONE_RE = re.compile(r"(?:\+?\d{1,3}[-.\s]?)?\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}")
SKILL_DELIMITERS = re.compile(r"[,;|]")
PARENTHETICAL = re.compile(r"\([^)]*\)")
CONJUNCTION = re.compile(r"&|\band\b", re.IGNORECASE)
BULLETS = "-*•·▪◦● \t"

SECTION_HEADINGS = (
    ("skills", ("skills", "technical skills", "technologies", "expertise")),
    ("experience", ("experience", "work history", "employment", "employment history", "career history")),
    ("education", ("education", "academic", "academics")),
    ("other", (
        "summary", "objective", "projects", "certifications", "certificates",
        "awards", "achievements", "interests", "hobbies", "references",
        "publications", "volunteer", "contact",
    )),
)

SKILL_VOCABULARY = (
    "javascript", "typescript", "python", "java", "c++", "c#", "go", "rust",
    "ruby", "php", "kotlin", "swift", "scala", "react", "angular", "vue",
    "node", "express", "django", "flask", "fastapi", "spring", "html", "css",
    "sql", "mysql", "postgresql", "mongodb", "redis", "elasticsearch",
    "graphql", "aws", "azure", "gcp", "docker", "kubernetes", "terraform",
    "git", "linux", "machine learning", "ai", "data science", "analytics",
    "tensorflow", "pytorch", "pandas", "numpy", "project management",
    "agile", "scrum",
)


def heading_kind(line: str) -> Optional[str]:
    """Return the section a heading line opens, or None for ordinary lines.

    A heading is a short label (text before the first colon, parentheticals
    removed) without digits that ends with one of the known section keywords,
    or starts with one when the label joins two sections with "and" or "&".
    """
    stripped = line.strip()
    if not stripped or stripped[0] in "-*•·▪◦●":
        return None
    label = PARENTHETICAL.sub(" ", stripped.split(":", 1)[0])
    words = tokenize(label)
    if not words or len(words) > MAX_HEADING_WORDS:
        return None
    if any(ch.isdigit() for ch in label):
        return None
    joined = " ".join(words)
    # "Education & Training" is named by its first keyword, "Work Experience"
    # by its last; "Education Consultant" is a job title, not a heading
    if CONJUNCTION.search(label):
        joined, anchor = f"{joined} ", "start"
    else:
        joined, anchor = f" {joined}", "end"
    for kind, keywords in SECTION_HEADINGS:
        for kw in keywords:
            if anchor == "start" and joined.startswith(f"{kw} "):
                return kind
            if anchor == "end" and joined.endswith(f" {kw}"):
                return kind
    return None


def _inline_remainder(line: str) -> str:
    parts = line.split(":", 1)
    return parts[1].strip() if len(parts) == 2 else ""


def _split_skill_line(line: str) -> List[str]:
    line = line.strip(BULLETS)
    # "Programming: Python, Java" -> "Python, Java"
    if ":" in line:
        label, rest = line.split(":", 1)
        if len(label.split()) <= 3:
            line = rest
    tokens = []
    for tok in SKILL_DELIMITERS.split(line):
        tok = tok.strip(BULLETS).rstrip(".").strip()
        if tok and len(tok) <= MAX_SKILL_LENGTH:
            tokens.append(tok)
    return tokens


class SkillExtractionStrategy(ABC):
    """Pluggable skill extraction; the Matcher only ever sees the result."""

    name = ""

    @abstractmethod
    def extract(self, text: str) -> List[str]:
        raise NotImplementedError


class SectionScanStrategy(SkillExtractionStrategy):
    """Collect delimited tokens listed under a skills heading."""

    name = "section-scan"

    def __init__(self, limit: int = MAX_SKILLS):
        self.limit = limit

    def extract(self, text: str) -> List[str]:
        skills: List[str] = []
        seen = set()
        in_section = False

        def add(tokens):
            for tok in tokens:
                key = tok.lower()
                if key in seen:
                    continue
                seen.add(key)
                skills.append(tok)
                if len(skills) >= self.limit:
                    return True
            return False

        for line in non_empty_lines(text):
            kind = heading_kind(line)
            if kind == "skills":
                in_section = True
                if add(_split_skill_line(_inline_remainder(line))):
                    break
                continue
            if kind is not None:
                if in_section:
                    break
                continue
            if in_section and add(_split_skill_line(line)):
                break

        return skills[:self.limit]


class VocabularyMatchStrategy(SkillExtractionStrategy):
    """Find known technical skills anywhere in the text."""

    name = "vocabulary-match"

    def __init__(self, vocabulary: Sequence[str] = SKILL_VOCABULARY, limit: int = MAX_SKILLS):
        self.limit = limit
        self._patterns = [
            (term, re.compile(rf"(?<![a-z0-9]){re.escape(term.lower())}(?![a-z0-9])"))
            for term in vocabulary
        ]

    def extract(self, text: str) -> List[str]:
        lowered = (text or "").lower()
        found = []
        for index, (term, pattern) in enumerate(self._patterns):
            m = pattern.search(lowered)
            if m:
                found.append((m.start(), index, term))
        found.sort()
        return [term for _, _, term in found][:self.limit]


DEFAULT_SKILL_STRATEGIES = (SectionScanStrategy(), VocabularyMatchStrategy())


def extract_email(text: str) -> Optional[str]:
    m = EMAIL_RE.search(text or "")
    return m.group(0) if m else None


def extract_phone(text: str) -> Optional[str]:
    m = PHONE_RE.search(text or "")
    return m.group(0).strip() if m else None


def extract_name(text: str) -> Optional[str]:
    """First non-empty line. Wrong for documents that do not open with a name."""
    lines = non_empty_lines(text)
    return lines[0] if lines else None


def extract_skills(text: str, strategies: Sequence[SkillExtractionStrategy] = None) -> List[str]:
    for strategy in strategies or DEFAULT_SKILL_STRATEGIES:
        skills = strategy.extract(text or "")
        if skills:
            logger.debug(f"Skills found by {strategy.name}: {len(skills)}")
            return skills[:MAX_SKILLS]
    return []


def _collect_section(text: str, section: str, cap: int) -> List[str]:
    items: List[str] = []
    current = None
    for line in non_empty_lines(text):
        kind = heading_kind(line)
        if kind is not None:
            current = kind
            line = _inline_remainder(line)
        if current == section and len(line) > MIN_SECTION_LINE:
            items.append(line)
            if len(items) >= cap:
                break
    return items


def extract_experience(text: str) -> List[str]:
    return _collect_section(text, "experience", MAX_EXPERIENCE)


def extract_education(text: str) -> List[str]:
    return _collect_section(text, "education", MAX_EDUCATION)


def extract_summary(text: str) -> str:
    return " ".join(non_empty_lines(text)[:SUMMARY_LINES])[:SUMMARY_CHARS]


@log_function_call
def parse_resume(text: str, strategies: Sequence[SkillExtractionStrategy] = None) -> ParsedFields:
    """Extract the structured fields of a resume from its raw text."""
    return ParsedFields(
        name=extract_name(text),
        email=extract_email(text),
        phone=extract_phone(text),
        skills=extract_skills(text, strategies),
        experience=extract_experience(text),
        education=extract_education(text),
        summary=extract_summary(text),
    )
