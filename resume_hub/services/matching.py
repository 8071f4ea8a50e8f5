from typing import List, Sequence, Tuple

from resume_hub.helpers.text import split_sentences
from resume_hub.models.models import DocumentRecord, JobRecord, MatchResult
from resume_hub.services.embedding import token_set_similarity
from resume_hub.utils.config import MATCH_DEFAULT_TOP_N, MATCH_MAX_TOP_N, clamp
from resume_hub.utils.logging_config import get_logger, log_function_call

logger = get_logger(__name__)

# weight of text similarity against skill coverage in the final score
TEXT_WEIGHT = 0.5
MAX_EVIDENCE = 3


def job_text(job: JobRecord) -> str:
    return " ".join([job.title, job.description, " ".join(job.skills), " ".join(job.requirements)])


def candidate_text(candidate: DocumentRecord) -> str:
    return f"{candidate.text} {' '.join(candidate.fields.skills)}"


def match_skills(job_skills: List[str], cv_skills: List[str]) -> Tuple[List[str], List[str]]:
    # bidirectional containment so "Node" matches "Node.js"
    cvs = [c.lower() for c in cv_skills if c]
    matched, missing = [], []
    for skill in job_skills:
        s = skill.lower()
        if s and any(c in s or s in c for c in cvs):
            matched.append(skill)
        else:
            missing.append(skill)
    return matched, missing


def match_requirements(requirements: List[str], text: str) -> Tuple[List[str], List[str]]:
    lowered = text.lower()
    matched, missing = [], []
    for req in requirements:
        if req and req.lower() in lowered:
            matched.append(req)
        else:
            missing.append(req)
    return matched, missing


def find_evidence(skills: List[str], text: str, limit: int = MAX_EVIDENCE) -> List[str]:
    sentences = split_sentences(text)
    lowered = [s.lower() for s in sentences]
    out = []
    for skill in skills:
        needle = skill.lower()
        for sentence, low in zip(sentences, lowered):
            if needle in low:
                if sentence not in out:
                    out.append(sentence)
                break
        if len(out) >= limit:
            break
    return out


def skill_ratio(matched: int, total: int) -> float:
    # a job without skills gives full credit
    return matched / total if total > 0 else 1.0


def score_candidate(job: JobRecord, candidate: DocumentRecord, job_blob: str = None) -> MatchResult:
    job_blob = job_blob if job_blob is not None else job_text(job)
    cv_blob = candidate_text(candidate)

    sim = token_set_similarity(job_blob, cv_blob)
    matched_skills, missing_skills = match_skills(job.skills, candidate.fields.skills)
    matched_reqs, missing_reqs = match_requirements(job.requirements, cv_blob)
    ratio = skill_ratio(len(matched_skills), len(job.skills))

    total = (TEXT_WEIGHT * sim) + ((1 - TEXT_WEIGHT) * ratio)
    return MatchResult(
        candidate_id=candidate.id,
        candidate_name=candidate.fields.name,
        email=candidate.fields.email,
        score=total,
        matched_skills=matched_skills,
        missing_skills=missing_skills,
        matched_requirements=matched_reqs,
        missing_requirements=missing_reqs,
        evidence=find_evidence(matched_skills, candidate.text),
    )


@log_function_call
def match_candidates(
    job: JobRecord, candidates: Sequence[DocumentRecord], top_n: int = MATCH_DEFAULT_TOP_N
) -> List[MatchResult]:
    """Rank candidates for a job: score descending, candidate id ascending on ties."""
    if not candidates:
        return []
    top_n = clamp(top_n, MATCH_DEFAULT_TOP_N, MATCH_MAX_TOP_N)
    job_blob = job_text(job)

    out = [score_candidate(job, cv, job_blob) for cv in candidates]
    out.sort(key=lambda r: (-r.score, r.candidate_id))

    logger.info(f"Matched {len(out)} candidates for job {job.id}, returning top {min(top_n, len(out))}")
    return out[:top_n]
