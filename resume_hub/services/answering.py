from typing import List, Sequence

from resume_hub.helpers.text import split_sentences, tokenize
from resume_hub.models.models import Answer, DocumentRecord
from resume_hub.services.embedding import cosine_similarity, generate_embedding
from resume_hub.utils.config import ASK_DEFAULT_K, MATCH_MAX_TOP_N, clamp
from resume_hub.utils.logging_config import get_logger, log_function_call

logger = get_logger(__name__)

FALLBACK_SNIPPET_CHARS = 200


def find_snippet(query: str, text: str) -> str:
    """Sentence holding the most query terms; first 200 chars when none match."""
    terms = set(tokenize(query))
    best, best_count = "", 0
    for sentence in split_sentences(text):
        count = len(terms & set(tokenize(sentence)))
        if count > best_count:
            best, best_count = sentence, count
    if not best:
        best = (text or "")[:FALLBACK_SNIPPET_CHARS]
    return best


def relevant_skills(query: str, skills: List[str]) -> List[str]:
    terms = tokenize(query)
    return [s for s in skills if any(t in s.lower() for t in terms)]


@log_function_call
def answer_query(query: str, documents: Sequence[DocumentRecord], k: int = ASK_DEFAULT_K) -> List[Answer]:
    """Rank documents for a free-text question and pull a snippet from each."""
    if not documents:
        return []
    k = clamp(k, ASK_DEFAULT_K, MATCH_MAX_TOP_N)

    corpus = [doc.text for doc in documents]
    query_vec = generate_embedding(query, corpus)

    answers = []
    for doc in documents:
        sim = cosine_similarity(query_vec, doc.embedding) if doc.embedding else 0.0
        answers.append(Answer(
            document_id=doc.id,
            candidate_name=doc.fields.name,
            snippet=find_snippet(query, doc.text),
            similarity=sim,
            relevant_skills=relevant_skills(query, doc.fields.skills),
        ))

    answers.sort(key=lambda a: (-a.similarity, a.document_id))
    logger.info(f"Answered query over {len(documents)} documents, returning top {min(k, len(answers))}")
    return answers[:k]
