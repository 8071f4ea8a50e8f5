"""
Deterministic TF-IDF embeddings and similarity measures.

An embedding is a fixed 100-dimension vector whose basis is the first 100
distinct terms (longer than two characters) of the document in
lexicographic order. Each slot holds tf * idf, where idf is computed over the
supplied corpus plus the document itself:

    idf = 1 + ln(N / (1 + df))

The vector is L2-normalized. The corpus is always passed in explicitly so
every call is a pure function of its arguments.
"""
import math
from collections import Counter
from typing import Iterable, List, Optional, Sequence

import numpy as np

from resume_hub.helpers.text import tokenize
from resume_hub.utils.logging_config import get_logger, log_function_call

logger = get_logger(__name__)

EMBEDDING_DIM = 100
MIN_TERM_LENGTH = 3


def _terms(text: str) -> List[str]:
    return [t for t in tokenize(text) if len(t) >= MIN_TERM_LENGTH]


def _document_frequencies(basis: Sequence[str], documents: Iterable[set]) -> Counter:
    df = Counter()
    for doc_terms in documents:
        for term in basis:
            if term in doc_terms:
                df[term] += 1
    return df


@log_function_call
def generate_embedding(text: str, corpus: Optional[Sequence[str]] = None) -> List[float]:
    """Embed ``text`` against ``corpus``; same inputs always give the same vector."""
    tf = Counter(_terms(text))
    basis = sorted(tf)[:EMBEDDING_DIM]

    doc_sets = [set(_terms(doc)) for doc in (corpus or [])]
    doc_sets.append(set(tf))
    n_docs = len(doc_sets)
    df = _document_frequencies(basis, doc_sets)

    vec = np.zeros(EMBEDDING_DIM, dtype=np.float64)
    for i, term in enumerate(basis):
        idf = 1.0 + math.log(n_docs / (1.0 + df[term]))
        vec[i] = tf[term] * idf

    norm = float(np.linalg.norm(vec))
    if norm > 0:
        vec = vec / norm
    return vec.tolist()


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine of two vectors; 0 for mismatched dimensions or zero vectors."""
    if a is None or b is None or len(a) == 0 or len(a) != len(b):
        return 0.0
    va = np.asarray(a, dtype=np.float64)
    vb = np.asarray(b, dtype=np.float64)
    den = float(np.linalg.norm(va) * np.linalg.norm(vb))
    if den == 0.0 or not math.isfinite(den):
        return 0.0
    sim = float(np.dot(va, vb)) / den
    if not math.isfinite(sim):
        return 0.0
    return max(0.0, min(1.0, sim))


def token_set_similarity(text_a: str, text_b: str) -> float:
    """Jaccard index over normalized token sets; 0 when both are empty."""
    sa, sb = set(tokenize(text_a)), set(tokenize(text_b))
    union = sa | sb
    if not union:
        return 0.0
    return len(sa & sb) / len(union)
