from fastapi import APIRouter, Depends

from resume_hub.models.models import Viewer
from resume_hub.models.schemas import AskRequest, AskResponse, ResumeModel
from resume_hub.routers.deps import get_viewer
from resume_hub.services.answering import answer_query
from resume_hub.services.db import resumes_coll
from resume_hub.services.redaction import answer_for_viewer
from resume_hub.utils.config import ASK_DEFAULT_K, MATCH_MAX_TOP_N, clamp
from resume_hub.utils.logging_config import get_logger, PerformanceMonitor

router = APIRouter()
logger = get_logger(__name__)


@router.post("/", response_model=AskResponse)
async def ask(payload: AskRequest, viewer: Viewer = Depends(get_viewer)):
    """Answer a free-text question with the best matching resume snippets"""
    k = clamp(payload.k, ASK_DEFAULT_K, MATCH_MAX_TOP_N)

    docs = await resumes_coll.find({}).to_list(length=None)
    if not docs:
        return AskResponse(query=payload.query, answers=[], k=k)

    documents = [ResumeModel(**d).to_record() for d in docs]
    by_id = {doc.id: doc for doc in documents}
    with PerformanceMonitor("ask query", logger):
        answers = answer_query(payload.query, documents, k)

    answers = [
        answer_for_viewer(a, viewer, by_id[a.document_id].owner_id, by_id[a.document_id].fields)
        for a in answers
    ]

    return AskResponse(query=payload.query, answers=answers, k=k)
