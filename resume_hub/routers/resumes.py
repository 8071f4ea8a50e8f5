import re
import uuid
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile

from resume_hub.helpers.extraction import parse_resume
from resume_hub.helpers.parsing import (
    EXTENSION_TYPES, ZIP_TYPES, extract_zip_files, is_zip, parse_document, resolve_mimetype
)
from resume_hub.models.models import Viewer
from resume_hub.models.schemas import (
    ResumeDetail, ResumeListResponse, ResumeModel, ResumeOut, UploadResponse, UploadedResume
)
from resume_hub.routers.deps import get_viewer
from resume_hub.services.db import resumes_coll
from resume_hub.services.embedding import generate_embedding
from resume_hub.services.redaction import can_view_pii, fields_for_viewer, is_privileged
from resume_hub.utils.config import CORPUS_LIMIT, MAX_UPLOAD_BYTES
from resume_hub.utils.exceptions import AuthorizationError, DocumentParseError, NotFoundError, ValidationError
from resume_hub.utils.logging_config import get_logger

router = APIRouter()
logger = get_logger(__name__)

ALLOWED_TYPES = set(EXTENSION_TYPES.values()) | set(ZIP_TYPES)


def _to_out(doc: ResumeModel, viewer: Viewer) -> ResumeOut:
    return ResumeOut(
        id=doc.resume_id,
        user_id=doc.user_id,
        filename=doc.original_name,
        uploaded_at=doc.uploaded_at,
        candidate_name=doc.parsed_data.name,
        parsed_data=fields_for_viewer(doc.parsed_data, viewer, doc.user_id),
    )


@router.post("/", response_model=UploadResponse, status_code=201)
async def upload_resume(file: UploadFile = File(...), viewer: Viewer = Depends(get_viewer)):
    """Upload a resume (PDF, DOCX, TXT) or a ZIP of resumes"""
    mimetype = resolve_mimetype(file.content_type, file.filename)
    if mimetype not in ALLOWED_TYPES:
        raise ValidationError(
            "Invalid file type. Only PDF, DOCX, TXT, and ZIP allowed.",
            field="file",
            value=file.content_type,
        )

    content = await file.read()
    if len(content) > MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=413, detail="File too large")

    if is_zip(mimetype, file.filename):
        try:
            files = extract_zip_files(content)
        except DocumentParseError as e:
            raise ValidationError(e.message, field="file") from e
    else:
        files = [(file.filename, content, mimetype)]

    # one corpus snapshot for the whole upload
    existing = await resumes_coll.find({}, {"content": 1}).limit(CORPUS_LIMIT).to_list(length=CORPUS_LIMIT)
    corpus = [r.get("content", "") for r in existing]

    uploaded = []
    for name, data, ftype in files:
        try:
            text = parse_document(data, ftype, name)
        except DocumentParseError as e:
            logger.error(f"Error processing file {name}: {e.message}")
            continue

        now = datetime.utcnow()
        resume = ResumeModel(
            resume_id=str(uuid.uuid4()),
            user_id=viewer.user_id,
            filename=f"{int(now.timestamp() * 1000)}_{name}",
            original_name=name,
            content=text,
            parsed_data=parse_resume(text),
            embedding=generate_embedding(text, corpus),
            uploaded_at=now,
        )
        await resumes_coll.insert_one(resume.model_dump())
        uploaded.append(UploadedResume(id=resume.resume_id, filename=name, uploaded_at=now))

    logger.info(f"User {viewer.user_id} uploaded {len(uploaded)}/{len(files)} resume(s)")
    return UploadResponse(
        message=f"Successfully uploaded {len(uploaded)} resume(s)",
        resumes=uploaded,
    )


@router.get("/", response_model=ResumeListResponse)
async def list_resumes(
    limit: int = Query(10, ge=1, le=100),
    offset: int = Query(0, ge=0),
    q: Optional[str] = Query(None, description="Search text, skills and candidate name"),
    viewer: Viewer = Depends(get_viewer),
):
    """List resumes; candidates only see their own"""
    query = {}
    if q:
        pattern = {"$regex": re.escape(q), "$options": "i"}
        query["$or"] = [
            {"content": pattern},
            {"parsed_data.skills": pattern},
            {"parsed_data.name": pattern},
        ]
    if not is_privileged(viewer):
        query["user_id"] = viewer.user_id

    total = await resumes_coll.count_documents(query)
    cursor = resumes_coll.find(query).sort("uploaded_at", -1).skip(offset).limit(limit)
    docs = await cursor.to_list(length=limit)

    items = [_to_out(ResumeModel(**d), viewer) for d in docs]
    next_offset = offset + limit if offset + limit < total else None
    return ResumeListResponse(items=items, total=total, next_offset=next_offset)


@router.get("/{resume_id}", response_model=ResumeDetail)
async def get_resume(resume_id: str, viewer: Viewer = Depends(get_viewer)):
    """Get a single resume with its full text"""
    doc = await resumes_coll.find_one({"resume_id": resume_id})
    if not doc:
        raise NotFoundError("Resume not found", resource="resume", resource_id=resume_id)

    resume = ResumeModel(**doc)
    if not can_view_pii(viewer, resume.user_id):
        raise AuthorizationError("Access denied", resource="resume")

    return ResumeDetail(**_to_out(resume, viewer).model_dump(), content=resume.content)
