import uuid
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query

from resume_hub.models.models import JobRecord, Viewer
from resume_hub.models.schemas import (
    JobCreate, JobListResponse, JobModel, JobOut, JobUpdate, MatchRequest, MatchResponse, ResumeModel
)
from resume_hub.routers.deps import get_viewer, require_privileged
from resume_hub.services.db import jobs_coll, resumes_coll
from resume_hub.services.embedding import generate_embedding
from resume_hub.services.matching import job_text, match_candidates
from resume_hub.services.redaction import match_for_viewer
from resume_hub.utils.exceptions import NotFoundError
from resume_hub.utils.logging_config import get_logger, PerformanceMonitor

router = APIRouter()
logger = get_logger(__name__)


def _to_out(job: JobModel) -> JobOut:
    return JobOut(
        id=job.job_id,
        title=job.title,
        description=job.description,
        requirements=job.requirements,
        skills=job.skills,
        created_at=job.created_at,
    )


def _embed_job(job: JobModel) -> list:
    record = JobRecord(
        id=job.job_id, title=job.title, description=job.description,
        skills=job.skills, requirements=job.requirements,
    )
    return generate_embedding(job_text(record))


async def _get_job(job_id: str) -> JobModel:
    doc = await jobs_coll.find_one({"job_id": job_id})
    if not doc:
        raise NotFoundError("Job not found", resource="job", resource_id=job_id)
    return JobModel(**doc)


@router.post("/", response_model=JobOut, status_code=201)
async def create_job(payload: JobCreate, viewer: Viewer = Depends(require_privileged)):
    """Create a job posting (recruiters and admins only)"""
    job = JobModel(
        job_id=str(uuid.uuid4()),
        created_by=viewer.user_id,
        **payload.model_dump(),
    )
    job.embedding = _embed_job(job)
    await jobs_coll.insert_one(job.model_dump())
    logger.info(f"Job {job.job_id} created by {viewer.user_id}")
    return _to_out(job)


@router.get("/", response_model=JobListResponse)
async def list_jobs(
    limit: int = Query(10, ge=1, le=100),
    offset: int = Query(0, ge=0),
    viewer: Viewer = Depends(get_viewer),
):
    """List jobs, newest first"""
    total = await jobs_coll.count_documents({})
    cursor = jobs_coll.find({}).sort("created_at", -1).skip(offset).limit(limit)
    docs = await cursor.to_list(length=limit)

    items = [_to_out(JobModel(**d)) for d in docs]
    next_offset = offset + limit if offset + limit < total else None
    return JobListResponse(items=items, total=total, next_offset=next_offset)


@router.get("/{job_id}", response_model=JobOut)
async def get_job(job_id: str, viewer: Viewer = Depends(get_viewer)):
    """Get a single job"""
    return _to_out(await _get_job(job_id))


@router.put("/{job_id}", response_model=JobOut)
async def update_job(job_id: str, payload: JobUpdate, viewer: Viewer = Depends(require_privileged)):
    """Update a job; the embedding is recomputed from the new text"""
    job = await _get_job(job_id)
    changes = payload.model_dump(exclude_none=True)
    if not changes:
        return _to_out(job)

    job = job.model_copy(update={**changes, "updated_at": datetime.utcnow()})
    job.embedding = _embed_job(job)

    await jobs_coll.update_one(
        {"job_id": job_id},
        {"$set": {**changes, "embedding": job.embedding, "updated_at": job.updated_at}},
    )
    logger.info(f"Job {job_id} updated by {viewer.user_id}: {sorted(changes)}")
    return _to_out(job)


@router.post("/{job_id}/match", response_model=MatchResponse)
async def match_job(
    job_id: str,
    payload: Optional[MatchRequest] = None,
    viewer: Viewer = Depends(get_viewer),
):
    """Rank stored resumes against a job"""
    job = await _get_job(job_id)
    top_n = payload.top_n if payload else None

    docs = await resumes_coll.find({}).to_list(length=None)
    resumes = [ResumeModel(**d) for d in docs]
    by_id = {r.resume_id: r for r in resumes}

    with PerformanceMonitor(f"match job {job_id}", logger):
        matches = match_candidates(job.to_record(), [r.to_record() for r in resumes], top_n)

    matches = [
        match_for_viewer(m, viewer, by_id[m.candidate_id].user_id, by_id[m.candidate_id].parsed_data)
        for m in matches
    ]

    return MatchResponse(job_id=job.job_id, job_title=job.title, matches=matches)
