from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

from resume_hub.models.models import ParsedFields, DocumentRecord, JobRecord, MatchResult, Answer

# -------- Resumes --------
class ResumeModel(BaseModel):
    resume_id: str
    user_id: str
    filename: str
    original_name: str
    content: str
    parsed_data: ParsedFields = Field(default_factory=ParsedFields)
    embedding: List[float] = []
    uploaded_at: datetime = Field(default_factory=datetime.utcnow)

    def to_record(self) -> DocumentRecord:
        return DocumentRecord(
            id=self.resume_id,
            owner_id=self.user_id,
            text=self.content,
            fields=self.parsed_data,
            embedding=self.embedding,
        )

class UploadedResume(BaseModel):
    id: str
    filename: str
    uploaded_at: datetime

class UploadResponse(BaseModel):
    message: str
    resumes: List[UploadedResume] = []

class ResumeOut(BaseModel):
    id: str
    user_id: str
    filename: str
    uploaded_at: datetime
    candidate_name: Optional[str] = None
    parsed_data: ParsedFields

class ResumeDetail(ResumeOut):
    content: str

class ResumeListResponse(BaseModel):
    items: List[ResumeOut] = []
    total: int
    next_offset: Optional[int] = None

# -------- Jobs --------
class JobModel(BaseModel):
    job_id: str
    title: str
    description: str
    requirements: List[str] = []
    skills: List[str] = []
    created_by: str
    embedding: List[float] = []
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    def to_record(self) -> JobRecord:
        return JobRecord(
            id=self.job_id,
            title=self.title,
            description=self.description,
            skills=self.skills,
            requirements=self.requirements,
            created_by=self.created_by,
            embedding=self.embedding,
        )

class JobCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    requirements: List[str] = []
    skills: List[str] = []

class JobUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = Field(None, min_length=1)
    requirements: Optional[List[str]] = None
    skills: Optional[List[str]] = None

class JobOut(BaseModel):
    id: str
    title: str
    description: str
    requirements: List[str] = []
    skills: List[str] = []
    created_at: datetime

class JobListResponse(BaseModel):
    items: List[JobOut] = []
    total: int
    next_offset: Optional[int] = None

# -------- Matching --------
class MatchRequest(BaseModel):
    top_n: Optional[int] = Field(None, ge=1)

class MatchResponse(BaseModel):
    job_id: str
    job_title: str
    matches: List[MatchResult] = []

# -------- Ask --------
class AskRequest(BaseModel):
    query: str = Field(..., min_length=1, max_length=2000)
    k: Optional[int] = Field(None, ge=1)

class AskResponse(BaseModel):
    query: str
    answers: List[Answer] = []
    k: int
