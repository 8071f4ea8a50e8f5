from pydantic import BaseModel, Field
from typing import List, Optional


class ParsedFields(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    skills: List[str] = Field(default_factory=list)
    experience: List[str] = Field(default_factory=list)
    education: List[str] = Field(default_factory=list)
    summary: str = ""


class DocumentRecord(BaseModel):
    """A parsed resume as the scoring core sees it."""
    id: str
    owner_id: str
    text: str
    fields: ParsedFields = Field(default_factory=ParsedFields)
    embedding: List[float] = Field(default_factory=list)


class JobRecord(BaseModel):
    id: str
    title: str
    description: str
    skills: List[str] = Field(default_factory=list)
    requirements: List[str] = Field(default_factory=list)
    created_by: Optional[str] = None
    embedding: List[float] = Field(default_factory=list)


class MatchResult(BaseModel):
    candidate_id: str
    candidate_name: Optional[str] = None
    email: Optional[str] = None
    score: float
    matched_skills: List[str] = Field(default_factory=list)
    missing_skills: List[str] = Field(default_factory=list)
    matched_requirements: List[str] = Field(default_factory=list)
    missing_requirements: List[str] = Field(default_factory=list)
    evidence: List[str] = Field(default_factory=list)


class Answer(BaseModel):
    document_id: str
    candidate_name: Optional[str] = None
    snippet: str
    similarity: float
    relevant_skills: List[str] = Field(default_factory=list)


class Viewer(BaseModel):
    """Caller identity forwarded by the auth layer."""
    user_id: str
    role: str = "candidate"
