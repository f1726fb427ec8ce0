from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional, Dict

from matching.status import CandidateStatus


# Job description submitted by the user
class JobIn(BaseModel):
    title: str = Field(..., min_length=1)
    company: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    experience: Optional[str] = None
    location: Optional[str] = None

    @field_validator("title", "company")
    @classmethod
    def strip_required(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value.strip()

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, value: str) -> str:
        # stored as written; only a blank description is refused
        if not value.strip():
            raise ValueError("must not be blank")
        return value


class JobOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    company: str
    content: str
    required_skills: List[str] = []
    experience: Optional[str] = None
    location: Optional[str] = None
    created_at: Optional[datetime] = None


class JobSummary(BaseModel):
    id: int
    title: str
    company: str
    required_skills: List[str] = []


# Preview of an uploaded job description file
class JobPreview(BaseModel):
    file_name: str
    title: str = ""
    required_skills: List[str] = []
    raw_text: str


class CandidateOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    job_description_id: int
    name: str = ""
    email: str = ""
    phone: Optional[str] = None
    file_name: str
    file_size: int = 0
    match_score: int
    matched_skills: List[str] = []
    missing_skills: List[str] = []
    experience: Optional[str] = None
    summary: Optional[str] = None
    status: CandidateStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# A document that could not be read and was not scored
class ExtractionFailureOut(BaseModel):
    file_name: str
    file_size: int = 0
    error: str


class ScreeningReport(BaseModel):
    job_id: int
    total: int
    succeeded: int
    failed: int
    candidates: List[CandidateOut] = []
    failures: List[ExtractionFailureOut] = []


class StatusUpdate(BaseModel):
    status: str


class InvitationRequest(BaseModel):
    candidate_ids: List[int] = Field(..., min_length=1)


class InvitationResult(BaseModel):
    invited: List[int] = []
    skipped: List[int] = []


class JobStats(BaseModel):
    job_id: int
    total: int
    bands: Dict[str, int]
    statuses: Dict[str, int]
    average_shortlisted_score: Optional[int] = None
