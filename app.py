from __future__ import annotations
import logging
import os
from collections import Counter
from contextlib import asynccontextmanager
from pathlib import Path
from typing import List, Optional

from fastapi import Depends, FastAPI, File, Header, HTTPException, Query, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from starlette.concurrency import run_in_threadpool

from config import Settings, get_settings
from errors import (
    CandidateNotFound,
    ExtractionFailure,
    InvalidStatusTransition,
    JobNotFound,
    PersistenceFailure,
)
from matching.pipeline import CandidateDocument, JobRequirement, ScreeningPipeline, rank_candidates
from matching.scorer import EXCELLENT, GOOD, POOR, score_band
from matching.status import CandidateStatus, parse_status
from matching.vocabulary import SkillVocabulary
from models import Base
from parsers.contact import ContactParser
from parsers.extract import TextExtractor
from parsers.jd_extract import extract_jd_details
from repository import CandidateRepository, JobRepository, to_requirement
from schemas import (
    CandidateOut,
    ExtractionFailureOut,
    InvitationRequest,
    InvitationResult,
    JobIn,
    JobOut,
    JobPreview,
    JobStats,
    JobSummary,
    ScreeningReport,
    StatusUpdate,
)

settings: Settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

engine = None
Session = sessionmaker(autoflush=False, expire_on_commit=False, future=True)
vocabulary: SkillVocabulary = SkillVocabulary.default()
extractor = TextExtractor()
contact_parser = ContactParser()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Read settings, open the database and build the shared parsers."""
    global settings, engine, vocabulary, extractor, contact_parser

    settings = get_settings()
    os.makedirs(settings.base_dir, exist_ok=True)

    db_url = settings.resolved_database_url
    connect_args = {"check_same_thread": False} if db_url.startswith("sqlite") else {}
    logger.info(f"Using database: {db_url}")
    engine = create_engine(db_url, future=True, connect_args=connect_args)
    Session.configure(bind=engine)
    Base.metadata.create_all(engine)

    vocabulary = SkillVocabulary.from_settings(settings)
    extractor = TextExtractor(max_bytes=settings.max_upload_bytes)
    contact_parser = ContactParser.from_settings(settings)
    logger.info(f"Loaded {vocabulary!r}; word boundary matching: {settings.word_boundary}")

    yield
    engine.dispose()
    logger.info("Application shutting down.")


app = FastAPI(title="Candidate Screening", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# -------------------------------------------------------------------
# Errors
# -------------------------------------------------------------------
@app.exception_handler(JobNotFound)
@app.exception_handler(CandidateNotFound)
async def not_found_handler(request: Request, exc: Exception):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(InvalidStatusTransition)
@app.exception_handler(ExtractionFailure)
async def unprocessable_handler(request: Request, exc: Exception):
    return JSONResponse(status_code=422, content={"detail": str(exc)})


@app.exception_handler(PersistenceFailure)
async def store_unavailable_handler(request: Request, exc: PersistenceFailure):
    return JSONResponse(status_code=503, content={"detail": str(exc)})


def current_user(x_user_id: Optional[str] = Header(None)) -> str:
    """Tenant id supplied by the identity layer in front of this service."""
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Authentication required.")
    return x_user_id.strip()


def _pipeline() -> ScreeningPipeline:
    return ScreeningPipeline(
        vocabulary, max_workers=settings.max_workers, word_boundary=settings.word_boundary
    )


def _name_from_file(file_name: str) -> str:
    stem = Path(file_name or "").stem
    return " ".join(stem.replace("_", " ").replace("-", " ").split()).title()


def _to_document(file_name: str, data: bytes) -> CandidateDocument:
    try:
        text = extractor.extract_bytes(file_name, data)
    except ExtractionFailure as e:
        return CandidateDocument(
            source_file_name=file_name,
            extracted_text=None,
            source_file_size_bytes=len(data),
            name=_name_from_file(file_name),
            error=e.reason,
        )
    contact = contact_parser.parse(text, fallback_name=_name_from_file(file_name))
    return CandidateDocument(
        source_file_name=file_name,
        extracted_text=text,
        source_file_size_bytes=len(data),
        name=contact.name,
        email=contact.email,
        phone=contact.phone,
        experience=contact.experience,
    )


def _round(total: int, count: int) -> int:
    return (2 * total + count) // (2 * count)


# -------------------------------------------------------------------
# Routes
# -------------------------------------------------------------------
@app.get("/health")
def health():
    return {"status": "ok", "vocabulary_size": len(vocabulary)}


@app.post("/jobs", response_model=JobOut, status_code=201)
def create_job(job: JobIn, user_id: str = Depends(current_user)):
    """Create a job; required skills are derived from its content once, here."""
    requirement = JobRequirement.create(
        title=job.title.strip(),
        company=job.company.strip(),
        raw_content=job.content,
        vocabulary=vocabulary,
        word_boundary=settings.word_boundary,
        location=job.location,
        experience_level=job.experience,
    )
    with Session() as s:
        row = JobRepository(s).create(user_id, requirement)
        return JobOut.model_validate(row)


@app.post("/jobs/parse", response_model=JobPreview)
async def parse_job_file(job_file: UploadFile = File(...), user_id: str = Depends(current_user)):
    """Read an uploaded job description so the client can pre-fill the job form."""
    data = await job_file.read()
    text = extractor.extract_bytes(job_file.filename, data)
    details = extract_jd_details(text, vocabulary, word_boundary=settings.word_boundary)
    return JobPreview(file_name=job_file.filename, **details)


@app.get("/jobs/list", response_model=List[JobSummary])
def list_jobs(user_id: str = Depends(current_user)):
    with Session() as s:
        jobs = JobRepository(s).list_for_user(user_id)
        return [
            JobSummary(id=j.id, title=j.title, company=j.company, required_skills=j.required_skills or [])
            for j in jobs
        ]


@app.get("/jobs/{job_id}", response_model=JobOut)
def get_job(job_id: int, user_id: str = Depends(current_user)):
    with Session() as s:
        return JobOut.model_validate(JobRepository(s).get(job_id, user_id))


@app.post("/jobs/{job_id}/candidates/upload", response_model=ScreeningReport)
async def upload_candidates(job_id: int, resumes: List[UploadFile] = File(...),
                            user_id: str = Depends(current_user)):
    """Score a batch of resumes against a job and store the results.

    Files that cannot be read are reported under `failures` and do not stop
    the rest of the batch.
    """
    def load_job():
        with Session() as s:
            return to_requirement(JobRepository(s).get(job_id, user_id))

    job = await run_in_threadpool(load_job)

    uploads = [(f.filename or "resume", await f.read()) for f in resumes]
    docs = await run_in_threadpool(lambda: [_to_document(name, data) for name, data in uploads])
    batch = await run_in_threadpool(_pipeline().run, job, docs)

    def store():
        with Session() as s:
            rows = CandidateRepository(s).create_many(user_id, batch.results)
            return [CandidateOut.model_validate(r) for r in rows]

    stored = await run_in_threadpool(store)
    return ScreeningReport(
        job_id=job_id,
        total=batch.total,
        succeeded=batch.succeeded,
        failed=batch.failed,
        candidates=rank_candidates(stored),
        failures=[
            ExtractionFailureOut(file_name=f.source_file_name, file_size=f.source_file_size_bytes, error=f.error)
            for f in batch.failures
        ],
    )


@app.get("/jobs/{job_id}/candidates", response_model=List[CandidateOut])
def list_candidates(job_id: int, sort: str = Query("score", pattern="^(score|name)$"),
                    status: Optional[str] = None, user_id: str = Depends(current_user)):
    wanted = parse_status(status) if status else None
    with Session() as s:
        JobRepository(s).get(job_id, user_id)
        rows = [CandidateOut.model_validate(r) for r in CandidateRepository(s).list_for_job(job_id, user_id, wanted)]

    if sort == "name":
        return sorted(rows, key=lambda c: (c.name.casefold(), -c.match_score))
    return rank_candidates(rows)


@app.get("/jobs/{job_id}/summary", response_model=JobStats)
def job_summary(job_id: int, user_id: str = Depends(current_user)):
    with Session() as s:
        JobRepository(s).get(job_id, user_id)
        rows = CandidateRepository(s).list_for_job(job_id, user_id)

    bands = Counter({EXCELLENT: 0, GOOD: 0, POOR: 0})
    bands.update(score_band(r.match_score) for r in rows)
    statuses = Counter({st.value: 0 for st in CandidateStatus})
    statuses.update(r.status for r in rows)
    shortlisted = [r.match_score for r in rows if r.status == CandidateStatus.SHORTLISTED.value]
    return JobStats(
        job_id=job_id,
        total=len(rows),
        bands=dict(bands),
        statuses=dict(statuses),
        average_shortlisted_score=_round(sum(shortlisted), len(shortlisted)) if shortlisted else None,
    )


@app.patch("/candidates/{candidate_id}/status", response_model=CandidateOut)
def update_candidate_status(candidate_id: int, update: StatusUpdate, user_id: str = Depends(current_user)):
    with Session() as s:
        row = CandidateRepository(s).update_status(candidate_id, user_id, update.status)
        return CandidateOut.model_validate(row)


@app.post("/jobs/{job_id}/invitations", response_model=InvitationResult)
def invite_candidates(job_id: int, request: InvitationRequest, user_id: str = Depends(current_user)):
    """Mark shortlisted candidates as invited. No message is sent from here."""
    result = InvitationResult()
    with Session() as s:
        JobRepository(s).get(job_id, user_id)
        repo = CandidateRepository(s)
        shortlisted = {
            c.id for c in repo.list_by_status(job_id, user_id, CandidateStatus.SHORTLISTED)
        }
        for candidate_id in dict.fromkeys(request.candidate_ids):
            if candidate_id in shortlisted:
                repo.update_status(candidate_id, user_id, CandidateStatus.INVITED)
                result.invited.append(candidate_id)
            else:
                result.skipped.append(candidate_id)
    logger.info(f"Invited {len(result.invited)} candidates for job {job_id}")
    return result
