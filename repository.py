"""Typed access to the job and candidate tables."""
import logging
from contextlib import contextmanager
from typing import Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from errors import CandidateNotFound, JobNotFound, PersistenceFailure
from matching.pipeline import CandidateResult, JobRequirement
from matching.status import CandidateStatus, parse_status
from models import Candidate, JobDescription

logger = logging.getLogger(__name__)


@contextmanager
def _store_errors(session: Session, action: str):
    try:
        yield
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Failed to {action}: {e}")
        raise PersistenceFailure(f"Failed to {action}") from e


def to_requirement(row: JobDescription) -> JobRequirement:
    return JobRequirement(
        id=row.id,
        title=row.title,
        company=row.company,
        raw_content=row.content,
        required_skills=frozenset(row.required_skills or []),
        location=row.location,
        experience_level=row.experience,
    )


class JobRepository:
    def __init__(self, session: Session):
        self.session = session

    def create(self, user_id: str, job: JobRequirement) -> JobDescription:
        with _store_errors(self.session, "create job description"):
            row = JobDescription(
                user_id=user_id,
                title=job.title,
                company=job.company,
                content=job.raw_content,
                required_skills=sorted(job.required_skills, key=str.lower),
                experience=job.experience_level,
                location=job.location,
            )
            self.session.add(row)
            self.session.commit()
            self.session.refresh(row)
        logger.info(f"Created job description: id={row.id} skills={len(job.required_skills)}")
        return row

    def get(self, job_id: int, user_id: str) -> JobDescription:
        """Job owned by `user_id`; JobNotFound otherwise."""
        with _store_errors(self.session, f"load job {job_id}"):
            row = self.session.execute(
                select(JobDescription).where(
                    JobDescription.id == job_id, JobDescription.user_id == user_id
                )
            ).scalar_one_or_none()
        if row is None:
            raise JobNotFound(job_id)
        return row

    def list_for_user(self, user_id: str) -> List[JobDescription]:
        with _store_errors(self.session, "list job descriptions"):
            rows = self.session.execute(
                select(JobDescription)
                .where(JobDescription.user_id == user_id)
                .order_by(JobDescription.created_at.desc(), JobDescription.id.desc())
            ).scalars().all()
        return list(rows)


class CandidateRepository:
    def __init__(self, session: Session):
        self.session = session

    def create_many(self, user_id: str, results: Iterable[CandidateResult]) -> List[Candidate]:
        """Insert scored results; failure markers are skipped."""
        rows = [Candidate(**r.to_row(user_id)) for r in results if not r.extraction_failed]
        if not rows:
            return []
        with _store_errors(self.session, "create candidates"):
            self.session.add_all(rows)
            self.session.commit()
            for row in rows:
                self.session.refresh(row)
        logger.info(f"Created {len(rows)} candidate records for job {rows[0].job_description_id}")
        return rows

    def get(self, candidate_id: int, user_id: str) -> Candidate:
        with _store_errors(self.session, f"load candidate {candidate_id}"):
            row = self.session.execute(
                select(Candidate).where(Candidate.id == candidate_id, Candidate.user_id == user_id)
            ).scalar_one_or_none()
        if row is None:
            raise CandidateNotFound(candidate_id)
        return row

    def list_for_job(self, job_id: int, user_id: str,
                     status: Optional[CandidateStatus] = None) -> List[Candidate]:
        query = select(Candidate).where(
            Candidate.job_description_id == job_id, Candidate.user_id == user_id
        )
        if status is not None:
            query = query.where(Candidate.status == parse_status(status).value)
        with _store_errors(self.session, f"list candidates for job {job_id}"):
            rows = self.session.execute(query.order_by(Candidate.id)).scalars().all()
        return list(rows)

    def list_by_status(self, job_id: int, user_id: str, status) -> List[Candidate]:
        """Candidates of one job currently in `status` (validated first)."""
        return self.list_for_job(job_id, user_id, parse_status(status))

    def update_status(self, candidate_id: int, user_id: str, status) -> Candidate:
        # validated before the store is touched
        new_status = parse_status(status)
        row = self.get(candidate_id, user_id)
        with _store_errors(self.session, f"update candidate {candidate_id}"):
            row.status = new_status.value
            self.session.commit()
            self.session.refresh(row)
        logger.info(f"Candidate {candidate_id} is now {new_status.value}")
        return row
