import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence

from .extractor import derive_required_skills, extract
from .scorer import score
from .status import CandidateStatus
from .vocabulary import SkillVocabulary

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class JobRequirement:
    title: str
    company: str
    raw_content: str
    required_skills: FrozenSet[str] = frozenset()
    id: Optional[int] = None
    location: Optional[str] = None
    experience_level: Optional[str] = None

    @classmethod
    def create(cls, title: str, company: str, raw_content: str, vocabulary: SkillVocabulary,
               word_boundary: bool = False, **extra) -> "JobRequirement":
        skills = derive_required_skills(raw_content, vocabulary, word_boundary=word_boundary)
        return cls(title=title, company=company, raw_content=raw_content,
                   required_skills=frozenset(skills), **extra)


@dataclass
class CandidateDocument:
    """One uploaded resume. `extracted_text` is None when text extraction failed."""
    source_file_name: str
    extracted_text: Optional[str]
    source_file_size_bytes: int = 0
    name: str = ""
    email: str = ""
    phone: str = ""
    experience: str = ""
    error: Optional[str] = None


@dataclass
class CandidateResult:
    job_requirement_id: Optional[int]
    source_file_name: str
    source_file_size_bytes: int = 0
    name: str = ""
    email: str = ""
    phone: str = ""
    experience: str = ""
    match_score: Optional[int] = None
    matched_skills: FrozenSet[str] = frozenset()
    missing_skills: FrozenSet[str] = frozenset()
    summary: str = ""
    status: CandidateStatus = CandidateStatus.PENDING
    extraction_failed: bool = False
    error: Optional[str] = None

    def to_row(self, user_id: str) -> dict:
        """Column values for an insert into the `candidates` table."""
        return {
            "job_description_id": self.job_requirement_id,
            "user_id": user_id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone or None,
            "file_name": self.source_file_name,
            "file_size": self.source_file_size_bytes,
            "match_score": self.match_score,
            "matched_skills": _sorted(self.matched_skills),
            "missing_skills": _sorted(self.missing_skills),
            "experience": self.experience or None,
            "summary": self.summary or None,
            "status": self.status.value,
        }


@dataclass
class ScreeningBatch:
    results: List[CandidateResult] = field(default_factory=list)
    total: int = 0
    cancelled: bool = False

    @property
    def scored(self) -> List[CandidateResult]:
        return [r for r in self.results if not r.extraction_failed]

    @property
    def failures(self) -> List[CandidateResult]:
        return [r for r in self.results if r.extraction_failed]

    @property
    def succeeded(self) -> int:
        return len(self.scored)

    @property
    def failed(self) -> int:
        return len(self.failures)


def _sorted(skills: Iterable[str]) -> List[str]:
    return sorted(skills, key=str.lower)


def summarize(job_title: str, matched: Iterable[str], required_count: int) -> str:
    top = _sorted(matched)
    role = job_title.strip() or "this role"
    if not required_count:
        return f"No specific skills are required for {role}."
    if not top:
        return f"None of the {required_count} required skills for {role} were found."
    return (f"Matches {len(top)} of {required_count} required skills for {role}, "
            f"including {', '.join(top[:3])}.")


def rank_candidates(records: Iterable) -> list:
    """Sort by match score (highest first), then name A-Z ignoring case.

    Works on anything with `match_score` and `name` attributes. Records without
    a score (failed extraction) go last.
    """
    def key(r):
        has_score = r.match_score is not None
        return (0 if has_score else 1, -(r.match_score or 0), (r.name or "").casefold())
    return sorted(records, key=key)


class ScreeningPipeline:
    """Extract and score a batch of resumes against one job."""

    def __init__(self, vocabulary: SkillVocabulary, max_workers: int = 4, word_boundary: bool = False):
        self.vocabulary = vocabulary
        self.max_workers = max(1, int(max_workers))
        self.word_boundary = word_boundary

    def _terms_for(self, job: JobRequirement) -> FrozenSet[str]:
        # stored requirements stay detectable even if the vocabulary changed since
        return frozenset(self.vocabulary) | job.required_skills

    def _screen_one(self, job: JobRequirement, doc: CandidateDocument) -> CandidateResult:
        result = CandidateResult(
            job_requirement_id=job.id,
            source_file_name=doc.source_file_name,
            source_file_size_bytes=doc.source_file_size_bytes,
            name=doc.name,
            email=doc.email,
            phone=doc.phone,
            experience=doc.experience,
        )
        if doc.extracted_text is None:
            result.extraction_failed = True
            result.error = doc.error or "text extraction failed"
            return result

        skills = extract(doc.extracted_text, self._terms_for(job), word_boundary=self.word_boundary)
        match = score(job.required_skills, skills)
        result.match_score = match.score
        result.matched_skills = match.matched
        result.missing_skills = match.missing
        result.summary = summarize(job.title, match.matched, len(job.required_skills))
        return result

    def run(self, job: JobRequirement, documents: Sequence[CandidateDocument],
            cancel_event: Optional[threading.Event] = None) -> ScreeningBatch:
        docs = list(documents)
        done: Dict[int, CandidateResult] = {}

        def is_cancelled() -> bool:
            return cancel_event is not None and cancel_event.is_set()

        if self.max_workers == 1 or len(docs) <= 1:
            for i, doc in enumerate(docs):
                if is_cancelled():
                    break
                done[i] = self._screen_one(job, doc)
        else:
            def task(doc):
                if is_cancelled():
                    return None
                return self._screen_one(job, doc)

            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                futures = {executor.submit(task, doc): i for i, doc in enumerate(docs)}
                for future in as_completed(futures):
                    if future.cancelled():
                        continue
                    result = future.result()
                    if result is not None:
                        done[futures[future]] = result
                    if is_cancelled():
                        for pending in futures:
                            pending.cancel()

        batch = ScreeningBatch(
            results=[done[i] for i in sorted(done)],
            total=len(docs),
            cancelled=len(done) < len(docs),
        )
        for failure in batch.failures:
            logger.warning(f"Extraction failed for {failure.source_file_name}: {failure.error}")
        logger.info(
            f"Screened {batch.total} documents for job {job.id}: "
            f"{batch.succeeded} scored, {batch.failed} failed"
            + (" (cancelled)" if batch.cancelled else "")
        )
        return batch
