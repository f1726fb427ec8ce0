class ScreeningError(Exception):
    """Base class for errors raised by the screening service."""


class ExtractionFailure(ScreeningError):
    """Text could not be obtained from an uploaded document."""

    def __init__(self, file_name: str, reason: str):
        self.file_name = file_name
        self.reason = reason
        super().__init__(f"Could not extract text from {file_name}: {reason}")


class InvalidStatusTransition(ScreeningError):
    def __init__(self, status):
        self.status = status
        super().__init__(f"Unknown candidate status: {status!r}")


class PersistenceFailure(ScreeningError):
    """The record store rejected a read or write."""


class JobNotFound(ScreeningError):
    def __init__(self, job_id):
        self.job_id = job_id
        super().__init__(f"Job {job_id} not found.")


class CandidateNotFound(ScreeningError):
    def __init__(self, candidate_id):
        self.candidate_id = candidate_id
        super().__init__(f"Candidate {candidate_id} not found.")
