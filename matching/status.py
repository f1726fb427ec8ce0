from enum import Enum

from errors import InvalidStatusTransition


class CandidateStatus(str, Enum):
    PENDING = "pending"
    SHORTLISTED = "shortlisted"
    REJECTED = "rejected"
    INVITED = "invited"


def parse_status(value) -> CandidateStatus:
    """Coerce `value` to a CandidateStatus or raise InvalidStatusTransition."""
    if isinstance(value, CandidateStatus):
        return value
    try:
        return CandidateStatus(str(value).strip().lower())
    except ValueError:
        raise InvalidStatusTransition(value) from None
