from dataclasses import dataclass, field
from typing import FrozenSet, Iterable

EXCELLENT, GOOD, POOR = "excellent", "good", "poor"


@dataclass(frozen=True)
class MatchScore:
    score: int
    matched: FrozenSet[str] = field(default_factory=frozenset)
    missing: FrozenSet[str] = field(default_factory=frozenset)


def score(required: Iterable[str], candidate_skills: Iterable[str]) -> MatchScore:
    """Percentage of `required` covered by `candidate_skills`.

    Skills are compared case-insensitively and reported with the spelling
    used in `required`. With no requirements the match is vacuously full:
    score 100 and both partitions empty.
    """
    req = frozenset(required)
    if not req:
        return MatchScore(score=100)

    have = {s.lower() for s in candidate_skills}
    matched = frozenset(r for r in req if r.lower() in have)
    missing = req - matched

    # round half up: 100 * hits / total
    hits, total = len(matched), len(req)
    pct = (200 * hits + total) // (2 * total)
    return MatchScore(score=pct, matched=matched, missing=missing)


def score_band(value: int) -> str:
    if value >= 80:
        return EXCELLENT
    if value >= 60:
        return GOOD
    return POOR
