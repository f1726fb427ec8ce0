import re
from pathlib import Path
from typing import FrozenSet, Iterable, Iterator

_COMMENT = re.compile(r"(?:^|\s)#")

# Canonical terms recognised in job descriptions and resumes.
DEFAULT_SKILLS = (
    "JavaScript", "React", "Node.js", "Python", "Java", "SQL", "AWS", "Docker",
    "TypeScript", "Git", "REST APIs", "MongoDB", "PostgreSQL", "Linux", "Agile",
    "Scrum", "HTML", "CSS", "Angular", "Vue.js", "Express", "Spring Boot",
)


class SkillVocabulary:
    """Immutable set of canonical skill terms.

    Terms keep the spelling they were configured with; duplicates that differ
    only by case collapse to the first spelling seen.
    """

    __slots__ = ("_terms",)

    def __init__(self, terms: Iterable[str] = ()):
        seen = {}
        for term in terms:
            term = (term or "").strip()
            if term and term.lower() not in seen:
                seen[term.lower()] = term
        self._terms: FrozenSet[str] = frozenset(seen.values())

    @classmethod
    def default(cls) -> "SkillVocabulary":
        return cls(DEFAULT_SKILLS)

    @classmethod
    def from_file(cls, path) -> "SkillVocabulary":
        """One term per line; blank lines and ` #` comments are skipped (C# stays a term)."""
        lines = Path(path).read_text(encoding="utf-8").splitlines()
        return cls(_COMMENT.split(line, 1)[0] for line in lines)

    @classmethod
    def from_settings(cls, settings) -> "SkillVocabulary":
        if settings.vocabulary_file:
            return cls.from_file(settings.vocabulary_file)
        if settings.vocabulary:
            return cls(settings.vocabulary)
        return cls.default()

    @property
    def terms(self) -> FrozenSet[str]:
        return self._terms

    def __contains__(self, term) -> bool:
        return term in self._terms

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._terms, key=str.lower))

    def __len__(self) -> int:
        return len(self._terms)

    def __eq__(self, other) -> bool:
        if isinstance(other, SkillVocabulary):
            return self._terms == other._terms
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._terms)

    def __repr__(self) -> str:
        return f"SkillVocabulary({len(self._terms)} terms)"
