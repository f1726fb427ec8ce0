import re
from typing import Iterable, Set

from .normalizer import joined

# Characters that carry meaning in a term ("C++", "C#") and must not be
# dropped the way separators like "." or "-" are.
_SYMBOLS = re.compile(r"[^a-z0-9\s.,/_\-]")


def _mentions_symbol_term(term: str, text: str, word_boundary: bool) -> bool:
    needle = re.escape(term.lower())
    if word_boundary:
        needle = rf"(?<![a-z0-9]){needle}(?![a-z0-9])"
    return re.search(needle, text.lower()) is not None


def extract(text: str, vocabulary: Iterable[str], word_boundary: bool = False) -> Set[str]:
    """Return the vocabulary terms mentioned in `text`.

    Both sides are normalized, so "node js", "Node.js" and "node-js" all match
    the term "Node.js". By default a term counts when it appears anywhere in
    the text, including inside a longer word ("Java" is found in
    "JavaScript"). Pass `word_boundary=True` to require whole tokens.

    Terms with symbols such as "C++" or "C#" are matched against the raw
    lowercased text instead, so their symbols are required.
    """
    haystack = joined(text)
    if not haystack:
        return set()
    if word_boundary:
        haystack = f" {haystack} "

    found = set()
    for term in vocabulary:
        if _SYMBOLS.search(term.lower()):
            if _mentions_symbol_term(term, text, word_boundary):
                found.add(term)
            continue
        needle = joined(term)
        if not needle:
            continue
        if word_boundary:
            needle = f" {needle} "
        if needle in haystack:
            found.add(term)
    return found


def derive_required_skills(content: str, vocabulary: Iterable[str], word_boundary: bool = False) -> Set[str]:
    """Skills a job description asks for, computed once when the job is created."""
    return extract(content, vocabulary, word_boundary=word_boundary)
