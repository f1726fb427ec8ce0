import re
from typing import List

_TOKEN = re.compile(r"[a-z0-9]+")


def normalize(text: str) -> List[str]:
    """Lowercase `text` and split it into alphanumeric tokens.

    Punctuation and whitespace are both separators, so "Node.js" becomes
    ["node", "js"]. Empty, blank or None input gives an empty list.
    """
    if not text:
        return []
    return _TOKEN.findall(text.lower())


def joined(text: str) -> str:
    """Normalized tokens re-joined with single spaces."""
    return " ".join(normalize(text))
