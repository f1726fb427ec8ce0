import logging
import re
from dataclasses import dataclass
from typing import Optional

import phonenumbers

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")
YEARS_PATTERNS = [
    re.compile(r"(?:total\s+)?experience\s*[:\-]?\s*(\d+(?:\.\d+)?)\+?\s*(?:years?|yrs?)", re.IGNORECASE),
    re.compile(r"(\d+(?:\.\d+)?)\+?\s*(?:years?|yrs?)\s+(?:of\s+)?(?:total\s+)?experience", re.IGNORECASE),
    re.compile(r"(\d{1,2})\+?\s*(?:years?|yrs?)\b", re.IGNORECASE),
]
_HEADER_WORDS = re.compile(r"resume|curriculum|vitae|email|phone|address|linkedin|github", re.IGNORECASE)


@dataclass
class ContactInfo:
    name: str = ""
    email: str = ""
    phone: str = ""
    experience: str = ""


class ContactParser:
    """Best-effort contact details from resume text.

    Empty strings mean "not found". When a spaCy pipeline is given, PERSON
    entities in the first lines are preferred for the name; otherwise a
    line that looks like two to four capitalised words is used.
    """

    def __init__(self, nlp=None, default_region: str = "US"):
        self.nlp = nlp
        self.default_region = default_region

    @classmethod
    def from_settings(cls, settings) -> "ContactParser":
        if not settings.spacy_model:
            return cls()
        import spacy

        try:
            nlp = spacy.load(settings.spacy_model)
        except OSError:
            logger.warning(f"spaCy model {settings.spacy_model} is not installed; using name heuristics")
            return cls()
        return cls(nlp=nlp)

    def extract_name(self, text: str) -> str:
        lines = (text or "").strip().split("\n")[:10]
        for line in lines:
            line = line.strip()
            if not line or len(line) > 100 or _HEADER_WORDS.search(line):
                continue

            if self.nlp is not None:
                for ent in self.nlp(line).ents:
                    if ent.label_ == "PERSON":
                        return ent.text.strip()

            words = line.split()
            if 2 <= len(words) <= 4 and all(
                w[0].isupper() and w.replace(".", "").isalpha() for w in words
            ):
                return line
        return ""

    def extract_email(self, text: str) -> str:
        match = EMAIL_PATTERN.search(text or "")
        return match.group(0) if match else ""

    def extract_phone(self, text: str) -> str:
        try:
            for match in phonenumbers.PhoneNumberMatcher(text or "", self.default_region):
                return phonenumbers.format_number(
                    match.number, phonenumbers.PhoneNumberFormat.INTERNATIONAL
                )
        except Exception as e:
            logger.warning(f"Phone number extraction error: {e}")
        return ""

    def extract_experience(self, text: str) -> str:
        for pattern in YEARS_PATTERNS:
            match = pattern.search(text or "")
            if match:
                years = float(match.group(1))
                if 0 < years < 50:
                    return f"{years:g} years"
        return ""

    def parse(self, text: str, fallback_name: Optional[str] = None) -> ContactInfo:
        name = self.extract_name(text) or (fallback_name or "")
        return ContactInfo(
            name=name,
            email=self.extract_email(text),
            phone=self.extract_phone(text),
            experience=self.extract_experience(text),
        )
