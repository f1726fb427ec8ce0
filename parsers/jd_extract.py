import re

from matching.extractor import derive_required_skills

TITLE_PATTERNS = [
    r"Job\s+Title[:\-]\s*([A-Z][A-Za-z0-9 /&\-]{2,50})",
    r"Position[:\-]\s*([A-Z][A-Za-z0-9 /&\-]{2,50})",
    r"We[’']?re\s+(?:seeking|hiring)\s+an?\s+([A-Z][A-Za-z0-9 /&\-]{2,50})",
]
ROLE_FALLBACK = re.compile(r"\b([A-Z][A-Za-z ]+(?:Engineer|Developer|Manager|Analyst|Scientist|Designer))\b")


def guess_title(text: str) -> str:
    for p in TITLE_PATTERNS:
        m = re.search(p, text, re.IGNORECASE)
        if m:
            return m.group(1).strip()
    guess = ROLE_FALLBACK.search(text)
    return guess.group(1).strip() if guess else ""


def extract_jd_details(text: str, vocabulary, word_boundary: bool = False) -> dict:
    """
    Preview what a job would look like if created from `text`.
    Nothing is stored; the caller still submits title and company.
    """
    text = text.replace("\r\n", "\n")
    # titles are searched line by line so patterns never run across lines
    title = ""
    for line in text.split("\n"):
        title = guess_title(line.strip())
        if title:
            break

    skills = derive_required_skills(text, vocabulary, word_boundary=word_boundary)
    return {
        "title": title,
        "required_skills": sorted(skills, key=str.lower),
        "raw_text": text.strip(),
    }
