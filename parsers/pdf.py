import io
import logging

import fitz  # PyMuPDF
from PyPDF2 import PdfReader

logger = logging.getLogger(__name__)


def pdf_to_text(data: bytes) -> str:
    """
    Extract text from PDF bytes.
    PyMuPDF is tried first; PyPDF2 is the fallback for files it cannot read.
    """
    text = ""

    try:
        doc = fitz.open(stream=data, filetype="pdf")
        text = "\n".join(page.get_text("text") or "" for page in doc)
        doc.close()
        if text.strip():
            logger.info(f"Extracted {len(text)} characters via PyMuPDF")
            return text.strip()
    except Exception as e:
        logger.warning(f"PyMuPDF extraction failed: {e}")

    try:
        reader = PdfReader(io.BytesIO(data))
        text = "\n".join(page.extract_text() or "" for page in reader.pages)
        if text.strip():
            logger.info(f"Extracted {len(text)} characters via PyPDF2 fallback")
    except Exception as e:
        logger.error(f"PyPDF2 extraction failed: {e}")

    return text.strip()
