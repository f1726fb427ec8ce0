import io
import logging
from pathlib import Path
from typing import Optional

import docx

from errors import ExtractionFailure
from .pdf import pdf_to_text

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".pdf", ".doc", ".docx", ".txt")


class TextExtractor:
    """Turns uploaded resume and job description files into plain text."""

    def __init__(self, max_bytes: Optional[int] = None):
        self.max_bytes = max_bytes

    def read_pdf(self, data: bytes) -> str:
        return pdf_to_text(data)

    def read_docx(self, data: bytes) -> str:
        """Paragraphs first, then table cells row by row."""
        doc = docx.Document(io.BytesIO(data))
        text = ""
        for para in doc.paragraphs:
            text += para.text + "\n"

        for table in doc.tables:
            for row in table.rows:
                for cell in row.cells:
                    text += cell.text + " "
            text += "\n"
        return text

    def read_txt(self, data: bytes) -> str:
        encodings = ['utf-8', 'cp1252', 'latin-1']
        for encoding in encodings:
            try:
                return data.decode(encoding)
            except UnicodeDecodeError:
                continue
        raise ValueError("Unable to decode file with supported encodings")

    def extract_bytes(self, file_name: str, data: bytes) -> str:
        """Extract text based on the file extension.

        Raises ExtractionFailure for unsupported, oversized, unreadable or
        empty files.
        """
        extension = Path(file_name or "").suffix.lower()
        if extension not in SUPPORTED_EXTENSIONS:
            raise ExtractionFailure(file_name, f"unsupported file format: {extension or 'none'}")
        if self.max_bytes is not None and len(data) > self.max_bytes:
            raise ExtractionFailure(file_name, f"file is larger than {self.max_bytes} bytes")

        try:
            if extension == '.pdf':
                text = self.read_pdf(data)
            elif extension in ('.docx', '.doc'):
                text = self.read_docx(data)
            else:
                text = self.read_txt(data)
        except Exception as e:
            logger.error(f"Error reading {file_name}: {e}")
            raise ExtractionFailure(file_name, str(e)) from e

        if not text or not text.strip():
            raise ExtractionFailure(file_name, "no text could be extracted")
        logger.debug(f"Extracted {len(text)} characters from {file_name}")
        return text

    def extract_file(self, file_path: str) -> str:
        path = Path(file_path)
        if not path.exists():
            raise ExtractionFailure(path.name, "file not found")
        return self.extract_bytes(path.name, path.read_bytes())
