import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()

IS_HF = os.environ.get("SPACE_ID") is not None


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}")


@dataclass(frozen=True)
class Settings:
    base_dir: str = "data"
    database_url: Optional[str] = None
    max_workers: int = 4
    vocabulary: List[str] = field(default_factory=list)
    vocabulary_file: Optional[str] = None
    word_boundary: bool = False
    spacy_model: str = ""
    max_upload_bytes: int = 10 * 1024 * 1024
    log_level: str = "INFO"
    cors_allow_origins: List[str] = field(default_factory=lambda: ["*"])

    @property
    def resolved_database_url(self) -> str:
        if self.database_url:
            return self.database_url
        return f"sqlite:///{os.path.join(self.base_dir, 'app.db')}"

    @classmethod
    def from_env(cls) -> "Settings":
        """Read settings from the process environment (and `.env`, loaded at import)."""
        base_dir = os.getenv("BASE_DIR") or ("/tmp/data" if IS_HF else "data")
        raw_vocab = os.getenv("SKILL_VOCABULARY", "")
        origins = os.getenv("CORS_ALLOW_ORIGINS", "*")
        return cls(
            base_dir=base_dir,
            database_url=os.getenv("DATABASE_URL") or None,
            max_workers=max(1, _env_int("SCREENING_MAX_WORKERS", 4)),
            vocabulary=[s.strip() for s in raw_vocab.split(",") if s.strip()],
            vocabulary_file=os.getenv("SKILL_VOCABULARY_FILE") or None,
            word_boundary=_env_bool("SKILL_MATCH_WORD_BOUNDARY"),
            spacy_model=os.getenv("SPACY_MODEL", "").strip(),
            max_upload_bytes=_env_int("MAX_UPLOAD_BYTES", 10 * 1024 * 1024),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            cors_allow_origins=[o.strip() for o in origins.split(",") if o.strip()],
        )


def get_settings() -> Settings:
    return Settings.from_env()
