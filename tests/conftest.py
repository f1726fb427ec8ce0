"""
Pytest configuration and shared fixtures.
"""
import os
import sys

import pytest

# The service modules live at the repository root
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from matching.pipeline import CandidateDocument, JobRequirement
from matching.vocabulary import SkillVocabulary


@pytest.fixture
def vocabulary():
    """Default skill vocabulary"""
    return SkillVocabulary.default()


@pytest.fixture
def web_job():
    """Job requiring React, Node.js and SQL"""
    return JobRequirement(
        id=1,
        title="Full Stack Developer",
        company="Acme",
        raw_content="We need React, Node.js and SQL.",
        required_skills=frozenset({"React", "Node.js", "SQL"}),
    )


@pytest.fixture
def make_document():
    """Factory for candidate documents"""
    def _make(text, name="", file_name="resume.txt"):
        return CandidateDocument(
            source_file_name=file_name,
            extracted_text=text,
            source_file_size_bytes=len(text or ""),
            name=name,
        )
    return _make


@pytest.fixture
def client(tmp_path, monkeypatch):
    """API client backed by a throwaway SQLite database"""
    from fastapi.testclient import TestClient

    monkeypatch.setenv("BASE_DIR", str(tmp_path))
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'test.db'}")
    monkeypatch.setenv("SPACY_MODEL", "")
    monkeypatch.setenv("SKILL_VOCABULARY", "")
    monkeypatch.delenv("SKILL_VOCABULARY_FILE", raising=False)
    monkeypatch.setenv("SKILL_MATCH_WORD_BOUNDARY", "false")

    import app as app_module

    with TestClient(app_module.app) as test_client:
        yield test_client
