from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, TypeDecorator, func
from sqlalchemy.orm import declarative_base, relationship
import json

Base = declarative_base()

class JSONType(TypeDecorator):
    """Custom JSON type that works reliably with SQLite."""
    impl = Text
    cache_ok = True

    def process_bind_param(self, value, dialect):
        """Convert Python object to JSON string for storage."""
        if value is None:
            return None
        return json.dumps(value)

    def process_result_value(self, value, dialect):
        """Convert JSON string back to Python object."""
        if value is None:
            return None
        return json.loads(value)


class JobDescription(Base):
    __tablename__ = "job_requirements"
    id = Column(Integer, primary_key=True)
    user_id = Column(String(255), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    company = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    required_skills = Column(JSONType, nullable=False)
    experience = Column(String(100), nullable=True)
    location = Column(String(255), nullable=True)
    created_at = Column(DateTime, server_default=func.current_timestamp())
    updated_at = Column(DateTime, server_default=func.current_timestamp(), onupdate=func.current_timestamp())

    candidates = relationship("Candidate", back_populates="job", cascade="all, delete-orphan")

    def __repr__(self) -> str:
        return f"<JobDescription(id={self.id}, title={self.title}, company={self.company})>"


class Candidate(Base):
    __tablename__ = "candidates"
    id = Column(Integer, primary_key=True)
    job_description_id = Column(Integer, ForeignKey("job_requirements.id"), nullable=False, index=True)
    user_id = Column(String(255), nullable=False, index=True)
    name = Column(String(255), nullable=False, default="")
    email = Column(String(255), nullable=False, default="")
    phone = Column(String(50), nullable=True)
    file_name = Column(String(512), nullable=False)
    file_size = Column(Integer, nullable=False, default=0)
    match_score = Column(Integer, nullable=False)
    matched_skills = Column(JSONType, nullable=False)
    missing_skills = Column(JSONType, nullable=False)
    experience = Column(String(100), nullable=True)
    summary = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default="pending")
    created_at = Column(DateTime, server_default=func.current_timestamp())
    updated_at = Column(DateTime, server_default=func.current_timestamp(), onupdate=func.current_timestamp())

    job = relationship("JobDescription", back_populates="candidates")

    def __repr__(self) -> str:
        return f"<Candidate(id={self.id}, name={self.name}, score={self.match_score}, status={self.status})>"
