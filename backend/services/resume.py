"""Metadata of a saved resume, read by the skill usage statistics."""

import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ResumeMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: f"resume_{uuid.uuid4().hex}")
    company: str
    role: str
    tech_stack: list[str] = []
    file_path: str = ""
    original_jd_id: str | None = None  # JD the resume was tailored for
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("tech_stack")
    @classmethod
    def _strip_technologies(cls, value: list[str]) -> list[str]:
        return [tech.strip() for tech in value if tech.strip()]

    def get_technologies(self) -> list[str]:
        return list(self.tech_stack)
