"""Unknown-skill review queue items and the decisions taken on them."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel

from models.schemas.layers import TechLayer


class ReviewStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class UnknownSkillItem(BaseModel):
    """A skill name not found in the dictionary, awaiting review.

    ``frequency`` counts every detection; ``detected_in`` holds each source id
    once.
    """
    skill_name: str
    frequency: int = 1
    first_detected_at: datetime
    detected_in: list[str] = []
    status: ReviewStatus = ReviewStatus.PENDING


class ApprovalDecision(BaseModel):
    skill_name: str
    decision: str  # canonical | variation
    canonical_name: str
    category: TechLayer | None = None
    approved_at: datetime


class RejectionDecision(BaseModel):
    skill_name: str
    reason: str
    rejected_at: datetime
