"""Pydantic contracts shared by the services, workflows and API."""

from models.schemas.correlation import (
    BidMatchRateResult,
    CorrelationResult,
    LayerCorrelationResult,
    MatchResult,
)
from models.schemas.layers import ALL_LAYERS, SkillWeight, TechLayer
from models.schemas.review_queue import (
    ApprovalDecision,
    RejectionDecision,
    ReviewStatus,
    UnknownSkillItem,
)
from models.schemas.skill_dictionary import CanonicalSkill, SkillOperationOutput, SkillVariation
from models.schemas.statistics import (
    SkillStatistic,
    SkillUsageStatisticsRequest,
    SkillUsageStatisticsResponse,
)

__all__ = [
    "ALL_LAYERS",
    "TechLayer",
    "SkillWeight",
    "CanonicalSkill",
    "SkillVariation",
    "SkillOperationOutput",
    "ReviewStatus",
    "UnknownSkillItem",
    "ApprovalDecision",
    "RejectionDecision",
    "LayerCorrelationResult",
    "CorrelationResult",
    "MatchResult",
    "BidMatchRateResult",
    "SkillStatistic",
    "SkillUsageStatisticsRequest",
    "SkillUsageStatisticsResponse",
]
