"""Outputs of the JD-to-JD and Bid-to-Bid correlation calculators."""

from pydantic import BaseModel


class LayerCorrelationResult(BaseModel):
    """Score for one layer.

    ``matching_skills`` and ``missing_skills`` partition the current profile's
    skills for the layer. ``layer_weight`` always comes from the current
    profile.
    """
    score: float = 0.0  # 0.0-1.0
    matching_skills: list[str] = []
    missing_skills: list[str] = []
    layer_weight: float = 0.0


class CorrelationResult(BaseModel):
    overall_score: float = 0.0  # 0.0-1.0
    layer_breakdown: dict[str, LayerCorrelationResult] = {}  # keyed by layer name, all six layers
    current_dictionary_version: str
    past_dictionary_version: str


class MatchResult(BaseModel):
    """Bid-to-Bid variant of CorrelationResult (no dictionary provenance)."""
    overall_match_rate: float = 0.0
    layer_breakdown: dict[str, LayerCorrelationResult] = {}


class BidMatchRateResult(BaseModel):
    bid_id: str
    company: str
    role: str
    match_rate: float  # 0.0-1.0
    match_rate_percentage: float  # 0-100
    layer_breakdown: dict[str, LayerCorrelationResult] = {}


class ResumeMatchResult(BaseModel):
    """A resume scored through the JD it was originally written for.

    Without a stored original JD the match rate is 0 and ``layer_breakdown``
    is empty.
    """
    resume_id: str
    company: str
    role: str
    match_rate: float = 0.0  # 0.0-1.0
    match_rate_percentage: float = 0.0  # 0-100
    original_jd_id: str | None = None
    layer_breakdown: dict[str, LayerCorrelationResult] = {}
    current_dictionary_version: str
    original_dictionary_version: str | None = None
