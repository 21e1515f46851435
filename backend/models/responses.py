from datetime import datetime

from pydantic import BaseModel

from models.schemas.layers import SkillWeight
from models.schemas.review_queue import ApprovalDecision


class ProfileResponse(BaseModel):
    id: str
    role: str
    layer_weights: dict[str, float]
    skills: dict[str, list[SkillWeight]]
    dictionary_version: str
    created_at: datetime

    @classmethod
    def from_profile(cls, profile) -> "ProfileResponse":
        return cls(
            id=profile.id,
            role=profile.role,
            layer_weights=profile.get_layer_weights(),
            skills=profile.get_all_skills(),
            dictionary_version=profile.dictionary_version,
            created_at=profile.created_at,
        )


class CreateProfileResponse(BaseModel):
    profile: ProfileResponse
    unknown_skills: list[str] = []  # names queued for review


class ApprovalResponse(BaseModel):
    decision: ApprovalDecision
    dictionary_version: str


class BidResponse(BaseModel):
    id: str
    company: str
    client: str
    role: str
    link: str
    main_stacks: dict[str, list[SkillWeight]] | list[str]
    layer_weights: dict[str, float] | None = None
    created_at: datetime

    @classmethod
    def from_bid(cls, bid) -> "BidResponse":
        return cls.model_validate(bid.to_dict())


class RoleLayerWeightsResponse(BaseModel):
    role: str
    basic_title: str
    layer_weights: dict[str, float]


class ErrorResponse(BaseModel):
    error: str
    message: str
