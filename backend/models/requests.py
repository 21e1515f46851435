from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from models.schemas.layers import TechLayer


class SkillWeightInput(BaseModel):
    skill: str = Field(..., description="Free-text skill name, mapped through the dictionary")
    weight: float


class CreateProfileRequest(BaseModel):
    """Raw JD specification. Layer completeness and weight sums are checked by the profile."""
    role: str = Field("", max_length=200)
    layer_weights: dict[str, float] = {}
    skills: dict[str, list[SkillWeightInput]] = {}


class AddSkillRequest(BaseModel):
    name: str
    category: TechLayer


class UpdateSkillRequest(BaseModel):
    new_name: str
    category: TechLayer | None = None


class AddVariationRequest(BaseModel):
    variation: str
    canonical_name: str


class ApproveSkillRequest(BaseModel):
    skill_name: str
    decision: Literal["canonical", "variation"] = "canonical"
    category: TechLayer | None = None  # required for "canonical"
    canonical_name: str | None = None  # required for "variation"


class RejectSkillRequest(BaseModel):
    skill_name: str
    reason: str


class ExportDictionaryRequest(BaseModel):
    version: str | None = None  # default: current


class ImportDictionaryRequest(BaseModel):
    data: dict = Field(..., description="Exported dictionary document")
    mode: Literal["replace", "merge"] = "replace"
    allow_version_downgrade: bool = False


class CreateBidRequest(BaseModel):
    company: str
    client: str
    role: str
    link: str
    main_stacks: dict[str, list[SkillWeightInput]] | list[str]
    layer_weights: dict[str, float] | None = None  # default: the role's weights


class CreateResumeRequest(BaseModel):
    company: str
    role: str
    tech_stack: list[str] = []
    file_path: str = ""
    original_jd_id: str | None = None
    created_at: datetime | None = None
