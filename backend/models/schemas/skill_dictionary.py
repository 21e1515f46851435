"""Canonical skill dictionary entries and their serialized form."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from models.schemas.layers import TechLayer


class CanonicalSkill(BaseModel):
    """The single authoritative identifier for a technology."""
    model_config = ConfigDict(frozen=True)

    name: str  # normalized, also the dictionary key
    category: TechLayer
    created_at: datetime


class SkillVariation(BaseModel):
    variation: str
    canonical: str


class SkillOperationOutput(BaseModel):
    """Result of a dictionary management operation."""
    success: bool
    message: str
    dictionary_version: str | None = None


class DictionarySkills(BaseModel):
    version: str
    skills: dict[str, list[CanonicalSkill]]  # keyed by layer


class SkillVariations(BaseModel):
    canonical_name: str
    variations: list[str] = []


class ExportDictionaryResponse(BaseModel):
    success: bool
    data: dict = {}  # SkillDictionary.to_dict() document
    message: str = ""


class ImportDictionaryResponse(BaseModel):
    success: bool
    message: str = ""
    imported_version: str | None = None
    conflicts_resolved: int | None = None
