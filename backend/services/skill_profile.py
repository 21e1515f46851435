"""Weighted six-layer skill profile (canonical JD specification).

A profile is validated once, at construction, and never changes afterwards;
updates replace the stored document by id. Validation runs in a fixed order
and stops at the first failure so error messages are deterministic:

1. layer completeness (both ``layer_weights`` and ``skills``)
2. layer weights sum to 1.0 (then each weight in [0, 1])
3. skill weights of every non-empty layer sum to 1.0 (then each in [0, 1])
4. skill identifiers non-empty, at most 100 characters
5. dictionary version ``YYYY.N``
"""

import math
import uuid
from collections.abc import Mapping, Sequence
from datetime import datetime, timezone
from numbers import Real
from typing import Any

from models.schemas.layers import ALL_LAYERS, WEIGHT_SUM_TOLERANCE, SkillWeight, TechLayer
from services.exceptions import (
    EmptySkillIdentifierError,
    InvalidSkillIdentifierError,
    LayerWeightsSumError,
    MissingLayerError,
    SkillIdentifierTooLongError,
    SkillWeightsSumError,
    WeightOutOfRangeError,
)
from services.normalizer import MAX_SKILL_NAME_LENGTH, parse_layer
from services.skill_dictionary import validate_version_format

LayerWeights = dict[str, float]
LayerSkills = dict[str, list[SkillWeight]]


def _is_number(value: object) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def _entry_fields(entry: Any) -> tuple[Any, Any]:
    if isinstance(entry, SkillWeight):
        return entry.skill, entry.weight
    if isinstance(entry, Mapping):
        return entry.get("skill"), entry.get("weight")
    return getattr(entry, "skill", None), getattr(entry, "weight", None)


def check_layer_weights_complete(layer_weights: object) -> None:
    if not isinstance(layer_weights, Mapping):
        raise MissingLayerError(ALL_LAYERS[0], "layer_weights")
    for layer in ALL_LAYERS:
        if layer not in layer_weights:
            raise MissingLayerError(layer, "layer_weights")
        if not _is_number(layer_weights[layer]):
            raise MissingLayerError(layer, "layer_weights", "expected number")


def check_layer_skills_complete(skills: object) -> None:
    if not isinstance(skills, Mapping):
        raise MissingLayerError(ALL_LAYERS[0], "skills")
    for layer in ALL_LAYERS:
        if layer not in skills:
            raise MissingLayerError(layer, "skills")
        value = skills[layer]
        if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
            raise MissingLayerError(layer, "skills", "expected array")


def check_layer_weights_sum(layer_weights: Mapping) -> None:
    # NaN passes every comparison below.
    for layer in ALL_LAYERS:
        if not math.isfinite(layer_weights[layer]):
            raise WeightOutOfRangeError(f"layer '{layer}'", layer_weights[layer])

    total = 0.0
    for layer in ALL_LAYERS:
        total += layer_weights[layer]
    if abs(total - 1.0) > WEIGHT_SUM_TOLERANCE:
        raise LayerWeightsSumError(total)
    for layer in ALL_LAYERS:
        weight = layer_weights[layer]
        if weight < 0 or weight > 1:
            raise WeightOutOfRangeError(f"layer '{layer}'", weight)


def check_skill_weights_sum(skills: Mapping) -> None:
    for layer in ALL_LAYERS:
        entries = skills[layer]
        if len(entries) == 0:
            continue

        weights = []
        for entry in entries:
            _, weight = _entry_fields(entry)
            if not _is_number(weight) or not math.isfinite(weight):
                raise WeightOutOfRangeError(f"a skill in layer '{layer}'", weight)
            weights.append(weight)

        total = 0.0
        for weight in weights:
            total += weight
        if abs(total - 1.0) > WEIGHT_SUM_TOLERANCE:
            raise SkillWeightsSumError(layer, total)
        for weight in weights:
            if weight < 0 or weight > 1:
                raise WeightOutOfRangeError(f"a skill in layer '{layer}'", weight)


def check_skill_identifiers(skills: Mapping) -> None:
    for layer in ALL_LAYERS:
        for entry in skills[layer]:
            skill, _ = _entry_fields(entry)
            if not isinstance(skill, str):
                raise InvalidSkillIdentifierError(layer)
            if not skill.strip():
                raise EmptySkillIdentifierError(layer)
            if len(skill) > MAX_SKILL_NAME_LENGTH:
                raise SkillIdentifierTooLongError(layer, MAX_SKILL_NAME_LENGTH)


def freeze_layer_skills(skills: Mapping) -> dict[str, tuple[SkillWeight, ...]]:
    """Copy validated layer skills into immutable tuples, preserving order."""
    frozen: dict[str, tuple[SkillWeight, ...]] = {}
    for layer in ALL_LAYERS:
        frozen[layer] = tuple(
            SkillWeight(skill=skill, weight=float(weight))
            for skill, weight in (_entry_fields(entry) for entry in skills[layer])
        )
    return frozen


def validate_layer_skills(skills: object) -> dict[str, tuple[SkillWeight, ...]]:
    """Completeness, weight-sum and identifier checks for a standalone LayerSkills."""
    check_layer_skills_complete(skills)
    check_skill_weights_sum(skills)
    check_skill_identifiers(skills)
    return freeze_layer_skills(skills)


def _parse_created_at(value: object) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        return datetime.fromisoformat(value)
    return datetime.now(timezone.utc)


class WeightedSkillProfile:
    """Immutable six-layer weighted skill profile."""

    __slots__ = ("_id", "_role", "_layer_weights", "_skills", "_dictionary_version", "_created_at")

    def __init__(
        self,
        profile_id: str,
        role: str,
        layer_weights: dict[str, float],
        skills: dict[str, tuple[SkillWeight, ...]],
        dictionary_version: str,
        created_at: datetime,
    ) -> None:
        # Use create() / from_dict(); the constructor trusts its arguments.
        self._id = profile_id
        self._role = role
        self._layer_weights = layer_weights
        self._skills = skills
        self._dictionary_version = dictionary_version
        self._created_at = created_at

    @classmethod
    def create(cls, data: Mapping[str, Any]) -> "WeightedSkillProfile":
        return cls._validated(data, created_at=datetime.now(timezone.utc))

    @classmethod
    def _validated(cls, data: Mapping[str, Any], created_at: datetime) -> "WeightedSkillProfile":
        layer_weights = data.get("layer_weights")
        skills = data.get("skills")

        check_layer_weights_complete(layer_weights)
        check_layer_skills_complete(skills)
        check_layer_weights_sum(layer_weights)
        check_skill_weights_sum(skills)
        check_skill_identifiers(skills)
        version = validate_version_format(data.get("dictionary_version"))

        profile_id = data.get("id") or f"jd_{uuid.uuid4().hex}"
        return cls(
            profile_id=str(profile_id),
            role=str(data.get("role") or ""),
            layer_weights={layer: float(layer_weights[layer]) for layer in ALL_LAYERS},
            skills=freeze_layer_skills(skills),
            dictionary_version=version,
            created_at=created_at,
        )

    # --- Getters ------------------------------------------------------------

    @property
    def id(self) -> str:
        return self._id

    @property
    def role(self) -> str:
        return self._role

    @property
    def dictionary_version(self) -> str:
        return self._dictionary_version

    @property
    def created_at(self) -> datetime:
        return self._created_at

    def get_layer_weight(self, layer: TechLayer | str) -> float:
        return self._layer_weights[parse_layer(layer).value]

    def get_layer_weights(self) -> LayerWeights:
        return dict(self._layer_weights)

    def get_skills_for_layer(self, layer: TechLayer | str) -> list[SkillWeight]:
        return list(self._skills[parse_layer(layer).value])

    def get_all_skills(self) -> LayerSkills:
        return {layer: list(self._skills[layer]) for layer in ALL_LAYERS}

    # --- Serialization ------------------------------------------------------

    def to_dict(self) -> dict:
        return {
            "id": self._id,
            "role": self._role,
            "layer_weights": dict(self._layer_weights),
            "skills": {
                layer: [{"skill": s.skill, "weight": s.weight} for s in self._skills[layer]]
                for layer in ALL_LAYERS
            },
            "dictionary_version": self._dictionary_version,
            "created_at": self._created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "WeightedSkillProfile":
        """Rebuild a stored profile; the stored document is re-validated."""
        payload = dict(data)
        if "id" not in payload and "_id" in payload:
            payload["id"] = payload["_id"]
        return cls._validated(payload, created_at=_parse_created_at(payload.get("created_at")))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, WeightedSkillProfile):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __hash__(self) -> int:
        return hash(self._id)

    def __repr__(self) -> str:
        return (
            f"WeightedSkillProfile(id={self._id!r}, role={self._role!r}, "
            f"dictionary_version={self._dictionary_version!r})"
        )
