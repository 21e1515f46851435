"""The six technology layers every weighted skill profile is partitioned into."""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class TechLayer(str, Enum):
    FRONTEND = "frontend"
    BACKEND = "backend"
    DATABASE = "database"
    CLOUD = "cloud"
    DEVOPS = "devops"
    OTHERS = "others"


# Fixed iteration order for every layer-keyed structure and every summation.
ALL_LAYERS: tuple[str, ...] = tuple(layer.value for layer in TechLayer)

# Tolerance used for every "sums to 1.0" check.
WEIGHT_SUM_TOLERANCE = 0.001


class SkillWeight(BaseModel):
    """A skill identifier with its importance inside one layer (0-1)."""
    model_config = ConfigDict(frozen=True)

    skill: str
    weight: float


def is_valid_tech_layer(value: object) -> bool:
    if isinstance(value, TechLayer):
        return True
    return isinstance(value, str) and value in ALL_LAYERS


def empty_layer_skills() -> dict[str, list[SkillWeight]]:
    return {layer: [] for layer in ALL_LAYERS}


def weights_sum_to_one(weights: list[float] | tuple[float, ...]) -> bool:
    total = 0.0
    for weight in weights:
        total += weight
    return abs(total - 1.0) <= WEIGHT_SUM_TOLERANCE
