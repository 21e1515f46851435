"""Skill name normalization used wherever skill names are compared."""

from models.schemas.layers import TechLayer
from services.exceptions import EmptyNameError, InvalidLayerError, NameTooLongError

MAX_SKILL_NAME_LENGTH = 100


def parse_layer(value: object) -> TechLayer:
    """Coerce a layer name (any case, surrounding whitespace allowed) to TechLayer."""
    if isinstance(value, TechLayer):
        return value
    if isinstance(value, str):
        try:
            return TechLayer(value.strip().lower())
        except ValueError:
            pass
    raise InvalidLayerError(value)


def normalize_skill_name(raw: str) -> str:
    """Trim surrounding whitespace and lowercase."""
    return raw.strip().lower()


def validate_skill_name(raw: str, what: str = "Skill name") -> str:
    """Normalize a name that must be a usable identifier.

    Raises EmptyNameError when nothing is left after trimming and
    NameTooLongError past MAX_SKILL_NAME_LENGTH characters.
    """
    if not isinstance(raw, str) or not raw.strip():
        raise EmptyNameError(what)
    trimmed = raw.strip()
    if len(trimmed) > MAX_SKILL_NAME_LENGTH:
        raise NameTooLongError(trimmed, MAX_SKILL_NAME_LENGTH)
    return trimmed.lower()
