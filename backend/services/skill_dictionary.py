"""Canonical skill dictionary: versioned registry of skills and their variations.

Free-text names are normalized (trim + lowercase) and resolved first against
the canonical skills, then against the variation map. The version string
(``YYYY.N``) is stamped on every profile built against the dictionary.
"""

import logging
import re
from datetime import datetime, timezone

from models.schemas.layers import TechLayer
from models.schemas.skill_dictionary import CanonicalSkill, SkillVariation
from services.exceptions import (
    CanonicalNotFoundError,
    DuplicateSkillError,
    InvalidVersionFormatError,
    SkillNotFoundError,
    ValidationError,
)
from services.normalizer import normalize_skill_name, parse_layer, validate_skill_name

logger = logging.getLogger(__name__)

VERSION_PATTERN = re.compile(r"^\d{4}\.\d+$")


def validate_version_format(version: object) -> str:
    if not isinstance(version, str) or not VERSION_PATTERN.match(version):
        raise InvalidVersionFormatError(version)
    return version


def parse_version(version: str) -> tuple[int, int]:
    """Split ``YYYY.N`` into comparable (year, n)."""
    validate_version_format(version)
    year, n = version.split(".")
    return int(year), int(n)


def is_newer_version(candidate: str, reference: str) -> bool:
    return parse_version(candidate) > parse_version(reference)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SkillDictionary:
    """Map-keyed aggregate of canonical skills and variations.

    Mutations validate fully before touching state. Query methods return new
    lists; CanonicalSkill entries are frozen.
    """

    def __init__(
        self,
        version: str,
        skills: dict[str, CanonicalSkill] | None = None,
        variations: dict[str, str] | None = None,
        created_at: datetime | None = None,
    ) -> None:
        self._version = validate_version_format(version)
        self._skills: dict[str, CanonicalSkill] = dict(skills or {})
        self._variations: dict[str, str] = dict(variations or {})
        self._created_at = created_at or _utcnow()

    @classmethod
    def create(cls, version: str) -> "SkillDictionary":
        return cls(version)

    @property
    def version(self) -> str:
        return self._version

    @property
    def created_at(self) -> datetime:
        return self._created_at

    # --- Skill management -------------------------------------------------

    def add_canonical_skill(self, name: str, category: TechLayer | str) -> CanonicalSkill:
        normalized = validate_skill_name(name)
        layer = parse_layer(category)

        if normalized in self._skills:
            raise DuplicateSkillError(normalized, f"Canonical skill '{normalized}' already exists")
        if normalized in self._variations:
            raise DuplicateSkillError(
                normalized,
                f"Skill '{normalized}' already exists as a variation of '{self._variations[normalized]}'",
            )

        skill = CanonicalSkill(name=normalized, category=layer, created_at=_utcnow())
        self._skills[normalized] = skill
        return skill

    def add_skill_variation(self, variation: str, canonical_name: str) -> None:
        normalized_variation = validate_skill_name(variation, "Variation name")
        normalized_canonical = validate_skill_name(canonical_name, "Canonical name")

        if normalized_canonical not in self._skills:
            raise CanonicalNotFoundError(normalized_canonical)
        if normalized_variation in self._skills:
            raise DuplicateSkillError(
                normalized_variation,
                f"Variation '{normalized_variation}' conflicts with existing canonical skill",
            )
        existing = self._variations.get(normalized_variation)
        if existing is not None:
            raise DuplicateSkillError(
                normalized_variation,
                f"Variation '{normalized_variation}' already exists and maps to '{existing}'",
            )

        self._variations[normalized_variation] = normalized_canonical

    def remove_canonical_skill(self, name: str) -> list[str]:
        """Remove a canonical skill and every variation pointing at it.

        Returns the removed variations.
        """
        normalized = normalize_skill_name(name)
        if normalized not in self._skills:
            raise SkillNotFoundError(normalized)

        del self._skills[normalized]
        removed = [v for v, c in self._variations.items() if c == normalized]
        for variation in removed:
            del self._variations[variation]
        return removed

    def rename_canonical_skill(
        self,
        old_name: str,
        new_name: str,
        category: TechLayer | str | None = None,
    ) -> CanonicalSkill:
        """Rename (and optionally recategorize) a skill, keeping its variations."""
        normalized_old = normalize_skill_name(old_name)
        normalized_new = validate_skill_name(new_name, "New skill name")

        old_skill = self._skills.get(normalized_old)
        if old_skill is None:
            raise SkillNotFoundError(normalized_old)
        new_category = parse_layer(category) if category is not None else old_skill.category

        if normalized_new != normalized_old and self.has_skill(normalized_new):
            raise DuplicateSkillError(normalized_new)

        variations = self.get_variations_for(normalized_old)
        self.remove_canonical_skill(normalized_old)
        skill = self.add_canonical_skill(normalized_new, new_category)
        for variation in variations:
            self.add_skill_variation(variation, normalized_new)
        return skill

    # --- Lookup -----------------------------------------------------------

    def get_canonical_skill(self, name: str) -> CanonicalSkill | None:
        return self._skills.get(normalize_skill_name(name))

    def map_to_canonical(self, name: str) -> str | None:
        """Resolve a canonical skill or variation to its canonical name, else None."""
        normalized = normalize_skill_name(name)
        if normalized in self._skills:
            return normalized
        return self._variations.get(normalized)

    def has_skill(self, name: str) -> bool:
        normalized = normalize_skill_name(name)
        return normalized in self._skills or normalized in self._variations

    def get_all_skills(self) -> list[CanonicalSkill]:
        return list(self._skills.values())

    def get_skills_by_category(self, category: TechLayer | str) -> list[CanonicalSkill]:
        layer = parse_layer(category)
        return [skill for skill in self._skills.values() if skill.category == layer]

    def get_variations_for(self, canonical_name: str) -> list[str]:
        normalized = normalize_skill_name(canonical_name)
        if normalized not in self._skills:
            return []
        return [v for v, c in self._variations.items() if c == normalized]

    def get_all_variations(self) -> list[SkillVariation]:
        return [SkillVariation(variation=v, canonical=c) for v, c in self._variations.items()]

    # --- Versioning -------------------------------------------------------

    def increment_version(self, now: datetime | None = None) -> str:
        """Next version: ``{year}.1`` once the calendar year has moved on, else ``{year}.{n+1}``."""
        year, n = parse_version(self._version)
        current_year = (now or _utcnow()).year
        if current_year > year:
            return f"{current_year}.1"
        return f"{year}.{n + 1}"

    def with_incremented_version(self, now: datetime | None = None) -> "SkillDictionary":
        new_version = self.increment_version(now)
        logger.info("Dictionary version %s -> %s", self._version, new_version)
        return SkillDictionary(new_version, self._skills, self._variations, _utcnow())

    def copy(self) -> "SkillDictionary":
        return SkillDictionary(self._version, self._skills, self._variations, self._created_at)

    # --- Serialization ----------------------------------------------------

    def to_dict(self) -> dict:
        return {
            "version": self._version,
            "skills": [
                {
                    "name": skill.name,
                    "category": skill.category.value,
                    "created_at": skill.created_at.isoformat(),
                }
                for skill in self._skills.values()
            ],
            "variations": [{"variation": v, "canonical": c} for v, c in self._variations.items()],
            "created_at": self._created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SkillDictionary":
        version = validate_version_format(data.get("version"))

        skills: dict[str, CanonicalSkill] = {}
        for entry in data.get("skills", []):
            name = normalize_skill_name(entry["name"])
            skills[name] = CanonicalSkill(
                name=name,
                category=parse_layer(entry["category"]),
                created_at=_parse_datetime(entry.get("created_at")),
            )

        variations: dict[str, str] = {}
        for entry in data.get("variations", []):
            variation = normalize_skill_name(entry["variation"])
            canonical = normalize_skill_name(entry["canonical"])
            if canonical not in skills:
                raise ValidationError(
                    f"Variation '{variation}' references unknown canonical skill '{canonical}'"
                )
            if variation in skills:
                raise ValidationError(
                    f"Variation '{variation}' conflicts with existing canonical skill"
                )
            variations[variation] = canonical

        return cls(version, skills, variations, _parse_datetime(data.get("created_at")))


def _parse_datetime(value: object) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        return datetime.fromisoformat(value)
    return _utcnow()
