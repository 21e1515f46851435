"""Export and import of whole dictionary documents.

Both workflows report failures in their response instead of raising.

Import modes:
    replace  the imported document becomes the next stored version
    merge    imported skills and variations are folded into a copy of the
             current dictionary carrying the next version

An imported version that is not newer than the current one is refused unless
``allow_version_downgrade`` is set; the content is then re-stamped with the
next version after the current one so stored versions only ever increase.
"""

import logging

from models.requests import ExportDictionaryRequest, ImportDictionaryRequest
from models.schemas.skill_dictionary import ExportDictionaryResponse, ImportDictionaryResponse
from services.repositories.base import SkillDictionaryRepository
from services.skill_dictionary import SkillDictionary, is_newer_version, parse_version

logger = logging.getLogger(__name__)


class ExportDictionaryWorkflow:
    def __init__(self, dictionaries: SkillDictionaryRepository) -> None:
        self._dictionaries = dictionaries

    async def execute(self, request: ExportDictionaryRequest | None = None) -> ExportDictionaryResponse:
        version = request.version if request else None
        try:
            if version:
                dictionary = await self._dictionaries.get_version(version)
            else:
                dictionary = await self._dictionaries.get_current()

            if dictionary is None:
                return ExportDictionaryResponse(
                    success=False,
                    message=f"Dictionary version '{version}' not found",
                )

            data = dictionary.to_dict()
            return ExportDictionaryResponse(
                success=True,
                data=data,
                message=(
                    f"Successfully exported dictionary version {data['version']} with "
                    f"{len(data['skills'])} skills and {len(data['variations'])} variations"
                ),
            )
        except Exception as e:
            logger.error("Dictionary export failed: %s", e)
            return ExportDictionaryResponse(success=False, message=str(e))


def validate_dictionary_document(data: object) -> str | None:
    """Structural check of an exported document; returns the first problem found."""
    if not isinstance(data, dict):
        return "Document must be an object"
    if not data.get("version"):
        return "Missing required field: version"
    if not isinstance(data.get("skills"), list):
        return "Missing or invalid field: skills (must be array)"
    if not isinstance(data.get("variations"), list):
        return "Missing or invalid field: variations (must be array)"
    if not data.get("created_at"):
        return "Missing required field: created_at"

    for skill in data["skills"]:
        if not isinstance(skill, dict) or not all(skill.get(k) for k in ("name", "category", "created_at")):
            return "Invalid skill structure: missing required fields (name, category, created_at)"
    for variation in data["variations"]:
        if not isinstance(variation, dict) or not all(variation.get(k) for k in ("variation", "canonical")):
            return "Invalid variation structure: missing required fields (variation, canonical)"
    return None


def version_conflict(current_version: str, imported_version: str) -> str | None:
    current_year, current_n = parse_version(current_version)
    imported_year, imported_n = parse_version(imported_version)

    if imported_year < current_year:
        return (
            f"Version conflict: Cannot import older version {imported_version} over current "
            f"version {current_version}. Use allow_version_downgrade option to override."
        )
    if imported_year == current_year and imported_n <= current_n:
        return (
            f"Version conflict: Cannot import version {imported_version} as current version "
            f"{current_version} is equal or newer. Use allow_version_downgrade option to override."
        )
    return None


class ImportDictionaryWorkflow:
    def __init__(self, dictionaries: SkillDictionaryRepository) -> None:
        self._dictionaries = dictionaries

    async def execute(self, request: ImportDictionaryRequest) -> ImportDictionaryResponse:
        try:
            problem = validate_dictionary_document(request.data)
            if problem:
                return ImportDictionaryResponse(success=False, message=f"Invalid dictionary JSON: {problem}")

            imported = SkillDictionary.from_dict(request.data)
            current = await self._dictionaries.get_current()

            if not request.allow_version_downgrade:
                conflict = version_conflict(current.version, imported.version)
                if conflict:
                    return ImportDictionaryResponse(success=False, message=conflict)

            if request.mode == "replace":
                return await self._replace(imported, current)
            return await self._merge(imported, current)
        except Exception as e:
            logger.error("Dictionary import failed: %s", e)
            return ImportDictionaryResponse(success=False, message=str(e))

    async def _replace(self, imported: SkillDictionary, current: SkillDictionary) -> ImportDictionaryResponse:
        to_store = imported
        if not is_newer_version(imported.version, current.version):
            to_store = SkillDictionary.from_dict(
                {**imported.to_dict(), "version": current.increment_version()}
            )
            logger.warning(
                "Imported dictionary %s is not newer than %s, stored as %s",
                imported.version,
                current.version,
                to_store.version,
            )

        await self._dictionaries.save(to_store, expected_version=current.version)
        return ImportDictionaryResponse(
            success=True,
            message=f"Successfully imported dictionary version {to_store.version} in replace mode",
            imported_version=to_store.version,
        )

    async def _merge(self, imported: SkillDictionary, current: SkillDictionary) -> ImportDictionaryResponse:
        merged = current.with_incremented_version()
        conflicts_resolved = 0

        for skill in imported.get_all_skills():
            existing = merged.get_canonical_skill(skill.name)
            if existing is None:
                if merged.has_skill(skill.name):
                    # Known here as a variation of another skill.
                    logger.warning("Skipped imported skill '%s': exists as a variation", skill.name)
                    conflicts_resolved += 1
                    continue
                merged.add_canonical_skill(skill.name, skill.category)
            elif existing.category != skill.category:
                # Imported category wins; variations are kept.
                merged.rename_canonical_skill(skill.name, skill.name, skill.category)
                conflicts_resolved += 1

        for entry in imported.get_all_variations():
            if merged.get_canonical_skill(entry.canonical) is None:
                continue
            existing_canonical = merged.map_to_canonical(entry.variation)
            if existing_canonical is None:
                merged.add_skill_variation(entry.variation, entry.canonical)
            elif existing_canonical != entry.canonical:
                logger.warning(
                    "Skipped imported variation '%s' -> '%s': already maps to '%s'",
                    entry.variation,
                    entry.canonical,
                    existing_canonical,
                )
                conflicts_resolved += 1

        await self._dictionaries.save(merged, expected_version=current.version)
        return ImportDictionaryResponse(
            success=True,
            message=(
                f"Successfully merged dictionaries. New version: {merged.version}. "
                f"Conflicts resolved: {conflicts_resolved}"
            ),
            imported_version=merged.version,
            conflicts_resolved=conflicts_resolved,
        )
