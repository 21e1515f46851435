"""Direct maintenance of the canonical skill dictionary.

Every mutation works on a copy carrying the next version, so a failed
mutation leaves the stored dictionary untouched, and the copy is saved with a
check against the version it was derived from.
"""

import logging

from models.schemas.layers import ALL_LAYERS, TechLayer
from models.schemas.skill_dictionary import DictionarySkills, SkillOperationOutput, SkillVariations
from services.exceptions import SkillNotFoundError
from services.normalizer import normalize_skill_name, parse_layer, validate_skill_name
from services.repositories.base import SkillDictionaryRepository
from services.skill_dictionary import SkillDictionary

logger = logging.getLogger(__name__)


class ManageSkillDictionaryWorkflow:
    def __init__(self, dictionaries: SkillDictionaryRepository) -> None:
        self._dictionaries = dictionaries

    async def _next_version(self) -> tuple[SkillDictionary, SkillDictionary]:
        current = await self._dictionaries.get_current()
        return current, current.with_incremented_version()

    async def _commit(self, current: SkillDictionary, updated: SkillDictionary, message: str) -> SkillOperationOutput:
        await self._dictionaries.save(updated, expected_version=current.version)
        logger.info("%s (dictionary %s)", message, updated.version)
        return SkillOperationOutput(success=True, message=message, dictionary_version=updated.version)

    # --- Mutations ----------------------------------------------------------

    async def add_canonical_skill(self, name: str, category: TechLayer | str) -> SkillOperationOutput:
        normalized = validate_skill_name(name)
        layer = parse_layer(category)

        current, updated = await self._next_version()
        updated.add_canonical_skill(normalized, layer)
        return await self._commit(current, updated, f"Canonical skill '{normalized}' added successfully")

    async def add_skill_variation(self, variation: str, canonical_name: str) -> SkillOperationOutput:
        normalized_variation = validate_skill_name(variation, "Variation name")
        normalized_canonical = validate_skill_name(canonical_name, "Canonical name")

        current, updated = await self._next_version()
        updated.add_skill_variation(normalized_variation, normalized_canonical)
        return await self._commit(
            current,
            updated,
            f"Variation '{normalized_variation}' added for '{normalized_canonical}'",
        )

    async def remove_canonical_skill(self, name: str) -> SkillOperationOutput:
        normalized = validate_skill_name(name)

        current, updated = await self._next_version()
        removed = updated.remove_canonical_skill(normalized)
        message = f"Canonical skill '{normalized}' removed successfully"
        if removed:
            message += f" along with {len(removed)} variation(s)"
        return await self._commit(current, updated, message)

    async def update_canonical_skill(
        self,
        old_name: str,
        new_name: str,
        category: TechLayer | str | None = None,
    ) -> SkillOperationOutput:
        """Rename and/or recategorize a skill, keeping its variations."""
        normalized_old = validate_skill_name(old_name, "Old skill name")
        normalized_new = validate_skill_name(new_name, "New skill name")

        current, updated = await self._next_version()
        updated.rename_canonical_skill(normalized_old, normalized_new, category)
        if normalized_old == normalized_new:
            message = f"Canonical skill '{normalized_old}' updated successfully"
        else:
            message = f"Canonical skill '{normalized_old}' renamed to '{normalized_new}'"
        return await self._commit(current, updated, message)

    # --- Queries ------------------------------------------------------------

    async def get_skills(self) -> DictionarySkills:
        dictionary = await self._dictionaries.get_current()
        return DictionarySkills(
            version=dictionary.version,
            skills={layer: dictionary.get_skills_by_category(layer) for layer in ALL_LAYERS},
        )

    async def get_skills_by_category(self, category: TechLayer | str) -> DictionarySkills:
        layer = parse_layer(category)
        dictionary = await self._dictionaries.get_current()
        return DictionarySkills(
            version=dictionary.version,
            skills={layer.value: dictionary.get_skills_by_category(layer)},
        )

    async def get_variations(self, canonical_name: str) -> SkillVariations:
        normalized = normalize_skill_name(canonical_name)
        dictionary = await self._dictionaries.get_current()
        if dictionary.get_canonical_skill(normalized) is None:
            raise SkillNotFoundError(normalized)
        return SkillVariations(
            canonical_name=normalized,
            variations=dictionary.get_variations_for(normalized),
        )
