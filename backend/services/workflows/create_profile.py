"""Create, update, read and delete JD specifications.

This is the only place unknown skill names enter the review queue: every raw
name is validated, mapped through the current dictionary, and names the
dictionary does not know are queued once per profile under the new profile's
id and kept in the profile in normalized form.
"""

import logging
import uuid

from pydantic import BaseModel, ConfigDict

from models.requests import CreateProfileRequest
from models.schemas.layers import ALL_LAYERS
from services.exceptions import ConcurrentModificationError, ProfileNotFoundError
from services.normalizer import parse_layer, validate_skill_name
from services.repositories.base import (
    ProfileRepository,
    ReviewQueueRepository,
    SkillDictionaryRepository,
)
from services.skill_dictionary import SkillDictionary
from services.skill_profile import WeightedSkillProfile

logger = logging.getLogger(__name__)

QUEUE_SAVE_ATTEMPTS = 3


class CreateProfileOutput(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    profile: WeightedSkillProfile
    unknown_skills: list[str] = []


class CreateProfileWorkflow:
    def __init__(
        self,
        profiles: ProfileRepository,
        dictionaries: SkillDictionaryRepository,
        review_queue: ReviewQueueRepository,
    ) -> None:
        self._profiles = profiles
        self._dictionaries = dictionaries
        self._review_queue = review_queue

    async def execute(self, request: CreateProfileRequest) -> CreateProfileOutput:
        dictionary = await self._dictionaries.get_current()
        profile_id = f"jd_{uuid.uuid4().hex}"

        mapped_skills, unknown_skills = self._map_skills(request, dictionary)
        profile = WeightedSkillProfile.create(
            {
                "id": profile_id,
                "role": request.role,
                "layer_weights": request.layer_weights,
                "skills": mapped_skills,
                "dictionary_version": dictionary.version,
            }
        )

        await self._profiles.save(profile)
        if unknown_skills:
            await self._record_unknown_skills(unknown_skills, profile.id)

        logger.info(
            "Created JD specification %s (%s) against dictionary %s, %d unknown skills",
            profile.id,
            profile.role,
            profile.dictionary_version,
            len(unknown_skills),
        )
        return CreateProfileOutput(profile=profile, unknown_skills=unknown_skills)

    async def update(self, profile_id: str, request: CreateProfileRequest) -> CreateProfileOutput:
        """Replace a stored profile, keeping its id and creation time."""
        existing = await self._profiles.find_by_id(profile_id)
        if existing is None:
            raise ProfileNotFoundError(profile_id)

        dictionary = await self._dictionaries.get_current()
        mapped_skills, unknown_skills = self._map_skills(request, dictionary)
        profile = WeightedSkillProfile.from_dict(
            {
                "id": profile_id,
                "role": request.role,
                "layer_weights": request.layer_weights,
                "skills": mapped_skills,
                "dictionary_version": dictionary.version,
                "created_at": existing.created_at,
            }
        )

        await self._profiles.update(profile)
        if unknown_skills:
            await self._record_unknown_skills(unknown_skills, profile.id)

        logger.info("Updated JD specification %s", profile_id)
        return CreateProfileOutput(profile=profile, unknown_skills=unknown_skills)

    async def get(self, profile_id: str) -> WeightedSkillProfile:
        profile = await self._profiles.find_by_id(profile_id)
        if profile is None:
            raise ProfileNotFoundError(profile_id)
        return profile

    async def list_all(self) -> list[WeightedSkillProfile]:
        return await self._profiles.find_all()

    async def delete(self, profile_id: str) -> None:
        if not await self._profiles.delete(profile_id):
            raise ProfileNotFoundError(profile_id)
        logger.info("Deleted JD specification %s", profile_id)

    @staticmethod
    def _map_skills(
        request: CreateProfileRequest,
        dictionary: SkillDictionary,
    ) -> tuple[dict[str, list[dict]], list[str]]:
        """Map raw names to canonical ids; returns (layer skills, unknown names in first-seen order)."""
        for key in list(request.layer_weights) + list(request.skills):
            parse_layer(key)

        mapped: dict[str, list[dict]] = {}
        unknown: list[str] = []
        for layer in ALL_LAYERS:
            entries = request.skills.get(layer)
            if entries is None:
                # Left for the profile's completeness check.
                continue

            mapped[layer] = []
            for entry in entries:
                name = validate_skill_name(entry.skill)
                canonical = dictionary.map_to_canonical(name)
                if canonical is None:
                    if name not in unknown:
                        unknown.append(name)
                    canonical = name
                mapped[layer].append({"skill": canonical, "weight": entry.weight})

        return mapped, unknown

    async def _record_unknown_skills(self, names: list[str], source_id: str) -> None:
        # Additions commute, so a lost race is retried on a fresh copy.
        for attempt in range(1, QUEUE_SAVE_ATTEMPTS + 1):
            queue = await self._review_queue.get()
            for name in names:
                queue.add_unknown_skill(name, source_id)
            try:
                await self._review_queue.save(queue)
                return
            except ConcurrentModificationError:
                if attempt == QUEUE_SAVE_ATTEMPTS:
                    raise
                logger.warning(
                    "Review queue changed while recording unknown skills for %s, retrying (%d/%d)",
                    source_id,
                    attempt,
                    QUEUE_SAVE_ATTEMPTS,
                )
