"""In-process repositories.

Aggregates are stored in their serialized form so every read hands out an
independent copy. No method awaits between its check and its write, which
makes each call atomic on the event loop.
"""

import logging
from collections.abc import Callable

from services.bid import Bid
from services.exceptions import DuplicateError, ProfileNotFoundError
from services.repositories.base import (
    BidRepository,
    ProfileRepository,
    ResumeRepository,
    ReviewQueueRepository,
    SkillDictionaryRepository,
    check_dictionary_write,
    check_queue_write,
)
from services.resume import ResumeMetadata
from services.review_queue import SkillReviewQueue
from services.skill_dictionary import SkillDictionary, parse_version
from services.skill_profile import WeightedSkillProfile

logger = logging.getLogger(__name__)

DEFAULT_DICTIONARY_VERSION = "2024.1"


def default_dictionary_factory() -> SkillDictionary:
    return SkillDictionary.create(DEFAULT_DICTIONARY_VERSION)


class InMemoryProfileRepository(ProfileRepository):
    def __init__(self) -> None:
        self._profiles: dict[str, dict] = {}

    async def save(self, profile: WeightedSkillProfile) -> None:
        if profile.id in self._profiles:
            raise DuplicateError(f"JD specification already exists: {profile.id}")
        self._profiles[profile.id] = profile.to_dict()

    async def find_by_id(self, profile_id: str) -> WeightedSkillProfile | None:
        data = self._profiles.get(profile_id)
        return WeightedSkillProfile.from_dict(data) if data is not None else None

    async def find_all(self) -> list[WeightedSkillProfile]:
        return [WeightedSkillProfile.from_dict(data) for data in self._profiles.values()]

    async def update(self, profile: WeightedSkillProfile) -> None:
        if profile.id not in self._profiles:
            raise ProfileNotFoundError(profile.id)
        self._profiles[profile.id] = profile.to_dict()

    async def delete(self, profile_id: str) -> bool:
        return self._profiles.pop(profile_id, None) is not None


class InMemorySkillDictionaryRepository(SkillDictionaryRepository):
    def __init__(self, initial_factory: Callable[[], SkillDictionary] = default_dictionary_factory) -> None:
        self._versions: dict[str, dict] = {}
        self._initial_factory = initial_factory

    def _latest_version(self) -> str | None:
        if not self._versions:
            return None
        return max(self._versions, key=parse_version)

    async def save(self, dictionary: SkillDictionary, expected_version: str | None = None) -> None:
        check_dictionary_write(self._latest_version(), dictionary, expected_version)
        self._versions[dictionary.version] = dictionary.to_dict()
        logger.info("Stored skill dictionary version %s", dictionary.version)

    async def get_current(self) -> SkillDictionary:
        latest = self._latest_version()
        if latest is None:
            initial = self._initial_factory()
            self._versions[initial.version] = initial.to_dict()
            logger.info("Initialised empty dictionary store with version %s", initial.version)
            latest = initial.version
        return SkillDictionary.from_dict(self._versions[latest])

    async def get_version(self, version: str) -> SkillDictionary | None:
        data = self._versions.get(version)
        return SkillDictionary.from_dict(data) if data is not None else None

    async def get_all_versions(self) -> list[str]:
        return sorted(self._versions, key=parse_version)


class InMemoryReviewQueueRepository(ReviewQueueRepository):
    def __init__(self) -> None:
        self._document: dict = SkillReviewQueue.create().to_dict()

    async def get(self) -> SkillReviewQueue:
        return SkillReviewQueue.from_dict(self._document)

    async def save(self, queue: SkillReviewQueue) -> None:
        check_queue_write(self._document["revision"], queue)
        queue.revision += 1
        self._document = queue.to_dict()


class InMemoryBidRepository(BidRepository):
    def __init__(self) -> None:
        self._bids: dict[str, dict] = {}

    async def save(self, bid: Bid) -> None:
        self._bids[bid.id] = bid.to_dict()

    async def find_by_id(self, bid_id: str) -> Bid | None:
        data = self._bids.get(bid_id)
        return Bid.from_dict(data) if data is not None else None

    async def find_all(self) -> list[Bid]:
        return [Bid.from_dict(data) for data in self._bids.values()]


class InMemoryResumeRepository(ResumeRepository):
    def __init__(self) -> None:
        self._resumes: dict[str, ResumeMetadata] = {}

    async def save(self, resume: ResumeMetadata) -> None:
        self._resumes[resume.id] = resume

    async def get_all_resume_metadata(self) -> list[ResumeMetadata]:
        return [resume.model_copy(deep=True) for resume in self._resumes.values()]
