"""Persistence contracts the workflows depend on.

Each aggregate maps to one stored document: a profile, a bid or a resume per
id, the dictionary per version and the review queue as a singleton. Saves of
the two shared aggregates are compare-and-swap:

- ``SkillDictionaryRepository.save`` takes the version the caller loaded and
  requires the new dictionary to carry a strictly greater version.
- ``ReviewQueueRepository.save`` compares the queue's ``revision`` with the
  stored one and bumps it on success.

A mismatch raises ConcurrentModificationError and writes nothing.
"""

import logging
from abc import ABC, abstractmethod

from services.bid import Bid
from services.exceptions import ConcurrentModificationError
from services.resume import ResumeMetadata
from services.review_queue import SkillReviewQueue
from services.skill_dictionary import SkillDictionary, is_newer_version
from services.skill_profile import WeightedSkillProfile

logger = logging.getLogger(__name__)


def check_dictionary_write(
    stored_version: str | None,
    dictionary: SkillDictionary,
    expected_version: str | None,
) -> None:
    """Raise ConcurrentModificationError unless the write may replace ``stored_version``."""
    if expected_version is not None and expected_version != stored_version:
        logger.warning(
            "Dictionary save rejected: based on %s but store holds %s", expected_version, stored_version
        )
        raise ConcurrentModificationError("Skill dictionary", expected_version, stored_version)
    if stored_version is not None and not is_newer_version(dictionary.version, stored_version):
        logger.warning(
            "Dictionary save rejected: version %s is not newer than %s", dictionary.version, stored_version
        )
        raise ConcurrentModificationError("Skill dictionary", f"newer than {stored_version}", dictionary.version)


def check_queue_write(stored_revision: int, queue: SkillReviewQueue) -> None:
    if queue.revision != stored_revision:
        logger.warning(
            "Review queue save rejected: revision %s, store holds %s", queue.revision, stored_revision
        )
        raise ConcurrentModificationError("Review queue", queue.revision, stored_revision)


class ProfileRepository(ABC):
    @abstractmethod
    async def save(self, profile: WeightedSkillProfile) -> None:
        """Insert a new profile. Raises DuplicateError if the id is taken."""

    @abstractmethod
    async def find_by_id(self, profile_id: str) -> WeightedSkillProfile | None:
        ...

    @abstractmethod
    async def find_all(self) -> list[WeightedSkillProfile]:
        ...

    @abstractmethod
    async def update(self, profile: WeightedSkillProfile) -> None:
        """Replace a stored profile by id. Raises ProfileNotFoundError if absent."""

    @abstractmethod
    async def delete(self, profile_id: str) -> bool:
        """Delete by id; returns False when nothing was stored."""


class SkillDictionaryRepository(ABC):
    @abstractmethod
    async def save(self, dictionary: SkillDictionary, expected_version: str | None = None) -> None:
        """Store a new dictionary version.

        ``expected_version`` is the version the caller based its changes on;
        None skips that check (used for first writes and imports).
        """

    @abstractmethod
    async def get_current(self) -> SkillDictionary:
        """Latest stored version; an empty store is initialised first."""

    @abstractmethod
    async def get_version(self, version: str) -> SkillDictionary | None:
        ...

    @abstractmethod
    async def get_all_versions(self) -> list[str]:
        """Stored versions, oldest first."""


class ReviewQueueRepository(ABC):
    @abstractmethod
    async def get(self) -> SkillReviewQueue:
        ...

    @abstractmethod
    async def save(self, queue: SkillReviewQueue) -> None:
        ...


class BidRepository(ABC):
    @abstractmethod
    async def save(self, bid: Bid) -> None:
        ...

    @abstractmethod
    async def find_by_id(self, bid_id: str) -> Bid | None:
        ...

    @abstractmethod
    async def find_all(self) -> list[Bid]:
        ...


class ResumeRepository(ABC):
    @abstractmethod
    async def save(self, resume: ResumeMetadata) -> None:
        ...

    @abstractmethod
    async def get_all_resume_metadata(self) -> list[ResumeMetadata]:
        ...
