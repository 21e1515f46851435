"""Resolve queued unknown skills into the dictionary.

Approvals touch two documents. The dictionary is saved first (with its
version check) and the queue second; if the queue save then loses a race the
skill is already in the dictionary and the still-pending item can be rejected.
"""

import logging

from models.responses import ApprovalResponse
from models.schemas.layers import TechLayer
from models.schemas.review_queue import (
    RejectionDecision,
    ReviewStatus,
    UnknownSkillItem,
)
from services.exceptions import CanonicalNotFoundError, EmptyCanonicalNameError
from services.normalizer import normalize_skill_name
from services.repositories.base import ReviewQueueRepository, SkillDictionaryRepository

logger = logging.getLogger(__name__)


class ReviewUnknownSkillsWorkflow:
    def __init__(
        self,
        review_queue: ReviewQueueRepository,
        dictionaries: SkillDictionaryRepository,
    ) -> None:
        self._review_queue = review_queue
        self._dictionaries = dictionaries

    async def get_queue_items(self, status: ReviewStatus | None = None) -> list[UnknownSkillItem]:
        queue = await self._review_queue.get()
        items = queue.get_queue_items()
        if status is not None:
            items = [item for item in items if item.status == status]
        return items

    async def approve_as_canonical(self, skill_name: str, category: TechLayer | str) -> ApprovalResponse:
        queue = await self._review_queue.get()
        decision = queue.approve_as_canonical(skill_name, category)

        dictionary = await self._dictionaries.get_current()
        updated = dictionary.with_incremented_version()
        updated.add_canonical_skill(decision.skill_name, decision.category)

        await self._dictionaries.save(updated, expected_version=dictionary.version)
        await self._review_queue.save(queue)

        logger.info(
            "Queued skill '%s' approved as canonical, dictionary now %s",
            decision.skill_name,
            updated.version,
        )
        return ApprovalResponse(decision=decision, dictionary_version=updated.version)

    async def approve_as_variation(self, skill_name: str, canonical_name: str) -> ApprovalResponse:
        normalized_canonical = normalize_skill_name(canonical_name or "")
        if not normalized_canonical:
            raise EmptyCanonicalNameError()

        # The queue does not know the dictionary; the target must be checked here.
        dictionary = await self._dictionaries.get_current()
        if dictionary.get_canonical_skill(normalized_canonical) is None:
            raise CanonicalNotFoundError(normalized_canonical)

        queue = await self._review_queue.get()
        decision = queue.approve_as_variation(skill_name, normalized_canonical)

        updated = dictionary.with_incremented_version()
        updated.add_skill_variation(decision.skill_name, normalized_canonical)

        await self._dictionaries.save(updated, expected_version=dictionary.version)
        await self._review_queue.save(queue)

        logger.info(
            "Queued skill '%s' approved as variation of '%s', dictionary now %s",
            decision.skill_name,
            normalized_canonical,
            updated.version,
        )
        return ApprovalResponse(decision=decision, dictionary_version=updated.version)

    async def reject_skill(self, skill_name: str, reason: str) -> RejectionDecision:
        queue = await self._review_queue.get()
        decision = queue.reject(skill_name, reason)
        await self._review_queue.save(queue)
        return decision
