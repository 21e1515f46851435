"""Review queue for skill names the dictionary did not recognise.

One entry per normalized name. Each entry moves pending -> approved or
pending -> rejected, both terminal. The queue never consults the dictionary:
checking that a variation's canonical target exists is the caller's job
(see services.workflows.review_unknown_skills).
"""

import logging
from datetime import datetime, timezone

from models.schemas.layers import TechLayer
from models.schemas.review_queue import (
    ApprovalDecision,
    RejectionDecision,
    ReviewStatus,
    UnknownSkillItem,
)
from services.exceptions import (
    AlreadyProcessedError,
    EmptyCanonicalNameError,
    EmptyNameError,
    EmptyReasonError,
    QueueItemNotFoundError,
)
from services.normalizer import normalize_skill_name, parse_layer

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SkillReviewQueue:
    def __init__(self, items: dict[str, UnknownSkillItem] | None = None, revision: int = 0) -> None:
        self._items: dict[str, UnknownSkillItem] = items or {}
        # Stored revision this instance was loaded from; checked on save.
        self.revision = revision

    @classmethod
    def create(cls) -> "SkillReviewQueue":
        return cls()

    @classmethod
    def from_items(cls, items: list[UnknownSkillItem], revision: int = 0) -> "SkillReviewQueue":
        by_name: dict[str, UnknownSkillItem] = {}
        for item in items:
            name = normalize_skill_name(item.skill_name)
            by_name[name] = item.model_copy(update={"skill_name": name}, deep=True)
        return cls(by_name, revision)

    # --- Queue management -------------------------------------------------

    def add_unknown_skill(self, skill_name: str, source_id: str) -> None:
        normalized = normalize_skill_name(skill_name)
        if not normalized:
            raise EmptyNameError()
        source_id = (source_id or "").strip()
        if not source_id:
            raise EmptyNameError("Source id")

        existing = self._items.get(normalized)
        if existing is None:
            self._items[normalized] = UnknownSkillItem(
                skill_name=normalized,
                frequency=1,
                first_detected_at=_utcnow(),
                detected_in=[source_id],
                status=ReviewStatus.PENDING,
            )
            return

        existing.frequency += 1
        if source_id not in existing.detected_in:
            existing.detected_in.append(source_id)

    def approve_as_canonical(self, skill_name: str, category: TechLayer | str) -> ApprovalDecision:
        normalized = normalize_skill_name(skill_name)
        layer = parse_layer(category)
        item = self._pending_item(normalized)

        item.status = ReviewStatus.APPROVED
        logger.info("Approved '%s' as canonical skill (%s)", normalized, layer.value)
        return ApprovalDecision(
            skill_name=normalized,
            decision="canonical",
            canonical_name=normalized,
            category=layer,
            approved_at=_utcnow(),
        )

    def approve_as_variation(self, skill_name: str, canonical_name: str) -> ApprovalDecision:
        normalized = normalize_skill_name(skill_name)
        normalized_canonical = normalize_skill_name(canonical_name or "")
        if not normalized_canonical:
            raise EmptyCanonicalNameError()
        item = self._pending_item(normalized)

        item.status = ReviewStatus.APPROVED
        logger.info("Approved '%s' as variation of '%s'", normalized, normalized_canonical)
        return ApprovalDecision(
            skill_name=normalized,
            decision="variation",
            canonical_name=normalized_canonical,
            approved_at=_utcnow(),
        )

    def reject(self, skill_name: str, reason: str) -> RejectionDecision:
        normalized = normalize_skill_name(skill_name)
        if not reason or not reason.strip():
            raise EmptyReasonError()
        item = self._pending_item(normalized)

        item.status = ReviewStatus.REJECTED
        logger.info("Rejected '%s': %s", normalized, reason.strip())
        return RejectionDecision(
            skill_name=normalized,
            reason=reason.strip(),
            rejected_at=_utcnow(),
        )

    def _pending_item(self, normalized: str) -> UnknownSkillItem:
        item = self._items.get(normalized)
        if item is None:
            raise QueueItemNotFoundError(normalized)
        if item.status != ReviewStatus.PENDING:
            raise AlreadyProcessedError(normalized, item.status.value)
        return item

    # --- Queries (deep copies) --------------------------------------------

    def has_skill(self, skill_name: str) -> bool:
        return normalize_skill_name(skill_name) in self._items

    def get_item_by_name(self, skill_name: str) -> UnknownSkillItem | None:
        item = self._items.get(normalize_skill_name(skill_name))
        return item.model_copy(deep=True) if item is not None else None

    def get_queue_items(self) -> list[UnknownSkillItem]:
        return [item.model_copy(deep=True) for item in self._items.values()]

    def get_pending_items(self) -> list[UnknownSkillItem]:
        return [
            item.model_copy(deep=True)
            for item in self._items.values()
            if item.status == ReviewStatus.PENDING
        ]

    def __len__(self) -> int:
        return len(self._items)

    # --- Serialization ----------------------------------------------------

    def to_dict(self) -> dict:
        return {
            "revision": self.revision,
            "items": [item.model_dump(mode="json") for item in self._items.values()],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SkillReviewQueue":
        items = [UnknownSkillItem.model_validate(raw) for raw in data.get("items", [])]
        return cls.from_items(items, revision=int(data.get("revision", 0)))
