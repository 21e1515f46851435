"""Job application (bid) carrying the stack it was submitted against.

Bids come in two shapes. Current bids store ``main_stacks`` as six-layer
weighted skills and take their layer weights either explicitly or from the
role's defaults; legacy bids store a flat list of stack names and are skipped
by match-rate calculations.
"""

import uuid
from collections.abc import Mapping, Sequence
from datetime import datetime, timezone
from typing import Any

from models.schemas.layers import ALL_LAYERS, SkillWeight, TechLayer
from services.exceptions import InvalidBidError
from services.normalizer import parse_layer
from services.roles import RoleService
from services.skill_profile import (
    check_layer_weights_complete,
    check_layer_weights_sum,
    validate_layer_skills,
)

_REQUIRED_FIELDS = ("company", "client", "role", "link")


def _parse_created_at(value: object) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        return datetime.fromisoformat(value)
    return datetime.now(timezone.utc)


class Bid:
    def __init__(
        self,
        bid_id: str,
        company: str,
        client: str,
        role: str,
        link: str,
        main_stacks: dict[str, tuple[SkillWeight, ...]] | tuple[str, ...],
        layer_weights: dict[str, float] | None,
        created_at: datetime,
    ) -> None:
        self.id = bid_id
        self.company = company
        self.client = client
        self.role = role
        self.link = link
        self._main_stacks = main_stacks
        self._layer_weights = layer_weights
        self.created_at = created_at

    @classmethod
    def create(cls, data: Mapping[str, Any], role_service: RoleService | None = None) -> "Bid":
        return cls._validated(data, datetime.now(timezone.utc), role_service or RoleService())

    @classmethod
    def _validated(cls, data: Mapping[str, Any], created_at: datetime, role_service: RoleService) -> "Bid":
        for field in _REQUIRED_FIELDS:
            value = data.get(field)
            if not isinstance(value, str) or not value.strip():
                raise InvalidBidError(f"Bid {field} is required")

        raw_stacks = data.get("main_stacks")
        if not raw_stacks:
            raise InvalidBidError("Bid main_stacks is required")

        role = data["role"].strip()
        if isinstance(raw_stacks, Mapping):
            main_stacks = validate_layer_skills(raw_stacks)
            raw_weights = data.get("layer_weights")
            if raw_weights is None:
                layer_weights = role_service.get_default_layer_weights(role)
            else:
                check_layer_weights_complete(raw_weights)
                check_layer_weights_sum(raw_weights)
                layer_weights = {layer: float(raw_weights[layer]) for layer in ALL_LAYERS}
        elif isinstance(raw_stacks, Sequence) and not isinstance(raw_stacks, str):
            main_stacks = tuple(str(stack) for stack in raw_stacks)
            layer_weights = None
        else:
            raise InvalidBidError("Bid main_stacks must be layer skills or a list of stacks")

        return cls(
            bid_id=str(data.get("id") or f"bid_{uuid.uuid4().hex}"),
            company=data["company"].strip(),
            client=data["client"].strip(),
            role=role,
            link=data["link"].strip(),
            main_stacks=main_stacks,
            layer_weights=layer_weights,
            created_at=created_at,
        )

    def is_layer_skills_format(self) -> bool:
        return isinstance(self._main_stacks, dict)

    def get_skills_for_layer(self, layer: TechLayer | str) -> list[SkillWeight]:
        if not self.is_layer_skills_format():
            raise InvalidBidError(f"Bid {self.id} does not use layer skills")
        return list(self._main_stacks[parse_layer(layer).value])

    def get_layer_weight(self, layer: TechLayer | str) -> float:
        if self._layer_weights is None:
            raise InvalidBidError(f"Bid {self.id} has no layer weights")
        return self._layer_weights[parse_layer(layer).value]

    def get_layer_weights(self) -> dict[str, float] | None:
        return dict(self._layer_weights) if self._layer_weights is not None else None

    def to_dict(self) -> dict:
        if self.is_layer_skills_format():
            main_stacks: Any = {
                layer: [{"skill": s.skill, "weight": s.weight} for s in self._main_stacks[layer]]
                for layer in ALL_LAYERS
            }
        else:
            main_stacks = list(self._main_stacks)
        return {
            "id": self.id,
            "company": self.company,
            "client": self.client,
            "role": self.role,
            "link": self.link,
            "main_stacks": main_stacks,
            "layer_weights": self.get_layer_weights(),
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], role_service: RoleService | None = None) -> "Bid":
        return cls._validated(
            data, _parse_created_at(data.get("created_at")), role_service or RoleService()
        )
