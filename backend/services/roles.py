"""Role strings and their default layer weights.

A role reads ``"<Seniority> [<Modifier>] <Title>"``, e.g. "Senior Backend
Engineer" or "Junior Frontend Heavy Full Stack Engineer". Full Stack Engineer
always carries one of the modifiers; the modifier is part of the title used to
look up weights.
"""

from pydantic import BaseModel, ConfigDict

from models.schemas.layers import weights_sum_to_one
from services.exceptions import InvalidRoleError

SENIORITY_LEVELS = ("Junior", "Mid", "Senior", "Lead", "Staff")
FULL_STACK_MODIFIERS = ("Balanced", "Frontend Heavy", "Backend Heavy")
FULL_STACK_TITLE = "Full Stack Engineer"

BASIC_TITLES = (
    "Software Engineer",
    "Backend Engineer",
    "Frontend Developer",
    FULL_STACK_TITLE,
    "QA Automation Engineer",
    "DevOps Engineer",
    "Data Engineer",
    "Mobile Developer",
)


def _weights(frontend, backend, database, cloud, devops, others) -> dict[str, float]:
    return {
        "frontend": frontend,
        "backend": backend,
        "database": database,
        "cloud": cloud,
        "devops": devops,
        "others": others,
    }


ROLE_LAYER_WEIGHTS: dict[str, dict[str, float]] = {
    "Software Engineer": _weights(0.25, 0.40, 0.15, 0.10, 0.05, 0.05),
    "Backend Engineer": _weights(0.05, 0.60, 0.20, 0.10, 0.05, 0.0),
    "Frontend Developer": _weights(0.70, 0.10, 0.05, 0.05, 0.05, 0.05),
    "Balanced Full Stack Engineer": _weights(0.35, 0.35, 0.15, 0.10, 0.05, 0.0),
    "Frontend Heavy Full Stack Engineer": _weights(0.50, 0.25, 0.10, 0.10, 0.05, 0.0),
    "Backend Heavy Full Stack Engineer": _weights(0.25, 0.50, 0.15, 0.05, 0.05, 0.0),
    "QA Automation Engineer": _weights(0.20, 0.30, 0.10, 0.10, 0.20, 0.10),
    "DevOps Engineer": _weights(0.0, 0.15, 0.10, 0.40, 0.35, 0.0),
    "Data Engineer": _weights(0.0, 0.30, 0.50, 0.15, 0.05, 0.0),
    "Mobile Developer": _weights(0.60, 0.15, 0.10, 0.10, 0.0, 0.05),
}


class ParsedRole(BaseModel):
    model_config = ConfigDict(frozen=True)

    seniority: str
    basic_title: str
    modifier: str | None = None


class RoleService:
    def get_default_layer_weights(self, role: str) -> dict[str, float]:
        """Default weights for a role; the seniority prefix is ignored."""
        basic_title = self.extract_basic_title(role)
        weights = ROLE_LAYER_WEIGHTS.get(basic_title)
        if weights is None:
            raise InvalidRoleError(f"Unknown role: {basic_title}")
        if not weights_sum_to_one(tuple(weights.values())):
            raise InvalidRoleError(
                f"Invalid layer weights for role {basic_title}: weights do not sum to 1.0"
            )
        return dict(weights)

    def extract_basic_title(self, role: str) -> str:
        for seniority in SENIORITY_LEVELS:
            prefix = seniority + " "
            if role.startswith(prefix):
                return role[len(prefix):]
        return role

    def validate_role(self, role: str) -> bool:
        try:
            self.get_default_layer_weights(role)
        except InvalidRoleError:
            return False
        return True

    def parse_role(self, role: str) -> ParsedRole:
        seniority = next((s for s in SENIORITY_LEVELS if role.startswith(s + " ")), None)
        if seniority is None:
            raise InvalidRoleError(f'Invalid role format: missing seniority level in "{role}"')
        remainder = role[len(seniority) + 1:]

        for modifier in FULL_STACK_MODIFIERS:
            if remainder == f"{modifier} {FULL_STACK_TITLE}":
                return ParsedRole(seniority=seniority, basic_title=FULL_STACK_TITLE, modifier=modifier)

        if remainder == FULL_STACK_TITLE:
            raise InvalidRoleError(
                "Full Stack Engineer role requires a modifier "
                "(Balanced, Frontend Heavy, or Backend Heavy)"
            )
        if remainder in BASIC_TITLES:
            return ParsedRole(seniority=seniority, basic_title=remainder)

        raise InvalidRoleError(f'Invalid role format: unknown title "{remainder}"')

    def compose_role(self, seniority: str, basic_title: str, modifier: str | None = None) -> str:
        if seniority not in SENIORITY_LEVELS:
            raise InvalidRoleError(f"Unknown seniority level: {seniority}")
        if basic_title not in BASIC_TITLES:
            raise InvalidRoleError(f"Unknown title: {basic_title}")
        if basic_title == FULL_STACK_TITLE:
            if modifier not in FULL_STACK_MODIFIERS:
                raise InvalidRoleError(
                    "Full Stack Engineer role requires a modifier "
                    "(Balanced, Frontend Heavy, or Backend Heavy)"
                )
            return f"{seniority} {modifier} {basic_title}"
        if modifier is not None:
            raise InvalidRoleError(f"Modifier is only allowed for {FULL_STACK_TITLE}")
        return f"{seniority} {basic_title}"
