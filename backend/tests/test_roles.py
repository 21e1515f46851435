import pytest
from pydantic import ValidationError

from models.schemas.layers import ALL_LAYERS, weights_sum_to_one
from services.exceptions import InvalidRoleError
from services.roles import ROLE_LAYER_WEIGHTS, ParsedRole, RoleService


@pytest.fixture
def roles():
    return RoleService()


class TestDefaultLayerWeights:
    @pytest.mark.parametrize("title", sorted(ROLE_LAYER_WEIGHTS))
    def test_every_table_entry_is_valid(self, title):
        weights = ROLE_LAYER_WEIGHTS[title]
        assert tuple(weights) == ALL_LAYERS
        assert weights_sum_to_one(tuple(weights.values()))

    def test_seniority_is_ignored(self, roles):
        assert roles.get_default_layer_weights("Senior Backend Engineer") == ROLE_LAYER_WEIGHTS["Backend Engineer"]
        assert roles.get_default_layer_weights("Backend Engineer") == ROLE_LAYER_WEIGHTS["Backend Engineer"]

    def test_full_stack_modifier_selects_weights(self, roles):
        weights = roles.get_default_layer_weights("Lead Frontend Heavy Full Stack Engineer")
        assert weights["frontend"] == 0.5

    def test_unknown_role(self, roles):
        with pytest.raises(InvalidRoleError, match="Unknown role: Astronaut"):
            roles.get_default_layer_weights("Senior Astronaut")

    def test_returns_copy(self, roles):
        roles.get_default_layer_weights("Data Engineer")["database"] = 0.0
        assert ROLE_LAYER_WEIGHTS["Data Engineer"]["database"] == 0.5

    def test_validate_role(self, roles):
        assert roles.validate_role("Mid DevOps Engineer")
        assert not roles.validate_role("Mid Full Stack Engineer")


class TestParseRole:
    def test_simple(self, roles):
        assert roles.parse_role("Junior Mobile Developer") == ParsedRole(seniority="Junior", basic_title="Mobile Developer")

    def test_full_stack_with_modifier(self, roles):
        parsed = roles.parse_role("Staff Backend Heavy Full Stack Engineer")
        assert parsed == ParsedRole(seniority="Staff", basic_title="Full Stack Engineer", modifier="Backend Heavy")

    def test_parsed_role_is_immutable(self, roles):
        parsed = roles.parse_role("Senior Data Engineer")
        with pytest.raises(ValidationError):
            parsed.seniority = "Junior"
        assert parsed.model_dump() == {"seniority": "Senior", "basic_title": "Data Engineer", "modifier": None}

    def test_missing_seniority(self, roles):
        with pytest.raises(InvalidRoleError, match="missing seniority"):
            roles.parse_role("Backend Engineer")

    def test_full_stack_requires_modifier(self, roles):
        with pytest.raises(InvalidRoleError, match="requires a modifier"):
            roles.parse_role("Senior Full Stack Engineer")

    def test_unknown_title(self, roles):
        with pytest.raises(InvalidRoleError, match="unknown title"):
            roles.parse_role("Senior Wizard")


class TestComposeRole:
    def test_compose(self, roles):
        assert roles.compose_role("Senior", "Data Engineer") == "Senior Data Engineer"
        assert (
            roles.compose_role("Mid", "Full Stack Engineer", "Balanced")
            == "Mid Balanced Full Stack Engineer"
        )

    def test_modifier_only_for_full_stack(self, roles):
        with pytest.raises(InvalidRoleError):
            roles.compose_role("Mid", "Data Engineer", "Balanced")

    def test_compose_then_parse(self, roles):
        role = roles.compose_role("Lead", "Full Stack Engineer", "Frontend Heavy")
        assert roles.parse_role(role) == ParsedRole(seniority="Lead", basic_title="Full Stack Engineer", modifier="Frontend Heavy")
