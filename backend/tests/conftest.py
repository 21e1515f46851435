"""Shared test configuration, pytest markers and fixtures."""

import pytest

from models.requests import CreateProfileRequest
from services.repositories.memory import (
    InMemoryBidRepository,
    InMemoryProfileRepository,
    InMemoryResumeRepository,
    InMemoryReviewQueueRepository,
    InMemorySkillDictionaryRepository,
)
from services.skill_dictionary import SkillDictionary
from services.skill_profile import WeightedSkillProfile


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "api: exercises the FastAPI app through TestClient"
    )


DEFAULT_LAYER_WEIGHTS = {
    "frontend": 0.3,
    "backend": 0.4,
    "database": 0.1,
    "cloud": 0.1,
    "devops": 0.05,
    "others": 0.05,
}


def build_profile_data(skills=None, layer_weights=None, version="2024.1", **extra) -> dict:
    """Valid profile input; ``skills`` maps layer -> [(name, weight), ...]."""
    all_skills = {layer: [] for layer in DEFAULT_LAYER_WEIGHTS}
    for layer, entries in (skills or {}).items():
        all_skills[layer] = [{"skill": name, "weight": weight} for name, weight in entries]
    data = {
        "role": "Senior Backend Engineer",
        "layer_weights": dict(layer_weights or DEFAULT_LAYER_WEIGHTS),
        "skills": all_skills,
        "dictionary_version": version,
    }
    data.update(extra)
    return data


@pytest.fixture
def profile_data():
    return build_profile_data(
        skills={
            "frontend": [("react", 0.6), ("typescript", 0.4)],
            "backend": [("node.js", 0.5), ("python", 0.5)],
            "database": [("postgresql", 1.0)],
        }
    )


@pytest.fixture
def make_profile_data():
    return build_profile_data


@pytest.fixture
def make_profile():
    def _make(skills=None, layer_weights=None, version="2024.1", **extra) -> WeightedSkillProfile:
        return WeightedSkillProfile.create(build_profile_data(skills, layer_weights, version, **extra))
    return _make


@pytest.fixture
def make_profile_request():
    def _make(skills=None, layer_weights=None, role="Senior Backend Engineer") -> CreateProfileRequest:
        data = build_profile_data(skills, layer_weights, role=role)
        return CreateProfileRequest(role=data["role"], layer_weights=data["layer_weights"], skills=data["skills"])
    return _make


@pytest.fixture
def dictionary():
    d = SkillDictionary.create("2024.1")
    d.add_canonical_skill("react", "frontend")
    d.add_canonical_skill("typescript", "frontend")
    d.add_canonical_skill("python", "backend")
    d.add_canonical_skill("postgresql", "database")
    d.add_canonical_skill("kubernetes", "devops")
    d.add_skill_variation("reactjs", "react")
    d.add_skill_variation("react.js", "react")
    d.add_skill_variation("ts", "typescript")
    d.add_skill_variation("postgres", "postgresql")
    d.add_skill_variation("k8s", "kubernetes")
    return d


@pytest.fixture
def profile_repo():
    return InMemoryProfileRepository()


@pytest.fixture
def dictionary_repo(dictionary):
    return InMemorySkillDictionaryRepository(lambda: dictionary.copy())


@pytest.fixture
def queue_repo():
    return InMemoryReviewQueueRepository()


@pytest.fixture
def bid_repo():
    return InMemoryBidRepository()


@pytest.fixture
def resume_repo():
    return InMemoryResumeRepository()
