"""Shared dependencies for API routes.

Repositories are built once, on first use, from ``settings.storage_backend``.
Follows the registry pattern: a module-level singleton with ``clear()`` for
tests.
"""

import logging

from pydantic import BaseModel, ConfigDict

from config import settings
from services.repositories.base import (
    BidRepository,
    ProfileRepository,
    ResumeRepository,
    ReviewQueueRepository,
    SkillDictionaryRepository,
)
from services.seed_dictionary import build_seed_dictionary
from services.skill_dictionary import SkillDictionary
from services.workflows.bid_match_rate import CalculateBidMatchRateWorkflow, CreateBidWorkflow
from services.workflows.calculate_correlation import CalculateCorrelationWorkflow
from services.workflows.create_profile import CreateProfileWorkflow
from services.workflows.dictionary_transfer import ExportDictionaryWorkflow, ImportDictionaryWorkflow
from services.workflows.manage_dictionary import ManageSkillDictionaryWorkflow
from services.workflows.resume_match_rate import CalculateResumeMatchRateWorkflow
from services.workflows.review_unknown_skills import ReviewUnknownSkillsWorkflow
from services.workflows.skill_statistics import SkillUsageStatisticsWorkflow

logger = logging.getLogger(__name__)


class Container(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    profiles: ProfileRepository
    dictionaries: SkillDictionaryRepository
    review_queue: ReviewQueueRepository
    bids: BidRepository
    resumes: ResumeRepository


_container: Container | None = None


def _initial_dictionary() -> SkillDictionary:
    if settings.seed_dictionary:
        return build_seed_dictionary(settings.default_dictionary_version)
    return SkillDictionary.create(settings.default_dictionary_version)


def _create_container() -> Container:
    backend = settings.storage_backend
    if backend == "memory":
        from services.repositories.memory import (
            InMemoryBidRepository,
            InMemoryProfileRepository,
            InMemoryResumeRepository,
            InMemoryReviewQueueRepository,
            InMemorySkillDictionaryRepository,
        )
        return Container(
            profiles=InMemoryProfileRepository(),
            dictionaries=InMemorySkillDictionaryRepository(_initial_dictionary),
            review_queue=InMemoryReviewQueueRepository(),
            bids=InMemoryBidRepository(),
            resumes=InMemoryResumeRepository(),
        )
    elif backend == "json":
        from services.repositories.json_store import (
            JsonBidRepository,
            JsonProfileRepository,
            JsonResumeRepository,
            JsonReviewQueueRepository,
            JsonSkillDictionaryRepository,
        )
        data_dir = settings.data_dir
        return Container(
            profiles=JsonProfileRepository(data_dir),
            dictionaries=JsonSkillDictionaryRepository(data_dir, _initial_dictionary),
            review_queue=JsonReviewQueueRepository(data_dir),
            bids=JsonBidRepository(data_dir),
            resumes=JsonResumeRepository(data_dir),
        )
    else:
        raise ValueError(f"Unknown storage backend: {backend}")


def get_container() -> Container:
    global _container
    if _container is None:
        logger.info("Initialising %s storage", settings.storage_backend)
        _container = _create_container()
    return _container


def clear() -> None:
    """Drop the repositories. Useful for testing."""
    global _container
    _container = None


def get_profile_workflow() -> CreateProfileWorkflow:
    c = get_container()
    return CreateProfileWorkflow(c.profiles, c.dictionaries, c.review_queue)


def get_correlation_workflow() -> CalculateCorrelationWorkflow:
    return CalculateCorrelationWorkflow(get_container().profiles)


def get_review_workflow() -> ReviewUnknownSkillsWorkflow:
    c = get_container()
    return ReviewUnknownSkillsWorkflow(c.review_queue, c.dictionaries)


def get_dictionary_workflow() -> ManageSkillDictionaryWorkflow:
    return ManageSkillDictionaryWorkflow(get_container().dictionaries)


def get_export_workflow() -> ExportDictionaryWorkflow:
    return ExportDictionaryWorkflow(get_container().dictionaries)


def get_import_workflow() -> ImportDictionaryWorkflow:
    return ImportDictionaryWorkflow(get_container().dictionaries)


def get_statistics_workflow() -> SkillUsageStatisticsWorkflow:
    c = get_container()
    return SkillUsageStatisticsWorkflow(c.profiles, c.resumes, c.dictionaries)


def get_create_bid_workflow() -> CreateBidWorkflow:
    return CreateBidWorkflow(get_container().bids)


def get_bid_match_rate_workflow() -> CalculateBidMatchRateWorkflow:
    return CalculateBidMatchRateWorkflow(get_container().bids)


def get_resume_match_rate_workflow() -> CalculateResumeMatchRateWorkflow:
    c = get_container()
    return CalculateResumeMatchRateWorkflow(c.profiles, c.resumes)
