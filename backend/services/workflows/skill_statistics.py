"""Skill usage statistics over stored JD specifications and resumes.

Usages are grouped under their canonical name; a raw name that only resolves
through a variation is counted for its canonical skill and listed among its
variations. This is a reporting workflow: any failure is returned as
``success=False`` with the error message.
"""

import logging
from datetime import datetime, timezone

from pydantic import BaseModel

from models.schemas.layers import TechLayer
from models.schemas.statistics import (
    DateRange,
    SkillStatistic,
    SkillUsageStatisticsRequest,
    SkillUsageStatisticsResponse,
)
from services.normalizer import normalize_skill_name
from services.repositories.base import (
    ProfileRepository,
    ResumeRepository,
    SkillDictionaryRepository,
)
from services.skill_dictionary import SkillDictionary

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _in_range(created_at: datetime, start: datetime | None, end: datetime | None) -> bool:
    created_at = _as_utc(created_at)
    if start is not None and created_at < start:
        return False
    if end is not None and created_at > end:
        return False
    return True


class _Usage(BaseModel):
    category: TechLayer
    first_seen: datetime
    last_seen: datetime
    jd_count: int = 0
    resume_count: int = 0
    variations: list[str] = []
    variation_usage_count: int = 0

    def record(self, raw_name: str, canonical: str | None, seen_at: datetime) -> None:
        if canonical is not None and canonical != normalize_skill_name(raw_name):
            if raw_name not in self.variations:
                self.variations.append(raw_name)
            self.variation_usage_count += 1
        self.first_seen = min(self.first_seen, seen_at)
        self.last_seen = max(self.last_seen, seen_at)


class SkillUsageStatisticsWorkflow:
    def __init__(
        self,
        profiles: ProfileRepository,
        resumes: ResumeRepository,
        dictionaries: SkillDictionaryRepository,
    ) -> None:
        self._profiles = profiles
        self._resumes = resumes
        self._dictionaries = dictionaries

    async def execute(self, request: SkillUsageStatisticsRequest | None = None) -> SkillUsageStatisticsResponse:
        request = request or SkillUsageStatisticsRequest()
        try:
            start = _as_utc(request.start_date) if request.start_date else None
            end = _as_utc(request.end_date) if request.end_date else None

            profiles = await self._profiles.find_all()
            resumes = await self._resumes.get_all_resume_metadata()
            dictionary = await self._dictionaries.get_current()

            usage: dict[str, _Usage] = {}
            self._count_profiles(usage, profiles, dictionary, start, end)
            self._count_resumes(usage, resumes, dictionary, start, end)

            statistics = [
                SkillStatistic(
                    skill_name=name,
                    category=entry.category,
                    jd_count=entry.jd_count,
                    resume_count=entry.resume_count,
                    total_usage=entry.jd_count + entry.resume_count,
                    variations=entry.variations,
                    variation_usage_count=entry.variation_usage_count,
                    first_seen=entry.first_seen,
                    last_seen=entry.last_seen,
                )
                for name, entry in usage.items()
            ]
            if request.category is not None:
                statistics = [s for s in statistics if s.category == request.category]
            statistics = self._sort(statistics, request.sort_by, request.sort_order)

            return SkillUsageStatisticsResponse(
                success=True,
                statistics=statistics,
                total_skills=len(statistics),
                date_range=DateRange(start=request.start_date, end=request.end_date),
                message=f"Successfully retrieved statistics for {len(statistics)} skills",
            )
        except Exception as e:
            logger.error("Skill usage statistics failed: %s", e)
            return SkillUsageStatisticsResponse(success=False, message=str(e))

    @staticmethod
    def _count_profiles(usage, profiles, dictionary: SkillDictionary, start, end) -> None:
        for profile in profiles:
            if not _in_range(profile.created_at, start, end):
                continue
            seen_at = _as_utc(profile.created_at)
            for layer, skills in profile.get_all_skills().items():
                for skill_weight in skills:
                    raw = skill_weight.skill
                    canonical = dictionary.map_to_canonical(raw)
                    key = canonical or normalize_skill_name(raw)
                    entry = usage.setdefault(
                        key, _Usage(category=TechLayer(layer), first_seen=seen_at, last_seen=seen_at)
                    )
                    entry.jd_count += 1
                    entry.record(raw, canonical, seen_at)

    @staticmethod
    def _count_resumes(usage, resumes, dictionary: SkillDictionary, start, end) -> None:
        for resume in resumes:
            if not _in_range(resume.created_at, start, end):
                continue
            seen_at = _as_utc(resume.created_at)
            for raw in resume.get_technologies():
                canonical = dictionary.map_to_canonical(raw)
                key = canonical or normalize_skill_name(raw)
                if key not in usage:
                    known = dictionary.get_canonical_skill(key)
                    usage[key] = _Usage(
                        category=known.category if known else TechLayer.OTHERS,
                        first_seen=seen_at,
                        last_seen=seen_at,
                    )
                entry = usage[key]
                entry.resume_count += 1
                entry.record(raw, canonical, seen_at)

    @staticmethod
    def _sort(statistics: list[SkillStatistic], sort_by: str, sort_order: str) -> list[SkillStatistic]:
        reverse = sort_order == "desc"
        if sort_by == "name":
            return sorted(statistics, key=lambda s: s.skill_name, reverse=reverse)
        return sorted(statistics, key=lambda s: s.total_usage, reverse=reverse)
