"""Match rate of saved resumes against a new JD.

A resume was tailored for its original JD, so its match rate against a new JD
is the correlation between the new JD and that original one.
"""

import logging

from models.schemas.correlation import ResumeMatchResult
from services.correlation import JDCorrelationCalculator
from services.exceptions import ProfileNotFoundError, ResumeNotFoundError
from services.repositories.base import ProfileRepository, ResumeRepository
from services.resume import ResumeMetadata
from services.skill_profile import WeightedSkillProfile

logger = logging.getLogger(__name__)


class CalculateResumeMatchRateWorkflow:
    def __init__(
        self,
        profiles: ProfileRepository,
        resumes: ResumeRepository,
        calculator: JDCorrelationCalculator | None = None,
    ) -> None:
        self._profiles = profiles
        self._resumes = resumes
        self._calculator = calculator or JDCorrelationCalculator()

    async def execute(self, current_jd_id: str, resume_id: str) -> ResumeMatchResult:
        current = await self._current_profile(current_jd_id)

        for resume in await self._resumes.get_all_resume_metadata():
            if resume.id == resume_id:
                return await self._score(current, resume)
        raise ResumeNotFoundError(resume_id)

    async def execute_for_all(self, current_jd_id: str) -> list[ResumeMatchResult]:
        """Every saved resume scored against the current JD, best match first."""
        current = await self._current_profile(current_jd_id)

        results = []
        for resume in await self._resumes.get_all_resume_metadata():
            results.append(await self._score(current, resume))
        results.sort(key=lambda r: r.match_rate, reverse=True)
        return results

    async def _current_profile(self, current_jd_id: str) -> WeightedSkillProfile:
        current = await self._profiles.find_by_id(current_jd_id)
        if current is None:
            raise ProfileNotFoundError(current_jd_id, which="current")
        return current

    async def _score(self, current: WeightedSkillProfile, resume: ResumeMetadata) -> ResumeMatchResult:
        unmatched = ResumeMatchResult(
            resume_id=resume.id,
            company=resume.company,
            role=resume.role,
            original_jd_id=resume.original_jd_id,
            current_dictionary_version=current.dictionary_version,
        )
        if not resume.original_jd_id:
            return unmatched

        original = await self._profiles.find_by_id(resume.original_jd_id)
        if original is None:
            # The original JD was deleted after the resume was saved.
            logger.warning(
                "Original JD %s of resume %s not found; match rate is 0",
                resume.original_jd_id,
                resume.id,
            )
            return unmatched

        correlation = self._calculator.calculate(current, original)
        return unmatched.model_copy(
            update={
                "match_rate": correlation.overall_score,
                "match_rate_percentage": correlation.overall_score * 100,
                "layer_breakdown": correlation.layer_breakdown,
                "original_dictionary_version": correlation.past_dictionary_version,
            }
        )
