import pytest

from services.exceptions import ProfileNotFoundError
from services.workflows.calculate_correlation import CalculateCorrelationWorkflow


class TestCalculateCorrelationWorkflow:
    @pytest.mark.asyncio
    async def test_loads_both_profiles(self, profile_repo, make_profile):
        current = make_profile(skills={"backend": [("python", 1.0)]})
        past = make_profile(skills={"backend": [("python", 1.0)]}, version="2023.4")
        await profile_repo.save(current)
        await profile_repo.save(past)

        result = await CalculateCorrelationWorkflow(profile_repo).execute(current.id, past.id)

        assert result.overall_score == pytest.approx(0.4)
        assert result.layer_breakdown["backend"].matching_skills == ["python"]
        assert result.past_dictionary_version == "2023.4"

    @pytest.mark.asyncio
    async def test_missing_current(self, profile_repo, make_profile):
        past = make_profile()
        await profile_repo.save(past)

        with pytest.raises(ProfileNotFoundError, match="Current JD specification not found") as exc_info:
            await CalculateCorrelationWorkflow(profile_repo).execute("jd_missing", past.id)
        assert exc_info.value.which == "current"

    @pytest.mark.asyncio
    async def test_missing_past(self, profile_repo, make_profile):
        current = make_profile()
        await profile_repo.save(current)

        with pytest.raises(ProfileNotFoundError, match="Past JD specification not found") as exc_info:
            await CalculateCorrelationWorkflow(profile_repo).execute(current.id, "jd_missing")
        assert exc_info.value.which == "past"
