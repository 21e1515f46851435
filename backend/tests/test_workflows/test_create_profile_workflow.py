import pytest

from services.exceptions import (
    ConcurrentModificationError,
    EmptyNameError,
    InvalidLayerError,
    LayerWeightsSumError,
    MissingLayerError,
    NameTooLongError,
    ProfileNotFoundError,
)
from services.repositories.memory import InMemoryReviewQueueRepository
from services.workflows.create_profile import QUEUE_SAVE_ATTEMPTS, CreateProfileWorkflow


@pytest.fixture
def workflow(profile_repo, dictionary_repo, queue_repo):
    return CreateProfileWorkflow(profile_repo, dictionary_repo, queue_repo)


class RacingQueueRepository(InMemoryReviewQueueRepository):
    """Another writer saves between every get() and save()."""

    def __init__(self, races: int) -> None:
        super().__init__()
        self.races = races

    async def save(self, queue):
        if self.races > 0:
            self.races -= 1
            rival = await self.get()
            rival.add_unknown_skill("rival-skill", "jd_rival")
            await super().save(rival)
        await super().save(queue)


class TestCreateProfile:
    @pytest.mark.asyncio
    async def test_maps_variations_to_canonical(self, workflow, make_profile_request, profile_repo):
        request = make_profile_request(
            skills={"frontend": [("ReactJS", 0.6), ("TS", 0.4)], "database": [(" Postgres ", 1.0)]}
        )

        output = await workflow.execute(request)

        profile = output.profile
        assert [s.skill for s in profile.get_skills_for_layer("frontend")] == ["react", "typescript"]
        assert profile.get_skills_for_layer("database")[0].skill == "postgresql"
        assert profile.dictionary_version == "2024.1"
        assert output.unknown_skills == []
        assert await profile_repo.find_by_id(profile.id) == profile

    @pytest.mark.asyncio
    async def test_unknown_skills_are_queued_once(self, workflow, make_profile_request, queue_repo):
        request = make_profile_request(
            skills={
                "frontend": [("Svelte", 0.5), ("react", 0.5)],
                "others": [("svelte", 0.5), ("Bun", 0.5)],
            }
        )

        output = await workflow.execute(request)

        assert output.unknown_skills == ["svelte", "bun"]
        assert output.profile.get_skills_for_layer("frontend")[0].skill == "svelte"
        queue = await queue_repo.get()
        item = queue.get_item_by_name("svelte")
        assert item.frequency == 1
        assert item.detected_in == [output.profile.id]
        assert len(queue) == 2

    @pytest.mark.asyncio
    async def test_repeat_detection_across_profiles(self, workflow, make_profile_request, queue_repo):
        request = make_profile_request(skills={"backend": [("Elixir", 1.0)]})
        first = await workflow.execute(request)
        second = await workflow.execute(request)

        item = (await queue_repo.get()).get_item_by_name("elixir")
        assert item.frequency == 2
        assert item.detected_in == [first.profile.id, second.profile.id]

    @pytest.mark.asyncio
    async def test_queue_untouched_without_unknown_skills(self, workflow, make_profile_request, queue_repo):
        await workflow.execute(make_profile_request(skills={"backend": [("python", 1.0)]}))
        assert (await queue_repo.get()).revision == 0

    @pytest.mark.asyncio
    async def test_name_validated_before_lookup(self, workflow, make_profile_request, queue_repo, profile_repo):
        with pytest.raises(EmptyNameError):
            await workflow.execute(make_profile_request(skills={"backend": [("  ", 1.0)]}))
        with pytest.raises(NameTooLongError):
            await workflow.execute(make_profile_request(skills={"backend": [("x" * 101, 1.0)]}))
        assert len(await queue_repo.get()) == 0
        assert await profile_repo.find_all() == []

    @pytest.mark.asyncio
    async def test_invalid_profile_not_saved(self, workflow, make_profile_request, queue_repo, profile_repo):
        weights = {"frontend": 0.9, "backend": 0.9, "database": 0, "cloud": 0, "devops": 0, "others": 0}
        request = make_profile_request(skills={"backend": [("elixir", 1.0)]}, layer_weights=weights)

        with pytest.raises(LayerWeightsSumError):
            await workflow.execute(request)
        assert await profile_repo.find_all() == []
        assert len(await queue_repo.get()) == 0

    @pytest.mark.asyncio
    async def test_missing_layer(self, workflow, make_profile_request):
        request = make_profile_request()
        del request.skills["devops"]
        with pytest.raises(MissingLayerError):
            await workflow.execute(request)

    @pytest.mark.asyncio
    async def test_unknown_layer_key(self, workflow, make_profile_request):
        request = make_profile_request()
        request.skills["mobile"] = []
        with pytest.raises(InvalidLayerError):
            await workflow.execute(request)

    @pytest.mark.asyncio
    async def test_queue_save_retried_after_race(self, profile_repo, dictionary_repo, make_profile_request):
        queue_repo = RacingQueueRepository(races=1)
        workflow = CreateProfileWorkflow(profile_repo, dictionary_repo, queue_repo)

        await workflow.execute(make_profile_request(skills={"backend": [("elixir", 1.0)]}))

        queue = await queue_repo.get()
        assert queue.has_skill("elixir")
        assert queue.has_skill("rival-skill")

    @pytest.mark.asyncio
    async def test_queue_save_gives_up(self, profile_repo, dictionary_repo, make_profile_request):
        queue_repo = RacingQueueRepository(races=QUEUE_SAVE_ATTEMPTS)
        workflow = CreateProfileWorkflow(profile_repo, dictionary_repo, queue_repo)

        with pytest.raises(ConcurrentModificationError):
            await workflow.execute(make_profile_request(skills={"backend": [("elixir", 1.0)]}))


class TestProfileCrud:
    @pytest.mark.asyncio
    async def test_update_keeps_id_and_created_at(self, workflow, make_profile_request):
        created = (await workflow.execute(make_profile_request())).profile

        updated = await workflow.update(
            created.id,
            make_profile_request(skills={"backend": [("Elixir", 1.0)]}, role="Lead Backend Engineer"),
        )

        assert updated.profile.id == created.id
        assert updated.profile.created_at == created.created_at
        assert updated.profile.role == "Lead Backend Engineer"
        assert updated.unknown_skills == ["elixir"]
        assert (await workflow.get(created.id)).role == "Lead Backend Engineer"

    @pytest.mark.asyncio
    async def test_update_missing(self, workflow, make_profile_request):
        with pytest.raises(ProfileNotFoundError):
            await workflow.update("jd_missing", make_profile_request())

    @pytest.mark.asyncio
    async def test_get_list_delete(self, workflow, make_profile_request):
        first = (await workflow.execute(make_profile_request())).profile
        second = (await workflow.execute(make_profile_request())).profile

        assert {p.id for p in await workflow.list_all()} == {first.id, second.id}

        await workflow.delete(first.id)
        with pytest.raises(ProfileNotFoundError, match="JD specification not found"):
            await workflow.get(first.id)
        with pytest.raises(ProfileNotFoundError):
            await workflow.delete(first.id)
