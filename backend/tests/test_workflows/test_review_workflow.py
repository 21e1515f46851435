import pytest

from models.responses import ApprovalResponse
from models.schemas.layers import TechLayer
from models.schemas.review_queue import ReviewStatus
from services.exceptions import (
    AlreadyProcessedError,
    CanonicalNotFoundError,
    ConcurrentModificationError,
    DuplicateSkillError,
    EmptyCanonicalNameError,
    QueueItemNotFoundError,
)
from services.repositories.memory import InMemorySkillDictionaryRepository
from services.skill_dictionary import is_newer_version
from services.workflows.review_unknown_skills import ReviewUnknownSkillsWorkflow


@pytest.fixture
def workflow(queue_repo, dictionary_repo):
    return ReviewUnknownSkillsWorkflow(queue_repo, dictionary_repo)


async def _queue(queue_repo, *names):
    queue = await queue_repo.get()
    for name in names:
        queue.add_unknown_skill(name, "jd_1")
    await queue_repo.save(queue)


class TestReviewUnknownSkillsWorkflow:
    @pytest.mark.asyncio
    async def test_list_and_filter(self, workflow, queue_repo):
        await _queue(queue_repo, "svelte", "deno")
        await workflow.reject_skill("deno", "runtime, not a skill")

        assert len(await workflow.get_queue_items()) == 2
        pending = await workflow.get_queue_items(ReviewStatus.PENDING)
        assert [i.skill_name for i in pending] == ["svelte"]
        rejected = await workflow.get_queue_items(ReviewStatus.REJECTED)
        assert [i.skill_name for i in rejected] == ["deno"]

    @pytest.mark.asyncio
    async def test_approve_as_canonical(self, workflow, queue_repo, dictionary_repo):
        await _queue(queue_repo, "svelte")

        output = await workflow.approve_as_canonical("Svelte", "frontend")

        assert isinstance(output, ApprovalResponse)
        assert output.decision.canonical_name == "svelte"
        dictionary = await dictionary_repo.get_current()
        assert dictionary.version == output.dictionary_version
        assert is_newer_version(dictionary.version, "2024.1")
        assert dictionary.get_canonical_skill("svelte").category is TechLayer.FRONTEND
        item = (await queue_repo.get()).get_item_by_name("svelte")
        assert item.status is ReviewStatus.APPROVED

    @pytest.mark.asyncio
    async def test_approve_as_variation(self, workflow, queue_repo, dictionary_repo):
        await _queue(queue_repo, "reactjs18")

        output = await workflow.approve_as_variation("reactjs18", "React")

        assert output.decision.canonical_name == "react"
        dictionary = await dictionary_repo.get_current()
        assert dictionary.map_to_canonical("ReactJS18") == "react"

    @pytest.mark.asyncio
    async def test_variation_target_checked_before_queue(self, workflow, queue_repo, dictionary_repo):
        await _queue(queue_repo, "vuejs")

        with pytest.raises(CanonicalNotFoundError):
            await workflow.approve_as_variation("vuejs", "vue")
        with pytest.raises(EmptyCanonicalNameError):
            await workflow.approve_as_variation("vuejs", " ")

        assert (await queue_repo.get()).get_item_by_name("vuejs").status is ReviewStatus.PENDING
        assert await dictionary_repo.get_all_versions() == ["2024.1"]

    @pytest.mark.asyncio
    async def test_approve_twice(self, workflow, queue_repo):
        await _queue(queue_repo, "svelte")
        await workflow.approve_as_canonical("svelte", "frontend")

        with pytest.raises(AlreadyProcessedError):
            await workflow.approve_as_canonical("svelte", "frontend")
        with pytest.raises(AlreadyProcessedError):
            await workflow.reject_skill("svelte", "duplicate")

    @pytest.mark.asyncio
    async def test_unknown_item(self, workflow):
        with pytest.raises(QueueItemNotFoundError):
            await workflow.reject_skill("elm", "noise")

    @pytest.mark.asyncio
    async def test_duplicate_in_dictionary_leaves_queue_pending(self, workflow, queue_repo):
        # Added to the dictionary directly after being queued.
        await _queue(queue_repo, "react")

        with pytest.raises(DuplicateSkillError):
            await workflow.approve_as_canonical("react", "frontend")
        assert (await queue_repo.get()).get_item_by_name("react").status is ReviewStatus.PENDING

    @pytest.mark.asyncio
    async def test_stale_dictionary_rejected(self, queue_repo, dictionary):
        class StaleDictionaryRepository(InMemorySkillDictionaryRepository):
            async def get_current(self):
                return dictionary.copy()

        stale = StaleDictionaryRepository()
        await stale.save(dictionary.copy())
        await stale.save(dictionary.with_incremented_version())
        await _queue(queue_repo, "svelte")

        workflow = ReviewUnknownSkillsWorkflow(queue_repo, stale)
        with pytest.raises(ConcurrentModificationError):
            await workflow.approve_as_canonical("svelte", "frontend")
        assert (await queue_repo.get()).get_item_by_name("svelte").status is ReviewStatus.PENDING
