"""JSON-file repositories: one document per aggregate under a data directory.

Layout::

    <data_dir>/profiles/<id>.json
    <data_dir>/dictionary/<version>.json
    <data_dir>/review_queue.json
    <data_dir>/bids/<id>.json
    <data_dir>/resumes/<id>.json

Writes go to a temporary file that is then renamed over the target, so a
reader never sees a half-written document.

File access is synchronous inside the async methods. Nothing awaits between a
version or revision check and the write that follows it, so saves from
coroutines on one event loop cannot interleave. Sharing a data directory
between processes needs external locking.
"""

import json
import logging
import os
from collections.abc import Callable
from pathlib import Path
from urllib.parse import quote, unquote

from services.bid import Bid
from services.exceptions import DuplicateError, ProfileNotFoundError
from services.repositories.base import (
    BidRepository,
    ProfileRepository,
    ResumeRepository,
    ReviewQueueRepository,
    SkillDictionaryRepository,
    check_dictionary_write,
    check_queue_write,
)
from services.repositories.memory import default_dictionary_factory
from services.resume import ResumeMetadata
from services.review_queue import SkillReviewQueue
from services.skill_dictionary import SkillDictionary, parse_version
from services.skill_profile import WeightedSkillProfile

logger = logging.getLogger(__name__)


def _write_json(path: Path, data: dict) -> None:
    tmp_path = path.with_name(path.name + ".tmp")
    with open(tmp_path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
    os.replace(tmp_path, path)


def _read_json(path: Path) -> dict:
    with open(path, encoding="utf-8") as f:
        return json.load(f)


class _DocumentCollection:
    """A directory of ``<key>.json`` documents."""

    def __init__(self, directory: Path) -> None:
        self.directory = directory
        self.directory.mkdir(parents=True, exist_ok=True)

    def path_for(self, key: str) -> Path:
        return self.directory / f"{quote(key, safe='')}.json"

    def exists(self, key: str) -> bool:
        return self.path_for(key).exists()

    def read(self, key: str) -> dict | None:
        path = self.path_for(key)
        if not path.exists():
            return None
        return _read_json(path)

    def write(self, key: str, data: dict) -> None:
        _write_json(self.path_for(key), data)

    def delete(self, key: str) -> bool:
        path = self.path_for(key)
        if not path.exists():
            return False
        path.unlink()
        return True

    def keys(self) -> list[str]:
        return sorted(unquote(path.stem) for path in self.directory.glob("*.json"))

    def read_all(self) -> list[dict]:
        return [_read_json(path) for path in sorted(self.directory.glob("*.json"))]


class JsonProfileRepository(ProfileRepository):
    def __init__(self, data_dir: str | Path) -> None:
        self._docs = _DocumentCollection(Path(data_dir) / "profiles")

    async def save(self, profile: WeightedSkillProfile) -> None:
        if self._docs.exists(profile.id):
            raise DuplicateError(f"JD specification already exists: {profile.id}")
        self._docs.write(profile.id, profile.to_dict())

    async def find_by_id(self, profile_id: str) -> WeightedSkillProfile | None:
        data = self._docs.read(profile_id)
        return WeightedSkillProfile.from_dict(data) if data is not None else None

    async def find_all(self) -> list[WeightedSkillProfile]:
        return [WeightedSkillProfile.from_dict(data) for data in self._docs.read_all()]

    async def update(self, profile: WeightedSkillProfile) -> None:
        if not self._docs.exists(profile.id):
            raise ProfileNotFoundError(profile.id)
        self._docs.write(profile.id, profile.to_dict())

    async def delete(self, profile_id: str) -> bool:
        return self._docs.delete(profile_id)


class JsonSkillDictionaryRepository(SkillDictionaryRepository):
    def __init__(
        self,
        data_dir: str | Path,
        initial_factory: Callable[[], SkillDictionary] = default_dictionary_factory,
    ) -> None:
        self._docs = _DocumentCollection(Path(data_dir) / "dictionary")
        self._initial_factory = initial_factory

    def _latest_version(self) -> str | None:
        versions = self._docs.keys()
        if not versions:
            return None
        return max(versions, key=parse_version)

    async def save(self, dictionary: SkillDictionary, expected_version: str | None = None) -> None:
        check_dictionary_write(self._latest_version(), dictionary, expected_version)
        self._docs.write(dictionary.version, dictionary.to_dict())
        logger.info("Stored skill dictionary version %s in %s", dictionary.version, self._docs.directory)

    async def get_current(self) -> SkillDictionary:
        latest = self._latest_version()
        if latest is None:
            initial = self._initial_factory()
            self._docs.write(initial.version, initial.to_dict())
            logger.info("Initialised empty dictionary store with version %s", initial.version)
            return initial
        return SkillDictionary.from_dict(self._docs.read(latest))

    async def get_version(self, version: str) -> SkillDictionary | None:
        data = self._docs.read(version)
        return SkillDictionary.from_dict(data) if data is not None else None

    async def get_all_versions(self) -> list[str]:
        return sorted(self._docs.keys(), key=parse_version)


class JsonReviewQueueRepository(ReviewQueueRepository):
    def __init__(self, data_dir: str | Path) -> None:
        self._path = Path(data_dir) / "review_queue.json"
        self._path.parent.mkdir(parents=True, exist_ok=True)

    def _stored_revision(self) -> int:
        if not self._path.exists():
            return 0
        return int(_read_json(self._path).get("revision", 0))

    async def get(self) -> SkillReviewQueue:
        if not self._path.exists():
            return SkillReviewQueue.create()
        return SkillReviewQueue.from_dict(_read_json(self._path))

    async def save(self, queue: SkillReviewQueue) -> None:
        check_queue_write(self._stored_revision(), queue)
        queue.revision += 1
        _write_json(self._path, queue.to_dict())


class JsonBidRepository(BidRepository):
    def __init__(self, data_dir: str | Path) -> None:
        self._docs = _DocumentCollection(Path(data_dir) / "bids")

    async def save(self, bid: Bid) -> None:
        self._docs.write(bid.id, bid.to_dict())

    async def find_by_id(self, bid_id: str) -> Bid | None:
        data = self._docs.read(bid_id)
        return Bid.from_dict(data) if data is not None else None

    async def find_all(self) -> list[Bid]:
        return [Bid.from_dict(data) for data in self._docs.read_all()]


class JsonResumeRepository(ResumeRepository):
    def __init__(self, data_dir: str | Path) -> None:
        self._docs = _DocumentCollection(Path(data_dir) / "resumes")

    async def save(self, resume: ResumeMetadata) -> None:
        self._docs.write(resume.id, resume.model_dump(mode="json"))

    async def get_all_resume_metadata(self) -> list[ResumeMetadata]:
        return [ResumeMetadata.model_validate(data) for data in self._docs.read_all()]
