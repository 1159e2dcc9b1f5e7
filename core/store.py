"""Project file/version store used by the classifier and the pipeline.

A project record is a plain dict:

    {
        "files": [{"path": "index.html", "content": "...", "updated_at": "<iso>"}],
        "code": "<single-blob html, used when there are no file records>",
        "versions": [{"description": "build a portfolio", "created_at": "<iso>"}],
    }
"""

import asyncio
import copy
import json
import logging
import os
import threading
from abc import ABC, abstractmethod
from datetime import datetime, timezone

from config.defaults import DEFAULTS
from core.state import ProjectSnapshot
from utils.file_types import make_file_info

logger = logging.getLogger(__name__)

FALLBACK_PATH = "index.html"


class ProjectStoreError(RuntimeError):
    """Raised when the backing storage cannot be read or written."""


def _parse_time(value):
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except (TypeError, ValueError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _now():
    return datetime.now(timezone.utc).isoformat()


def _empty_record():
    return {"files": [], "code": "", "versions": []}


def _file_records(files):
    stamp = _now()
    return [{"path": path, "content": content, "updated_at": stamp} for path, content in files]


def snapshot_from_record(record, prompt_limit=None):
    """Convert a stored project record into the classifier's read-only view.

    With no file records but a stored code blob, a single index.html entry is
    synthesized so callers always see the current output.
    """
    limit = DEFAULTS["previous_prompts_limit"] if prompt_limit is None else prompt_limit

    files = [
        make_file_info(
            f["path"],
            f.get("content", ""),
            _parse_time(f.get("updated_at") or f.get("created_at")),
        )
        for f in record.get("files") or []
    ]
    if not files and record.get("code"):
        files = [make_file_info(FALLBACK_PATH, record["code"], _parse_time(record.get("updated_at")))]

    versions = list(record.get("versions") or [])
    # Newest first. Versions without timestamps keep their stored order.
    if versions and all(_parse_time(v.get("created_at")) for v in versions):
        versions.sort(key=lambda v: _parse_time(v["created_at"]), reverse=True)
    prompts = [v["description"] for v in versions if v.get("description")]

    return ProjectSnapshot(files=files, previous_prompts=prompts[:limit])


class ProjectStore(ABC):
    """Async read/write access to persisted project files and versions."""

    @abstractmethod
    async def get_project_files(self, project_id):
        """Return a ProjectSnapshot, or None if the project does not exist."""

    @abstractmethod
    async def save_project_files(self, project_id, files):
        """Replace the project's files with the given (path, content) pairs."""

    @abstractmethod
    async def add_version(self, project_id, description, code=""):
        """Record a new version entry for the project."""


class InMemoryProjectStore(ProjectStore):
    """Dict-backed store. Used by tests and as the base of JsonProjectStore.

    Reads and writes run in a worker thread under one lock, so async views on
    different event loops see whole records.
    """

    def __init__(self, projects=None):
        self.projects = projects if projects is not None else {}
        self._lock = threading.Lock()

    def create_project(self, project_id, files=None, code="", versions=None):
        """Register a project record synchronously (seeding, tests, CLI)."""
        record = {
            "files": _file_records(files or []),
            "code": code,
            "versions": [{"description": d, "created_at": None} for d in (versions or [])],
        }
        def register(projects):
            projects[project_id] = record

        self._update(register)
        return record

    async def get_project_files(self, project_id):
        record = await asyncio.to_thread(self._read, project_id)
        if record is None:
            return None
        return snapshot_from_record(record)

    async def save_project_files(self, project_id, files):
        records = _file_records(files)

        def replace_files(projects):
            projects.setdefault(project_id, _empty_record())["files"] = records

        await asyncio.to_thread(self._update, replace_files)

    async def add_version(self, project_id, description, code=""):
        version = {"description": description, "created_at": _now()}

        def prepend_version(projects):
            record = projects.setdefault(project_id, _empty_record())
            record.setdefault("versions", []).insert(0, version)
            if code:
                record["code"] = code

        await asyncio.to_thread(self._update, prepend_version)

    def _read(self, project_id):
        with self._lock:
            return copy.deepcopy(self.projects.get(project_id))

    def _update(self, mutate):
        with self._lock:
            mutate(self.projects)


class JsonProjectStore(InMemoryProjectStore):
    """Store whose records live in one JSON file on disk.

    Every read re-loads the file and every write is a locked
    load-modify-replace, so edits made by another process are kept.
    """

    def __init__(self, path=None):
        self.path = path or os.environ.get("BUILDFLOW_STORE") or DEFAULTS["store_path"]
        super().__init__(self._load())

    def _load(self):
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ProjectStoreError(f"Cannot read project store {self.path}: {e}") from e
        return data.get("projects", {})

    def _write(self, projects):
        tmp_path = self.path + ".tmp"
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump({"projects": projects}, f, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise ProjectStoreError(f"Cannot write project store {self.path}: {e}") from e

    def _read(self, project_id):
        with self._lock:
            self.projects = self._load()
            return copy.deepcopy(self.projects.get(project_id))

    def _update(self, mutate):
        with self._lock:
            projects = self._load()
            mutate(projects)
            self._write(projects)
            self.projects = projects
        logger.debug("Persisted %d project(s) to %s", len(projects), self.path)
