"""File classification helpers: type mapping, listing priority, stack detection."""

import os
from datetime import datetime, timezone

from core.state import FileInfo

EXTENSION_TYPES = {
    ".html": "html", ".htm": "html",
    ".css": "css",
    ".js": "js", ".jsx": "js",
    ".ts": "typescript", ".tsx": "typescript",
    ".json": "json",
}

LOW_PRIORITY_NAMES = {
    "package-lock.json", "yarn.lock", "pnpm-lock.yaml", "bun.lockb",
    "package.json", "tsconfig.json", "composer.lock", "poetry.lock",
    ".gitignore", ".env", ".env.example", ".env.local", "license",
}

LOW_PRIORITY_EXTENSIONS = {
    ".lock", ".json", ".yaml", ".yml", ".toml", ".ini", ".cfg",
    ".md", ".markdown", ".txt", ".map",
}

FULLSTACK_EXTENSIONS = {".ts", ".tsx", ".prisma"}
FULLSTACK_DIRS = ("app/", "lib/", "prisma/")


def get_file_type(path):
    """Map a path to html/css/js/json/typescript/other by its extension."""
    _, ext = os.path.splitext(path)
    return EXTENSION_TYPES.get(ext.lower(), "other")


def base_name(path):
    """Return the file name of a path without its extension, lowercased."""
    name = path.rsplit("/", 1)[-1]
    stem, _ = os.path.splitext(name)
    return stem.lower()


def make_file_info(path, content, last_modified=None):
    """Build a FileInfo from a stored file record."""
    return FileInfo(
        filename=path.rsplit("/", 1)[-1] or path,
        path=path,
        content=content or "",
        last_modified=last_modified or datetime.now(timezone.utc),
        type=get_file_type(path),
    )


def _normalize(path):
    path = path.replace("\\", "/")
    while path.startswith("./"):
        path = path[2:]
    return path.lstrip("/")


def is_high_priority(file_info):
    """Source-like files are listed first; configs, lockfiles and docs last."""
    name = file_info.filename.lower()
    if name in LOW_PRIORITY_NAMES:
        return False
    _, ext = os.path.splitext(name)
    if ext in LOW_PRIORITY_EXTENSIONS:
        return False
    # tailwind.config.js, next.config.mjs, ...
    if ".config." in name:
        return False
    return True


def is_fullstack_project(files):
    """True when the file set looks like a Next.js/Prisma style project."""
    for f in files:
        path = _normalize(f.path).lower()
        _, ext = os.path.splitext(path)
        if ext in FULLSTACK_EXTENSIONS:
            return True
        if path.rsplit("/", 1)[-1] == "package.json":
            return True
        if path.startswith(FULLSTACK_DIRS):
            return True
    return False
