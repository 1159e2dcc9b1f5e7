"""Iteration classifier: new project vs. edit of the existing one, and edit scope."""

import logging
import re

from config.defaults import DEFAULTS
from config.keywords import (
    COLOR_WORDS,
    COMPONENT_REFERENCES,
    ITERATION_KEYWORDS,
    LARGE_SCOPE_INDICATORS,
    NEW_PROJECT_PHRASES,
    SMALL_SCOPE_INDICATORS,
)
from core.state import IterationContext
from utils.file_types import base_name

logger = logging.getLogger(__name__)

MIN_FILE_STEM = 3


def _pattern(keyword, whole_word=False):
    """Regex for a keyword starting at a word boundary.

    Keywords run on into inflections ("margin" matches "margins") unless
    whole_word is set.
    """
    pattern = r'\b' + re.escape(keyword)
    if whole_word:
        pattern += r'\b'
    return pattern


def first_match(text, keywords, whole_word=False):
    """Return the first keyword found in text, or None."""
    for keyword in keywords:
        if re.search(_pattern(keyword, whole_word), text):
            return keyword
    return None


def is_explicit_new_project(text):
    return first_match(text, NEW_PROJECT_PHRASES, whole_word=True) is not None


def has_iteration_keyword(text):
    return first_match(text, ITERATION_KEYWORDS) is not None


def references_existing_feature(text, files):
    """True if the message names an existing file or a generic page component."""
    # Very short stems ("a.js", "db.ts") would match ordinary words.
    names = {base_name(f.path) for f in files}
    for name in sorted(n for n in names if len(n) >= MIN_FILE_STEM):
        if re.search(r'\b' + re.escape(name) + r'\b', text):
            return True
    return first_match(text, COMPONENT_REFERENCES) is not None


def determine_change_scope(text):
    """Size an edit request: large beats small, medium is the default."""
    if first_match(text, LARGE_SCOPE_INDICATORS):
        return "large"
    if first_match(text, SMALL_SCOPE_INDICATORS) or first_match(text, COLOR_WORDS, whole_word=True):
        return "small"
    return "medium"


def new_project_context(previous_prompts=None):
    return IterationContext(
        is_iteration=False,
        change_scope="new",
        previous_prompts=list(previous_prompts or []),
    )


async def _lookup(project_id, store):
    try:
        return await store.get_project_files(project_id)
    except Exception:
        # Storage failures degrade to "no project" rather than failing the request.
        logger.exception("Project lookup failed for %s; treating as new project", project_id)
        return None


async def detect_iteration(user_message, project_id, store):
    """Decide whether a chat message edits the project or starts a new one.

    Decision order, first match wins:
      1. no project / no files               -> new
      2. explicit "start over" phrasing      -> new (history kept)
      3./4. edit verb or reference to an existing file/component -> iteration
      5. no positive signal                  -> new (history kept)

    Never raises.
    """
    text = (user_message or "").lower()

    snapshot = await _lookup(project_id, store) if project_id else None
    if snapshot is None or not snapshot.files:
        return new_project_context()

    previous = list(snapshot.previous_prompts)[:DEFAULTS["previous_prompts_limit"]]

    if is_explicit_new_project(text):
        logger.debug("Explicit new-project phrasing in message for %s", project_id)
        return new_project_context(previous)

    if not (has_iteration_keyword(text) or references_existing_feature(text, snapshot.files)):
        return new_project_context(previous)

    scope = determine_change_scope(text)
    logger.debug("Iteration on %s with %s scope (%d files)", project_id, scope, len(snapshot.files))
    return IterationContext(
        is_iteration=True,
        change_scope=scope,
        project_id=project_id,
        existing_files=list(snapshot.files),
        previous_prompts=previous,
    )
