"""Prompt composer — turns an IterationContext into the generation payload."""

import re

from config.defaults import DEFAULTS
from config.keywords import HISTORY_FEATURES
from core.budget import BlockFormat, pack_files
from core.state import GenerationPayload
from utils.file_types import is_fullstack_project, is_high_priority
from utils.template_engine import load_template, render_template

EMPTY_LISTING = "No files yet."

LISTING_FORMAT = BlockFormat(
    header="--- FILE: {path} ({type}) ---\n",
    footer="\n--- END FILE: {path} ---\n\n",
    stub="--- FILE: {path} ({type}) --- [content omitted: context limit reached]\n",
)

USER_MESSAGE_FORMAT = BlockFormat(
    header='<file path="{path}">\n',
    footer="\n</file>\n",
    stub='<file path="{path}" omitted="true" />\n',
)


def _load_base_prompt(name):
    return load_template("base", name).strip()


def extract_features_from_history(previous_prompts):
    """Deduplicated capability bullets derived from earlier prompts, in first-seen order.

    Keywords match at the start of a word, so plurals count ("forms", "apis").
    """
    features = []
    for prompt in previous_prompts:
        text = prompt.lower()
        for keywords, line in HISTORY_FEATURES:
            if line in features:
                continue
            if any(re.search(r'\b' + re.escape(kw), text) for kw in keywords):
                features.append(line)
    return features


def extract_feature_summary(context):
    """Build the <current_features> block for medium iterations ('' when empty)."""
    files = context.existing_files
    html_files = [f.filename for f in files if f.type == "html"]
    script_count = sum(1 for f in files if f.type in ("js", "typescript"))
    css_count = sum(1 for f in files if f.type == "css")

    lines = []
    if html_files:
        lines.append(f"HTML Pages: {', '.join(html_files)}")
    if script_count:
        lines.append(f"JavaScript/TypeScript: {script_count} file(s)")
    if css_count:
        lines.append(f"Stylesheets: {css_count} file(s)")

    history = extract_features_from_history(context.previous_prompts)
    if history:
        lines.append("\nPreviously Implemented:\n" + "\n".join(history))

    if not lines:
        return ""
    return "<current_features>\n" + "\n".join(lines) + "\n</current_features>"


class PromptComposer:
    """Builds the system prompt for new projects and small/medium/large iterations."""

    name = "prompt_composer"

    def __init__(self, base_system_prompt=None, listing_ceiling=None):
        self.base_system_prompt = base_system_prompt
        self.listing_ceiling = (
            listing_ceiling if listing_ceiling is not None else DEFAULTS["listing_char_ceiling"]
        )

    def select_base_prompt(self, context):
        """Explicit override, else full-stack vs static-site by the existing files."""
        if self.base_system_prompt is not None:
            return self.base_system_prompt
        if context.is_iteration and is_fullstack_project(context.existing_files):
            return _load_base_prompt("fullstack.txt")
        return _load_base_prompt("static_site.txt")

    def format_files_list(self, files):
        if not files:
            return EMPTY_LISTING
        return pack_files(files, self.listing_ceiling, is_high_priority, LISTING_FORMAT).rstrip("\n")

    def build_system_prompt(self, context):
        base = self.select_base_prompt(context)
        if not context.is_iteration:
            return render_template("modes", "new.tpl", {"base_prompt": base}).strip()

        files = context.existing_files
        variables = {
            "base_prompt": base,
            "files_list": self.format_files_list(files),
            "file_count": len(files),
            "output_format": self._output_format(files),
            "feature_summary": "",
        }
        if context.change_scope == "medium":
            summary = extract_feature_summary(context)
            variables["feature_summary"] = summary + "\n\n" if summary else ""

        return render_template("modes", f"{context.change_scope}.tpl", variables).strip()

    def _output_format(self, files):
        paths = ", ".join(f.path for f in files) or "(none)"
        return render_template("modes", "output_format.tpl", {"existing_paths": paths}).strip()

    def compose(self, user_message, context):
        return GenerationPayload(
            system_prompt=self.build_system_prompt(context),
            user_message=build_user_message_with_context(user_message, context),
            context=context,
        )


def build_user_message_with_context(user_message, context, ceiling=None):
    """Append existing file contents to the user's message for iterations.

    Returns the message untouched when the context is not an iteration or
    carries no files.
    """
    if not context.is_iteration or not context.existing_files:
        return user_message

    if ceiling is None:
        ceiling = DEFAULTS["user_message_char_ceiling"]
    files = context.existing_files
    blocks = pack_files(files, ceiling, is_high_priority, USER_MESSAGE_FORMAT)

    return (
        f"{user_message}\n\n"
        "<project_context>\n"
        f"This is an iteration on an existing project with {len(files)} file(s).\n"
        "Modify only what is necessary and preserve existing functionality.\n"
        "<existing_files>\n"
        f"{blocks}"
        "</existing_files>\n"
        "</project_context>"
    )
