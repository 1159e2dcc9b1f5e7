"""Prompt templates: base prompts (.txt) and generation-mode templates (.tpl).

Templates are read once per process and rendered with string.Template.
Rendering refuses to leave a mode's placeholder unfilled, so a renamed
variable cannot silently ship "${files_list}" to the model.
"""

import functools
import os
from string import Template

PROMPTS_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "agents", "prompts")


@functools.lru_cache(maxsize=None)
def load_template(category, template_name):
    """Return a template's text. Paths may not leave PROMPTS_DIR."""
    path = os.path.realpath(os.path.join(PROMPTS_DIR, category, template_name))
    if not path.startswith(os.path.realpath(PROMPTS_DIR) + os.sep):
        raise ValueError(f"Template path escapes prompts directory: {category}/{template_name}")
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def placeholders(raw):
    """Names of the $name / ${name} placeholders in a template, in order of first use."""
    names = []
    for m in Template.pattern.finditer(raw):
        name = m.group("named") or m.group("braced")
        if name and name not in names:
            names.append(name)
    return names


def render_template(category, template_name, variables):
    """Render a template, raising ValueError if any placeholder has no value.

    Substituted values (file contents included) are inserted as-is and never
    re-scanned, so "$" and "${...}" inside them survive.
    """
    raw = load_template(category, template_name)
    missing = [name for name in placeholders(raw) if name not in variables]
    if missing:
        raise ValueError(f"{category}/{template_name} needs values for: {', '.join(missing)}")
    return Template(raw).safe_substitute(variables)
