"""Tests for core.state models."""

import dataclasses

import pytest

from core.state import EnhancementOptions, IterationContext
from utils.file_types import make_file_info


def test_new_context_defaults():
    ctx = IterationContext(is_iteration=False)
    assert ctx.change_scope == "new"
    assert ctx.project_id is None
    assert ctx.existing_files == []
    assert ctx.previous_prompts == []


def test_iteration_context():
    files = [make_file_info("index.html", "<html></html>")]
    ctx = IterationContext(is_iteration=True, change_scope="small", project_id="p1", existing_files=files)
    assert ctx.existing_files[0].type == "html"


def test_iteration_cannot_have_new_scope():
    with pytest.raises(ValueError):
        IterationContext(is_iteration=True, change_scope="new")


def test_new_project_cannot_have_edit_scope():
    with pytest.raises(ValueError):
        IterationContext(is_iteration=False, change_scope="small")


def test_unknown_scope_rejected():
    with pytest.raises(ValueError):
        IterationContext(is_iteration=True, change_scope="huge")


def test_new_project_carries_no_files():
    with pytest.raises(ValueError):
        IterationContext(is_iteration=False, existing_files=[make_file_info("index.html", "")])


def test_file_info_is_frozen():
    f = make_file_info("css/site.css", "body{}")
    assert (f.filename, f.path, f.type) == ("site.css", "css/site.css", "css")
    with pytest.raises(dataclasses.FrozenInstanceError):
        f.content = "changed"


def test_enhancement_option_defaults():
    options = EnhancementOptions()
    assert options.add_css_variables is False
    assert all([options.add_media_queries, options.add_focus_styles, options.add_form_labels,
                options.add_aria, options.add_reduced_motion])
