"""Tests for utils.template_engine."""

import pytest

from utils.template_engine import load_template, placeholders, render_template


def test_placeholders_in_order_of_first_use():
    assert placeholders("${a} and $b then ${a} costs $$5") == ["a", "b"]


def test_mode_templates_declare_their_variables():
    assert placeholders(load_template("modes", "new.tpl")) == ["base_prompt"]
    assert "feature_summary" in placeholders(load_template("modes", "medium.tpl"))
    assert "files_list" in placeholders(load_template("modes", "small.tpl"))


def test_missing_variable_rejected():
    with pytest.raises(ValueError, match="base_prompt"):
        render_template("modes", "new.tpl", {})


def test_values_are_not_rescanned():
    out = render_template("modes", "output_format.tpl", {"existing_paths": "${base_prompt}, $price"})
    assert "${base_prompt}, $price" in out


def test_templates_are_read_once():
    load_template.cache_clear()
    load_template("modes", "small.tpl")
    load_template("modes", "small.tpl")
    assert load_template.cache_info().misses == 1
    assert load_template.cache_info().hits == 1


def test_template_path_cannot_escape():
    with pytest.raises(ValueError):
        load_template("..", "pyproject.toml")
