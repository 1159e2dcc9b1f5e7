"""Tests for utils.file_types."""

import pytest

from utils.file_types import base_name, get_file_type, is_fullstack_project, is_high_priority, make_file_info


@pytest.mark.parametrize("path,file_type", [
    ("index.html", "html"),
    ("pages/About.HTM", "html"),
    ("css/site.css", "css"),
    ("app.jsx", "js"),
    ("app/page.tsx", "typescript"),
    ("package.json", "json"),
    ("README.md", "other"),
    ("Makefile", "other"),
])
def test_get_file_type(path, file_type):
    assert get_file_type(path) == file_type


def test_base_name():
    assert base_name("pages/Pricing.html") == "pricing"


@pytest.mark.parametrize("path,high", [
    ("index.html", True),
    ("src/app.js", True),
    ("package-lock.json", False),
    ("yarn.lock", False),
    ("tailwind.config.js", False),
    ("docs/NOTES.md", False),
    ("data.json", False),
])
def test_is_high_priority(path, high):
    assert is_high_priority(make_file_info(path, "")) is high


def test_static_site_is_not_fullstack():
    files = [make_file_info("index.html", ""), make_file_info("js/app.js", "")]
    assert is_fullstack_project(files) is False


@pytest.mark.parametrize("path", ["app/page.js", "prisma/schema.prisma", "lib/db.ts", "./package.json"])
def test_fullstack_markers(path):
    assert is_fullstack_project([make_file_info("index.html", ""), make_file_info(path, "")]) is True

