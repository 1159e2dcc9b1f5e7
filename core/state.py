"""Pipeline state models shared across all stages."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

CHANGE_SCOPES = ("small", "medium", "large", "new")
FILE_TYPES = ("html", "css", "js", "json", "typescript", "other")


@dataclass(frozen=True)
class FileInfo:
    filename: str           # base name e.g. "index.html"
    path: str               # logical path, unique within a project
    content: str
    last_modified: datetime
    type: str               # one of FILE_TYPES, derived from the extension


@dataclass
class ProjectSnapshot:
    files: list[FileInfo] = field(default_factory=list)
    previous_prompts: list[str] = field(default_factory=list)   # newest first


@dataclass
class IterationContext:
    """Classifier verdict for one inbound chat message."""

    is_iteration: bool
    change_scope: str = "new"
    project_id: str | None = None
    existing_files: list[FileInfo] = field(default_factory=list)
    previous_prompts: list[str] = field(default_factory=list)

    def __post_init__(self):
        if self.change_scope not in CHANGE_SCOPES:
            raise ValueError(f"Unknown change scope: {self.change_scope!r}")
        if (self.change_scope == "new") == self.is_iteration:
            raise ValueError("change_scope must be 'new' exactly when is_iteration is False")
        if self.existing_files and not self.is_iteration:
            raise ValueError("existing_files are only carried by iterations")


@dataclass
class GenerationPayload:
    system_prompt: str
    user_message: str
    context: IterationContext


@dataclass
class GenerationResult:
    payload: GenerationPayload
    response: str
    written_files: list[str] = field(default_factory=list)
    enhancements: list[str] = field(default_factory=list)


@dataclass
class EnhancementOptions:
    add_media_queries: bool = True
    add_focus_styles: bool = True
    add_css_variables: bool = False     # off by default, scans every colour literal
    add_form_labels: bool = True
    add_aria: bool = True
    add_reduced_motion: bool = True


@dataclass
class EnhancedCode:
    html: str
    css: str
    js: str
    enhancements: list[str] = field(default_factory=list)
