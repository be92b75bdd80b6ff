"""Shared pytest fixtures for the craft-config-gen test suite.

Provides reusable fixtures for:
- Deterministic identifier sources and a fixed clock
- Sample project descriptions (as dicts, models, and JSON files)
- Generator configs rooted in a temporary directory
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import pytest

from craftgen.config import GeneratorConfig
from craftgen.identity import SeededUidGenerator
from craftgen.schema.models import ProjectDeclaration

FIXED_NOW = datetime(2025, 3, 14, 15, 9, 26, tzinfo=timezone.utc)


class SequenceUids:
    """Identifier source yielding ``uid-0001``, ``uid-0002``, ..."""

    def __init__(self) -> None:
        self.count = 0

    def next_uid(self) -> str:
        self.count += 1
        return f"uid-{self.count:04d}"


# ---------------------------------------------------------------------------
# Identifiers & time
# ---------------------------------------------------------------------------

@pytest.fixture
def seq_uids() -> SequenceUids:
    """Readable, predictable identifiers."""
    return SequenceUids()


@pytest.fixture
def seeded_uids() -> SeededUidGenerator:
    return SeededUidGenerator(1234)


@pytest.fixture
def fixed_clock():
    """Clock that always returns ``FIXED_NOW``."""
    return lambda: FIXED_NOW


# ---------------------------------------------------------------------------
# Project descriptions
# ---------------------------------------------------------------------------

@pytest.fixture
def heading_page_dict() -> dict[str, Any]:
    """One plain-text field required on one entry type."""
    return {
        "fields": [
            {"name": "Heading", "handle": "heading", "field_type": "plain_text"},
        ],
        "entry_types": [
            {
                "name": "Page",
                "handle": "page",
                "fields": [{"handle": "heading", "required": True}],
            },
        ],
    }


@pytest.fixture
def mixed_project_dict() -> dict[str, Any]:
    """Supported and unsupported field types plus a dangling reference."""
    return {
        "fields": [
            {
                "name": "Heading",
                "handle": "heading",
                "field_type": "plain_text",
                "required": False,
                "searchable": True,
            },
            {"name": "Gallery", "handle": "gallery", "field_type": "carousel"},
            {"name": "Body", "handle": "body", "field_type": "rich_text"},
            {"name": "Hero", "handle": "hero", "field_type": "image"},
            {"name": "Published", "handle": "published", "field_type": "lightswitch"},
        ],
        "entry_types": [
            {
                "name": "Article",
                "handle": "article",
                "fields": [
                    {"handle": "heading", "required": True},
                    {"handle": "gallery", "required": True},
                    {"handle": "body"},
                    {"handle": "hero", "required": False},
                ],
            },
            {
                "name": "Landing",
                "handle": "landing",
                "has_title_field": False,
                "title_format": "{heading}",
                "fields": [{"handle": "hero", "required": True}],
            },
        ],
    }


@pytest.fixture
def heading_page_project(heading_page_dict) -> ProjectDeclaration:
    return ProjectDeclaration.model_validate(heading_page_dict)


@pytest.fixture
def mixed_project(mixed_project_dict) -> ProjectDeclaration:
    return ProjectDeclaration.model_validate(mixed_project_dict)


def write_project_file(directory: Path, data: dict[str, Any], name: str = "project.json") -> Path:
    path = directory / name
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return path


@pytest.fixture
def heading_page_file(tmp_path: Path, heading_page_dict) -> Path:
    return write_project_file(tmp_path, heading_page_dict)


@pytest.fixture
def mixed_project_file(tmp_path: Path, mixed_project_dict) -> Path:
    return write_project_file(tmp_path, mixed_project_dict, name="mixed.json")


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

@pytest.fixture
def out_config(tmp_path: Path) -> GeneratorConfig:
    """Generator config writing under ``<tmp>/config/project``."""
    return GeneratorConfig(output_dir=tmp_path / "config" / "project")


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    """Keep CRAFTGEN_* variables from the developer's shell out of tests."""
    for key in (
        "CRAFTGEN_OUTPUT_DIR",
        "CRAFTGEN_STRICT",
        "CRAFTGEN_SEED",
        "CRAFTGEN_FORMAT",
        "CRAFTGEN_STAGE_WRITES",
    ):
        monkeypatch.delenv(key, raising=False)
