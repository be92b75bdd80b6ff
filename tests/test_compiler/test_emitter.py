"""Tests for serialisation and the project tree writer (craftgen.compiler.emitter)."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml

from craftgen.compiler import emitter
from craftgen.compiler.emitter import STAGING_PREFIX, ProjectWriter, serialize, write_record
from craftgen.compiler.fields import build_field
from craftgen.compiler.project import ProjectCompiler
from craftgen.errors import OutputError

pytestmark = pytest.mark.unit


@pytest.fixture
def heading_page_result(heading_page_project, out_config, seq_uids, fixed_clock):
    return ProjectCompiler(out_config, uids=seq_uids, clock=fixed_clock).compile(
        heading_page_project
    )


class TestSerialize:
    def test_yaml_round_trips_class_names(self, seq_uids):
        record = build_field("text", "Heading", "heading", uids=seq_uids)
        text = serialize(record)
        data = yaml.safe_load(text)
        assert data["type"] == "craft\\fields\\PlainText"
        assert data["settings"]["initialRows"] == 1
        assert data["translationMethod"] == "none"
        assert data["columnSuffix"] is None

    def test_yaml_is_block_style_in_key_order(self, seq_uids):
        text = serialize(build_field("url", "Website", "website", uids=seq_uids))
        lines = text.splitlines()
        assert lines[0] == "columnSuffix: null"
        assert "settings:" in lines
        assert "{" not in text

    def test_long_instructions_not_folded(self, seq_uids):
        instructions = "word " * 60
        text = serialize(build_field("text", "A", "a", instructions.strip(), uids=seq_uids))
        assert yaml.safe_load(text)["instructions"] == instructions.strip()
        assert sum(1 for line in text.splitlines() if line.startswith("instructions:")) == 1

    def test_json(self, seq_uids):
        text = serialize(build_field("number", "Price", "price", uids=seq_uids), "json")
        data = json.loads(text)
        assert data["type"] == "craft\\fields\\Number"
        assert data["settings"]["previewFormat"] == "decimal"
        assert text.endswith("\n")

    def test_write_record(self, tmp_path: Path, seq_uids):
        path = write_record(build_field("text", "A", "a", uids=seq_uids), tmp_path / "x" / "a.yaml")
        assert yaml.safe_load(path.read_text(encoding="utf-8"))["handle"] == "a"

    def test_write_record_failure(self, tmp_path: Path, seq_uids):
        blocker = tmp_path / "file"
        blocker.write_text("", encoding="utf-8")
        with pytest.raises(OutputError) as exc:
            write_record(build_field("text", "A", "a", uids=seq_uids), blocker / "a.yaml")
        assert exc.value.step == "write output"


class TestProjectWriter:
    def test_tree_layout(self, heading_page_result, out_config):
        written = ProjectWriter(out_config).write(heading_page_result)
        root = out_config.output_dir
        assert written == [
            root / "fields" / "heading--uid-0001.yaml",
            root / "entryTypes" / "page--uid-0006.yaml",
            root / "project.yaml",
        ]
        for name in ("fields", "entryTypes", "sections", "volumes"):
            assert (root / name).is_dir()
        assert all(path.is_file() for path in written)

    def test_project_file_last(self, heading_page_result, out_config):
        files = ProjectWriter(out_config).render(heading_page_result)
        assert files[-1][0] == out_config.project_file

    def test_project_yaml_content(self, heading_page_result, out_config):
        ProjectWriter(out_config).write(heading_page_result)
        data = yaml.safe_load(out_config.project_file.read_text(encoding="utf-8"))
        assert data == {
            "dateModified": heading_page_result.date_modified,
            "meta": {
                "__names__": {
                    "uid-0001": "Heading # heading",
                    "uid-0006": "Page # page",
                },
            },
        }

    def test_entry_type_file_references_field(self, heading_page_result, out_config):
        ProjectWriter(out_config).write(heading_page_result)
        path = out_config.entry_types_dir / "page--uid-0006.yaml"
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
        elements = data["fieldLayouts"]["uid-0002"]["tabs"][0]["elements"]
        assert elements[0]["type"] == "craft\\fieldlayoutelements\\entries\\EntryTitleField"
        assert elements[1]["fieldUid"] == "uid-0001"
        assert elements[1]["required"] is True

    def test_staging_directory_removed(self, heading_page_result, out_config):
        ProjectWriter(out_config).write(heading_page_result)
        leftovers = [p for p in out_config.output_dir.iterdir() if p.name.startswith(STAGING_PREFIX)]
        assert leftovers == []

    def test_overwrites_existing_files(self, heading_page_result, out_config):
        out_config.ensure_directories()
        out_config.project_file.write_text("stale: true\n", encoding="utf-8")
        ProjectWriter(out_config).write(heading_page_result)
        data = yaml.safe_load(out_config.project_file.read_text(encoding="utf-8"))
        assert "stale" not in data

    def test_failed_staged_write_leaves_tree_untouched(
        self, heading_page_result, heading_page_project, out_config, seeded_uids, fixed_clock,
        monkeypatch,
    ):
        ProjectWriter(out_config).write(heading_page_result)
        before = {
            path: path.read_text(encoding="utf-8")
            for path in out_config.output_dir.rglob("*.yaml")
        }
        second = ProjectCompiler(out_config, uids=seeded_uids, clock=fixed_clock).compile(
            heading_page_project
        )
        real_write_text = emitter.write_text

        def failing_write_text(path, content):
            if path.name.startswith("page--"):
                raise OSError("disk full")
            return real_write_text(path, content)

        monkeypatch.setattr(emitter, "write_text", failing_write_text)
        with pytest.raises(OutputError, match="disk full"):
            ProjectWriter(out_config).write(second)

        after = {
            path: path.read_text(encoding="utf-8")
            for path in out_config.output_dir.rglob("*.yaml")
        }
        assert after == before
        leftovers = [p for p in out_config.output_dir.iterdir() if p.name.startswith(STAGING_PREFIX)]
        assert leftovers == []

    def test_unstaged_write(self, heading_page_result, out_config):
        config = out_config.model_copy(update={"stage_writes": False})
        written = ProjectWriter(config).write(heading_page_result)
        assert all(path.is_file() for path in written)

    def test_json_format(self, heading_page_project, out_config, seq_uids, fixed_clock):
        config = out_config.model_copy(update={"output_format": "json"})
        result = ProjectCompiler(config, uids=seq_uids, clock=fixed_clock).compile(
            heading_page_project
        )
        written = ProjectWriter(config).write(result)
        assert written[-1] == config.output_dir / "project.json"
        assert written[0].suffix == ".json"
        data = json.loads(written[-1].read_text(encoding="utf-8"))
        assert data["meta"]["__names__"]["uid-0006"] == "Page # page"

    def test_unwritable_root(self, heading_page_result, tmp_path: Path, out_config):
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")
        config = out_config.model_copy(update={"output_dir": blocker / "project"})
        with pytest.raises(OutputError, match="Failed to create output directories"):
            ProjectWriter(config).write(heading_page_result)
