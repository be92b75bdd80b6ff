"""Tests for whole-project compilation (craftgen.compiler.project)."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from craftgen.compiler.emitter import serialize
from craftgen.compiler.project import ProjectCompiler, WarningKind
from craftgen.config import GeneratorConfig
from craftgen.errors import InvalidSettingsError, UnsupportedFieldTypeError
from craftgen.schema.models import ProjectDeclaration
from craftgen.target.models import EntryTitleElement

pytestmark = pytest.mark.unit

FIXED_EPOCH = int(datetime(2025, 3, 14, 15, 9, 26, tzinfo=timezone.utc).timestamp())


def _compile(project, uids, clock, **config):
    return ProjectCompiler(GeneratorConfig(**config), uids=uids, clock=clock).compile(project)


class TestHeadingPage:
    def test_index_has_field_and_entry_type(self, heading_page_project, seq_uids, fixed_clock):
        result = _compile(heading_page_project, seq_uids, fixed_clock)
        assert result.index.labels() == {
            "uid-0001": "Heading # heading",
            "uid-0006": "Page # page",
        }
        assert result.warnings == []

    def test_entry_type_references_field_uid(self, heading_page_project, seq_uids, fixed_clock):
        result = _compile(heading_page_project, seq_uids, fixed_clock)
        (page,) = result.entry_types
        title, heading = page.record.elements()
        assert isinstance(title, EntryTitleElement)
        assert heading.field_uid == result.field_uids["heading"]
        assert heading.required is True

    def test_manifest(self, heading_page_project, seq_uids, fixed_clock):
        result = _compile(heading_page_project, seq_uids, fixed_clock)
        assert result.date_modified == FIXED_EPOCH
        assert result.manifest().to_config() == {
            "dateModified": FIXED_EPOCH,
            "meta": {
                "__names__": {
                    "uid-0001": "Heading # heading",
                    "uid-0006": "Page # page",
                },
            },
        }


class TestMixedProject:
    def test_unsupported_fields_skipped(self, mixed_project, seq_uids, fixed_clock):
        result = _compile(mixed_project, seq_uids, fixed_clock)
        assert [c.handle for c in result.fields] == ["heading", "body", "hero"]
        assert [c.handle for c in result.entry_types] == ["article", "landing"]

    def test_warnings(self, mixed_project, seq_uids, fixed_clock):
        result = _compile(mixed_project, seq_uids, fixed_clock)
        assert [(w.kind, w.subject) for w in result.warnings] == [
            (WarningKind.UNSUPPORTED_FIELD_TYPE, "gallery"),
            (WarningKind.UNSUPPORTED_FIELD_TYPE, "published"),
            (WarningKind.UNRESOLVED_FIELD_REFERENCE, "article"),
        ]
        assert result.warnings[0].message == (
            "Skipped field 'gallery': unsupported field type 'carousel'"
        )
        assert result.warnings[2].message == "Entry type 'article' skipped unknown field 'gallery'"

    def test_index_order_fields_then_entry_types(self, mixed_project, seq_uids, fixed_clock):
        result = _compile(mixed_project, seq_uids, fixed_clock)
        assert list(result.index.labels().values()) == [
            "Heading # heading",
            "Body # body",
            "Hero # hero",
            "Article # article",
            "Landing # landing",
        ]

    def test_embedded_uids_not_indexed(self, mixed_project, seq_uids, fixed_clock):
        result = _compile(mixed_project, seq_uids, fixed_clock)
        body = result.fields[1].record
        hero = result.fields[2].record
        assert body.settings.cke_config == "uid-0002"
        assert hero.settings.default_upload_location_source == "volume:uid-0004"
        assert "uid-0002" not in result.index
        assert "uid-0004" not in result.index
        assert len(result.index) == 5

    def test_references_resolve(self, mixed_project, seq_uids, fixed_clock):
        result = _compile(mixed_project, seq_uids, fixed_clock)
        uids = result.field_uids
        article, landing = (c.record for c in result.entry_types)
        assert article.field_uids() == [uids["heading"], uids["body"], uids["hero"]]
        assert [e.required for e in article.elements()[1:]] == [True, False, False]
        assert landing.has_title_field is False
        assert landing.title_format == "{heading}"
        assert landing.field_uids() == [uids["hero"]]
        assert landing.elements()[0].required is True

    def test_every_referenced_uid_is_indexed(self, mixed_project, seeded_uids, fixed_clock):
        result = _compile(mixed_project, seeded_uids, fixed_clock)
        for compiled in result.entry_types:
            for field_uid in compiled.record.field_uids():
                assert field_uid in result.index

    def test_searchable_carried(self, mixed_project, seq_uids, fixed_clock):
        result = _compile(mixed_project, seq_uids, fixed_clock)
        assert result.fields[0].record.searchable is True
        assert result.fields[1].record.searchable is False

    def test_sections_and_volumes_passed_through(self, seq_uids, fixed_clock):
        result = _compile(ProjectDeclaration.example(), seq_uids, fixed_clock)
        assert [s.handle for s in result.sections] == ["pages", "blog"]
        assert [v.handle for v in result.volumes] == ["images"]


class TestStrictMode:
    def test_unsupported_type_raises(self, mixed_project, seq_uids, fixed_clock):
        with pytest.raises(UnsupportedFieldTypeError) as exc:
            _compile(mixed_project, seq_uids, fixed_clock, strict=True)
        assert exc.value.tag == "carousel"
        assert exc.value.handle == "gallery"

    def test_invalid_override_raises_in_lenient_mode(self, seq_uids, fixed_clock):
        project = ProjectDeclaration.model_validate({
            "fields": [
                {"name": "Website", "handle": "website", "field_type": "url",
                 "settings": {"colour": "red"}},
            ],
            "entry_types": [],
        })
        with pytest.raises(InvalidSettingsError):
            _compile(project, seq_uids, fixed_clock)


class TestIdentifiers:
    def test_seeded_runs_are_identical(self, mixed_project, fixed_clock):
        config = GeneratorConfig(seed=42)
        first = ProjectCompiler(config, clock=fixed_clock).compile(mixed_project)
        second = ProjectCompiler(config, clock=fixed_clock).compile(mixed_project)
        assert first.index.labels() == second.index.labels()
        assert [serialize(c.record) for c in first.entry_types] == [
            serialize(c.record) for c in second.entry_types
        ]

    def test_random_runs_differ_only_in_uids(self, mixed_project, fixed_clock):
        first = ProjectCompiler(clock=fixed_clock).compile(mixed_project)
        second = ProjectCompiler(clock=fixed_clock).compile(mixed_project)
        assert set(first.index).isdisjoint(second.index)
        assert list(first.index.labels().values()) == list(second.index.labels().values())
        assert [c.record.name for c in first.fields] == [c.record.name for c in second.fields]

    def test_empty_project(self, seq_uids, fixed_clock):
        result = _compile(ProjectDeclaration(fields=[], entry_types=[]), seq_uids, fixed_clock)
        assert result.fields == []
        assert result.entry_types == []
        assert result.manifest().to_config()["meta"] == {"__names__": {}}
