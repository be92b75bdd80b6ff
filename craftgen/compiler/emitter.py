"""Serialisation and file output.

``serialize`` renders a record as YAML (the project-config format) or JSON.
``ProjectWriter`` lays out a compiled project as::

    <root>/fields/<handle>--<uid>.yaml
    <root>/entryTypes/<handle>--<uid>.yaml
    <root>/sections/
    <root>/volumes/
    <root>/project.yaml

All files are rendered in memory first.  With staging enabled they are
written to a temporary directory inside ``<root>`` and then moved into
place, ``project.yaml`` last, so a failed write leaves the existing tree
untouched.  Moves are per file; a crash during the move phase can still
leave a partial tree.
"""

from __future__ import annotations

import json
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any

import yaml

from craftgen.compiler.project import CompileResult
from craftgen.config import GeneratorConfig, OutputFormat
from craftgen.errors import OutputError
from craftgen.target.models import ConfigRecord
from craftgen.utils import write_text

STAGING_PREFIX = ".craftgen-staging-"


# ---------------------------------------------------------------------------
# Serialisation
# ---------------------------------------------------------------------------

def dump_yaml(data: Any) -> str:
    """Block-style YAML, keys in insertion order, no line folding."""
    return yaml.safe_dump(
        data,
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
        width=float("inf"),
    )


def dump_json(data: Any) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def serialize(record: ConfigRecord, fmt: OutputFormat = "yaml") -> str:
    """Render *record* in project-config key casing."""
    data = record.to_config()
    if fmt == "json":
        return dump_json(data)
    return dump_yaml(data)


def write_record(record: ConfigRecord, path: str | Path, fmt: OutputFormat = "yaml") -> Path:
    """Serialise *record* to a single file.

    Raises:
        OutputError: If the file cannot be written.
    """
    content = serialize(record, fmt)
    try:
        return write_text(path, content)
    except OSError as exc:
        raise OutputError(f"Failed to write {path}: {exc}") from exc


# ---------------------------------------------------------------------------
# Project tree
# ---------------------------------------------------------------------------

class ProjectWriter:
    """Writes a ``CompileResult`` into the project-config directory tree."""

    def __init__(self, config: GeneratorConfig) -> None:
        self.config = config

    def render(self, result: CompileResult) -> list[tuple[Path, str]]:
        """Return ``(final_path, content)`` pairs; the project file comes last."""
        fmt = self.config.output_format
        files: list[tuple[Path, str]] = []
        for compiled in result.fields:
            path = self.config.record_path(self.config.fields_dir, compiled.handle, compiled.uid)
            files.append((path, serialize(compiled.record, fmt)))
        for compiled in result.entry_types:
            path = self.config.record_path(
                self.config.entry_types_dir, compiled.handle, compiled.uid
            )
            files.append((path, serialize(compiled.record, fmt)))
        files.append((self.config.project_file, serialize(result.manifest(), fmt)))
        return files

    def write(self, result: CompileResult) -> list[Path]:
        """Create the directory tree and write every file.

        Existing files at the same paths are overwritten.

        Returns:
            Paths written, in write order.

        Raises:
            OutputError: If a directory or file cannot be created.
        """
        files = self.render(result)
        try:
            self.config.ensure_directories()
        except OSError as exc:
            raise OutputError(
                f"Failed to create output directories under {self.config.output_dir}: {exc}"
            ) from exc

        if not self.config.stage_writes:
            for path, content in files:
                self._write(path, content)
            return [path for path, _ in files]

        try:
            staging = Path(tempfile.mkdtemp(prefix=STAGING_PREFIX, dir=self.config.output_dir))
        except OSError as exc:
            raise OutputError(f"Failed to create staging directory: {exc}") from exc

        try:
            staged: list[tuple[Path, Path]] = []
            for path, content in files:
                temp_path = staging / path.relative_to(self.config.output_dir)
                self._write(temp_path, content)
                staged.append((temp_path, path))

            for temp_path, path in staged:
                try:
                    os.replace(temp_path, path)
                except OSError as exc:
                    raise OutputError(f"Failed to move {path} into place: {exc}") from exc
        finally:
            shutil.rmtree(staging, ignore_errors=True)

        return [path for path, _ in files]

    @staticmethod
    def _write(path: Path, content: str) -> None:
        try:
            write_text(path, content)
        except OSError as exc:
            raise OutputError(f"Failed to write {path}: {exc}") from exc
