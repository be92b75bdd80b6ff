"""craft-config-gen configuration.

Typed settings for a generator run. Uses a Pydantic v2 model so values are
validated at construction time and can be read from environment variables
without boiler-plate.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

OutputFormat = Literal["yaml", "json"]

DEFAULT_OUTPUT_DIR = Path("config/project")

_TRUTHY = {"1", "true", "yes", "on"}


class GeneratorConfig(BaseModel):
    """Settings shared by every generator command.

    Instances are created once by the CLI (or by tests) and passed to the
    compiler and the writer.
    """

    output_dir: Path = Field(default=DEFAULT_OUTPUT_DIR)
    strict: bool = Field(
        default=False,
        description="Abort on unsupported field types and unresolved references instead of skipping them",
    )
    seed: Optional[int] = Field(
        default=None, description="Seed for reproducible identifiers; random when unset"
    )
    output_format: OutputFormat = Field(default="yaml")
    stage_writes: bool = Field(
        default=True, description="Write into a staging directory and move files into place"
    )

    # ------------------------------------------------------------------
    # Derived paths (read-only properties)
    # ------------------------------------------------------------------

    @property
    def extension(self) -> str:
        """File extension for emitted records."""
        return "yaml" if self.output_format == "yaml" else "json"

    @property
    def fields_dir(self) -> Path:
        return self.output_dir / "fields"

    @property
    def entry_types_dir(self) -> Path:
        return self.output_dir / "entryTypes"

    @property
    def sections_dir(self) -> Path:
        return self.output_dir / "sections"

    @property
    def volumes_dir(self) -> Path:
        return self.output_dir / "volumes"

    @property
    def project_file(self) -> Path:
        """Path to the project-level ``project.<ext>`` index file."""
        return self.output_dir / f"project.{self.extension}"

    def record_path(self, category_dir: Path, handle: str, uid: str) -> Path:
        """Return ``<category_dir>/<handle>--<uid>.<ext>``."""
        return category_dir / f"{handle}--{uid}.{self.extension}"

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_env(cls) -> "GeneratorConfig":
        """Build a ``GeneratorConfig`` from environment variables.

        Recognised variables (all optional):
            CRAFTGEN_OUTPUT_DIR, CRAFTGEN_STRICT, CRAFTGEN_SEED,
            CRAFTGEN_FORMAT, CRAFTGEN_STAGE_WRITES.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("CRAFTGEN_OUTPUT_DIR"):
            kwargs["output_dir"] = Path(os.environ["CRAFTGEN_OUTPUT_DIR"])
        if os.environ.get("CRAFTGEN_STRICT"):
            kwargs["strict"] = os.environ["CRAFTGEN_STRICT"].strip().lower() in _TRUTHY
        if os.environ.get("CRAFTGEN_SEED"):
            kwargs["seed"] = int(os.environ["CRAFTGEN_SEED"])
        if os.environ.get("CRAFTGEN_FORMAT"):
            kwargs["output_format"] = os.environ["CRAFTGEN_FORMAT"].strip().lower()
        if os.environ.get("CRAFTGEN_STAGE_WRITES"):
            kwargs["stage_writes"] = (
                os.environ["CRAFTGEN_STAGE_WRITES"].strip().lower() in _TRUTHY
            )
        return cls(**kwargs)

    def ensure_directories(self) -> None:
        """Create the output tree: ``fields/``, ``entryTypes/``, ``sections/``, ``volumes/``."""
        for directory in (
            self.output_dir,
            self.fields_dir,
            self.entry_types_dir,
            self.sections_dir,
            self.volumes_dir,
        ):
            directory.mkdir(parents=True, exist_ok=True)
