"""craft-config-gen compiler -- turns a content-model description into project config.

Quick usage::

    from craftgen.compiler import ProjectCompiler, ProjectWriter
    from craftgen.config import GeneratorConfig
    from craftgen.schema import load_project

    config = GeneratorConfig(output_dir="config/project")
    result = ProjectCompiler(config).compile(load_project("content-model.json"))
    ProjectWriter(config).write(result)
"""

from craftgen.compiler.emitter import ProjectWriter, serialize, write_record
from craftgen.compiler.entry_types import build_adhoc_entry_type, build_entry_type
from craftgen.compiler.fields import FIELD_TYPE_ALIASES, build_field, resolve_field_type
from craftgen.compiler.project import CompileResult, CompileWarning, ProjectCompiler

__all__ = [
    "FIELD_TYPE_ALIASES",
    "CompileResult",
    "CompileWarning",
    "ProjectCompiler",
    "ProjectWriter",
    "build_adhoc_entry_type",
    "build_entry_type",
    "build_field",
    "resolve_field_type",
    "serialize",
    "write_record",
]
