"""File generation for create-filament projects.

``files`` declares which files exist for a configuration, ``templates``
renders them, ``manifest`` and ``docker_gen`` build the structured documents,
and ``generator`` holds the pipeline step bodies.
"""

from create_filament.scaffolder.files import FILE_SPECS, FileGroup, FileSpec, plan_files
from create_filament.scaffolder.generator import GenerationContext
from create_filament.scaffolder.templates import TemplateRenderer

__all__ = [
    "FILE_SPECS",
    "FileGroup",
    "FileSpec",
    "GenerationContext",
    "TemplateRenderer",
    "plan_files",
]
