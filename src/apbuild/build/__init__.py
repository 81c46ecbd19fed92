"""
Build system components for apbuild.

This module provides the provisioning pipeline including:
- Native library provisioning (meson/ninja source build, prebuilt download)
- ABI shim compilation and archiving
- Binding generation and serde patching
- Cargo link directives
"""

from .archive_creator import ArchiveCreationError, ArchiveCreator
from .binding_patch import BindingPostProcessor, DeriveAttribute, PatchError
from .bindings import BindgenOptions, BindingFile, BindingGenerationError, BindingGenerator
from .build_stamp import BuildStamp
from .compiler import CompilerError, WrapperCompiler
from .link_directives import LinkDirectives
from .native_provisioner import (
    BuildState,
    NativeProvisioner,
    PrebuiltProvisioner,
    SourceBuildProvisioner,
    select_provisioner,
)
from .orchestrator import BuildPathsError, NativeBuildOrchestrator, validate_build_paths
from .output_lock import OutputDirBusyError, OutputDirLock
from .pipeline import Pipeline, PipelineResult
from .tool_runner import BuildToolError, ExternalProcessResult, ToolRunner

__all__ = [
    "ArchiveCreationError",
    "ArchiveCreator",
    "BindingPostProcessor",
    "DeriveAttribute",
    "PatchError",
    "BindgenOptions",
    "BindingFile",
    "BindingGenerationError",
    "BindingGenerator",
    "BuildStamp",
    "CompilerError",
    "WrapperCompiler",
    "LinkDirectives",
    "BuildState",
    "NativeProvisioner",
    "PrebuiltProvisioner",
    "SourceBuildProvisioner",
    "select_provisioner",
    "BuildPathsError",
    "NativeBuildOrchestrator",
    "validate_build_paths",
    "OutputDirBusyError",
    "OutputDirLock",
    "Pipeline",
    "PipelineResult",
    "BuildToolError",
    "ExternalProcessResult",
    "ToolRunner",
]
