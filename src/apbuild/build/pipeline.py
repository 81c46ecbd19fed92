"""
Provisioning pipeline for apbuild.

Runs every step of the build strictly in sequence:
1. Take ownership of the output directory
2. Provision the native library (build from source or fetch prebuilt)
3. Compile the ABI shim against the provisioned headers
4. Generate Rust bindings from the shim header
5. Optionally patch the bindings to derive serde traits
6. Emit cargo link directives
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..config import BuildConfig, BuildPaths
from .binding_patch import BindingPostProcessor
from .bindings import BindingFile, BindingGenerator
from .compiler import WrapperCompiler
from .link_directives import LinkDirectives
from .orchestrator import NativeBuildOrchestrator, validate_build_paths
from .output_lock import OutputDirLock

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    """Result of a complete provisioning run."""

    paths: BuildPaths
    wrapper_library: Path
    binding_file: BindingFile
    serde_patched: Optional[int]
    native_skipped: bool


class Pipeline:
    """
    Orchestrates the full provisioning-and-binding pipeline.

    Example usage:
        config = BuildConfig.from_environ()
        result = Pipeline(config).run()
        print(result.binding_file.path)
    """

    def __init__(
        self,
        config: BuildConfig,
        orchestrator: Optional[NativeBuildOrchestrator] = None,
        compiler: Optional[WrapperCompiler] = None,
        generator: Optional[BindingGenerator] = None,
        post_processor: Optional[BindingPostProcessor] = None,
        emit_link_directives: bool = True,
        show_progress: bool = True,
    ):
        self.config = config
        self.orchestrator = orchestrator or NativeBuildOrchestrator(
            config, show_progress=show_progress
        )
        self.compiler = compiler or WrapperCompiler(config, show_progress=show_progress)
        self.generator = generator or BindingGenerator(config, show_progress=show_progress)
        self.post_processor = post_processor or BindingPostProcessor()
        self.emit_link_directives = emit_link_directives
        self.show_progress = show_progress

    def _step(self, index: int, message: str) -> None:
        logger.info(message)
        if self.config.verbose:
            print(f"[{index}/5] {message}")

    def run(self) -> PipelineResult:
        """
        Execute the pipeline.

        Returns:
            PipelineResult with the generated artifact locations

        Raises:
            Any of the pipeline's fatal errors; nothing is retried or downgraded.
        """
        config = self.config

        with OutputDirLock(config.out_dir):
            self._step(1, f"Provisioning native library for {config.target_os.value}")
            paths = validate_build_paths(self.orchestrator.build())

            self._step(2, "Compiling wrapper")
            wrapper_library = self.compiler.compile(paths.include_path)

            self._step(3, "Generating bindings")
            binding_file = self.generator.generate(config.wrapper_header, paths.include_path)

            serde_patched = None
            if config.derive_serde:
                self._step(4, "Adding serde derives")
                serde_patched = self.post_processor.add_serialization(binding_file)

            if self.emit_link_directives:
                self._step(5, "Emitting link directives")
                LinkDirectives(config, paths).emit()

        return PipelineResult(
            paths=paths,
            wrapper_library=wrapper_library,
            binding_file=binding_file,
            serde_patched=serde_patched,
            native_skipped=self.orchestrator.skipped,
        )
