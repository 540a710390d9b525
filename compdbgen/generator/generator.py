from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from compdbgen.aquery.model import AqueryOutput
from compdbgen.aquery.query import run_aquery
from compdbgen.config.generator_config import GeneratorConfig
from compdbgen.core.atomic_io import write_atomic_json
from compdbgen.output.compile_commands import NormalizedInvocation, to_compile_commands
from compdbgen.translate.compiler import CompilerResolver
from compdbgen.translate.database import DatabaseBuilder
from compdbgen.translate.translator import ActionTranslator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerateResult:
    output_path: Path
    entries: int


@dataclass(frozen=True)
class Generator:
    """Query -> translate -> write, for one workspace and one config."""

    workspace_root: Path
    config: GeneratorConfig
    environ: Mapping[str, str] | None = None

    def _translator(self) -> ActionTranslator:
        return ActionTranslator(
            self.config.output_mode(),
            environ=dict(os.environ if self.environ is None else self.environ),
            compilers=CompilerResolver(env_vars=tuple(self.config.compiler_env_vars)),
        )

    def query(self) -> AqueryOutput:
        return run_aquery(
            bazel=self.config.bazel,
            target=self.config.target,
            extra_flags=self.config.extra_flags,
            cwd=self.workspace_root,
        )

    def translate(self, aquery: AqueryOutput) -> list[NormalizedInvocation]:
        base_dir = str(self.workspace_root)
        builder = DatabaseBuilder(self._translator())
        return builder.build_from_aquery(base_dir, aquery, working_directory=base_dir)

    def write(self, invocations: list[NormalizedInvocation]) -> GenerateResult:
        out_path = Path(self.config.output_path)
        if not out_path.is_absolute():
            out_path = self.workspace_root / out_path
        write_atomic_json(out_path, to_compile_commands(invocations, self.config.output_mode()))
        logger.info("wrote %d entries to %s", len(invocations), out_path)
        return GenerateResult(output_path=out_path, entries=len(invocations))

    def run(self, aquery: AqueryOutput | None = None) -> GenerateResult:
        # Translation completes before anything is written; a failed batch leaves no file behind.
        invocations = self.translate(aquery if aquery is not None else self.query())
        return self.write(invocations)
