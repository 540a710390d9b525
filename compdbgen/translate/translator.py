from __future__ import annotations

import os
from typing import Mapping

from compdbgen.aquery.model import RawInvocation
from compdbgen.core.errors import EmptyArgumentsError, MissingSourceFileError
from compdbgen.output.compile_commands import NormalizedInvocation, OutputMode
from compdbgen.translate.compiler import CompilerResolver
from compdbgen.translate.flags import FlagDeduplicator, pin_version
from compdbgen.translate.paths import PathResolver, anchor
from compdbgen.translate.policy import DEBUG_PREFIX_MAP_FLAG, OUTPUT_FLAG, SOURCE_FLAG


class ActionTranslator:
    """
    Turn one aquery compiler action into a compile_commands.json entry.

    The argument list is scanned once, left to right. Tokens are only dropped
    (sandbox remapping, duplicate -W/-std flags, empty tokens) or substituted in
    place (compiler path, anchored paths, pinned -std); relative order is kept.
    Decisions about a token always look at the original previous token, never
    at what it was rewritten to.
    """

    def __init__(
        self,
        mode: OutputMode,
        *,
        environ: Mapping[str, str] | None = None,
        compilers: CompilerResolver | None = None,
        paths: PathResolver | None = None,
    ) -> None:
        self._mode = mode
        self._environ = dict(os.environ if environ is None else environ)
        self._compilers = compilers or CompilerResolver()
        self._paths = paths or PathResolver()

    @property
    def mode(self) -> OutputMode:
        return self._mode

    def translate(self, base_dir: str, raw: RawInvocation, *, working_directory: str | None = None) -> NormalizedInvocation:
        args = raw.arguments
        if not args:
            raise EmptyArgumentsError(target_id=raw.target_id)

        out = [self._compilers.resolve(args[0], self._environ)]
        dedup = FlagDeduplicator()
        source: str | None = None
        output: str | None = None

        for i in range(1, len(args)):
            prev, curr = args[i - 1], args[i]
            if curr.startswith(DEBUG_PREFIX_MAP_FLAG):
                continue

            if prev == SOURCE_FLAG:
                source = token = self._anchor(base_dir, curr)
            elif prev == OUTPUT_FLAG:
                output = token = self._anchor(base_dir, curr)
            elif self._mode.rewrite_paths:
                token = self._paths.rewrite(base_dir, curr, prev)
            else:
                token = curr

            token = pin_version(token)
            if not token:
                continue
            if not dedup.admit(token):
                continue
            out.append(token)

        if not source:
            raise MissingSourceFileError(target_id=raw.target_id)

        return NormalizedInvocation(
            source_file=source,
            arguments=tuple(out),
            directory=base_dir if self._mode.rewrite_paths or working_directory is None else working_directory,
            output_file=output if self._mode.include_output else None,
        )

    def _anchor(self, base_dir: str, token: str) -> str:
        if not self._mode.rewrite_paths or not token:
            return token
        return anchor(base_dir, token)
