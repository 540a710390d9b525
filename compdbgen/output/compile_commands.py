from __future__ import annotations

import shlex
from dataclasses import dataclass
from typing import Any, Iterable


@dataclass(frozen=True)
class OutputMode:
    """
    Shape of the emitted compile_commands.json, fixed for a whole run.

    Docs about the format: https://clang.llvm.org/docs/JSONCompilationDatabase.html#format
    """

    name: str
    rewrite_paths: bool
    joined_command: bool
    include_output: bool


OUTPUT_MODES: dict[str, OutputMode] = {
    # Workspace-relative paths, `directory` is the workspace root.
    "arguments": OutputMode(name="arguments", rewrite_paths=False, joined_command=False, include_output=False),
    "absolute": OutputMode(name="absolute", rewrite_paths=True, joined_command=False, include_output=True),
    "command": OutputMode(name="command", rewrite_paths=True, joined_command=True, include_output=True),
}

DEFAULT_OUTPUT_MODE = "arguments"


def output_mode(name: str) -> OutputMode:
    try:
        return OUTPUT_MODES[name]
    except KeyError:
        raise ValueError(f"unknown output mode {name!r} (expected one of: {', '.join(sorted(OUTPUT_MODES))})") from None


@dataclass(frozen=True)
class NormalizedInvocation:
    source_file: str
    arguments: tuple[str, ...]
    directory: str
    output_file: str | None = None

    @property
    def command(self) -> str:
        return shlex.join(self.arguments)

    def to_json_obj(self, mode: OutputMode) -> dict[str, Any]:
        obj: dict[str, Any] = {"file": self.source_file}
        if mode.joined_command:
            obj["command"] = self.command
        else:
            obj["arguments"] = list(self.arguments)
        # Bazel gotcha: `bazel info execution_root` is not a usable working directory for tooling.
        obj["directory"] = self.directory
        if mode.include_output and self.output_file is not None:
            obj["output"] = self.output_file
        return obj


def to_compile_commands(invocations: Iterable[NormalizedInvocation], mode: OutputMode) -> list[dict[str, Any]]:
    return [inv.to_json_obj(mode) for inv in invocations]
