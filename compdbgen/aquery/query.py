from __future__ import annotations

import json
import logging
import shlex
import subprocess
from pathlib import Path
from typing import Any

from compdbgen.aquery.model import AqueryOutput
from compdbgen.core.errors import QueryError

logger = logging.getLogger(__name__)

ALL_TARGETS = "//..."

# Aquery docs: https://bazel.build/query/aquery
# Output proto: https://github.com/bazelbuild/bazel/blob/master/src/main/protobuf/analysis_v2.proto
AQUERY_FLAGS: tuple[str, ...] = (
    # jsonproto rather than proto: https://github.com/bazelbuild/bazel/issues/13404
    "--output=jsonproto",
    # Artifacts are large and unused.
    "--include_artifacts=false",
    "--ui_event_filters=-info",
    "--noshow_progress",
    # Param files hide compile actions until they have been generated.
    "--features=-compiler_param_file",
    "--host_features=-compiler_param_file",
    # layering_check depends on generated module maps.
    "--features=-layering_check",
    "--host_features=-layering_check",
    # parse_headers yields compile actions with no source file.
    "--features=-parse_headers",
    "--host_features=-parse_headers",
)


def query_scope(target: str) -> str:
    if target == ALL_TARGETS:
        return f"mnemonic('CppCompile', {ALL_TARGETS})"
    return f"mnemonic('CppCompile', deps({target}))"


def build_aquery_command(*, bazel: str, target: str, extra_flags: list[str] | tuple[str, ...] = ()) -> list[str]:
    own_flag = f"--target={target}"
    cmd = [bazel, "aquery", query_scope(target), *AQUERY_FLAGS]
    cmd.extend(f for f in extra_flags if f != own_flag)
    return cmd


def decode_aquery_output(data: bytes | str) -> AqueryOutput:
    try:
        obj: Any = json.loads(data)
        return AqueryOutput.from_json_obj(obj)
    except (json.JSONDecodeError, UnicodeDecodeError, ValueError, TypeError) as e:
        raise QueryError(f"unable to parse `bazel aquery` output: {e}") from e


def load_aquery_output(path: Path) -> AqueryOutput:
    try:
        data = path.read_bytes()
    except OSError as e:
        raise QueryError(f"unable to read aquery output {path}: {e}") from e
    return decode_aquery_output(data)


def run_aquery(
    *,
    bazel: str,
    target: str,
    extra_flags: list[str] | tuple[str, ...] = (),
    cwd: Path | None = None,
) -> AqueryOutput:
    """
    Run `bazel aquery` for the C++ compile actions of `target` and decode the result.

    Bazel's stderr is passed through to ours. An empty action list is treated as
    a failure, since it almost always means BUILD file errors.
    """
    cmd = build_aquery_command(bazel=bazel, target=target, extra_flags=extra_flags)
    logger.info("query command: %s", shlex.join(cmd))
    try:
        proc = subprocess.run(
            cmd,
            cwd=str(cwd) if cwd is not None else None,
            stdout=subprocess.PIPE,
            stderr=None,
            check=False,
        )
    except OSError as e:
        raise QueryError(f"unable to run `bazel aquery`: {e}") from e
    if proc.returncode != 0:
        raise QueryError(f"unable to run `bazel aquery`: exit status {proc.returncode}")

    output = decode_aquery_output(proc.stdout or b"")
    if not output.actions:
        raise QueryError("unable to find any actions from `bazel aquery`, likely there are BUILD file errors")
    return output
