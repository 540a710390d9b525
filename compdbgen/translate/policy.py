from __future__ import annotations

from types import MappingProxyType

# Recorded in place of the real compiler by the cc toolchain.
WRAPPER_SCRIPT_NAME = "cc_wrapper.sh"

# Checked in order; the first non-empty value names the real compiler.
COMPILER_OVERRIDE_ENV_VARS: tuple[str, ...] = ("CXX", "cxx")

# Sandbox path remapping; never part of a normalized command.
DEBUG_PREFIX_MAP_FLAG = "-fdebug-prefix-map"

SOURCE_FLAG = "-c"
OUTPUT_FLAG = "-o"

# Flags that carry a path glued to the flag itself, e.g. `-Iinc`.
PATH_PREFIX_FLAGS: tuple[str, ...] = ("-I", "-frandom-seed=")

# Flags whose next token is a path, e.g. `-isystem external/foo`.
PATH_VALUE_FLAGS: frozenset[str] = frozenset({"-I", "-isystem", "-iquote", "-MF"})

# "." means the working directory on purpose and is never anchored.
CURRENT_DIR = "."

# Only these categories are collapsed to their first occurrence.
DEDUP_FLAG_PREFIXES: tuple[str, ...] = ("-W", "-std=")

CANONICAL_STD_FLAG = "-std=c++23"

STD_FLAG_PINS = MappingProxyType(
    {
        "-std=c++11": CANONICAL_STD_FLAG,
        "-std=c++14": CANONICAL_STD_FLAG,
        "-std=c++17": CANONICAL_STD_FLAG,
    }
)

# Bazel's own bootstrap sources (e.g. the launcher dummy.cc) leak into aquery.
INTERNAL_SOURCE_PREFIX = "external/bazel_tools/"
