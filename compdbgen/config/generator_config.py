from __future__ import annotations

import json
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from compdbgen.core.errors import ConfigError
from compdbgen.output.compile_commands import DEFAULT_OUTPUT_MODE, OUTPUT_MODES, OutputMode, output_mode
from compdbgen.translate.policy import COMPILER_OVERRIDE_ENV_VARS

CONFIG_FILE_NAME = "compdbgen.json"

_STR_FIELDS = ("target", "mode", "output_path", "bazel")
_LIST_FIELDS = ("extra_flags", "compiler_env_vars")
_BOOL_FIELDS = ("create_external_link",)


@dataclass(frozen=True)
class GeneratorConfig:
    target: str = "//..."
    mode: str = DEFAULT_OUTPUT_MODE
    output_path: str = "compile_commands.json"
    bazel: str = "bazel"
    extra_flags: tuple[str, ...] = ()
    compiler_env_vars: tuple[str, ...] = COMPILER_OVERRIDE_ENV_VARS
    create_external_link: bool = True

    @staticmethod
    def default() -> "GeneratorConfig":
        return GeneratorConfig()

    @staticmethod
    def load(path: Path, base: "GeneratorConfig | None" = None) -> "GeneratorConfig":
        try:
            obj = json.loads(path.read_text(encoding="utf-8"))
        except OSError as e:
            raise ConfigError(f"unable to read config {path}: {e}") from e
        except json.JSONDecodeError as e:
            raise ConfigError(f"unable to parse config {path}: {e}") from e
        return (base or GeneratorConfig.default()).merged(obj, source=str(path))

    @staticmethod
    def discover(workspace_root: Path, explicit: Path | None = None) -> "GeneratorConfig":
        """Load `explicit`, else `<workspace>/compdbgen.json` if present, else defaults."""
        if explicit is not None:
            return GeneratorConfig.load(explicit)
        candidate = workspace_root / CONFIG_FILE_NAME
        if candidate.is_file():
            return GeneratorConfig.load(candidate)
        return GeneratorConfig.default()

    def merged(self, obj: Any, *, source: str = "<config>") -> "GeneratorConfig":
        problems = _validate(obj)
        if problems:
            raise ConfigError(f"invalid config {source}:\n" + "\n".join(problems))
        updates: dict[str, Any] = {}
        for k, v in obj.items():
            updates[k] = tuple(v) if k in _LIST_FIELDS else v
        return replace(self, **updates)

    def with_overrides(self, **overrides: Any) -> "GeneratorConfig":
        return self.merged({k: v for k, v in overrides.items() if v is not None}, source="<command line>")

    def output_mode(self) -> OutputMode:
        return output_mode(self.mode)

    def to_json_obj(self) -> dict[str, Any]:
        return {
            "target": self.target,
            "mode": self.mode,
            "output_path": self.output_path,
            "bazel": self.bazel,
            "extra_flags": list(self.extra_flags),
            "compiler_env_vars": list(self.compiler_env_vars),
            "create_external_link": self.create_external_link,
        }


def _validate(obj: Any) -> list[str]:
    if not isinstance(obj, dict):
        return [f"config must be a JSON object, got {type(obj).__name__}"]
    problems: list[str] = []
    for k, v in obj.items():
        if k in _STR_FIELDS:
            if not isinstance(v, str) or not v:
                problems.append(f"{k} must be a non-empty string")
        elif k in _LIST_FIELDS:
            if not isinstance(v, (list, tuple)) or not all(isinstance(x, str) for x in v):
                problems.append(f"{k} must be a list of strings")
        elif k in _BOOL_FIELDS:
            if not isinstance(v, bool):
                problems.append(f"{k} must be a boolean")
        else:
            problems.append(f"unknown key {k!r}")
    mode = obj.get("mode")
    if isinstance(mode, str) and mode and mode not in OUTPUT_MODES:
        problems.append(f"mode must be one of: {', '.join(sorted(OUTPUT_MODES))} (got {mode!r})")
    return problems
