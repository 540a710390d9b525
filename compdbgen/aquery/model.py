from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping


@dataclass(frozen=True)
class RawInvocation:
    target_id: int
    configuration_id: int
    arguments: tuple[str, ...]
    environment: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))


@dataclass(frozen=True)
class Configuration:
    id: int
    mnemonic: str = ""
    platform_name: str = ""
    is_tool: bool = False


@dataclass(frozen=True)
class Target:
    id: int
    label: str


@dataclass(frozen=True)
class AqueryOutput:
    actions: tuple[RawInvocation, ...]
    targets: tuple[Target, ...] = ()
    configurations: tuple[Configuration, ...] = ()

    @staticmethod
    def from_json_obj(obj: Any) -> "AqueryOutput":
        """
        Decode `bazel aquery --output=jsonproto` output.

        Only the fields the translator needs are read; artifacts, depsets and
        path fragments are ignored. Absent lists decode as empty.
        """
        if not isinstance(obj, dict):
            raise ValueError(f"aquery output must be a JSON object, got {type(obj).__name__}")
        return AqueryOutput(
            actions=tuple(_decode_action(a) for a in _list_of_dicts(obj, "actions")),
            targets=tuple(Target(id=int(t.get("id", 0)), label=str(t.get("label", ""))) for t in _list_of_dicts(obj, "targets")),
            configurations=tuple(_decode_configuration(c) for c in _list_of_dicts(obj, "configuration")),
        )

    def labels_by_target_id(self) -> dict[int, str]:
        return {t.id: t.label for t in self.targets}


def _list_of_dicts(obj: dict[str, Any], key: str) -> list[dict[str, Any]]:
    items = obj.get(key) or []
    if not isinstance(items, list):
        raise ValueError(f"aquery output field {key!r} must be a list")
    for i, item in enumerate(items):
        if not isinstance(item, dict):
            raise ValueError(f"aquery output {key}[{i}] must be an object")
    return items


def _decode_action(a: dict[str, Any]) -> RawInvocation:
    env: dict[str, str] = {}
    for kv in a.get("environmentVariables") or []:
        if isinstance(kv, dict) and "key" in kv:
            env[str(kv["key"])] = str(kv.get("value", ""))
    return RawInvocation(
        target_id=int(a.get("targetId", 0)),
        configuration_id=int(a.get("configurationId", 0)),
        arguments=tuple(str(x) for x in (a.get("arguments") or [])),
        environment=MappingProxyType(env),
    )


def _decode_configuration(c: dict[str, Any]) -> Configuration:
    # Older Bazel releases spell the field "mnemenic".
    mnemonic = c.get("mnemonic", c.get("mnemenic", ""))
    return Configuration(
        id=int(c.get("id", 0)),
        mnemonic=str(mnemonic or ""),
        platform_name=str(c.get("platformName", "") or ""),
        is_tool=bool(c.get("isTool", False)),
    )
