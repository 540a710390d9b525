from __future__ import annotations

import posixpath

from compdbgen.translate.policy import CURRENT_DIR, PATH_PREFIX_FLAGS, PATH_VALUE_FLAGS


def anchor(base_dir: str, path: str) -> str:
    """Join `path` onto `base_dir` and clean it. Absolute paths stay as they are."""
    return posixpath.normpath(posixpath.join(base_dir, path))


class PathResolver:
    """
    Rewrite workspace-relative paths carried by compiler flags into absolute ones.

    Two token shapes are handled:
    - prefix-owned flags, where the path is glued to the flag (`-Iinc`);
    - value-position flags, where the path is the following token (`-isystem inc`).

    No filesystem access happens here. Callers must apply `rewrite` exactly once
    per token, left to right, passing the original previous token.
    """

    def __init__(
        self,
        *,
        prefix_flags: tuple[str, ...] = PATH_PREFIX_FLAGS,
        value_flags: frozenset[str] = PATH_VALUE_FLAGS,
    ) -> None:
        self._prefix_flags = tuple(prefix_flags)
        self._value_flags = frozenset(value_flags)

    def takes_path_value(self, flag: str | None) -> bool:
        return flag is not None and flag in self._value_flags

    def rewrite(self, base_dir: str, token: str, prev: str | None = None) -> str:
        if self.takes_path_value(prev):
            if token == CURRENT_DIR:
                return token
            return anchor(base_dir, token)
        return self.rewrite_prefixed(base_dir, token)

    def rewrite_prefixed(self, base_dir: str, token: str) -> str:
        for prefix in self._prefix_flags:
            if not token.startswith(prefix):
                continue
            value = token[len(prefix) :]
            if not value:
                # Bare flag; its path (if any) is the next token.
                continue
            if value == CURRENT_DIR:
                return token
            return prefix + anchor(base_dir, value)
        return token
