from __future__ import annotations

from typing import Mapping

from compdbgen.translate.policy import DEDUP_FLAG_PREFIXES, STD_FLAG_PINS


def pin_version(token: str, pins: Mapping[str, str] = STD_FLAG_PINS) -> str:
    """Replace a legacy `-std=` flag with the canonical one; other tokens pass through."""
    return pins.get(token, token)


class FlagDeduplicator:
    """
    Keep only the first occurrence of warning and language-standard flags.

    Bazel expands flags from several layers (toolchain, copts, command line), so
    the same `-W...` or `-std=...` routinely appears more than once. One instance
    is used per compiler action.
    """

    def __init__(self, prefixes: tuple[str, ...] = DEDUP_FLAG_PREFIXES) -> None:
        self._prefixes = tuple(prefixes)
        self._seen: set[str] = set()

    def is_subject(self, token: str) -> bool:
        return token.startswith(self._prefixes)

    def admit(self, token: str) -> bool:
        if not self.is_subject(token):
            return True
        if token in self._seen:
            return False
        self._seen.add(token)
        return True
