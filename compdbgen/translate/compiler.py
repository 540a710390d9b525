from __future__ import annotations

import posixpath
from typing import Mapping

from compdbgen.translate.policy import COMPILER_OVERRIDE_ENV_VARS, WRAPPER_SCRIPT_NAME


class CompilerResolver:
    """
    Map the recorded compiler executable to the one tooling should invoke.

    Bazel records its `cc_wrapper.sh` shim as argv[0]. When the user names the
    real compiler through CXX (or cxx), that path replaces the shim; everything
    else passes through unchanged. Results are memoized per recorded path for
    the lifetime of the resolver.
    """

    def __init__(
        self,
        *,
        wrapper_name: str = WRAPPER_SCRIPT_NAME,
        env_vars: tuple[str, ...] = COMPILER_OVERRIDE_ENV_VARS,
    ) -> None:
        self._wrapper_name = wrapper_name
        self._env_vars = tuple(env_vars)
        self._cache: dict[str, str] = {}

    def resolve(self, token: str, environment: Mapping[str, str]) -> str:
        cached = self._cache.get(token)
        if cached is not None:
            return cached
        resolved = self._resolve_uncached(token, environment)
        self._cache[token] = resolved
        return resolved

    def _resolve_uncached(self, token: str, environment: Mapping[str, str]) -> str:
        if posixpath.basename(token) != self._wrapper_name:
            return token
        for name in self._env_vars:
            value = environment.get(name)
            if value:
                return value
        return token
