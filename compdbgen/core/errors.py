from __future__ import annotations


class CompdbError(RuntimeError):
    pass


class TranslationError(CompdbError):
    """
    A single compiler action could not be normalized.

    Carries the aquery targetId (and the target label once the database builder
    knows it) so the offending build action can be found.
    """

    def __init__(self, reason: str, *, target_id: int, label: str | None = None) -> None:
        self.reason = reason
        self.target_id = target_id
        self.label = label
        super().__init__(self._format())

    def _format(self) -> str:
        where = f"targetId {self.target_id}"
        if self.label:
            where += f" ({self.label})"
        return f"{self.reason} for {where}"

    def attach_label(self, label: str | None) -> None:
        if not label or self.label:
            return
        self.label = label
        self.args = (self._format(),)


class EmptyArgumentsError(TranslationError):
    def __init__(self, *, target_id: int, label: str | None = None) -> None:
        super().__init__("empty arguments for compiler action", target_id=target_id, label=label)


class MissingSourceFileError(TranslationError):
    def __init__(self, *, target_id: int, label: str | None = None) -> None:
        super().__init__("unable to find source file (no `-c <file>` pair)", target_id=target_id, label=label)


class QueryError(CompdbError):
    pass


class WorkspaceError(CompdbError):
    pass


class ConfigError(CompdbError, ValueError):
    pass
