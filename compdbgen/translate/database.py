from __future__ import annotations

import logging
import posixpath
from typing import Iterable, Mapping

from compdbgen.aquery.model import AqueryOutput, Configuration, RawInvocation
from compdbgen.core.errors import TranslationError
from compdbgen.output.compile_commands import NormalizedInvocation
from compdbgen.translate.policy import INTERNAL_SOURCE_PREFIX
from compdbgen.translate.translator import ActionTranslator

logger = logging.getLogger(__name__)


def tool_configuration_ids(configurations: Iterable[Configuration]) -> frozenset[int]:
    return frozenset(c.id for c in configurations if c.is_tool)


def is_internal_source(source_file: str, base_dir: str) -> bool:
    path = source_file
    if posixpath.isabs(path):
        rel = posixpath.relpath(path, base_dir)
        if rel == ".." or rel.startswith("../"):
            return False
        path = rel
    return path.startswith(INTERNAL_SOURCE_PREFIX)


class DatabaseBuilder:
    """
    Convert a whole aquery result into compile_commands.json entries.

    Tool-configuration actions are skipped (they duplicate the real build's
    compiles for exec-configuration builds) and so are Bazel's own bootstrap
    sources. The first translation error aborts the batch: there is no partial
    database.
    """

    def __init__(self, translator: ActionTranslator) -> None:
        self._translator = translator

    def build(
        self,
        base_dir: str,
        records: Iterable[RawInvocation],
        configurations: Iterable[Configuration],
        *,
        labels: Mapping[int, str] | None = None,
        working_directory: str | None = None,
    ) -> list[NormalizedInvocation]:
        tool_ids = tool_configuration_ids(configurations)
        labels = labels or {}

        out: list[NormalizedInvocation] = []
        skipped_tool = 0
        for record in records:
            if record.configuration_id in tool_ids:
                skipped_tool += 1
                continue
            try:
                inv = self._translator.translate(base_dir, record, working_directory=working_directory)
            except TranslationError as e:
                e.attach_label(labels.get(record.target_id))
                raise
            if is_internal_source(inv.source_file, base_dir):
                logger.debug("skipping Bazel internal source %s", inv.source_file)
                continue
            out.append(inv)

        if skipped_tool:
            logger.debug("skipped %d tool-configuration actions", skipped_tool)
        return out

    def build_from_aquery(self, base_dir: str, aquery: AqueryOutput, *, working_directory: str | None = None) -> list[NormalizedInvocation]:
        return self.build(
            base_dir,
            aquery.actions,
            aquery.configurations,
            labels=aquery.labels_by_target_id(),
            working_directory=working_directory,
        )
