from __future__ import annotations

import unittest

from compdbgen.aquery.model import AqueryOutput, Configuration, RawInvocation, Target
from compdbgen.core.errors import EmptyArgumentsError, MissingSourceFileError
from compdbgen.output.compile_commands import output_mode
from compdbgen.translate.database import DatabaseBuilder, is_internal_source
from compdbgen.translate.translator import ActionTranslator


def _raw(target_id: int, configuration_id: int, *args: str) -> RawInvocation:
    return RawInvocation(target_id=target_id, configuration_id=configuration_id, arguments=tuple(args))


_CONFIGS = (
    Configuration(id=1, mnemonic="k8-fastbuild", platform_name="k8"),
    Configuration(id=2, mnemonic="k8-opt-exec-ST-1", platform_name="k8", is_tool=True),
)


class DatabaseBuilderTests(unittest.TestCase):
    def _builder(self, mode: str = "absolute") -> DatabaseBuilder:
        return DatabaseBuilder(ActionTranslator(output_mode(mode), environ={}))

    def test_tool_configuration_actions_are_excluded(self) -> None:
        records = [
            _raw(1, 1, "gcc", "-c", "a.cc"),
            _raw(2, 2, "gcc", "-c", "tool.cc"),
            # Even malformed tool actions never reach the translator.
            _raw(3, 2),
            _raw(4, 1, "gcc", "-c", "b.cc"),
        ]
        out = self._builder().build("/ws", records, _CONFIGS)
        self.assertEqual([i.source_file for i in out], ["/ws/a.cc", "/ws/b.cc"])

    def test_internal_sources_are_skipped(self) -> None:
        records = [
            _raw(1, 1, "gcc", "-c", "external/bazel_tools/src/tools/launcher/dummy.cc"),
            _raw(2, 1, "gcc", "-c", "external/abseil/x.cc"),
        ]
        for mode in ("absolute", "arguments"):
            out = self._builder(mode).build("/ws", records, _CONFIGS)
            self.assertEqual(len(out), 1, mode)
            self.assertTrue(out[0].source_file.endswith("external/abseil/x.cc"))

    def test_first_error_aborts_batch(self) -> None:
        records = [
            _raw(1, 1, "gcc", "-c", "a.cc"),
            _raw(5, 1),
            _raw(6, 1, "gcc"),
        ]
        with self.assertRaises(EmptyArgumentsError):
            self._builder().build("/ws", records, _CONFIGS)

    def test_error_carries_target_label(self) -> None:
        aquery = AqueryOutput(
            actions=(_raw(3, 1, "gcc", "-O2"),),
            targets=(Target(id=3, label="//src:lib"),),
            configurations=_CONFIGS,
        )
        with self.assertRaises(MissingSourceFileError) as ctx:
            self._builder().build_from_aquery("/ws", aquery)
        self.assertEqual(ctx.exception.label, "//src:lib")
        self.assertIn("//src:lib", str(ctx.exception))

    def test_order_is_preserved(self) -> None:
        records = [_raw(i, 1, "gcc", "-c", f"f{i}.cc") for i in (3, 1, 2)]
        out = self._builder("arguments").build("/ws", records, _CONFIGS)
        self.assertEqual([i.source_file for i in out], ["f3.cc", "f1.cc", "f2.cc"])

    def test_unknown_configuration_is_not_a_tool(self) -> None:
        out = self._builder("arguments").build("/ws", [_raw(1, 99, "gcc", "-c", "a.cc")], _CONFIGS)
        self.assertEqual(len(out), 1)


class InternalSourceTests(unittest.TestCase):
    def test_relative_and_absolute(self) -> None:
        self.assertTrue(is_internal_source("external/bazel_tools/tools/cpp/x.cc", "/ws"))
        self.assertTrue(is_internal_source("/ws/external/bazel_tools/tools/cpp/x.cc", "/ws"))
        self.assertFalse(is_internal_source("/elsewhere/external/bazel_tools/x.cc", "/ws"))
        self.assertFalse(is_internal_source("src/external/bazel_tools/x.cc", "/ws"))


if __name__ == "__main__":
    unittest.main()
