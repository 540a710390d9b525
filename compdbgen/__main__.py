from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from compdbgen.aquery.query import load_aquery_output
from compdbgen.config.generator_config import GeneratorConfig
from compdbgen.core.errors import CompdbError
from compdbgen.generator.generator import Generator
from compdbgen.output.compile_commands import OUTPUT_MODES
from compdbgen.workspace.bootstrap import ensure_external_link, switch_to_workspace_root


def _add_common(p: argparse.ArgumentParser) -> None:
    p.add_argument("--workspace", default=None, help="Workspace root (default: $BUILD_WORKSPACE_DIRECTORY)")
    p.add_argument("--config", default=None, help="Config JSON (default: <workspace>/compdbgen.json if present)")
    p.add_argument("--mode", choices=sorted(OUTPUT_MODES), default=None, help="Output shape (default: arguments)")
    p.add_argument("--output", default=None, help="Output path, relative to the workspace root (default: compile_commands.json)")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    p.add_argument("--json", action="store_true", help="Emit a JSON summary to stdout")


def _parse_args(argv: list[str]) -> tuple[argparse.Namespace, list[str]]:
    # Everything after `--` is handed to `bazel aquery` untouched.
    extra: list[str] = []
    if "--" in argv:
        i = argv.index("--")
        argv, extra = argv[:i], argv[i + 1 :]

    parser = argparse.ArgumentParser(prog="compdbgen")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_gen = sub.add_parser("generate", help="Run `bazel aquery` and write compile_commands.json")
    _add_common(p_gen)
    p_gen.add_argument("--target", default=None, help="Target pattern (default: //...)")
    p_gen.add_argument("--bazel", default=None, help="Bazel executable (default: bazel)")
    p_gen.add_argument(
        "--external-link",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Maintain the //external symlink into Bazel's output base (default: on)",
    )

    p_tr = sub.add_parser("translate", help="Convert a saved `aquery --output=jsonproto` dump")
    p_tr.add_argument("aquery_json", help="Path to the aquery jsonproto output")
    _add_common(p_tr)

    return parser.parse_args(argv), extra


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        stream=sys.stderr,
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(message)s",
    )


def main(argv: list[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    args, extra = _parse_args(argv)
    _configure_logging(bool(args.verbose))

    try:
        return _run(args, extra)
    except CompdbError as e:
        print(f"unable to generate compilation database: {e}", file=sys.stderr)
        return 1


def _run(args: argparse.Namespace, extra: list[str]) -> int:
    explicit_root = Path(args.workspace).resolve() if args.workspace else None
    # Resolve user paths before chdir into the workspace.
    config_path = Path(args.config).resolve() if args.config else None

    if args.cmd == "generate":
        root = switch_to_workspace_root(explicit=explicit_root)
    else:
        root = explicit_root or Path.cwd().resolve()

    cfg = GeneratorConfig.discover(root, config_path)
    cfg = cfg.with_overrides(
        mode=args.mode,
        output_path=args.output,
        target=getattr(args, "target", None),
        bazel=getattr(args, "bazel", None),
        create_external_link=getattr(args, "external_link", None),
        extra_flags=[*cfg.extra_flags, *extra] if extra else None,
    )

    generator = Generator(workspace_root=root, config=cfg)
    if args.cmd == "generate":
        if cfg.create_external_link:
            ensure_external_link(root)
        result = generator.run()
    elif args.cmd == "translate":
        result = generator.run(load_aquery_output(Path(args.aquery_json).resolve()))
    else:
        raise SystemExit(f"Unknown cmd: {args.cmd}")

    if args.json:
        print(json.dumps({"ok": True, "output_path": str(result.output_path), "entries": result.entries}))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
