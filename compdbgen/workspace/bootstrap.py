from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Mapping

from compdbgen.core.errors import WorkspaceError

logger = logging.getLogger(__name__)

WORKSPACE_ENV_VAR = "BUILD_WORKSPACE_DIRECTORY"

# Traverse into output_base via bazel-out so the workspace stays position-independent.
EXTERNAL_LINK_TARGET = "bazel-out/../../../external"


def switch_to_workspace_root(environ: Mapping[str, str] | None = None, *, explicit: Path | None = None) -> Path:
    """
    chdir to the Bazel workspace root and return it.

    `bazel run` exports BUILD_WORKSPACE_DIRECTORY; `explicit` wins when given so
    the tool can also be run directly.
    """
    if explicit is not None:
        root = explicit
    else:
        env = os.environ if environ is None else environ
        value = env.get(WORKSPACE_ENV_VAR)
        if not value:
            raise WorkspaceError(
                f"{WORKSPACE_ENV_VAR} was not found in the environment. "
                "Make sure to invoke this with `bazel run` (or pass --workspace)"
            )
        root = Path(value)
    try:
        os.chdir(root)
    except OSError as e:
        raise WorkspaceError(f"unable to change working directory to workspace root {root}: {e}") from e
    return Path.cwd()


def ensure_external_link(root: Path) -> None:
    """
    Postcondition: `<root>/external` links into Bazel's output_base external tree.

    An existing link to the wrong place is replaced. A real directory or file
    named `external` is left alone and reported.
    """
    if not os.path.lexists(root / "bazel-out"):
        raise WorkspaceError("//bazel-out is missing. Build once and do not use --symlink_prefix")

    link = root / "external"
    if os.path.lexists(link):
        try:
            current = os.readlink(link)
        except OSError as e:
            raise WorkspaceError(
                "//external already exists, but it isn't a symlink. "
                "//external is reserved by Bazel; rename or delete it and rerun"
            ) from e
        if current == EXTERNAL_LINK_TARGET:
            return
        logger.warning("//external links to %s instead of %s. Relinking...", current, EXTERNAL_LINK_TARGET)
        try:
            link.unlink()
        except OSError as e:
            raise WorkspaceError(f"unable to cleanup invalid external symlink: {e}") from e

    try:
        link.symlink_to(EXTERNAL_LINK_TARGET, target_is_directory=True)
    except OSError as e:
        raise WorkspaceError(f"unable to create external symlink: {e}") from e
    logger.info(
        "Added //external workspace link. It mirrors the build sandbox layout so tooling "
        "and you can browse external dependencies."
    )
