from __future__ import annotations

import stat
from pathlib import Path


AQUERY_OUTPUT = {
    "actions": [
        {
            "targetId": 1,
            "actionKey": "k1",
            "mnemonic": "CppCompile",
            "configurationId": 1,
            "arguments": ["external/local_config_cc/cc_wrapper.sh", "-Wall", "-c", "src/a.cc", "-o", "bazel-out/a.o"],
            "environmentVariables": [{"key": "PATH", "value": "/bin:/usr/bin"}, {"key": "PWD", "value": "/proc/self/cwd"}],
        },
        {
            "targetId": 2,
            "configurationId": 2,
            "arguments": ["gcc", "-c", "tool.cc"],
        },
    ],
    "targets": [{"id": 1, "label": "//src:a"}, {"id": 2, "label": "//tools:gen"}],
    "configuration": [
        {"id": 1, "mnemonic": "k8-fastbuild", "platformName": "k8", "checksum": "abc"},
        {"id": 2, "mnemonic": "k8-opt-exec-ST-1", "platformName": "k8", "isTool": True},
    ],
}


def write_fake_bazel(bin_dir: Path, *, stdout: str = "", exit_code: int = 0) -> Path:
    """
    Create a fake `bazel` executable:
    - records its argv, one per line, to `<bin_dir>/argv.txt`
    - prints `stdout`
    - exits with `exit_code`
    """
    bin_dir.mkdir(parents=True, exist_ok=True)
    payload = bin_dir / "stdout.txt"
    payload.write_text(stdout, encoding="utf-8")
    script = f"""#!/bin/sh
printf '%s\\n' "$@" > "{bin_dir}/argv.txt"
cat "{payload}"
exit {exit_code}
"""
    path = bin_dir / "bazel"
    path.write_text(script, encoding="utf-8")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path
