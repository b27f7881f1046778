"""Running module install scripts with a time limit."""

from __future__ import annotations

import os
import signal
import subprocess
from dataclasses import dataclass
from pathlib import Path

SCRIPT_TIMEOUT_SECS = 60


class ScriptError(Exception):
    """Base class for script execution failures."""


class ScriptNotFoundError(ScriptError):
    def __init__(self, path: Path) -> None:
        super().__init__(f"Script not found: {path}")
        self.path = path


class ScriptTimeoutError(ScriptError):
    def __init__(self, seconds: float) -> None:
        whole = int(seconds)
        super().__init__(f"Script timed out after {whole} seconds")
        self.seconds = whole


class ScriptSpawnError(ScriptError):
    def __init__(self, detail: str) -> None:
        super().__init__(f"Failed to spawn sandbox process: {detail}")
        self.detail = detail


@dataclass(frozen=True)
class ScriptResult:
    success: bool
    exit_code: int | None
    stdout: str
    stderr: str


def _kill_process_group(process: subprocess.Popen[bytes]) -> None:
    try:
        os.killpg(process.pid, signal.SIGKILL)
    except (ProcessLookupError, PermissionError):
        process.kill()


def _wait_with_timeout(process: subprocess.Popen[bytes], timeout: float) -> ScriptResult:
    try:
        stdout, stderr = process.communicate(timeout=timeout)
    except subprocess.TimeoutExpired:
        _kill_process_group(process)
        for stream in (process.stdout, process.stderr):
            if stream is not None:
                stream.close()
        process.wait()
        raise ScriptTimeoutError(timeout) from None

    code = process.returncode
    return ScriptResult(
        success=code == 0,
        exit_code=code if code >= 0 else None,
        stdout=stdout.decode("utf-8", errors="replace"),
        stderr=stderr.decode("utf-8", errors="replace"),
    )


def run_script_unsandboxed(
    script: str | os.PathLike[str],
    module_dir: str | os.PathLike[str],
    timeout: float = SCRIPT_TIMEOUT_SECS,
) -> ScriptResult:
    """Run script with bash inside module_dir, killing it after timeout seconds."""
    script_path = Path(script)
    if not script_path.exists():
        raise ScriptNotFoundError(script_path)

    module_path = Path(module_dir)
    env = {**os.environ, "MODULE_DIR": os.fspath(module_path)}
    try:
        process = subprocess.Popen(
            ["bash", os.fspath(script_path)],
            cwd=module_path,
            env=env,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            start_new_session=True,
        )
    except OSError as exc:
        raise ScriptSpawnError(str(exc)) from exc

    return _wait_with_timeout(process, timeout)