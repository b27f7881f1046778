from pathlib import Path

import pytest

from barforge.script_execution import (
    ScriptNotFoundError,
    ScriptTimeoutError,
    run_script_unsandboxed,
)


@pytest.fixture
def make_script(tmp_path):
    def _make(content: str) -> Path:
        script = tmp_path / "test.sh"
        script.write_text(content)
        script.chmod(0o755)
        return script

    return _make


def test_script_not_found_error():
    with pytest.raises(ScriptNotFoundError) as info:
        run_script_unsandboxed(Path("/nonexistent/script.sh"), Path("/tmp"), 5)
    assert info.value.path == Path("/nonexistent/script.sh")
    assert "Script not found" in str(info.value)


def test_successful_script_execution(make_script, tmp_path):
    script = make_script("#!/bin/bash\necho 'hello'")
    result = run_script_unsandboxed(script, tmp_path, 5)
    assert result.success is True
    assert result.exit_code == 0
    assert "hello" in result.stdout


def test_script_with_nonzero_exit(make_script, tmp_path):
    script = make_script("#!/bin/bash\nexit 42")
    result = run_script_unsandboxed(script, tmp_path, 5)
    assert result.success is False
    assert result.exit_code == 42


def test_script_timeout(make_script, tmp_path):
    script = make_script("#!/bin/bash\nsleep 10")
    with pytest.raises(ScriptTimeoutError) as info:
        run_script_unsandboxed(script, tmp_path, 0.5)
    assert info.value.seconds == 0


def test_script_captures_stderr(make_script, tmp_path):
    script = make_script("#!/bin/bash\necho 'error' >&2")
    result = run_script_unsandboxed(script, tmp_path, 5)
    assert "error" in result.stderr


def test_script_sees_module_dir(make_script, tmp_path):
    script = make_script('#!/bin/bash\necho "$MODULE_DIR"\npwd')
    result = run_script_unsandboxed(script, tmp_path, 5)
    lines = result.stdout.splitlines()
    assert lines[0] == str(tmp_path)
    assert Path(lines[1]).resolve() == tmp_path.resolve()