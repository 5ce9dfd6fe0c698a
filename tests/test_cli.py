"""CLI behavior tests."""

import json
import sys

import pytest

from effectport import __version__
from effectport.cli import _core_argv, main


def _run_cli(capsys, argv):
    """Run main() and capture exit code/stdout/stderr."""
    with pytest.raises(SystemExit) as exc_info:
        main(argv)
    captured = capsys.readouterr()
    return exc_info.value.code, captured.out, captured.err


@pytest.fixture(autouse=True)
def _no_git(monkeypatch, tmp_path):
    """Run every CLI test outside any checkout and without a real git."""
    monkeypatch.chdir(tmp_path)
    config = tmp_path / "no-git.json"
    config.write_text(json.dumps({"git": "effectport-no-such-git-executable"}), encoding="utf-8")
    return str(config)


def test_exit_success_core(capsys, _no_git):
    code, out, err = _run_cli(
        capsys, ["-c", _no_git, "-m", "test_helpers:make_hello_core"]
    )

    assert code == 0
    assert out == "hello\n"
    assert err == ""


def test_exit_failure_core(capsys, _no_git):
    code, out, err = _run_cli(
        capsys, ["-c", _no_git, "-m", "test_helpers:make_failing_core"]
    )

    assert code == 1
    assert out == ""
    assert err == "bad input\n"


def test_quiet_core_returns_without_exit(capsys, _no_git):
    main(["-c", _no_git, "-m", "test_helpers:make_quiet_core"])

    captured = capsys.readouterr()
    assert captured.out == ""


def test_core_args_and_version_reach_core(capsys, monkeypatch, _no_git):
    monkeypatch.setattr(sys, "argv", ["effectport"])

    code, out, _err = _run_cli(
        capsys,
        ["-c", _no_git, "-m", "test_helpers:make_argv_echo_core", ".git/COMMIT_EDITMSG", "message"],
    )

    assert code == 0
    assert out == f".git/COMMIT_EDITMSG message\n{__version__}\n"


def test_missing_core_is_an_error(capsys, _no_git):
    code, out, _err = _run_cli(capsys, ["-c", _no_git])

    assert code == 1
    assert "Error: a core is required" in out


def test_bad_core_path_is_an_error(capsys, _no_git):
    code, out, _err = _run_cli(capsys, ["-c", _no_git, "-m", "no_such_core_module:make"])

    assert code == 1
    assert out.startswith("Error: Cannot import core module 'no_such_core_module'")


def test_missing_config_file_is_an_error(capsys, tmp_path):
    code, out, _err = _run_cli(
        capsys, ["-c", str(tmp_path / "missing.json"), "-m", "test_helpers:make_hello_core"]
    )

    assert code == 1
    assert "Error: Config file not found" in out


def test_invalid_variant_choice_is_usage_error(capsys):
    code, _out, err = _run_cli(capsys, ["--variant", "websocket"])

    assert code == 2
    assert "invalid choice" in err


def test_split_core_against_unified_layout_fails(capsys, _no_git):
    code, out, _err = _run_cli(
        capsys,
        ["-c", _no_git, "-m", "test_helpers:make_hello_core", "--variant", "split"],
    )

    assert code == 1
    assert "missing required split port" in out


def test_version_option(capsys):
    code, out, _err = _run_cli(capsys, ["--version"])

    assert code == 0
    assert __version__ in out


def test_log_file_records_run(capsys, tmp_path, _no_git):
    log_path = tmp_path / "run.log"

    code, _out, _err = _run_cli(
        capsys,
        ["-c", _no_git, "-m", "test_helpers:make_hello_core", "-l", str(log_path)],
    )

    content = log_path.read_text(encoding="utf-8")
    assert code == 0
    assert "=== app_start ===" in content
    assert "=== branch_query_failed ===" in content
    assert "=== core_init ===" in content
    assert "=== effect_dispatch ===" in content
    assert "=== app_stop ===" in content


def test_core_argv_drops_separator(monkeypatch):
    monkeypatch.setattr(sys, "argv", ["/usr/local/bin/effectport"])

    assert _core_argv(["--", "a"]) == ["/usr/local/bin/effectport", "a"]
    assert _core_argv([]) == ["/usr/local/bin/effectport"]
