"""Unit tests for the depwalk click commands, backed by an in-memory source."""

from __future__ import annotations

from click.testing import CliRunner

from depwalk.cli import cli
from depwalk.models.config import DepwalkConfig
from depwalk.source import InMemorySource

_LAYOUT = {
    "nano": ["ncurses", "glibc", "file"],
    "ncurses": ["glibc"],
    "file": ["zlib", "glibc"],
    "zlib": ["glibc"],
    "glibc": [],
}


def _invoke(args: list[str], layout: dict[str, list[str]] | None = None):
    runner = CliRunner()
    obj = {"config": DepwalkConfig(), "source": InMemorySource(layout if layout is not None else _LAYOUT)}
    return runner.invoke(cli, ["--log-level", "error", *args], obj=obj)


class TestDeps:
    def test_prints_sorted_edges_and_leaves(self) -> None:
        result = _invoke(["deps", "nano"])
        assert result.exit_code == 0, result.output
        assert result.stdout.splitlines() == [
            "file -> glibc",
            "file -> zlib",
            "nano -> file",
            "nano -> glibc",
            "nano -> ncurses",
            "ncurses -> glibc",
            "zlib -> glibc",
            "glibc",
        ]

    def test_missing_dependency_marked_and_exits_nonzero(self) -> None:
        result = _invoke(["deps", "nano"], layout={"nano": ["ghost"]})
        assert result.exit_code == 1
        assert "nano -> ghost (missing)" in result.stdout
        assert "warning: Package ghost does not exist" in result.stderr

    def test_allow_partial_exits_zero(self) -> None:
        runner = CliRunner()
        obj = {"config": DepwalkConfig(), "source": InMemorySource({"nano": ["ghost"]})}
        result = runner.invoke(cli, ["--log-level", "error", "--allow-partial", "deps", "nano"], obj=obj)
        assert result.exit_code == 0
        assert "nano -> ghost (missing)" in result.stdout

    def test_unknown_root_is_an_error(self) -> None:
        result = _invoke(["deps", "nosuchpkg"])
        assert result.exit_code == 1
        assert "Package nosuchpkg does not exist" in result.stderr


class TestOrder:
    def test_install_order(self) -> None:
        result = _invoke(["order", "nano"])
        assert result.exit_code == 0, result.output
        assert result.stdout.splitlines() == ["glibc", "ncurses", "zlib", "file", "nano"]

    def test_cycle_is_an_error(self) -> None:
        result = _invoke(["order", "a"], layout={"a": ["b"], "b": ["a"]})
        assert result.exit_code == 1
        assert "Dependency cycle detected" in result.stderr


class TestCycles:
    def test_reports_cycles(self) -> None:
        result = _invoke(["cycles", "a"], layout={"a": ["b"], "b": ["c"], "c": ["b"]})
        assert result.exit_code == 0
        assert result.stdout.splitlines() == ["b c"]

    def test_no_cycles(self) -> None:
        result = _invoke(["cycles", "nano"])
        assert result.exit_code == 0
        assert result.stdout == ""
        assert "no cycles found" in result.stderr


class TestRdeps:
    def test_reverse_dependencies_of_glibc(self) -> None:
        result = _invoke(["rdeps", "nano", "glibc"])
        assert result.exit_code == 0, result.output
        assert result.stdout.splitlines() == ["file", "nano", "ncurses", "zlib"]

    def test_direct_excludes_indirect(self) -> None:
        result = _invoke(["rdeps", "nano", "zlib", "--direct"])
        assert result.stdout.splitlines() == ["file"]
        result = _invoke(["rdeps", "nano", "zlib"])
        assert result.stdout.splitlines() == ["file", "nano"]


class TestConfiguration:
    def test_invalid_environment_is_a_one_line_error(self) -> None:
        runner = CliRunner()
        result = runner.invoke(
            cli,
            ["deps", "nano"],
            obj={"source": InMemorySource(_LAYOUT)},
            env={"DEPWALK_MAX_CONCURRENCY": "many"},
        )
        assert result.exit_code == 1
        assert "Error: invalid configuration" in result.stderr
        assert "Traceback" not in result.output
        assert not isinstance(result.exception, ValueError)

    def test_config_loaded_from_environment(self) -> None:
        runner = CliRunner()
        result = runner.invoke(
            cli,
            ["deps", "nano"],
            obj={"source": InMemorySource(_LAYOUT)},
            env={"DEPWALK_MAX_CONCURRENCY": "2", "DEPWALK_LOG_LEVEL": "error"},
        )
        assert result.exit_code == 0, result.output
        assert "nano -> ncurses" in result.stdout


def test_version() -> None:
    result = CliRunner().invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "depwalk" in result.output
