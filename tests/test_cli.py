"""Tests for the yrm CLI."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from yrm import parse_file
from yrm.cli import main

DOCUMENT = 'name: "svc"\nport: 8080\ntls:\n\tenabled: true\n\tratio: 0.5\n'
EXPECTED = {"name": "svc", "port": 8080, "tls": {"enabled": True, "ratio": 0.5}}


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def good_file(tmp_path):
    path = tmp_path / "service.yrm"
    path.write_text(DOCUMENT)
    return path


@pytest.fixture
def bad_file(tmp_path):
    path = tmp_path / "broken.yrm"
    path.write_text("a: 1\na: 2\n")
    return path


class TestCLI:
    def test_help(self, runner):
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "yrm" in result.output
        for command in ("json", "check", "tokens", "lsp"):
            assert command in result.output

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output


class TestJsonCommand:
    def test_prints_json(self, runner, good_file):
        result = runner.invoke(main, ["json", str(good_file)])
        assert result.exit_code == 0
        assert json.loads(result.output) == EXPECTED
        assert result.output == json.dumps(EXPECTED, indent=4) + "\n"

    def test_indent_and_sort(self, runner, good_file):
        result = runner.invoke(main, ["json", str(good_file), "--indent", "2", "--sort-keys"])
        assert result.exit_code == 0
        assert result.output == json.dumps(EXPECTED, indent=2, sort_keys=True) + "\n"

    def test_uses_config_file(self, runner, good_file):
        (good_file.parent / "yrm.toml").write_text("[output]\nindent = 1\n")
        result = runner.invoke(main, ["json", str(good_file)])
        assert result.exit_code == 0
        assert result.output == json.dumps(EXPECTED, indent=1) + "\n"

    def test_error(self, runner, bad_file):
        result = runner.invoke(main, ["--no-color", "json", str(bad_file)])
        assert result.exit_code == 1
        assert "error[E203]: duplicate key 'a'" in result.output
        assert "     2 | a: 2" in result.output

    def test_matches_parse_file(self, runner, tmp_path):
        path = tmp_path / "deep.yrm"
        path.write_text("".join("\t" * i + "k:\n" for i in range(1200)) + "\t" * 1200 + "x: 1\n")
        result = runner.invoke(main, ["json", "--indent", "0", str(path)])
        assert result.exit_code == 0
        assert json.loads(result.output) == parse_file(path)

    def test_conversion_error(self, runner, tmp_path):
        path = tmp_path / "big.yrm"
        path.write_text("n: 9223372036854775808\n")
        result = runner.invoke(main, ["--no-color", "json", str(path)])
        assert result.exit_code == 1
        assert "error[E301]" in result.output
        assert "     1 | n: 9223372036854775808" in result.output

    def test_missing_file(self, runner, tmp_path):
        result = runner.invoke(main, ["json", str(tmp_path / "nope.yrm")])
        assert result.exit_code != 0

    def test_verbose(self, runner, good_file):
        result = runner.invoke(main, ["--verbose", "json", str(good_file)])
        assert result.exit_code == 0


class TestCheckCommand:
    def test_ok(self, runner, good_file):
        result = runner.invoke(main, ["check", str(good_file)])
        assert result.exit_code == 0
        assert f"ok {good_file}" in result.output

    def test_reports_each_failure(self, runner, good_file, bad_file):
        result = runner.invoke(main, ["--no-color", "check", str(good_file), str(bad_file)])
        assert result.exit_code == 1
        assert f"ok {good_file}" in result.output
        assert "E203" in result.output
        assert "1 of 2 file(s) failed" in result.output

    def test_requires_files(self, runner):
        result = runner.invoke(main, ["check"])
        assert result.exit_code != 0


class TestTokensCommand:
    def test_dump(self, runner, tmp_path):
        path = tmp_path / "a.yrm"
        path.write_text("a: 1\n")
        result = runner.invoke(main, ["tokens", str(path)])
        assert result.exit_code == 0
        assert result.output.splitlines() == [
            "1:1\tIDENTIFIER 'a'",
            "1:2\tCOLON_SIGN",
            "1:4\tINT '1'",
            "1:5\tNEWLINE",
            "2:1\tEOF",
        ]

    def test_dump_stops_at_illegal_token(self, runner, tmp_path):
        path = tmp_path / "a.yrm"
        path.write_text('a: "open\nb: 2\n')
        result = runner.invoke(main, ["--no-color", "tokens", str(path)])
        assert result.exit_code == 1
        assert "1:4\tILLEGAL" in result.output
        assert "error[E103]: unterminated quoted string" in result.output
        assert "IDENTIFIER 'b'" not in result.output
