"""Tests for the click command-line interface."""

import json
import os

import pytest
from click.testing import CliRunner

from code_clarity.cli import cli


@pytest.fixture
def project(tmp_path):
    root = tmp_path / "proj"
    (root / "pkg").mkdir(parents=True)
    (root / "pkg" / "a.py").write_text("from . import b\n")
    (root / "pkg" / "b.py").write_text("from . import a\n")
    (root / "pkg" / "c.py").write_text("")
    return os.path.realpath(str(root))


@pytest.fixture
def runner():
    return CliRunner()


def test_version(runner):
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "0.1.0" in result.output


def test_show_dot(runner, project):
    result = runner.invoke(cli, ["show", "-r", project, "-i", "pkg"])
    assert result.exit_code == 0, result.output
    assert "digraph dependencies {" in result.output
    assert "// C1: a.py -> b.py -> a.py" in result.output


def test_show_json(runner, project):
    result = runner.invoke(cli, ["show", "-r", project, "-i", "pkg", "--format", "JSON"])
    assert result.exit_code == 0, result.output
    doc = json.loads(result.output)
    assert len(doc["nodes"]) == 3
    assert doc["cycles"] == [{"path": [os.path.join(project, "pkg", "a.py"), os.path.join(project, "pkg", "b.py")]}]


def test_show_comma_separated_inputs(runner, project):
    result = runner.invoke(cli, ["show", "-r", project, "-i", "pkg/a.py,pkg/c.py", "-f", "json"])
    assert result.exit_code == 0, result.output
    assert len(json.loads(result.output)["nodes"]) == 2


def test_show_mermaid_url(runner, project):
    result = runner.invoke(cli, ["show", "-r", project, "-i", "pkg", "-f", "mermaid", "--url"])
    assert result.exit_code == 0, result.output
    assert result.output.strip().startswith("https://mermaid.live/edit#base64:")


def test_show_json_url_falls_back_to_output(runner, project):
    result = runner.invoke(cli, ["show", "-r", project, "-i", "pkg", "-f", "json", "--url"])
    assert result.exit_code == 0, result.output
    assert "URL generation is not supported for json" in result.output
    assert '"nodes"' in result.output


@pytest.mark.parametrize("args,message", [
    (["-i", "pkg", "-w", "pkg/a.py,pkg/b.py"], "--between cannot be used with --input"),
    (["-p", "pkg/a.py", "-w", "pkg/a.py,pkg/b.py"], "--file cannot be used with --between"),
    (["-p", "pkg/a.py", "-i", "pkg"], "--file cannot be used with --input"),
])
def test_show_conflicting_options(runner, project, args, message):
    result = runner.invoke(cli, ["show", "-r", project, *args])
    assert result.exit_code == 2
    assert message in result.output


def test_show_level_must_be_positive(runner, project):
    result = runner.invoke(cli, ["show", "-r", project, "-p", "pkg/a.py", "-l", "0"])
    assert result.exit_code == 2


def test_show_bad_extension(runner, project):
    result = runner.invoke(cli, ["show", "-r", project, "-i", "pkg", "--include-ext", "py,,js"])
    assert result.exit_code == 2
    assert "empty extensions" in result.output


def test_show_reports_pipeline_errors(runner, project):
    result = runner.invoke(cli, ["show", "-r", project, "-i", "missing"])
    assert result.exit_code == 1
    assert "Error: failed to access" in result.output


def test_show_file_level(runner, project):
    result = runner.invoke(cli, ["show", "-r", project, "-p", "pkg/c.py", "-f", "json"])
    assert result.exit_code == 0, result.output
    assert [n["name"] for n in json.loads(result.output)["nodes"]] == ["c.py"]


def test_languages(runner):
    result = runner.invoke(cli, ["languages"])
    assert result.exit_code == 0
    assert "Supported languages (13)" in result.output
    assert "Python" in result.output
    assert ".dart" in result.output
