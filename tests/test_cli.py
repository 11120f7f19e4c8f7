"""
Tests for the typer CLI in machine (JSON) and human mode.
"""

import json

import pytest
from typer.testing import CliRunner

from sourcepin.cli.config import CLIConfig
from sourcepin.main import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def machine_mode(monkeypatch, temp_dir):
    monkeypatch.setenv("HOME", str(temp_dir))
    CLIConfig.reset()
    yield
    CLIConfig.reset()


def read_text(path):
    with open(path, "r", encoding="utf-8", newline="") as f:
        return f.read()


class TestAnnotateCommand:
    def test_prints_annotated_source(self, tsx_project):
        path = tsx_project / "src" / "App.tsx"
        result = runner.invoke(app, ["annotate", str(path)])
        assert result.exit_code == 0
        assert 'data-sourcepin-position="7:6"' in result.stdout
        assert "data-sourcepin" not in path.read_text(encoding="utf-8")

    def test_write_and_json(self, tsx_project):
        path = tsx_project / "src" / "Card.tsx"
        result = runner.invoke(app, ["annotate", str(path), "--write", "--json", "--prefix", "data-pin"])
        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["status"] == "ok"
        assert payload["written"] is True
        assert "code" not in payload
        assert 'data-pin-element-id=' in path.read_text(encoding="utf-8")

    def test_parse_error(self, temp_dir):
        path = temp_dir / "Broken.tsx"
        path.write_text("export const = <div>\n")
        result = runner.invoke(app, ["annotate", str(path), "--json"])
        assert result.exit_code == 1
        payload = json.loads(result.stdout)
        assert payload["status"] == "error"
        assert payload["errors"]

    def test_bad_prefix(self, tsx_project):
        path = tsx_project / "src" / "App.tsx"
        result = runner.invoke(app, ["annotate", str(path), "--prefix", "1bad", "--json"])
        assert result.exit_code == 2
        assert json.loads(result.stdout)["code"] == "CONFIG_ERROR"


class TestLocateCommand:
    def test_locate(self, tsx_project):
        path = tsx_project / "src" / "App.tsx"
        result = runner.invoke(app, ["locate", str(path), "--line", "6", "--column", "6"])
        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["tagName"] == "h1"
        assert payload["componentName"] == "App"
        assert payload["isStaticText"] is True
        assert payload["openTag"] == '<h1 className="title">'

    def test_not_found(self, tsx_project):
        path = tsx_project / "src" / "App.tsx"
        result = runner.invoke(app, ["locate", str(path), "--line", "6", "--column", "0"])
        assert result.exit_code == 1
        assert json.loads(result.stdout)["code"] == "ELEMENT_NOT_FOUND"

    def test_human_mode(self, tsx_project):
        path = tsx_project / "src" / "App.tsx"
        result = runner.invoke(app, ["--human", "locate", str(path), "-l", "7", "-c", "6"])
        assert result.exit_code == 0
        assert "Element id" in result.stdout


class TestEditCommand:
    def test_edit_style(self, tsx_project):
        result = runner.invoke(app, [
            "edit", "src/App.tsx",
            "--line", "6", "--column", "6",
            "--kind", "style", "--value", "heading",
            "--root", str(tsx_project),
        ])
        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["success"] is True
        assert payload["filePath"] == "src/App.tsx"
        assert '<h1 className="heading">Welcome</h1>' in read_text(tsx_project / "src" / "App.tsx")

    def test_edit_attribute_with_backup(self, tsx_project):
        result = runner.invoke(app, [
            "edit", "src/App.tsx",
            "-l", "9", "-c", "6",
            "-k", "attribute", "-a", "type", "-v", "submit",
            "--root", str(tsx_project), "--backup",
        ])
        assert result.exit_code == 0, result.stdout
        assert '<button type="submit" onClick' in read_text(tsx_project / "src" / "App.tsx")
        assert list((tsx_project / ".sourcepin" / "backups").iterdir())

    def test_edit_failure(self, tsx_project):
        before = read_text(tsx_project / "src" / "App.tsx")
        result = runner.invoke(app, [
            "edit", "src/App.tsx", "-l", "8", "-c", "6",
            "-k", "content", "-v", "x", "--root", str(tsx_project),
        ])
        assert result.exit_code == 1
        assert json.loads(result.stdout)["success"] is False
        assert read_text(tsx_project / "src" / "App.tsx") == before

    def test_invalid_kind(self, tsx_project):
        result = runner.invoke(app, [
            "edit", "src/App.tsx", "-l", "6", "-c", "6",
            "-k", "colour", "-v", "x", "--root", str(tsx_project),
        ])
        assert result.exit_code == 1
        assert "Invalid edit request" in json.loads(result.stdout)["message"]


class TestBatchCommand:
    def test_batch(self, tsx_project):
        requests = tsx_project / "edits.json"
        requests.write_text(json.dumps({"updates": [
            {"filePath": "src/App.tsx", "line": 7, "column": 6, "kind": "content", "newValue": "Edited"},
            {"filePath": "src/App.tsx", "line": 1, "column": 0, "kind": "content", "newValue": "nope"},
        ]}))
        result = runner.invoke(app, ["batch", str(requests), "--root", str(tsx_project)])
        assert result.exit_code == 1
        payload = json.loads(result.stdout)
        assert payload["summary"] == {"total": 2, "success": 1, "failed": 1}
        assert "<p>Edited</p>" in read_text(tsx_project / "src" / "App.tsx")

    def test_bad_payload(self, tsx_project):
        requests = tsx_project / "edits.json"
        requests.write_text('{"edits": 1}')
        result = runner.invoke(app, ["batch", str(requests), "--root", str(tsx_project)])
        assert result.exit_code == 2
        assert json.loads(result.stdout)["code"] == "INVALID_REQUESTS"


class TestInspectCommand:
    def test_inspect(self, tsx_project):
        result = runner.invoke(app, ["inspect", "src/App.tsx:7:6_p", "--root", str(tsx_project), "--radius", "0"])
        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["targetLine"] == "      <p>Edit me</p>"
        assert payload["contextLines"] == ["      <p>Edit me</p>"]

    def test_unknown_id(self, tsx_project):
        result = runner.invoke(app, ["inspect", "garbage", "--root", str(tsx_project)])
        assert result.exit_code == 1


def test_version():
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert result.stdout.startswith("sourcepin v")
