"""
Tests for ordered batch edits.
"""

from sourcepin.mutation import MutationFacade, apply_batch
from sourcepin.schemas import EditRequest

PAGE = (
    "export const Page = () => (\n"
    "  <main>\n"
    '    <h1 className="title">Old title</h1>\n'
    "    <p>Body</p>\n"
    "  </main>\n"
    ");\n"
)


def read_text(path):
    with open(path, "r", encoding="utf-8", newline="") as f:
        return f.read()


class TestApplyBatch:
    def test_partial_failure(self, temp_dir):
        target = temp_dir / "Page.tsx"
        target.write_text(PAGE, encoding="utf-8")

        batch = apply_batch(temp_dir, [
            {"filePath": "Page.tsx", "line": 3, "column": 4, "kind": "style", "newValue": "big"},
            {"filePath": "Page.tsx", "line": 9, "column": 0, "kind": "content", "newValue": "lost"},
            {"filePath": "Page.tsx", "line": 4, "column": 4, "kind": "content", "newValue": "New body"},
        ])

        assert batch.summary.total == 3
        assert batch.summary.success == 2
        assert batch.summary.failed == 1
        assert [result.success for result in batch.results] == [True, False, True]

        text = read_text(target)
        assert '<h1 className="big">Old title</h1>' in text
        assert "<p>New body</p>" in text

    def test_later_edits_see_earlier_ones(self, temp_dir):
        target = temp_dir / "Page.tsx"
        target.write_text(PAGE, encoding="utf-8")
        facade = MutationFacade(temp_dir, attribute_prefix="data-sourcepin", backup=False)

        batch = facade.apply_batch([
            EditRequest(file_path="Page.tsx", line=3, column=4, kind="content", new_value="First"),
            EditRequest(file_path="Page.tsx", line=3, column=4, kind="content",
                        new_value="Second", original_value="First"),
        ])

        assert batch.summary.success == 2
        assert '<h1 className="title">Second</h1>' in read_text(target)

    def test_invalid_entries_do_not_stop_the_batch(self, temp_dir):
        target = temp_dir / "Page.tsx"
        target.write_text(PAGE, encoding="utf-8")

        batch = apply_batch(temp_dir, [
            {"filePath": "Page.tsx", "line": 3, "column": 4},
            "not a request",
            {"filePath": "Page.tsx", "line": 4, "column": 4, "type": "content", "newValue": "Typed"},
        ])

        assert batch.summary.to_wire() == {"total": 3, "success": 1, "failed": 2}
        assert batch.results[0].message.startswith("Invalid edit request")
        assert batch.results[1].file_path == ""
        assert "<p>Typed</p>" in read_text(target)

    def test_wire_format(self, temp_dir):
        (temp_dir / "Page.tsx").write_text(PAGE, encoding="utf-8")
        batch = apply_batch(temp_dir, [
            {"filePath": "Page.tsx", "line": 4, "column": 4, "kind": "content", "newValue": "x"},
        ])
        wire = batch.to_wire()
        assert set(wire) == {"results", "summary"}
        assert wire["results"][0]["filePath"] == "Page.tsx"
        assert wire["results"][0]["kind"] == "content"
        assert "diff" in wire["results"][0]

    def test_empty_batch(self, temp_dir):
        batch = apply_batch(temp_dir, [])
        assert batch.results == []
        assert batch.summary.total == 0

    def test_bad_config_fails_every_edit(self, temp_dir):
        target = temp_dir / "Page.tsx"
        target.write_text(PAGE, encoding="utf-8")
        (temp_dir / "sourcepin.toml").write_text("[annotate\n", encoding="utf-8")

        batch = apply_batch(temp_dir, [
            {"filePath": "Page.tsx", "line": 3, "column": 4, "kind": "style", "newValue": "big"},
            EditRequest(file_path="Page.tsx", line=4, column=4, kind="content", new_value="x"),
        ])

        assert batch.summary.to_wire() == {"total": 2, "success": 0, "failed": 2}
        assert all(result.message.startswith("Configuration error") for result in batch.results)
        assert [result.kind for result in batch.results] == ["style", "content"]
        assert read_text(target) == PAGE

    def test_invalid_prefix_from_environment(self, temp_dir, monkeypatch):
        target = temp_dir / "Page.tsx"
        target.write_text(PAGE, encoding="utf-8")
        monkeypatch.setenv("SOURCEPIN_ATTRIBUTE_PREFIX", "bad prefix")

        batch = apply_batch(temp_dir, [
            {"filePath": "Page.tsx", "line": 4, "column": 4, "kind": "content", "newValue": "x"},
        ])

        assert batch.summary.failed == 1
        assert "bad prefix" in batch.results[0].message
        assert read_text(target) == PAGE
