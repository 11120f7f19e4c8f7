"""Tests for the sourcepin MCP tools."""
import pytest

from .conftest import unwrap_result


def read_text(path):
    with open(path, "r", encoding="utf-8", newline="") as f:
        return f.read()


class TestToolRegistration:
    @pytest.mark.asyncio
    async def test_tools_listed(self, mcp_client):
        tools = await mcp_client.list_tools()
        names = {tool.name for tool in tools}
        assert {"annotate_source", "apply_edit", "apply_batch", "locate_element", "element_source"} <= names


class TestAnnotateSourceTool:
    @pytest.mark.asyncio
    async def test_annotate(self, mcp_client):
        result = unwrap_result(await mcp_client.call_tool("annotate_source", {
            "code": "const a = <p>Hi</p>;\n",
            "filename": "a.tsx",
        }))
        assert result["status"] == "ok"
        assert result["changed"] is True
        assert 'data-sourcepin-position="1:10"' in result["code"]

    @pytest.mark.asyncio
    async def test_annotate_parse_error(self, mcp_client):
        code = "export const = <p>\n"
        result = unwrap_result(await mcp_client.call_tool("annotate_source", {
            "code": code,
            "filename": "a.tsx",
        }))
        assert result["status"] == "error"
        assert result["code"] == code
        assert result["errors"]

    @pytest.mark.asyncio
    async def test_annotate_bad_prefix(self, mcp_client):
        result = unwrap_result(await mcp_client.call_tool("annotate_source", {
            "code": "const a = <p>Hi</p>;\n",
            "filename": "a.tsx",
            "attribute_prefix": "bad prefix",
        }))
        assert result["status"] == "error"


class TestEditingTools:
    @pytest.mark.asyncio
    async def test_apply_edit(self, tsx_project, mcp_client):
        result = unwrap_result(await mcp_client.call_tool("apply_edit", {
            "file_path": "src/App.tsx",
            "line": 7,
            "column": 6,
            "kind": "content",
            "new_value": "Edited",
            "root_dir": str(tsx_project),
        }))
        assert result["success"] is True
        assert result["diff"]
        assert "<p>Edited</p>" in read_text(tsx_project / "src" / "App.tsx")

    @pytest.mark.asyncio
    async def test_apply_edit_failure(self, tsx_project, mcp_client):
        result = unwrap_result(await mcp_client.call_tool("apply_edit", {
            "file_path": "src/Card.tsx",
            "line": 2,
            "column": 2,
            "kind": "attribute",
            "attribute_name": "className",
            "new_value": "x",
            "root_dir": str(tsx_project),
        }))
        assert result["success"] is False
        assert "dynamic" in result["message"]

    @pytest.mark.asyncio
    async def test_apply_batch(self, tsx_project, mcp_client):
        result = unwrap_result(await mcp_client.call_tool("apply_batch", {
            "requests": [
                {"filePath": "src/App.tsx", "line": 6, "column": 6, "kind": "style", "newValue": "big"},
                {"filePath": "src/App.tsx", "line": 6, "column": 0, "kind": "style", "newValue": "lost"},
            ],
            "root_dir": str(tsx_project),
        }))
        assert result["summary"] == {"total": 2, "success": 1, "failed": 1}


class TestLookupTools:
    @pytest.mark.asyncio
    async def test_locate_element(self, tsx_project, mcp_client):
        result = unwrap_result(await mcp_client.call_tool("locate_element", {
            "file_path": "src/Card.tsx",
            "line": 3,
            "column": 4,
            "root_dir": str(tsx_project),
        }))
        assert result["status"] == "ok"
        assert result["tagName"] == "span"
        assert result["componentName"] == "Card"
        assert result["isStaticText"] is False

    @pytest.mark.asyncio
    async def test_locate_missing(self, tsx_project, mcp_client):
        result = unwrap_result(await mcp_client.call_tool("locate_element", {
            "file_path": "src/Card.tsx",
            "line": 3,
            "column": 0,
            "root_dir": str(tsx_project),
        }))
        assert result["status"] == "error"
        assert result["parseFailed"] is False

    @pytest.mark.asyncio
    async def test_element_source(self, tsx_project, mcp_client):
        result = unwrap_result(await mcp_client.call_tool("element_source", {
            "element_id": "src/Card.tsx:2:2_div#card",
            "root_dir": str(tsx_project),
            "radius": 1,
        }))
        assert result["status"] == "ok"
        assert result["targetLine"].lstrip().startswith("<div")
        assert result["contextStart"] == 1
