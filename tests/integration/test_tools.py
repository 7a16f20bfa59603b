"""Integration tests for tool dispatch and the select_category handler."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from docpilot.errors import DocPilotError, ErrorCode
from docpilot.executor import build_tool_schemas, execute_tool
from docpilot.tools.select_category import handle

if TYPE_CHECKING:
    from docpilot.state import AppState

_AUTH_OVERVIEW_URL = "https://developers.glean.com/api-info/client/authentication/overview"
_AUTH_TOKENS_URL = "https://developers.glean.com/api-info/client/authentication/glean-issued"


class TestSelectCategoryHandler:
    async def test_returns_pages_with_descriptions(self, app_state: AppState) -> None:
        result = await handle({"category": "authentication"}, app_state)

        assert result == {
            "category": "authentication",
            "pages": [
                {"url": _AUTH_OVERVIEW_URL, "description": "Client API authentication overview."},
                {"url": _AUTH_TOKENS_URL, "description": ""},
            ],
        }

    async def test_unknown_category_returns_empty_list(self, app_state: AppState) -> None:
        result = await handle({"category": "billing"}, app_state)
        assert result == {"category": "billing", "pages": []}

    async def test_missing_category(self, app_state: AppState) -> None:
        with pytest.raises(DocPilotError) as exc_info:
            await handle({}, app_state)
        assert exc_info.value.code == ErrorCode.INVALID_ARGUMENTS
        assert exc_info.value.message == "missing category"

    async def test_empty_category(self, app_state: AppState) -> None:
        with pytest.raises(DocPilotError) as exc_info:
            await handle({"category": ""}, app_state)
        assert exc_info.value.message == "missing category"

    async def test_non_string_category(self, app_state: AppState) -> None:
        with pytest.raises(DocPilotError) as exc_info:
            await handle({"category": 5}, app_state)
        assert exc_info.value.message == "invalid category"


class TestExecuteTool:
    async def test_dispatches_select_category(self, app_state: AppState) -> None:
        result = await execute_tool("select_category", '{"category": "search"}', app_state)
        assert result["category"] == "search"
        assert len(result["pages"]) == 1

    async def test_unknown_tool(self, app_state: AppState) -> None:
        result = await execute_tool("delete_everything", "{}", app_state)
        assert result == {"error": "unknown tool"}

    async def test_handler_error_becomes_data(self, app_state: AppState) -> None:
        result = await execute_tool("select_category", "{}", app_state)
        assert result == {"error": "missing category"}

    async def test_empty_arguments_treated_as_empty_object(self, app_state: AppState) -> None:
        result = await execute_tool("load_pages", "", app_state)
        assert result == {"error": "missing urls"}

    async def test_invalid_argument_type(self, app_state: AppState) -> None:
        result = await execute_tool("select_category", '{"category": 5}', app_state)
        assert result == {"error": "invalid category"}

    async def test_malformed_json(self, app_state: AppState) -> None:
        result = await execute_tool("select_category", '{"category": ', app_state)
        assert result == {"error": "execution failed"}

    async def test_non_object_arguments(self, app_state: AppState) -> None:
        result = await execute_tool("select_category", "[1]", app_state)
        assert result == {"error": "execution failed"}


class TestToolSchemas:
    def test_two_function_tools(self) -> None:
        schemas = build_tool_schemas(["authentication", "search"])
        assert [schema["function"]["name"] for schema in schemas] == [
            "select_category",
            "load_pages",
        ]
        assert all(schema["type"] == "function" for schema in schemas)

    def test_category_enum_from_index(self) -> None:
        select_category = build_tool_schemas(["authentication", "search"])[0]["function"]
        category = select_category["parameters"]["properties"]["category"]
        assert category["enum"] == ["authentication", "search"]
        assert select_category["parameters"]["required"] == ["category"]

    def test_urls_is_string_array(self) -> None:
        load_pages = build_tool_schemas([])[1]["function"]
        urls = load_pages["parameters"]["properties"]["urls"]
        assert urls["type"] == "array"
        assert urls["items"]["type"] == "string"
        assert load_pages["parameters"]["required"] == ["urls"]
