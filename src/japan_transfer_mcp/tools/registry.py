"""Explicit tool registry.

Every tool is registered by name with its description, input model and
handler. The registry serves the MCP tools/list and tools/call requests and
the HTTP discovery endpoint from the same table.
"""

import logging
from collections.abc import Awaitable, Callable, Iterator
from dataclasses import dataclass
from typing import Any, TypeVar

import mcp.types as types
from mcp.server.lowlevel import Server
from pydantic import BaseModel, ValidationError

from japan_transfer_mcp.errors import ValidationInputError
from japan_transfer_mcp.services.tokenizer import Tokenizer

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

ToolHandler = Callable[[dict[str, Any], Tokenizer], Awaitable[types.CallToolResult]]


class ToolExecutionError(Exception):
    """Carries an error-flagged tool result through the MCP server.

    The low-level server turns a raised exception into a CallToolResult with
    isError set and str(exception) as its only text block.
    """


@dataclass(frozen=True)
class ToolSpec:
    """One registered tool."""

    name: str
    description: str
    input_model: type[BaseModel]
    handler: ToolHandler

    @property
    def input_schema(self) -> dict[str, Any]:
        """JSON Schema of the tool input, using the wire (alias) names."""
        return self.input_model.model_json_schema(by_alias=True)

    def to_mcp_tool(self) -> types.Tool:
        return types.Tool(
            name=self.name,
            description=self.description,
            inputSchema=self.input_schema,
        )


class ToolRegistry:
    """Mapping from tool name to ToolSpec, filled by explicit register() calls."""

    def __init__(self) -> None:
        self._tools: dict[str, ToolSpec] = {}

    def register(self, spec: ToolSpec) -> None:
        if spec.name in self._tools:
            raise ValueError(f"Tool already registered: {spec.name}")
        self._tools[spec.name] = spec

    def get(self, name: str) -> ToolSpec | None:
        return self._tools.get(name)

    def names(self) -> list[str]:
        return list(self._tools)

    def __iter__(self) -> Iterator[ToolSpec]:
        return iter(self._tools.values())

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def describe(self) -> list[dict[str, Any]]:
        """Tool listing for discovery: name, description and input schema."""
        return [
            {
                "name": spec.name,
                "description": spec.description,
                "inputSchema": spec.input_schema,
            }
            for spec in self
        ]

    async def call(
        self,
        name: str,
        arguments: dict[str, Any] | None,
        tokenizer: Tokenizer,
    ) -> types.CallToolResult:
        """Dispatch a call to the named tool's handler."""
        spec = self.get(name)
        if spec is None:
            return error_result(f"Unknown tool: {name}")
        return await spec.handler(arguments or {}, tokenizer)

    def install(self, server: Server, tokenizer: Tokenizer) -> None:
        """Serve this registry's tools from a low-level MCP server."""

        @server.list_tools()
        async def list_tools() -> list[types.Tool]:
            return [spec.to_mcp_tool() for spec in self]

        # handlers validate their own arguments
        @server.call_tool(validate_input=False)
        async def call_tool(name: str, arguments: dict[str, Any]) -> list[types.TextContent]:
            result = await self.call(name, arguments, tokenizer)
            if result.isError:
                raise ToolExecutionError(result_text(result))
            return [block for block in result.content if isinstance(block, types.TextContent)]

        logger.debug(f"Installed tools: {self.names()}")


def text_result(text: str) -> types.CallToolResult:
    return types.CallToolResult(content=[types.TextContent(type="text", text=text)])


def error_result(message: str) -> types.CallToolResult:
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=message)],
        isError=True,
    )


def result_text(result: types.CallToolResult) -> str:
    """Concatenated text of a result's text blocks."""
    return "".join(block.text for block in result.content if isinstance(block, types.TextContent))


def validate_arguments(model: type[ModelT], arguments: dict[str, Any]) -> ModelT:
    """Validate raw tool arguments against an input model.

    Raises:
        ValidationInputError: With one "field: message" entry per problem.
    """
    try:
        return model.model_validate(arguments)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc']) or 'input'}: {error['msg']}"
            for error in e.errors()
        )
        raise ValidationInputError(f"Invalid arguments: {problems}") from e
