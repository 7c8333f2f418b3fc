"""MCP tool for searching stations, bus stops and spots by name."""

import logging
from typing import Any

import mcp.types as types
from pydantic import BaseModel, ConfigDict, Field

from japan_transfer_mcp.services.suggest_service import (
    search_station_by_name as _search_station_by_name,
)
from japan_transfer_mcp.services.tokenizer import Tokenizer
from japan_transfer_mcp.tools.registry import (
    ToolRegistry,
    ToolSpec,
    error_result,
    text_result,
    validate_arguments,
)

logger = logging.getLogger(__name__)

TOOL_NAME = "search_station_by_name"

DESCRIPTION = """Search for stations by name.

Returns railway stations, bus stops and spots matching the query as one
comma-separated list, best matches of each kind first. Pass a returned name
unchanged to search_route_by_station_name.
"""


class StationSearchInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    query: str = Field(
        min_length=1,
        description="The name of the station to search for (must be in Japanese)",
    )
    max_tokens: int | None = Field(
        default=None,
        ge=0,
        alias="maxTokens",
        description="The maximum number of tokens to return",
    )
    only_name: bool = Field(
        default=False,
        alias="onlyName",
        description=(
            "Whether to only return the name of the station. If you do not need detailed "
            "information, it is generally recommended to set this to true."
        ),
    )


async def search_station_by_name(
    arguments: dict[str, Any],
    tokenizer: Tokenizer,
) -> types.CallToolResult:
    """Handle a search_station_by_name call.

    Any failure (bad input, network error, tokenizer error) becomes an
    error-flagged result reading "Contact retrieval error: <detail>".
    """
    try:
        params = validate_arguments(StationSearchInput, arguments)
        text = await _search_station_by_name(
            params.query,
            tokenizer=tokenizer,
            max_tokens=params.max_tokens,
            name_only=params.only_name,
        )
    except Exception as e:
        logger.warning(f"Station search failed: {e}")
        return error_result(f"Contact retrieval error: {e}")

    return text_result(text)


def register_station_tools(registry: ToolRegistry) -> None:
    registry.register(
        ToolSpec(
            name=TOOL_NAME,
            description=DESCRIPTION,
            input_model=StationSearchInput,
            handler=search_station_by_name,
        )
    )
