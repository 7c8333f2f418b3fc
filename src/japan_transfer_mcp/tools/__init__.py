"""MCP tool handlers and their registry."""

from japan_transfer_mcp.tools.registry import ToolRegistry, ToolSpec
from japan_transfer_mcp.tools.route_tools import register_route_tools
from japan_transfer_mcp.tools.station_tools import register_station_tools


def build_registry() -> ToolRegistry:
    """Registry with every tool this server offers."""
    registry = ToolRegistry()
    register_station_tools(registry)
    register_route_tools(registry)
    return registry


__all__ = ["ToolRegistry", "ToolSpec", "build_registry"]
