"""Japan transit MCP server: station lookup and route search over J-Route Planner."""

__version__ = "0.1.0"
