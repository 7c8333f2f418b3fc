import argparse
import asyncio
import logging

from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from japan_transfer_mcp.app import MCP_PATH, create_http_app, create_server
from japan_transfer_mcp.data.config import get_server_config
from japan_transfer_mcp.services.tokenizer import get_tokenizer
from japan_transfer_mcp.tools import ToolRegistry, build_registry

logger = logging.getLogger(__name__)


async def run_stdio(server: Server) -> None:
    """Serve MCP over stdin/stdout until the client disconnects."""
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


def run_http(server: Server, registry: ToolRegistry, host: str, port: int) -> None:
    """Serve MCP over streamable HTTP."""
    import uvicorn

    app = create_http_app(server, registry)
    logger.info(f"MCP server listening on http://{host}:{port}{MCP_PATH}")
    logger.info(f"Registered tools: {registry.names()}")
    uvicorn.run(app, host=host, port=port)


def main() -> None:
    config = get_server_config()

    parser = argparse.ArgumentParser(
        prog="japan-transfer-mcp",
        description="Japan Transit MCP Server (J-Route Planner)",
    )
    parser.add_argument(
        "--http",
        action="store_true",
        help="Serve streamable HTTP instead of stdio",
    )
    parser.add_argument(
        "--host",
        default=config.host,
        help="HTTP bind address (default: 0.0.0.0 or HOST env var)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=config.port,
        help="HTTP port (default: 3000 or PORT env var)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args()

    # logging goes to stderr, stdout belongs to the stdio transport
    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    # Load the encoding once, before the first request needs it
    tokenizer = get_tokenizer()
    registry = build_registry()
    server = create_server(tokenizer, registry)

    if args.http:
        run_http(server, registry, args.host, args.port)
    else:
        asyncio.run(run_stdio(server))


if __name__ == "__main__":
    main()
