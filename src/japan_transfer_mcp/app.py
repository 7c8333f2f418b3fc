"""MCP server and HTTP application factories.

All tool wiring goes through the explicit registry from
``japan_transfer_mcp.tools.build_registry``.
"""

import contextlib
from collections.abc import AsyncIterator

from mcp.server.lowlevel import Server
from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route
from starlette.types import Receive, Scope, Send

from japan_transfer_mcp import __version__
from japan_transfer_mcp.services.tokenizer import Tokenizer
from japan_transfer_mcp.tools import ToolRegistry, build_registry

SERVER_NAME = "japan-transfer-mcp"
INSTRUCTIONS = (
    "Japanese public transit (J-Route Planner) - look up station, bus stop and spot "
    "names, then search routes between them"
)

MCP_PATH = "/mcp"
DISCOVERY_PATH = "/tools"
DISCOVERY_REQUEST_ID = "tool-discovery"


def create_server(tokenizer: Tokenizer, registry: ToolRegistry | None = None) -> Server:
    """Create a low-level MCP server serving the registry's tools."""
    if registry is None:
        registry = build_registry()

    server = Server(SERVER_NAME, version=__version__, instructions=INSTRUCTIONS)
    registry.install(server, tokenizer)
    return server


class _StreamableHTTPEndpoint:
    """ASGI endpoint forwarding every /mcp request to the session manager."""

    def __init__(self, session_manager: StreamableHTTPSessionManager):
        self._session_manager = session_manager

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        await self._session_manager.handle_request(scope, receive, send)


def create_http_app(server: Server, registry: ToolRegistry) -> Starlette:
    """Stateless streamable HTTP app with a GET discovery endpoint.

    - ``/mcp``: MCP over streamable HTTP, no session state between requests.
    - ``/tools``: registered tools in a JSON-RPC shaped body, for clients
      that list tools with a plain GET.
    """
    session_manager = StreamableHTTPSessionManager(
        app=server,
        event_store=None,
        json_response=False,
        stateless=True,
    )

    async def list_registered_tools(request: Request) -> JSONResponse:
        return JSONResponse(
            {
                "jsonrpc": "2.0",
                "result": {"tools": registry.describe()},
                "id": DISCOVERY_REQUEST_ID,
            }
        )

    @contextlib.asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        async with session_manager.run():
            yield

    return Starlette(
        routes=[
            Route(MCP_PATH, endpoint=_StreamableHTTPEndpoint(session_manager)),
            Route(DISCOVERY_PATH, endpoint=list_registered_tools, methods=["GET"]),
        ],
        lifespan=lifespan,
    )
