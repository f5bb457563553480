import asyncio
import sys
import logging
import json
from typing import Callable, Awaitable, List, Optional

from mcp.server import Server, NotificationOptions
from mcp.server.models import InitializationOptions
from mcp.server.stdio import stdio_server
import mcp.types as types

from config import GatewayConfig, configure_logging, load_config
from errors import GatewayError

class BaseMcpServer:
    def __init__(self, server_name: str, version: str = "1.0.0", config: Optional[GatewayConfig] = None):
        self.name = server_name
        self.version = version
        self.config = config
        self.logger = logging.getLogger(server_name)
        self.server = Server(server_name)

    def get_config(self) -> GatewayConfig:
        """Configuration is read from the environment on first use only."""
        if self.config is None:
            self.config = load_config()
        return self.config

    def register_handlers(self, list_tools_fn: Callable[[], Awaitable[List[types.Tool]]], call_tool_fn: Callable[[str, dict], Awaitable[List[types.TextContent]]]):
        """Register the tool listing and execution handlers."""

        @self.server.list_tools()
        async def handle_list_tools() -> List[types.Tool]:
            return await list_tools_fn()

        @self.server.call_tool()
        async def handle_call_tool(name: str, arguments: dict | None) -> List[types.TextContent]:
            try:
                return await call_tool_fn(name, arguments or {})
            except GatewayError as e:
                self.logger.error(f"Tool {name} failed: {e.message}")
                return [types.TextContent(type="text", text=json.dumps(error_payload(e)))]
            except Exception as e:
                self.logger.exception(f"Error executing tool {name}")
                return [types.TextContent(type="text", text=json.dumps({"ok": False, "error": str(e)}))]

    async def run(self):
        """Run the MCP server over stdio."""
        async with stdio_server() as (read, write):
            await self.server.run(
                read,
                write,
                InitializationOptions(
                    server_name=self.name,
                    server_version=self.version,
                    capabilities=self.server.get_capabilities(
                        notification_options=NotificationOptions(),
                        experimental_capabilities={},
                    ),
                ),
            )

    def serve(self):
        """Entry point to start the server."""
        try:
            configure_logging(self.get_config())
            asyncio.run(self.run())
        except KeyboardInterrupt:
            pass
        except GatewayError as e:
            logging.basicConfig(stream=sys.stderr)
            self.logger.critical(f"Invalid configuration: {e.message}")
            sys.exit(1)
        except Exception as e:
            self.logger.critical(f"Server crashed: {e}")
            sys.exit(1)


def error_payload(error: GatewayError) -> dict:
    payload = {"ok": False, "error": error.message, "kind": error.kind}
    if error.data:
        payload.update(error.data)
    return payload
