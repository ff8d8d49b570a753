"""FastMCP server initialization for the journal task store."""

import logging

from mcp.server.fastmcp import FastMCP

from bujo_mcp.config import get_settings
from bujo_mcp.logging_setup import setup_logging

# Initialize the MCP server
mcp = FastMCP("bujo_mcp")


def run() -> None:
    """Run the MCP server."""
    settings = get_settings()
    setup_logging(log_dir=settings.log_dir, console_level=settings.log_level)
    logging.getLogger(__name__).info("Starting bujo_mcp with %r", settings)
    mcp.run()


if __name__ == "__main__":
    run()
