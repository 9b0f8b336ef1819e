"""MCP Server exposing interlinear passage tools.

Tools:
- list_books        (corpus contents)
- get_passage       (resolve and render a reference)
- render_passage    (expand ```passage blocks in a markdown note)
- inspect_word      (morphology of a rendered word)
"""

from __future__ import annotations

import argparse
import logging

from mcp.server.fastmcp import FastMCP

from passage_gloss.host import BlockRegistry
from passage_gloss.plugin import PassagePlugin
from passage_gloss.tools import passage

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

mcp = FastMCP("passage-gloss")

# Shared plugin instance used by the tools
plugin = PassagePlugin(BlockRegistry())
passage.register(mcp, plugin)


def main():
    """Run the MCP server with the corpus pre-loaded."""
    parser = argparse.ArgumentParser(
        description="Passage Gloss MCP Server",
    )
    parser.add_argument(
        "--sse",
        type=int,
        metavar="PORT",
        help="Run with SSE transport on specified port",
    )
    parser.add_argument(
        "--http",
        type=int,
        metavar="PORT",
        help="Run with Streamable HTTP transport on specified port",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )
    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    if args.sse:
        transport = "sse"
        port = args.sse
    elif args.http:
        transport = "http"
        port = args.http
    else:
        transport = "stdio"
        port = None

    logger.info("Starting Passage Gloss MCP server (transport: %s)...", transport)

    if not plugin.onload():
        raise SystemExit("Corpus failed to load; see log for details")

    if transport == "stdio":
        mcp.run(transport="stdio")
    elif transport == "sse":
        mcp.settings.host = "0.0.0.0"
        mcp.settings.port = port
        mcp.run(transport="sse")
    elif transport == "http":
        mcp.settings.host = "0.0.0.0"
        mcp.settings.port = port
        mcp.run(transport="streamable-http")


if __name__ == "__main__":
    main()
