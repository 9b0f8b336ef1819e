"""MCP tools for passage rendering and word inspection."""

from __future__ import annotations

from mcp.server.fastmcp import FastMCP

from passage_gloss.plugin import PassagePlugin
from passage_gloss.reference import MalformedReference


def register(mcp: FastMCP, plugin: PassagePlugin) -> None:
    @mcp.tool()
    def list_books() -> list[dict]:
        """List all books in the loaded corpus with chapter counts."""
        if plugin.index is None:
            return []
        return [b.model_dump() for b in plugin.index.list_books()]

    @mcp.tool()
    def get_passage(reference: str) -> dict:
        """Get the annotated words for a passage reference.

        Returns the parsed range, the sentence ids covering it, and one line
        per sentence with each word's surface form, lemma and a handle that
        can be passed to inspect_word.

        Args:
            reference: Passage reference (e.g. "John 3:16", "Mark 1:1-4")
        """
        if plugin.renderer is None:
            return {"error": "Corpus not loaded"}
        try:
            return plugin.renderer.render_passage(reference).model_dump()
        except MalformedReference as e:
            return {"error": str(e)}

    @mcp.tool()
    def render_passage(markdown: str) -> dict:
        """Render a markdown note, expanding ```passage fenced blocks to HTML.

        Args:
            markdown: Markdown text containing ```passage blocks
        """
        if plugin.renderer is None:
            return {"error": "Corpus not loaded"}
        root = plugin.registry.process(markdown)
        return {"html": root.to_html()}

    @mcp.tool()
    def inspect_word(handle: str) -> dict:
        """Get the lemma, part of speech and morphological features of a word.

        Args:
            handle: Word handle returned by get_passage
        """
        if plugin.renderer is None:
            return {"error": "Corpus not loaded"}
        try:
            return plugin.renderer.describe(handle).model_dump()
        except KeyError:
            return {"error": f"Word handle not found: {handle}"}
