"""FastAPI HTTP layer wrapping the passage plugin.

Requests never touch the shared inspection panel: word lookups return the
panel contents directly, so concurrent clients do not interfere.
"""

from __future__ import annotations

import hmac
import logging
import os

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from passage_gloss.host import BlockRegistry
from passage_gloss.inspector import describe_snapshot
from passage_gloss.plugin import PassagePlugin
from passage_gloss.reference import MalformedReference

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Passage Gloss API",
    description="Interlinear passage rendering with word-level morphology",
    version="0.1.0",
)

API_KEY = os.getenv("API_KEY")
if not API_KEY:
    logger.warning("API_KEY not set. All requests will be allowed.")


@app.middleware("http")
async def verify_api_key(request: Request, call_next):
    if API_KEY and request.url.path != "/health":
        key = request.headers.get("x-api-key", "")
        if not hmac.compare_digest(key, API_KEY):
            return JSONResponse(status_code=401, content={"detail": "Invalid API key"})
    return await call_next(request)


registry = BlockRegistry()
plugin = PassagePlugin(registry)
if not plugin.onload():
    logger.error("Corpus unavailable. Passage endpoints will return 503.")


@app.get("/health")
def health():
    """Unauthenticated health check."""
    return {"status": "ok", "corpus_loaded": plugin.active}


def _renderer():
    if plugin.renderer is None:
        raise HTTPException(status_code=503, detail="Corpus not loaded")
    return plugin.renderer


# --- Request models ---


class RenderRequest(BaseModel):
    markdown: str


class InspectRequest(BaseModel):
    data_word: str


# --- Endpoints ---


@app.get("/api/books")
def list_books():
    """List books with chapter counts."""
    return [b.model_dump() for b in _renderer().index.list_books()]


@app.get("/api/passage")
def get_passage(reference: str):
    """Resolve a reference like "John 3:16-18" and render its words."""
    renderer = _renderer()
    try:
        result = renderer.render_passage(reference)
    except MalformedReference as e:
        raise HTTPException(status_code=400, detail=str(e))
    return result.model_dump()


@app.post("/api/render")
def render_markdown(req: RenderRequest):
    """Render a markdown document, expanding ``passage`` fenced blocks."""
    renderer = _renderer()
    root = registry.process(req.markdown)
    handles = [
        el.id for el in root.find_all(tag="span", cls=renderer.word_class)
    ]
    return {"html": root.to_html(), "handles": handles}


@app.get("/api/words/{handle}")
def inspect_word(handle: str):
    """Inspection panel contents for a rendered word."""
    renderer = _renderer()
    try:
        return renderer.describe(handle).model_dump()
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Word handle not found: {handle}")


@app.post("/api/inspect")
def inspect_payload(req: InspectRequest):
    """Decode a raw ``data-word`` attribute taken from rendered HTML."""
    return describe_snapshot(req.data_word).model_dump()


def main():
    """Run the API server."""
    import uvicorn

    port = int(os.environ.get("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
