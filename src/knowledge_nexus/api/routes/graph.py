"""Graph API routes."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from knowledge_nexus.api.models.api_models import (
    ChatRequest,
    ChatResponse,
    ComponentsResponse,
    ExtractRequest,
    GraphStateResponse,
    HighlightResponse,
    ImportRequest,
    MessageListResponse,
    SearchResponse,
    SelectRequest,
)
from knowledge_nexus.data_models.entities import (
    RefinementStats,
    ValidationReport,
)
from knowledge_nexus.graph.exceptions import (
    EmptyGraphError,
    ExtractionError,
    GraphImportError,
    RefinementInProgressError,
    StaleGraphError,
    UnificationError,
)
from knowledge_nexus.services.graph_session_service import GraphSession

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/graph", tags=["graph"])

_session: GraphSession | None = None


# One session per process: the current graph is a single owned slot
def get_graph_session() -> GraphSession:
    """Get the process-wide GraphSession instance."""
    global _session
    if _session is None:
        _session = GraphSession()
    return _session


def convert_session_to_response(session: GraphSession) -> GraphStateResponse:
    """Convert the session's current graph into a GraphStateResponse."""
    return GraphStateResponse(
        graph=session.graph,
        source_label=session.source_label,
        generation=session.generation,
        stats=session.stats,
        graph_stats=session.graph_stats(),
    )


@router.get("", response_model=GraphStateResponse)
async def get_graph(session: GraphSession = Depends(get_graph_session)):
    """Get the current graph."""
    return convert_session_to_response(session)


@router.delete("", response_model=GraphStateResponse)
async def reset_graph(session: GraphSession = Depends(get_graph_session)):
    """Discard the current graph and conversation."""
    session.reset()
    return convert_session_to_response(session)


@router.post("/extract", response_model=GraphStateResponse)
async def extract_graph(
    request: ExtractRequest, session: GraphSession = Depends(get_graph_session)
):
    """Extract a graph from a markdown or text document."""
    try:
        session.check_upload_filename(request.filename)
        await session.load_text(request.content, request.filename)
        return convert_session_to_response(session)
    except GraphImportError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except StaleGraphError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    except ExtractionError as e:
        logger.error(f"Failed to extract graph from {request.filename}: {e}")
        raise HTTPException(
            status_code=502, detail="Unable to extract graph from the provided file."
        ) from e


@router.post("/import", response_model=GraphStateResponse)
async def import_graph(
    request: ImportRequest, session: GraphSession = Depends(get_graph_session)
):
    """Load a graph from exported JSON."""
    try:
        session.import_json(request.payload, request.filename or "")
        return convert_session_to_response(session)
    except GraphImportError as e:
        logger.error(f"Graph import failed: {e}")
        raise HTTPException(
            status_code=400, detail="Unable to load the selected JSON graph."
        ) from e


@router.get("/export")
async def export_graph(session: GraphSession = Depends(get_graph_session)):
    """Download the current graph as re-importable JSON."""
    try:
        export = session.export()
    except EmptyGraphError as e:
        raise HTTPException(
            status_code=404, detail="No graph data available to export."
        ) from e

    return JSONResponse(
        content=export.graph.model_dump(mode="json", exclude_none=True),
        headers={"Content-Disposition": f'attachment; filename="{export.filename}"'},
    )


@router.get("/validate", response_model=ValidationReport)
async def validate_graph(session: GraphSession = Depends(get_graph_session)):
    """Report dangling links in the current graph."""
    return session.validate()


@router.get("/components", response_model=ComponentsResponse)
async def get_components(session: GraphSession = Depends(get_graph_session)):
    """Get the connected components of the current graph."""
    components = session.components()
    return ComponentsResponse(components=components, count=len(components))


@router.post("/unify", response_model=RefinementStats)
async def unify_graph(session: GraphSession = Depends(get_graph_session)):
    """Connect the graph's components with proposed bridge links."""
    try:
        return await session.refine()
    except EmptyGraphError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except (RefinementInProgressError, StaleGraphError) as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    except UnificationError as e:
        logger.error(f"Graph refinement failed: {e}")
        raise HTTPException(status_code=502, detail="Graph refinement failed.") from e


@router.get("/search", response_model=SearchResponse)
async def search_graph(q: str = "", session: GraphSession = Depends(get_graph_session)):
    """Search nodes and relationships."""
    return SearchResponse(results=session.search(q))


@router.post("/select", response_model=HighlightResponse)
async def select_result(
    request: SelectRequest, session: GraphSession = Depends(get_graph_session)
):
    """Highlight a selected search result."""
    highlights = session.select(request.result)
    return HighlightResponse(
        node_ids=sorted(highlights.node_ids), link_keys=sorted(highlights.link_keys)
    )


@router.get("/chat", response_model=MessageListResponse)
async def get_chat_messages(session: GraphSession = Depends(get_graph_session)):
    """Get the conversation about the current graph."""
    return MessageListResponse(messages=session.chat_history)


@router.post("/chat", response_model=ChatResponse)
async def send_chat_message(
    request: ChatRequest, session: GraphSession = Depends(get_graph_session)
):
    """Ask a question about the current graph."""
    try:
        reply = await session.chat(request.content)
        return ChatResponse(message=reply)
    except EmptyGraphError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
