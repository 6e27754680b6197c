"""
Search, tag-graph and statistics endpoints.

Each request loads the caller's recordings once and derives its result
in memory; nothing is cached between requests.
"""

import logging

from fastapi import APIRouter, Depends, Query

from src.api.deps import get_user_context
from src.core.models import (
    GraphSnapshotResponse,
    LibraryStats,
    RecordingResponse,
    SearchResult,
    TagGraph,
    UserContext,
)
from src.services.storage.database import get_session
from src.services.storage.repository import RecordingRepository
from src.services.views import build_tag_graph, compute_stats, search_recordings, tag_adjacency

logger = logging.getLogger(__name__)

router = APIRouter(tags=["views"])


async def _load_recordings(user_id: str) -> list[RecordingResponse]:
    async with get_session() as session:
        repo = RecordingRepository(session)
        rows = await repo.list_recordings(user_id)
        return [RecordingResponse.model_validate(r) for r in rows]


@router.get("/search", response_model=list[SearchResult])
async def search(
    q: str = Query("", description="Case-insensitive substring"),
    user: UserContext = Depends(get_user_context),
):
    return search_recordings(await _load_recordings(user.user_id), q)


@router.get("/graph", response_model=TagGraph)
async def tag_graph(user: UserContext = Depends(get_user_context)):
    return build_tag_graph(await _load_recordings(user.user_id))


@router.post("/graph/snapshot", response_model=GraphSnapshotResponse)
async def snapshot_graph(user: UserContext = Depends(get_user_context)):
    """Write the caller's tag adjacency to the shared knowledge-graph table."""
    adjacency = tag_adjacency(await _load_recordings(user.user_id))
    async with get_session() as session:
        written = await RecordingRepository(session).replace_graph_entries(
            {tag: sorted(linked) for tag, linked in adjacency.items()}
        )
    logger.info("Knowledge graph snapshot: %s tags written", written)
    return GraphSnapshotResponse(tags_written=written)


@router.get("/stats", response_model=LibraryStats)
async def library_stats(user: UserContext = Depends(get_user_context)):
    return compute_stats(await _load_recordings(user.user_id))
