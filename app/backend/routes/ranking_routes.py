import logging

from fastapi import APIRouter, HTTPException

from app.backend.schemas import RankingRequest
from app.backend.state import game_state

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/api/rankings")
async def get_rankings():
    return await game_state.rankings.fetch()


@router.post("/api/rankings", status_code=201)
async def submit_ranking(request: RankingRequest):
    try:
        ranking = await game_state.rankings.submit(request.name, request.score, request.mode)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except OSError as e:
        logger.exception("Failed to store ranking")
        raise HTTPException(status_code=500, detail=f"Failed to store ranking: {e}")
    return {"success": True, "ranking": ranking}
