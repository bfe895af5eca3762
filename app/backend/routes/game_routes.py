import logging

from fastapi import APIRouter, HTTPException

from app.backend.hints import fetch_hint
from app.backend.schemas import MoveRequest, NewGameRequest, PassRequest
from app.backend.state import game_state, require_possession, serialize_state
from tsumeball.envs.core import phases
from tsumeball.envs.core.phases import GameMode, Phase
from tsumeball.envs.core.strategies import Strategy, strategy_highlights
from tsumeball.envs.core.units import find_unit

router = APIRouter()
logger = logging.getLogger(__name__)


def _commit(state):
    game_state.commit(state)
    if state.last_error:
        logger.debug("Rejected: %s", state.last_error)
    elif state.is_over:
        logger.info(
            "Possession over: %s (score=%d, streak=%d)",
            state.outcome.value,
            state.score,
            state.streak,
        )
    return serialize_state()


def _require_unit(state, unit_id: str):
    try:
        return find_unit(state.units, unit_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown unit: {unit_id}")


@router.post("/api/new_game")
def new_game(request: NewGameRequest):
    mode = GameMode(request.mode)
    game_state.start(mode, seed=request.seed)
    logger.info("New %s game started", mode.value)
    return serialize_state()


@router.get("/api/state")
def get_state():
    require_possession()
    return serialize_state()


@router.post("/api/move")
def move(request: MoveRequest):
    state = require_possession()
    unit = _require_unit(state, request.unit_id)
    target = (request.x, request.y)
    if state.phase == Phase.BALL_CARRIER and unit.has_ball:
        return _commit(phases.move_ball_carrier(state, target))
    if state.phase == Phase.BALL_CARRIER:
        return _commit(phases.reject(state, "Move the ball carrier now."))
    return _commit(phases.move_off_ball(state, unit.id, target))


@router.post("/api/begin_pass")
def begin_pass():
    return _commit(phases.begin_pass(require_possession()))


@router.post("/api/cancel_pass")
def cancel_pass():
    return _commit(phases.cancel_pass(require_possession()))


@router.post("/api/pass")
def pass_ball(request: PassRequest):
    state = require_possession()
    _require_unit(state, request.receiver_id)
    return _commit(phases.pass_ball(state, request.receiver_id))


@router.post("/api/shoot")
def shoot():
    return _commit(phases.attempt_shot(require_possession()))


@router.post("/api/undo")
def undo():
    return _commit(phases.undo(require_possession()))


@router.post("/api/next_possession")
def next_possession():
    state = require_possession()
    return _commit(phases.next_possession(state, game_state.rng))


@router.get("/api/legal_moves/{unit_id}")
def legal_moves(unit_id: str):
    state = require_possession()
    _require_unit(state, unit_id)
    return {"unit_id": unit_id, "moves": [list(c) for c in phases.legal_targets(state, unit_id)]}


@router.get("/api/strategy/{name}")
def strategy(name: str):
    state = require_possession()
    try:
        play = Strategy(name)
    except ValueError:
        raise HTTPException(status_code=404, detail=f"Unknown strategy: {name}")
    cells = strategy_highlights(state.units, play, state.court)
    return {"strategy": play.value, "cells": [list(c) for c in cells]}


@router.get("/api/hint")
async def hint():
    state = require_possession()
    text = await fetch_hint(state, game_state.config.hint_url, game_state.config.http_timeout)
    return {"hint": text}
