import logging
from typing import Optional

import httpx

from tsumeball.envs.core.phases import PossessionState

logger = logging.getLogger(__name__)

DEFAULT_HINT = "Move to space the floor."
FALLBACK_HINT = "Execute the Pick & Roll!"


def hint_payload(state: PossessionState) -> dict:
    """Board summary sent to the coaching service."""
    return {
        "gameState": {
            "phase": state.phase.value,
            "turnCount": state.turn,
            "maxTurns": state.court.max_turns,
            "players": [u.to_dict() for u in state.units],
            "basket": list(state.court.basket),
        }
    }


async def fetch_hint(
    state: PossessionState,
    url: Optional[str],
    timeout: float = 5.0,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> str:
    """Ask the coaching service for a one-line tip; never raises."""
    if not url:
        return FALLBACK_HINT
    try:
        async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
            resp = await client.post(url, json=hint_payload(state))
            resp.raise_for_status()
            data = resp.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.warning("Hint service failed (%s); using canned hint", e)
        return FALLBACK_HINT
    hint = data.get("hint") if isinstance(data, dict) else None
    return hint or DEFAULT_HINT
