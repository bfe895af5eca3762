from typing import Literal

from pydantic import BaseModel


class NewGameRequest(BaseModel):
    mode: Literal["streak-attack", "time-attack"] = "streak-attack"
    seed: int | None = None


class MoveRequest(BaseModel):
    unit_id: str
    x: int
    y: int


class PassRequest(BaseModel):
    receiver_id: str


class RankingRequest(BaseModel):
    # Validated by the ranking store so errors match the public leaderboard.
    name: str
    score: int | float
    mode: str
