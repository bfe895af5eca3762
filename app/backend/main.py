import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.backend.routes import game_routes, ranking_routes

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

# --- FastAPI App ---
# Single-user demo: one in-process session lives in app.backend.state.
# Run with: uvicorn app.backend.main:app --reload
app = FastAPI(title="Tsume Basketball")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(game_routes.router)
app.include_router(ranking_routes.router)
