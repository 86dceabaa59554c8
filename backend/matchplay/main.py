import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .database import Base, SessionLocal, engine
from .models import Tournament
from .routes import admin, courses, matches, rounds, stats, tournaments

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Match Play Scoring API",
    version="1.0.0",
    description=(
        "Golf match-play scoring for team and singles formats, with per-player "
        "match facts, season stats and a skins side game."
    ),
)

cors_origins = os.getenv(
    "CORS_ORIGINS",
    "http://localhost:5173,http://127.0.0.1:5173",
)
allow_origins = [origin.strip() for origin in cors_origins.split(",") if origin.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

Base.metadata.create_all(bind=engine)


def should_auto_seed() -> bool:
    value = os.getenv("AUTO_SEED_ON_EMPTY", "false").strip().lower()
    return value in {"1", "true", "yes", "on"}


def seed_if_empty() -> None:
    if not should_auto_seed():
        return

    db = SessionLocal()
    try:
        has_tournaments = db.query(Tournament.id).first() is not None
    finally:
        db.close()

    if has_tournaments:
        return

    from .seed import seed

    logger.info("Database empty, seeding demo tournament")
    seed(demo_progress=True)


seed_if_empty()


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


app.include_router(tournaments.router, prefix="/tournaments")
app.include_router(courses.router, prefix="/courses")
app.include_router(rounds.router, prefix="/rounds")
app.include_router(matches.router, prefix="/matches")
app.include_router(stats.router, prefix="/stats")
app.include_router(admin.router, prefix="/admin")
