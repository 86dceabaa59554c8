import argparse
import logging

from sqlalchemy.orm import Session

from . import crud, schemas
from .database import Base, SessionLocal, engine

logger = logging.getLogger(__name__)

TOURNAMENT = {
    "name": "Autumn Cup",
    "year": 2026,
    "series": "autumn-cup",
}

TEAMS = {
    "team_a": {
        "id": "aces",
        "name": "Aces",
        "captain_id": "p-moreno",
        "co_captain_id": "p-hale",
        "roster_by_tier": {
            "A": ["p-moreno", "p-okafor"],
            "B": ["p-hale", "p-lindqvist"],
        },
        "handicap_by_player": {"p-moreno": 4.2, "p-okafor": 7.9, "p-hale": 12.5, "p-lindqvist": 15.1},
    },
    "team_b": {
        "id": "bogeys",
        "name": "Bogeys",
        "captain_id": "p-tanaka",
        "co_captain_id": "p-reyes",
        "roster_by_tier": {
            "A": ["p-tanaka", "p-brennan"],
            "B": ["p-reyes", "p-volkov"],
        },
        "handicap_by_player": {"p-tanaka": 5.6, "p-brennan": 9.3, "p-reyes": 11.0, "p-volkov": 18.4},
    },
}

COURSE_PARS = [4, 5, 3, 4, 4, 4, 3, 5, 4, 4, 4, 3, 5, 4, 4, 3, 5, 4]
COURSE_HCP_INDEX = [7, 3, 15, 1, 11, 9, 17, 5, 13, 8, 2, 16, 6, 10, 14, 18, 4, 12]

ROUNDS = [
    {"format": "twoManBestBall", "day": 1, "points_value": 1, "skins_gross_pot": 40, "skins_net_pot": 40},
    {"format": "singles", "day": 2, "points_value": 1},
]

PAIRINGS = {
    "twoManBestBall": [
        (["p-moreno", "p-hale"], ["p-tanaka", "p-reyes"]),
        (["p-okafor", "p-lindqvist"], ["p-brennan", "p-volkov"]),
    ],
    "singles": [
        (["p-moreno"], ["p-tanaka"]),
        (["p-okafor"], ["p-brennan"]),
        (["p-hale"], ["p-reyes"]),
        (["p-lindqvist"], ["p-volkov"]),
    ],
}

# Gross scores entered on holes 1-16 of the first best-ball match.
DEMO_BEST_BALL_SCORES = [
    ([4, 5], [5, 5]),
    ([5, 5], [5, 6]),
    ([3, 4], [3, 3]),
    ([4, 4], [5, 4]),
    ([4, 5], [4, 4]),
    ([4, 4], [5, 5]),
    ([3, 3], [3, 4]),
    ([5, 6], [5, 5]),
    ([4, 4], [4, 5]),
    ([4, 5], [5, 5]),
    ([4, 4], [4, 4]),
    ([3, 3], [4, 3]),
    ([5, 5], [5, 6]),
    ([4, 5], [4, 4]),
    ([4, 4], [5, 5]),
    ([3, 4], [3, 3]),
]


def reset_database() -> None:
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)


def course_payload() -> schemas.CourseCreate:
    return schemas.CourseCreate(
        name="Pine Ridge",
        slope_rating=128,
        course_rating=71.4,
        holes=[
            schemas.CourseHoleIn(number=number, par=par, hcp_index=hcp_index)
            for number, (par, hcp_index) in enumerate(zip(COURSE_PARS, COURSE_HCP_INDEX), start=1)
        ],
    )


def apply_demo_progress(db: Session, match_id: int) -> None:
    for number, (team_a, team_b) in enumerate(DEMO_BEST_BALL_SCORES, start=1):
        crud.update_hole(
            db,
            match_id,
            number,
            schemas.HoleUpdate(team_a_players_gross=team_a, team_b_players_gross=team_b),
        )


def seed(*, demo_progress: bool = False) -> None:
    reset_database()

    db = SessionLocal()
    try:
        tournament = crud.create_tournament(
            db,
            schemas.TournamentCreate(
                **TOURNAMENT,
                team_a=schemas.TeamSetup(**TEAMS["team_a"]),
                team_b=schemas.TeamSetup(**TEAMS["team_b"]),
            ),
        )
        course = crud.create_course(db, course_payload())
        handicaps = {**TEAMS["team_a"]["handicap_by_player"], **TEAMS["team_b"]["handicap_by_player"]}

        first_match_id: int | None = None
        for round_template in ROUNDS:
            round_row = crud.create_round(
                db,
                schemas.RoundCreate(tournament_id=tournament.id, course_id=course.id, **round_template),
            )
            for team_a, team_b in PAIRINGS[round_template["format"]]:
                match = crud.create_match(
                    db,
                    schemas.MatchCreate(
                        round_id=round_row.id,
                        team_a_players=[schemas.PlayerSideIn(player_id=player_id) for player_id in team_a],
                        team_b_players=[schemas.PlayerSideIn(player_id=player_id) for player_id in team_b],
                        handicap_indexes=[handicaps[player_id] for player_id in team_a + team_b],
                    ),
                )
                if first_match_id is None:
                    first_match_id = match.id

        if demo_progress and first_match_id is not None:
            apply_demo_progress(db, first_match_id)

        logger.info("Seeded tournament %s with %d round(s)", tournament.id, len(ROUNDS))
    finally:
        db.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed match play demo data.")
    parser.add_argument(
        "--demo-progress",
        action="store_true",
        help="Enter scores on holes 1-16 of the first best-ball match.",
    )
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)
    seed(demo_progress=args.demo_progress)
    mode = "demo" if args.demo_progress else "fresh"
    print(f"Seed completed ({mode})")
