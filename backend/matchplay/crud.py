import hashlib
import json
import logging
import os
from collections.abc import Callable
from dataclasses import dataclass, replace

from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from . import models, schemas
from .scoring import holes as hole_rules
from .scoring.aggregate import aggregate_player_stats, scopes_for_fact
from .scoring.context import (
    RoundContext,
    TournamentContext,
    build_round_context,
    build_tournament_context,
    parse_course_holes,
)
from .scoring.facts import PlayerMatchFact, build_match_facts, fact_from_dict
from .scoring.skins import SkinsPlayer, compute_skins, players_from_match, skins_enabled
from .scoring.strokes import DEFAULT_COURSE_PAR, allocate_match_strokes, skins_strokes
from .scoring.summary import MatchState, default_status, summarize

logger = logging.getLogger(__name__)

LIST_APPEND_MAX_RETRIES = int(os.getenv("LIST_APPEND_MAX_RETRIES", "5"))

StatsKey = tuple[str, str, str]

_SCOPE_COLUMNS = {
    "series": models.PlayerMatchFact.series,
    "tournament": models.PlayerMatchFact.tournament_id,
    "round": models.PlayerMatchFact.round_id,
}


def _hole_fields(format: hole_rules.RoundFormat) -> set[str]:
    return set(hole_rules.hole_to_raw(hole_rules.parse_hole_input(format, {})))


# ---------------------------------------------------------------------------
# Shared list fields
# ---------------------------------------------------------------------------


def _update_list(
    db: Session,
    model: type,
    row_id: int,
    attribute: str,
    change: Callable[[list[int]], list[int]],
) -> None:
    """Read-modify-write a JSON id list under the row's version counter.

    A concurrent writer bumps the version first and our UPDATE matches no
    row, which SQLAlchemy reports as ``StaleDataError``. The session is
    rolled back and the list re-read before trying again.
    """
    for attempt in range(1, LIST_APPEND_MAX_RETRIES + 1):
        row = db.get(model, row_id, populate_existing=True)
        if row is None:
            raise LookupError(f"{model.__name__} not found.")

        current = list(getattr(row, attribute) or [])
        updated = change(current)
        if updated == current:
            return

        setattr(row, attribute, updated)
        try:
            db.commit()
            return
        except StaleDataError:
            db.rollback()
            logger.warning(
                "Concurrent update of %s %s.%s, retry %d/%d",
                model.__name__,
                row_id,
                attribute,
                attempt,
                LIST_APPEND_MAX_RETRIES,
            )
            if attempt == LIST_APPEND_MAX_RETRIES:
                raise


def append_to_list(db: Session, model: type, row_id: int, attribute: str, value: int) -> None:
    _update_list(db, model, row_id, attribute, lambda ids: ids if value in ids else ids + [value])


def remove_from_list(db: Session, model: type, row_id: int, attribute: str, value: int) -> None:
    _update_list(db, model, row_id, attribute, lambda ids: [item for item in ids if item != value])


# ---------------------------------------------------------------------------
# Tournaments, courses and rounds
# ---------------------------------------------------------------------------


def _team_defaults(team: schemas.TeamSetup | None, fallback_id: str) -> dict[str, object]:
    data = team.model_dump() if team else {}
    return {
        "id": data.get("id") or fallback_id,
        "name": data.get("name") or "",
        "captain_id": data.get("captain_id") or "",
        "co_captain_id": data.get("co_captain_id") or "",
        "roster_by_tier": data.get("roster_by_tier") or {},
        "handicap_by_player": data.get("handicap_by_player") or {},
    }


def create_tournament(db: Session, payload: schemas.TournamentCreate) -> models.Tournament:
    name = " ".join(payload.name.split())
    if not name:
        raise ValueError("Tournament name cannot be empty.")

    tournament = models.Tournament(
        name=name,
        year=payload.year,
        series=payload.series.strip(),
        team_a=_team_defaults(payload.team_a, "teamA"),
        team_b=_team_defaults(payload.team_b, "teamB"),
        round_ids=[],
    )
    db.add(tournament)
    db.commit()
    db.refresh(tournament)
    return tournament


def get_tournament_or_raise(db: Session, tournament_id: int) -> models.Tournament:
    tournament = db.get(models.Tournament, tournament_id)
    if not tournament:
        raise LookupError("Tournament not found.")
    return tournament


def create_course(db: Session, payload: schemas.CourseCreate) -> models.Course:
    holes = [hole.model_dump() for hole in payload.holes]
    if holes:
        if len(holes) != hole_rules.HOLE_COUNT:
            raise ValueError("A course needs either no hole data or all 18 holes.")
        if sorted(hole["number"] for hole in holes) != list(range(1, hole_rules.HOLE_COUNT + 1)):
            raise ValueError("Course holes must be numbered 1 to 18 exactly once.")
        if len({hole["hcp_index"] for hole in holes}) != hole_rules.HOLE_COUNT:
            raise ValueError("Each hole needs a distinct handicap index.")
        holes.sort(key=lambda hole: hole["number"])
    else:
        holes = [
            {"number": hole.number, "par": hole.par, "hcp_index": hole.hcp_index}
            for hole in parse_course_holes(None)
        ]

    par = payload.par or sum(hole["par"] for hole in holes) or DEFAULT_COURSE_PAR
    course = models.Course(
        name=" ".join(payload.name.split()),
        par=par,
        slope_rating=payload.slope_rating,
        course_rating=payload.course_rating,
        holes=holes,
    )
    db.add(course)
    db.commit()
    db.refresh(course)
    return course


def get_course_or_raise(db: Session, course_id: int) -> models.Course:
    course = db.get(models.Course, course_id)
    if not course:
        raise LookupError("Course not found.")
    return course


def create_round(db: Session, payload: schemas.RoundCreate) -> models.Round:
    get_tournament_or_raise(db, payload.tournament_id)
    if payload.course_id is not None:
        get_course_or_raise(db, payload.course_id)

    round_row = models.Round(
        tournament_id=payload.tournament_id,
        course_id=payload.course_id,
        format=hole_rules.normalize_format(payload.format),
        day=payload.day,
        points_value=payload.points_value,
        skins_gross_pot=payload.skins_gross_pot,
        skins_net_pot=payload.skins_net_pot,
        skins_handicap_percent=payload.skins_handicap_percent,
        match_ids=[],
    )
    db.add(round_row)
    db.commit()
    db.refresh(round_row)

    append_to_list(db, models.Tournament, payload.tournament_id, "round_ids", round_row.id)
    return get_round_or_raise(db, round_row.id)


def get_round_or_raise(db: Session, round_id: int) -> models.Round:
    round_row = db.get(models.Round, round_id)
    if not round_row:
        raise LookupError("Round not found.")
    return round_row


# ---------------------------------------------------------------------------
# Context
# ---------------------------------------------------------------------------


def _round_context(round_row: models.Round | None) -> RoundContext:
    if round_row is None:
        return build_round_context()

    course = round_row.course
    return build_round_context(
        round_id=str(round_row.id),
        format=round_row.format,
        points_value=round_row.points_value,
        day=round_row.day,
        course_id=str(course.id) if course else "",
        course_par=course.par if course else None,
        course_holes=course.holes if course else None,
    )


def _tournament_context(tournament: models.Tournament | None) -> TournamentContext:
    if tournament is None:
        return build_tournament_context()

    return build_tournament_context(
        tournament_id=str(tournament.id),
        name=tournament.name,
        year=tournament.year,
        series=tournament.series,
        team_a=tournament.team_a,
        team_b=tournament.team_b,
    )


# ---------------------------------------------------------------------------
# Matches
# ---------------------------------------------------------------------------


def _side_to_raw(players: list[hole_rules.PlayerSide]) -> list[dict[str, object]]:
    return [
        {"player_id": player.player_id, "strokes_received": list(player.strokes_received)}
        for player in players
    ]


def seed_match_defaults(
    format: object,
    team_a_players: object = None,
    team_b_players: object = None,
    holes: object = None,
) -> dict[str, object]:
    """Normalized column values for a new match row."""
    round_format = hole_rules.normalize_format(format)
    count = hole_rules.players_per_side(round_format)
    return {
        "format": round_format,
        "holes": hole_rules.normalize_holes(round_format, holes),
        "team_a_players": _side_to_raw(hole_rules.parse_side(team_a_players, count)),
        "team_b_players": _side_to_raw(hole_rules.parse_side(team_b_players, count)),
        "status": default_status().to_dict(),
        "result": {},
    }


def create_match(db: Session, payload: schemas.MatchCreate) -> models.Match:
    round_row = get_round_or_raise(db, payload.round_id)
    round_format = hole_rules.normalize_format(round_row.format)
    count = hole_rules.players_per_side(round_format)

    team_a = [player.model_dump() for player in payload.team_a_players]
    team_b = [player.model_dump() for player in payload.team_b_players]
    if len(team_a) > count or len(team_b) > count:
        raise ValueError(f"A {round_format} match takes {count} player(s) per side.")

    defaults = seed_match_defaults(round_format, team_a, team_b, payload.holes)
    course_handicaps: list[float] = list(payload.course_handicaps or [])

    if payload.handicap_indexes is not None:
        if len(payload.handicap_indexes) != count * 2:
            raise ValueError(f"Expected {count * 2} handicap indexes, team A players first.")

        course = round_row.course
        raw_handicaps, _, allocations = allocate_match_strokes(
            payload.handicap_indexes,
            slope_rating=course.slope_rating if course else None,
            course_rating=course.course_rating if course else None,
            par=course.par if course else DEFAULT_COURSE_PAR,
            course_holes=parse_course_holes(course.holes if course else None),
        )
        for side_key, offset in (("team_a_players", 0), ("team_b_players", count)):
            for index, player in enumerate(defaults[side_key]):  # type: ignore[arg-type]
                player["strokes_received"] = allocations[offset + index]
        course_handicaps = [float(value) for value in raw_handicaps]

    match = models.Match(
        round_id=round_row.id,
        tournament_id=round_row.tournament_id,
        course_handicaps=course_handicaps,
        **defaults,
    )
    db.add(match)
    db.commit()
    db.refresh(match)

    append_to_list(db, models.Round, round_row.id, "match_ids", match.id)
    recompute_match(db, match.id, force=True)
    return get_match_or_raise(db, match.id)


def get_match_or_raise(db: Session, match_id: int) -> models.Match:
    match = db.get(models.Match, match_id)
    if not match:
        raise LookupError("Match not found.")
    return match


def update_hole(db: Session, match_id: int, hole_number: int, payload: schemas.HoleUpdate) -> models.Match:
    if not 1 <= hole_number <= hole_rules.HOLE_COUNT:
        raise ValueError("Hole number must be between 1 and 18.")

    match = get_match_or_raise(db, match_id)
    round_format = hole_rules.normalize_format(match.format)

    changes = payload.model_dump(exclude_unset=True)
    unexpected = sorted(set(changes) - _hole_fields(round_format))
    if unexpected:
        raise ValueError(f"Fields not used by {round_format} holes: {', '.join(unexpected)}.")

    holes = hole_rules.normalize_holes(round_format, match.holes)
    merged = {**holes[hole_number - 1], **changes}
    holes[hole_number - 1] = hole_rules.hole_to_raw(hole_rules.parse_hole_input(round_format, merged))
    match.holes = holes
    db.commit()

    recompute_match(db, match_id)
    return get_match_or_raise(db, match_id)


def delete_match(db: Session, match_id: int) -> None:
    match = get_match_or_raise(db, match_id)
    round_id = match.round_id

    rows = db.query(models.PlayerMatchFact).filter(models.PlayerMatchFact.match_id == match_id).all()
    touched = _stats_keys([fact_from_dict(row.data) for row in rows])
    for row in rows:
        db.delete(row)
    db.delete(match)
    db.flush()

    _rebuild_stats(db, touched)
    db.commit()
    logger.info("Deleted match %s and %d fact(s)", match_id, len(rows))

    if db.get(models.Round, round_id) is not None:
        remove_from_list(db, models.Round, round_id, "match_ids", match_id)


def list_match_facts(db: Session, match_id: int) -> list[models.PlayerMatchFact]:
    get_match_or_raise(db, match_id)
    return (
        db.query(models.PlayerMatchFact)
        .filter(models.PlayerMatchFact.match_id == match_id)
        .order_by(models.PlayerMatchFact.player_id.asc())
        .all()
    )


# ---------------------------------------------------------------------------
# Recompute
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class _Evaluation:
    compute_sig: str
    state: MatchState
    facts: list[PlayerMatchFact]


def _compute_sig(match: models.Match, round_ctx: RoundContext) -> str:
    payload = {
        "format": match.format,
        "holes": match.holes,
        "team_a_players": match.team_a_players,
        "team_b_players": match.team_b_players,
        "course_handicaps": match.course_handicaps,
        "points_value": round_ctx.points_value,
        "course_par": round_ctx.course_par,
        "pars": [hole.par for hole in round_ctx.course_holes],
    }
    encoded = json.dumps(payload, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha256(encoded.encode("utf-8")).hexdigest()


def _evaluate(db: Session, match: models.Match) -> _Evaluation:
    round_ctx = _round_context(db.get(models.Round, match.round_id))
    tournament_ctx = _tournament_context(db.get(models.Tournament, match.tournament_id))

    round_format = hole_rules.normalize_format(match.format)
    round_ctx = replace(round_ctx, format=round_format)

    count = hole_rules.players_per_side(round_format)
    holes = hole_rules.parse_holes(round_format, match.holes)
    side_a = hole_rules.parse_side(match.team_a_players, count)
    side_b = hole_rules.parse_side(match.team_b_players, count)

    state = summarize(round_format, holes, side_a, side_b)
    facts = build_match_facts(
        str(match.id),
        holes,
        side_a,
        side_b,
        state,
        round_ctx=round_ctx,
        tournament_ctx=tournament_ctx,
        course_handicaps=list(match.course_handicaps or []),
    )
    return _Evaluation(compute_sig=_compute_sig(match, round_ctx), state=state, facts=facts)


def recompute_match(db: Session, match_id: int, force: bool = False) -> tuple[models.Match, bool]:
    """Recompute status, facts and affected stats for one match.

    Returns the match and whether anything was recomputed. Unchanged
    scoring inputs are detected by hash and skipped unless ``force``.
    """
    match = get_match_or_raise(db, match_id)
    evaluation = _evaluate(db, match)

    if not force and match.compute_sig == evaluation.compute_sig:
        logger.debug("Match %s inputs unchanged, skipping recompute", match_id)
        return match, False

    status = evaluation.state.status.to_dict()
    result = evaluation.state.result.to_dict()
    if match.status != status or match.result != result:
        logger.info(
            "Match %s status now %s thru %d%s",
            match_id,
            evaluation.state.score_line,
            evaluation.state.status.thru,
            " (closed)" if evaluation.state.status.closed else "",
        )

    match.status = status
    match.result = result
    match.compute_sig = evaluation.compute_sig

    touched = _replace_facts(db, match, evaluation.facts)
    db.flush()
    _rebuild_stats(db, touched)
    db.commit()
    return match, True


def _stats_keys(facts: list[PlayerMatchFact]) -> set[StatsKey]:
    keys: set[StatsKey] = set()
    for fact in facts:
        for scope_type, scope_key in scopes_for_fact(fact):
            keys.add((fact.player_id, scope_type, scope_key))
    return keys


def _replace_facts(db: Session, match: models.Match, facts: list[PlayerMatchFact]) -> set[StatsKey]:
    existing = {
        row.id: row
        for row in db.query(models.PlayerMatchFact).filter(models.PlayerMatchFact.match_id == match.id).all()
    }
    touched = _stats_keys([fact_from_dict(row.data) for row in existing.values()])
    touched |= _stats_keys(facts)

    written = 0
    for fact in facts:
        data = fact.to_dict()
        row = existing.pop(fact.key, None)
        if row is None:
            row = models.PlayerMatchFact(id=fact.key, match_id=match.id, player_id=fact.player_id)
            db.add(row)
        row.tournament_id = fact.tournament_id
        row.round_id = fact.round_id
        row.series = fact.tournament_series
        row.data = data
        written += 1

    for row in existing.values():
        db.delete(row)

    if written:
        logger.info("Wrote %d fact(s) for match %s", written, match.id)
    if existing:
        logger.info("Deleted %d stale fact(s) for match %s", len(existing), match.id)
    return touched


def _rebuild_stats(db: Session, keys: set[StatsKey]) -> None:
    for player_id, scope_type, scope_key in sorted(keys):
        rows = (
            db.query(models.PlayerMatchFact)
            .filter(
                models.PlayerMatchFact.player_id == player_id,
                _SCOPE_COLUMNS[scope_type] == scope_key,
            )
            .all()
        )
        stats = aggregate_player_stats(
            player_id,
            scope_type,  # type: ignore[arg-type]
            scope_key,
            [fact_from_dict(row.data) for row in rows],
        )

        stored = (
            db.query(models.PlayerStats)
            .filter(
                models.PlayerStats.player_id == player_id,
                models.PlayerStats.scope_type == scope_type,
                models.PlayerStats.scope_key == scope_key,
            )
            .first()
        )
        if stats is None:
            if stored is not None:
                db.delete(stored)
                logger.debug("Deleted %s stats for %s in %s", scope_type, player_id, scope_key)
            continue

        if stored is None:
            stored = models.PlayerStats(player_id=player_id, scope_type=scope_type, scope_key=scope_key)
            db.add(stored)
        stored.data = stats.to_dict()
        logger.debug("Rebuilt %s stats for %s in %s", scope_type, player_id, scope_key)


def recompute_all(db: Session, dry_run: bool = True, confirm: bool = False) -> schemas.AdminRecomputeReport:
    if not dry_run and not confirm:
        raise ValueError("Regenerating every match requires confirm=true (or run with dry_run=true).")

    matches = db.query(models.Match).order_by(models.Match.id.asc()).all()
    changed: list[int] = []
    facts_written = 0
    facts_deleted = 0

    for match in matches:
        evaluation = _evaluate(db, match)
        stored = {
            row.id: row.data
            for row in db.query(models.PlayerMatchFact).filter(models.PlayerMatchFact.match_id == match.id).all()
        }
        fresh = {fact.key: fact.to_dict() for fact in evaluation.facts}
        differs = (
            match.status != evaluation.state.status.to_dict()
            or match.result != evaluation.state.result.to_dict()
            or stored != fresh
        )
        if not differs:
            continue

        changed.append(match.id)
        facts_written += len(fresh)
        facts_deleted += len(set(stored) - set(fresh))
        if not dry_run:
            recompute_match(db, match.id, force=True)

    logger.info(
        "Admin recompute%s: %d match(es) scanned, %d changed",
        " (dry run)" if dry_run else "",
        len(matches),
        len(changed),
    )
    return schemas.AdminRecomputeReport(
        dry_run=dry_run,
        matches_scanned=len(matches),
        matches_changed=len(changed),
        facts_written=facts_written,
        facts_deleted=facts_deleted,
        changed_match_ids=changed,
    )


# ---------------------------------------------------------------------------
# Stats and skins
# ---------------------------------------------------------------------------


def get_player_stats(db: Session, player_id: str, scope_type: str, scope_key: str) -> models.PlayerStats:
    row = (
        db.query(models.PlayerStats)
        .filter(
            models.PlayerStats.player_id == player_id,
            models.PlayerStats.scope_type == scope_type,
            models.PlayerStats.scope_key == scope_key,
        )
        .first()
    )
    if not row:
        raise LookupError("No stats for this player in this scope.")
    return row


def list_scope_stats(db: Session, scope_type: str, scope_key: str) -> list[models.PlayerStats]:
    return (
        db.query(models.PlayerStats)
        .filter(models.PlayerStats.scope_type == scope_type, models.PlayerStats.scope_key == scope_key)
        .all()
    )


def compute_round_skins(db: Session, round_id: int) -> schemas.SkinsRead:
    round_row = get_round_or_raise(db, round_id)
    round_format = hole_rules.normalize_format(round_row.format)
    if not skins_enabled(round_format, round_row.skins_gross_pot, round_row.skins_net_pot):
        return schemas.SkinsRead(round_id=round_id, enabled=False)

    course = round_row.course
    course_holes = parse_course_holes(course.holes if course else None)
    tournament_ctx = _tournament_context(round_row.tournament)
    count = hole_rules.players_per_side(round_format)

    players: dict[str, SkinsPlayer] = {}
    matches = (
        db.query(models.Match)
        .filter(models.Match.round_id == round_id)
        .order_by(models.Match.id.asc())
        .all()
    )
    for match in matches:
        holes = hole_rules.parse_holes(round_format, match.holes)
        side_a = hole_rules.parse_side(match.team_a_players, count)
        side_b = hole_rules.parse_side(match.team_b_players, count)
        for player_id, gross in players_from_match(holes, side_a, side_b):
            if player_id in players:
                continue
            strokes = skins_strokes(
                tournament_ctx.handicap_of(player_id) or 0,
                round_row.skins_handicap_percent,
                slope_rating=course.slope_rating if course else None,
                course_rating=course.course_rating if course else None,
                par=course.par if course else DEFAULT_COURSE_PAR,
                course_holes=course_holes,
            )
            players[player_id] = SkinsPlayer(player_id=player_id, gross=gross, strokes=tuple(strokes))

    pars = [hole.par for hole in sorted(course_holes, key=lambda hole: hole.number)]
    result = compute_skins(
        list(players.values()),
        pars,
        gross_pot=round_row.skins_gross_pot,
        net_pot=round_row.skins_net_pot,
    )
    data = result.to_dict()
    return schemas.SkinsRead(
        round_id=round_id,
        enabled=True,
        gross_pot=result.gross_pot,
        net_pot=result.net_pot,
        holes=data["holes"],  # type: ignore[arg-type]
        player_totals=data["player_totals"],  # type: ignore[arg-type]
    )
