"""Handicap index → course handicap → per-hole stroke allowance."""

import math
from collections.abc import Sequence
from dataclasses import dataclass

from .holes import HOLE_COUNT, is_score

DEFAULT_COURSE_PAR = 72
DEFAULT_SLOPE_RATING = 113


@dataclass(frozen=True)
class CourseHole:
    number: int
    par: int = 4
    hcp_index: int = 0


def default_course_holes() -> list[CourseHole]:
    return [CourseHole(number=number, par=4, hcp_index=number) for number in range(1, HOLE_COUNT + 1)]


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _number(value: object, default: float) -> float:
    if is_score(value):
        return float(value)  # type: ignore[arg-type]
    if isinstance(value, str):
        try:
            parsed = float(value)
        except ValueError:
            return default
        return parsed if math.isfinite(parsed) else default
    return default


def course_handicap(
    handicap_index: object,
    slope_rating: object = DEFAULT_SLOPE_RATING,
    course_rating: object = None,
    par: object = DEFAULT_COURSE_PAR,
) -> float:
    """Unrounded course handicap: ``index * slope / 113 + (rating - par)``.

    A missing or non-numeric course rating is treated as equal to par, so
    the second term drops out.
    """
    index = _number(handicap_index, 0.0)
    slope = _number(slope_rating, DEFAULT_SLOPE_RATING) or DEFAULT_SLOPE_RATING
    par_value = _number(par, DEFAULT_COURSE_PAR) or DEFAULT_COURSE_PAR
    rating = _number(course_rating, par_value)
    return index * (slope / DEFAULT_SLOPE_RATING) + (rating - par_value)


def spin_down(course_handicaps: Sequence[float]) -> list[int]:
    """Re-base every handicap on the lowest one in the field, then round once."""
    if not course_handicaps:
        return []
    lowest = min(course_handicaps)
    return [max(0, round_half_up(value - lowest)) for value in course_handicaps]


def strokes_received(adjusted_handicap: int, course_holes: Sequence[CourseHole] | None = None) -> list[int]:
    holes = list(course_holes) if course_holes else default_course_holes()
    strokes = [0] * HOLE_COUNT

    by_difficulty = sorted(holes, key=lambda hole: (hole.hcp_index, hole.number))
    count = min(max(0, adjusted_handicap), HOLE_COUNT, len(by_difficulty))
    for hole in by_difficulty[:count]:
        if 1 <= hole.number <= HOLE_COUNT:
            strokes[hole.number - 1] = 1

    return strokes


def allocate_match_strokes(
    handicap_indexes: Sequence[object],
    slope_rating: object = DEFAULT_SLOPE_RATING,
    course_rating: object = None,
    par: object = DEFAULT_COURSE_PAR,
    course_holes: Sequence[CourseHole] | None = None,
) -> tuple[list[int], list[int], list[list[int]]]:
    """Spin the field down and allocate strokes for every player.

    Returns the rounded course handicaps, the rounded spun-down handicaps and
    one 18-slot stroke list per player, all in the order of ``handicap_indexes``.
    Only the spun-down values drive stroke allocation.
    """
    raw = [course_handicap(index, slope_rating, course_rating, par) for index in handicap_indexes]
    adjusted = spin_down(raw)
    allocations = [strokes_received(value, course_holes) for value in adjusted]
    return [round_half_up(value) for value in raw], adjusted, allocations


def skins_strokes(
    handicap_index: object,
    handicap_percent: object,
    slope_rating: object = DEFAULT_SLOPE_RATING,
    course_rating: object = None,
    par: object = DEFAULT_COURSE_PAR,
    course_holes: Sequence[CourseHole] | None = None,
) -> list[int]:
    """Stroke allocation used by the skins game.

    No spin-down here: the full course handicap is scaled by the allowance
    percentage and rounded once.
    """
    percent = _number(handicap_percent, 100.0)
    allowance = course_handicap(handicap_index, slope_rating, course_rating, par) * (percent / 100)
    return strokes_received(round_half_up(allowance), course_holes)
