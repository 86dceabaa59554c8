import pytest

from matchplay.scoring.strokes import (
    CourseHole,
    allocate_match_strokes,
    course_handicap,
    round_half_up,
    skins_strokes,
    spin_down,
    strokes_received,
)


def test_course_handicap_is_unrounded():
    assert course_handicap(10, slope_rating=130, course_rating=73, par=72) == pytest.approx(10 * 130 / 113 + 1)


def test_missing_rating_is_treated_as_par():
    assert course_handicap(12, slope_rating=113) == pytest.approx(12)


def test_malformed_inputs_fall_back_to_defaults():
    assert course_handicap("abc", slope_rating=None, course_rating="n/a", par=None) == 0
    assert course_handicap("8.5") == pytest.approx(8.5)


def test_round_half_up_matches_scorecard_rounding():
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(2.49) == 2


def test_spin_down_rebases_on_lowest_player():
    assert spin_down([11.5, 5.2, 20.4]) == [6, 0, 15]
    assert spin_down([]) == []


def test_strokes_go_to_hardest_holes_first():
    holes = [CourseHole(number=number, par=4, hcp_index=19 - number) for number in range(1, 19)]

    strokes = strokes_received(3, holes)

    assert strokes[15:] == [1, 1, 1]
    assert sum(strokes) == 3


def test_strokes_never_exceed_one_per_hole():
    strokes = strokes_received(25)

    assert strokes == [1] * 18


def test_negative_allowance_gives_no_strokes():
    assert strokes_received(-4) == [0] * 18


def test_allocate_match_strokes_spins_down_the_field():
    course_handicaps, adjusted, allocations = allocate_match_strokes([4.0, 10.0, 6.0, 2.0])

    assert course_handicaps == [4, 10, 6, 2]
    assert adjusted == [2, 8, 4, 0]
    assert [sum(strokes) for strokes in allocations] == [2, 8, 4, 0]
    assert allocations[3] == [0] * 18
    assert allocations[0][:2] == [1, 1]


def test_skins_strokes_scale_by_percentage_without_spin_down():
    assert sum(skins_strokes(10, 80)) == 8
    assert sum(skins_strokes(10, 85)) == 9
    assert sum(skins_strokes(10, "bad")) == 10
