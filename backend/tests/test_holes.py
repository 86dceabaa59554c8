from matchplay.scoring.holes import (
    BestBallHole,
    PlayerSide,
    ScrambleHole,
    ShambleHole,
    SinglesHole,
    decide_hole,
    normalize_format,
    normalize_holes,
    parse_hole_input,
    parse_side,
)


def strokes_on(*holes: int) -> tuple[int, ...]:
    return tuple(1 if number in holes else 0 for number in range(1, 19))


def test_singles_applies_strokes():
    side_a = [PlayerSide("a1", strokes_on(1))]
    side_b = [PlayerSide("b1")]

    assert decide_hole("singles", 1, SinglesHole(4, 4), side_a, side_b) == "teamA"
    assert decide_hole("singles", 2, SinglesHole(4, 4), side_a, side_b) == "AS"


def test_scramble_tie_is_halved():
    hole = ScrambleHole(team_a_gross=3, team_b_gross=3)

    assert decide_hole("twoManScramble", 1, hole, [PlayerSide(), PlayerSide()], [PlayerSide(), PlayerSide()]) == "AS"


def test_best_ball_uses_each_players_net():
    side_a = [PlayerSide("a1"), PlayerSide("a2", strokes_on(1))]
    side_b = [PlayerSide("b1"), PlayerSide("b2")]
    hole = BestBallHole(team_a_gross=(5, 4), team_b_gross=(4, 4))

    assert decide_hole("twoManBestBall", 1, hole, side_a, side_b) == "teamA"


def test_shamble_ignores_strokes():
    side_a = [PlayerSide("a1"), PlayerSide("a2")]
    side_b = [PlayerSide("b1", strokes_on(1)), PlayerSide("b2", strokes_on(1))]
    hole = ShambleHole(team_a_gross=(4, 5), team_b_gross=(4, 6))

    assert decide_hole("twoManShamble", 1, hole, side_a, side_b) == "AS"


def test_partial_input_is_undecided():
    sides = [PlayerSide(), PlayerSide()]

    assert decide_hole("twoManBestBall", 1, BestBallHole((4, None), (4, 4)), sides, sides) is None
    assert decide_hole("twoManShamble", 1, ShambleHole((3, 4), (None, None)), sides, sides) is None
    assert decide_hole("singles", 1, SinglesHole(4, None), sides[:1], sides[:1]) is None
    assert decide_hole("twoManScramble", 1, ScrambleHole(None, 4), sides, sides) is None


def test_malformed_scores_are_treated_as_missing():
    hole = parse_hole_input("twoManScramble", {"team_a_gross": "4", "team_b_gross": True, "team_a_drive": 2})

    assert hole == ScrambleHole(team_a_gross=None, team_b_gross=None, team_a_drive=None, team_b_drive=None)


def test_legacy_singles_hole_uses_first_array_entry():
    hole = parse_hole_input(
        "singles",
        {"team_a_players_gross": [5, None], "team_b_players_gross": [4]},
    )

    assert hole == SinglesHole(team_a_gross=5, team_b_gross=4)


def test_normalize_format_defaults_and_aliases():
    assert normalize_format("singles") == "singles"
    assert normalize_format("fourManScramble") == "twoManScramble"
    assert normalize_format("skins") == "twoManBestBall"
    assert normalize_format(None) == "twoManBestBall"


def test_normalize_holes_accepts_legacy_keyed_map():
    holes = normalize_holes(
        "twoManScramble",
        {"1": {"team_a_gross": 4, "team_b_gross": 5}, "18": {"team_a_gross": 3}, "19": {}, "01": {"team_a_gross": 9}},
    )

    assert len(holes) == 18
    assert holes[0]["team_a_gross"] == 4
    assert holes[17] == {"team_a_gross": 3, "team_b_gross": None, "team_a_drive": None, "team_b_drive": None}
    assert all(hole["team_a_gross"] is None for hole in holes[1:17])


def test_parse_side_pads_and_resets_bad_stroke_arrays():
    side = parse_side([{"player_id": "a1", "strokes_received": [1, 1]}], 2)

    assert side[0] == PlayerSide("a1", (0,) * 18)
    assert side[1] == PlayerSide()


def test_stroke_values_other_than_one_become_zero():
    side = parse_side([{"player_id": "a1", "strokes_received": [2, 1, True] + [0] * 15}], 1)

    assert side[0].strokes_received[:3] == (0, 1, 0)
