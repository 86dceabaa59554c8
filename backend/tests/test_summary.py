from matchplay.scoring.holes import PlayerSide, ScrambleHole
from matchplay.scoring.summary import score_line, summarize

SIDE = [PlayerSide(), PlayerSide()]


def scramble(results: list[str | None]) -> list[ScrambleHole]:
    scores = {"A": (3, 4), "B": (4, 3), "H": (4, 4), None: (None, None)}
    holes = [ScrambleHole(*scores[result]) for result in results]
    return holes + [ScrambleHole()] * (18 - len(holes))


def run(results: list[str | None]):
    return summarize("twoManScramble", scramble(results), SIDE, SIDE)


def test_summarize_is_idempotent():
    results = ["A", "B", "H", None, "A", "A"]

    assert run(results) == run(results)
    assert run(results).status.to_dict() == run(results).status.to_dict()


def test_match_closes_three_and_one():
    state = run(["A", "B"] * 7 + ["A", "A", "A"])

    assert state.status.closed
    assert state.status.thru == 17
    assert state.status.margin == 3
    assert state.result.winner == "teamA"
    assert (state.result.holes_won_a, state.result.holes_won_b) == (10, 7)
    assert state.score_line == "3&1"


def test_dormie_before_closure():
    state = run(["A", "B"] * 7 + ["A", "A"])

    assert state.status.dormie
    assert not state.status.closed
    assert state.status.leader == "teamA"
    assert state.score_line == "2 UP"


def test_closed_invariants_hold():
    for results in (["A"] * 10, ["B", "H"] * 9, ["H"] * 18, ["A", "B"] * 9):
        state = run(results)
        status = state.status
        assert status.margin == abs(state.result.holes_won_a - state.result.holes_won_b)
        if status.closed:
            assert status.margin > 18 - status.thru or status.thru == 18


def test_holes_after_closure_do_not_change_status():
    closed_early = run(["A"] * 10)
    with_extra_holes = run(["A"] * 10 + ["B"] * 8)

    assert closed_early == with_extra_holes
    assert closed_early.status.thru == 10
    assert closed_early.score_line == "10&8"


def test_gaps_are_skipped_but_later_holes_advance_thru():
    state = run(["A", None, "B"])

    assert state.status.thru == 3
    assert state.status.leader is None
    assert state.status.margin_history == (1, 0)
    assert state.score_line == "AS"


def test_all_square_after_eighteen_is_halved():
    state = run(["A", "B"] * 9)

    assert state.status.closed
    assert state.result.winner == "AS"
    assert state.score_line == "AS"


def test_one_up_after_eighteen():
    state = run(["A", "B"] * 8 + ["H", "A"])

    assert state.status.closed
    assert state.result.winner == "teamA"
    assert score_line(state.status) == "1 UP"


def test_three_down_on_the_back_nine_sets_momentum_flag():
    state = run(["B"] * 3 + ["H"] * 6 + ["H"])

    assert state.status.was_team_a_down_3_plus_back9
    assert not state.status.was_team_a_up_3_plus_back9


def test_three_down_after_nine_counts_even_when_ten_is_won():
    state = run(["B"] * 3 + ["H"] * 6 + ["A"] * 7)

    assert state.status.closed
    assert state.result.winner == "teamA"
    assert state.score_line == "4&2"
    assert state.status.margin_history[8:10] == (-3, -2)
    assert state.status.was_team_a_down_3_plus_back9


def test_three_down_only_on_front_nine_does_not_count():
    state = run(["B"] * 3 + ["H"] * 5 + ["A"])

    assert not state.status.was_team_a_down_3_plus_back9


def test_nothing_entered_is_open():
    state = run([])

    assert not state.status.closed
    assert state.status.thru == 0
    assert state.result.winner == "AS"
