from matchplay.scoring.context import RoundContext, build_tournament_context
from matchplay.scoring.facts import build_match_facts, fact_from_dict
from matchplay.scoring.holes import BestBallHole, PlayerSide, ScrambleHole, ShambleHole, SinglesHole
from matchplay.scoring.summary import summarize

BEST_BALL = RoundContext(round_id="r1", format="twoManBestBall", points_value=1, day=1, course_id="c1")
SINGLES = RoundContext(round_id="r2", format="singles", points_value=1)
SCRAMBLE = RoundContext(round_id="r3", format="twoManScramble", points_value=2)
SHAMBLE = RoundContext(round_id="r4", format="twoManShamble", points_value=1)

TOURNAMENT = build_tournament_context(
    tournament_id="t1",
    name="Autumn Cup",
    year=2026,
    series="autumn-cup",
    team_a={
        "id": "aces",
        "captain_id": "a1",
        "co_captain_id": "a2",
        "roster_by_tier": {"A": ["a1"], "B": ["a2"]},
        "handicap_by_player": {"a1": 4.5, "a2": 12.0},
    },
    team_b={
        "id": "bogeys",
        "captain_id": "b1",
        "roster_by_tier": {"A": ["b1"], "B": ["b2"]},
        "handicap_by_player": {"b1": 6.1},
    },
)

PAIR_A = [PlayerSide("a1"), PlayerSide("a2")]
PAIR_B = [PlayerSide("b1"), PlayerSide("b2")]


def build(round_ctx, holes, side_a, side_b, course_handicaps=()):
    state = summarize(round_ctx.format, holes, side_a, side_b)
    facts = build_match_facts(
        "m1",
        holes,
        side_a,
        side_b,
        state,
        round_ctx=round_ctx,
        tournament_ctx=TOURNAMENT,
        course_handicaps=course_handicaps,
    )
    return state, {fact.player_id: fact for fact in facts}


def halved_best_ball(count: int) -> list[BestBallHole]:
    return [BestBallHole((4, 5), (4, 5)) for _ in range(count)]


def test_open_match_has_no_facts():
    holes = halved_best_ball(10) + [BestBallHole()] * 8

    state, facts = build(BEST_BALL, holes, PAIR_A, PAIR_B)

    assert not state.status.closed
    assert facts == {}


def test_decided_on_eighteen_from_all_square():
    holes = halved_best_ball(17) + [BestBallHole((5, 5), (4, 5))]

    state, facts = build(BEST_BALL, holes, PAIR_A, PAIR_B)

    assert state.result.winner == "teamB"
    assert all(fact.decided_on_18 for fact in facts.values())
    assert facts["b1"].won_18th_hole is True
    assert facts["b2"].won_18th_hole is True
    assert facts["a1"].won_18th_hole is False
    assert facts["a2"].won_18th_hole is False
    assert facts["b1"].outcome == "win"
    assert facts["a1"].points_earned == 0


def test_trailing_side_squaring_on_eighteen_is_decided_on_eighteen():
    holes = [BestBallHole((3, 5), (4, 5))] + halved_best_ball(16) + [BestBallHole((5, 5), (4, 5))]

    state, facts = build(BEST_BALL, holes, PAIR_A, PAIR_B)

    assert state.result.winner == "AS"
    assert facts["a1"].outcome == "halve"
    assert facts["a1"].points_earned == 0.5
    assert facts["a1"].decided_on_18 and facts["b1"].decided_on_18
    assert facts["b1"].won_18th_hole is True
    assert facts["a1"].won_18th_hole is False


def test_two_up_entering_eighteen_is_never_decided_on_eighteen():
    holes = [BestBallHole((3, 5), (4, 5))] * 2 + halved_best_ball(15) + [BestBallHole((5, 5), (4, 5))]

    _, facts = build(BEST_BALL, holes, PAIR_A, PAIR_B)

    assert not any(fact.decided_on_18 for fact in facts.values())
    assert facts["a1"].won_18th_hole is None


def test_jekyll_and_hyde_from_best_and_worst_ball_totals():
    best = [3, 3, 3, 3] + [4] * 14
    worst = [6, 6, 6] + [5] * 15
    holes = [BestBallHole((low, high), (low, low + 1)) for low, high in zip(best, worst)]

    state, facts = build(BEST_BALL, holes, PAIR_A, PAIR_B)

    assert state.status.thru == 18
    assert facts["a1"].best_ball_total == 68
    assert facts["a1"].worst_ball_total == 93
    assert facts["a1"].jekyll_and_hyde and facts["a2"].jekyll_and_hyde
    assert not facts["b1"].jekyll_and_hyde


def test_ham_and_egg_counts_net_par_with_partner_double():
    holes = [BestBallHole((4, 6), (5, 5))] + halved_best_ball(17)

    _, facts = build(BEST_BALL, holes, PAIR_A, PAIR_B)

    assert facts["a1"].ham_and_egg_count == 1
    assert facts["b1"].ham_and_egg_count == 0


def test_ball_usage_splits_solo_and_shared():
    holes = [BestBallHole((3, 5), (4, 4)), BestBallHole((4, 4), (4, 5))] + halved_best_ball(16)

    _, facts = build(BEST_BALL, holes, PAIR_A, PAIR_B)

    assert facts["a1"].balls_used == 18
    assert facts["a1"].balls_used_solo == 17
    assert facts["a1"].balls_used_shared == 1
    assert facts["a1"].balls_used_solo_won_hole == 1
    assert facts["a1"].balls_used_solo_push == 16
    assert facts["a2"].balls_used == 1
    assert facts["a1"].ball_used_on_18 is True
    assert facts["a2"].ball_used_on_18 is False


def test_best_ball_strokes_feed_net_ledger():
    side_a = [PlayerSide("a1"), PlayerSide("a2", (1,) + (0,) * 17)]
    holes = [BestBallHole((5, 5), (5, 5))] + halved_best_ball(17)

    _, facts = build(BEST_BALL, holes, side_a, PAIR_B)

    first = facts["a2"].hole_performance[0]
    assert first.result == "win"
    assert (first.gross, first.net, first.strokes, first.partner_net) == (5, 4, 1, 5)
    assert facts["a2"].strokes_given == 1
    assert len(facts["a2"].hole_performance) == 18


def test_captains_and_identity_snapshots():
    holes = [SinglesHole(4, 5)] * 10 + [SinglesHole()] * 8

    _, facts = build(SINGLES, holes, [PlayerSide("a1")], [PlayerSide("b1")])

    a1 = facts["a1"]
    assert a1.is_captain and facts["b1"].is_captain
    assert a1.captain_vs_captain and facts["b1"].captain_vs_captain
    assert a1.player_tier == "A"
    assert a1.player_handicap == 4.5
    assert a1.opponent_ids == ("b1",)
    assert a1.opponent_handicaps == (6.1,)
    assert a1.partner_ids == ()
    assert a1.player_team_id == "aces"
    assert a1.opponent_team_id == "bogeys"
    assert a1.tournament_series == "autumn-cup"
    assert a1.winning_hole == 10
    assert a1.final_margin == 10


def test_co_captain_is_not_captain_vs_captain():
    holes = [SinglesHole(4, 5)] * 10 + [SinglesHole()] * 8

    _, facts = build(SINGLES, holes, [PlayerSide("a2")], [PlayerSide("b1")])

    assert facts["a2"].is_co_captain
    assert not facts["a2"].is_captain
    assert not facts["a2"].captain_vs_captain
    assert not facts["b1"].captain_vs_captain


def test_unknown_players_degrade_to_defaults():
    holes = [SinglesHole(4, 5)] * 10 + [SinglesHole()] * 8

    _, facts = build(SINGLES, holes, [PlayerSide("x9")], [PlayerSide("b2")])

    assert facts["x9"].player_tier == "Unknown"
    assert facts["x9"].player_handicap is None
    assert facts["x9"].opponent_tiers == ("B",)
    assert facts["b2"].opponent_handicaps == (None,)


def test_empty_player_slots_get_no_fact():
    holes = [SinglesHole(4, 5)] * 10 + [SinglesHole()] * 8

    _, facts = build(SINGLES, holes, [PlayerSide("a1")], [PlayerSide("")])

    assert list(facts) == ["a1"]


def test_singles_totals_use_course_handicap_when_stored():
    holes = [SinglesHole(4, 5)] * 10 + [SinglesHole(5, 4)] * 8

    _, facts = build(SINGLES, holes, [PlayerSide("a1")], [PlayerSide("b1")], course_handicaps=[3, 0])

    a1 = facts["a1"]
    assert a1.total_gross == 80
    assert a1.total_net == 77
    assert a1.strokes_vs_par_gross == 8
    assert a1.strokes_vs_par_net == 5
    assert a1.player_course_handicap == 3
    assert a1.holes_played == 18
    assert a1.holes_won == 10 and a1.holes_lost == 0
    assert a1.drives_used is None
    assert a1.team_total_gross is None


def test_post_match_holes_count_for_scoring_but_not_momentum():
    closing = [ScrambleHole(3, 4, 0, 1)] * 10
    after = [ScrambleHole(5, 3, 1, 1)] * 8

    _, facts = build(SCRAMBLE, closing + after, PAIR_A, PAIR_B)

    a1 = facts["a1"]
    assert a1.winning_hole == 10
    assert a1.drives_used == 10
    assert facts["a2"].drives_used == 0
    assert a1.team_total_gross == 30 + 40
    assert a1.holes_played == 18
    assert a1.birdies == 10
    assert facts["b2"].drives_used == 10
    assert a1.points_earned == 2
    assert a1.total_gross is None
    assert a1.hole_performance[0].drive_used is True
    assert facts["a2"].hole_performance[0].drive_used is False


def test_comeback_win_and_blown_lead():
    results = [(5, 4)] * 3 + [(4, 4)] * 6 + [(4, 4)] + [(3, 4)] * 4 + [(4, 4)] * 4
    holes = [SinglesHole(a, b) for a, b in results]

    state, facts = build(SINGLES, holes, [PlayerSide("a1")], [PlayerSide("b1")])

    assert state.result.winner == "teamA"
    assert facts["a1"].comeback_win
    assert facts["b1"].blown_lead
    assert not facts["a1"].was_never_behind
    assert facts["a1"].lead_changes == 1


def test_shamble_counts_gross_balls_and_team_scores():
    holes = (
        [
            ShambleHole((4, 6), (5, 5), 0, 1),
            ShambleHole((3, 4), (4, 4), 1, 0),
            ShambleHole((5, None), (4, 4)),
        ]
        + [ShambleHole((4, 4), (5, 5))] * 7
        + [ShambleHole()] * 8
    )
    side_b = [PlayerSide("b1"), PlayerSide("b2", (1,) + (0,) * 17)]

    state, facts = build(SHAMBLE, holes, PAIR_A, side_b)

    assert state.status.closed
    assert state.score_line == "9&8"
    a1, a2, b1 = facts["a1"], facts["a2"], facts["b1"]
    assert (a1.balls_used, a1.balls_used_solo, a1.balls_used_shared) == (9, 2, 7)
    assert a1.balls_used_solo_won_hole == 2
    assert (a2.balls_used, a2.balls_used_solo) == (7, 0)
    assert b1.balls_used_solo == 0
    assert b1.balls_used_shared == 10
    assert a1.ham_and_egg_count == 1
    assert b1.ham_and_egg_count == 0
    assert a1.team_total_gross == 4 + 3 + 5 + 28
    assert b1.team_total_gross == 5 + 4 + 4 + 35
    assert (a1.drives_used, a2.drives_used) == (1, 1)
    assert (b1.drives_used, facts["b2"].drives_used) == (1, 1)
    assert a1.total_gross is None

    first = a1.hole_performance[0]
    assert (first.gross, first.partner_gross, first.drive_used) == (4, 6, True)
    assert a2.hole_performance[0].drive_used is False
    partial = a2.hole_performance[2]
    assert (partial.gross, partial.partner_gross, partial.result) == (None, 5, None)


def test_three_down_after_nine_then_winning_ten_is_a_comeback():
    holes = [SinglesHole(5, 4)] * 3 + [SinglesHole(4, 4)] * 6 + [SinglesHole(4, 5)] * 7 + [SinglesHole()] * 2

    state, facts = build(SINGLES, holes, [PlayerSide("a1")], [PlayerSide("b1")])

    assert state.score_line == "4&2"
    assert facts["a1"].comeback_win
    assert facts["b1"].blown_lead


def test_fact_round_trips_through_storage_form():
    holes = [SinglesHole(4, 5)] * 10 + [SinglesHole()] * 8
    _, facts = build(SINGLES, holes, [PlayerSide("a1")], [PlayerSide("b1")])

    fact = facts["a1"]

    assert fact_from_dict(fact.to_dict()) == fact
    assert fact.key == "m1_a1"
