from dataclasses import replace

from matchplay.scoring.aggregate import aggregate_player_stats, scopes_for_fact
from matchplay.scoring.context import RoundContext, build_tournament_context
from matchplay.scoring.facts import build_match_facts
from matchplay.scoring.holes import PlayerSide, SinglesHole
from matchplay.scoring.summary import summarize


def singles_fact(player_id: str = "a1", series: str = "autumn-cup"):
    holes = [SinglesHole(4, 5)] * 10 + [SinglesHole()] * 8
    side_a = [PlayerSide(player_id)]
    side_b = [PlayerSide("b1")]
    state = summarize("singles", holes, side_a, side_b)
    facts = build_match_facts(
        "m1",
        holes,
        side_a,
        side_b,
        state,
        round_ctx=RoundContext(round_id="r1", format="singles", points_value=1),
        tournament_ctx=build_tournament_context(
            tournament_id="t1",
            series=series,
            team_a={"captain_id": player_id},
        ),
    )
    return facts[0]


def test_empty_scope_returns_none():
    assert aggregate_player_stats("a1", "tournament", "t1", []) is None
    assert aggregate_player_stats("a1", "tournament", "t2", [singles_fact()]) is None


def test_record_points_and_scoring_sums():
    win = singles_fact()
    loss = replace(win, match_id="m2", outcome="loss", points_earned=0, total_gross=90, total_net=88)
    halve = replace(win, match_id="m3", outcome="halve", points_earned=0.5, format="twoManBestBall")

    stats = aggregate_player_stats("a1", "tournament", "t1", [win, loss, halve])

    assert (stats.wins, stats.losses, stats.halves) == (1, 1, 1)
    assert stats.matches_played == 3
    assert stats.points == 1.5
    assert stats.points_per_match == 0.5
    assert stats.by_format["singles"].matches == 2
    assert stats.by_format["twoManBestBall"].halves == 1
    assert stats.total_gross == win.total_gross * 2 + 90
    assert stats.individual_rounds == 3
    assert stats.avg_gross == stats.total_gross / 3


def test_badges_and_captain_record():
    base = singles_fact()
    clutch = replace(base, match_id="m2", decided_on_18=True, comeback_win=True)
    lost = replace(base, match_id="m3", outcome="loss", blown_lead=True, was_never_behind=False)
    versus = replace(base, match_id="m4", captain_vs_captain=True, jekyll_and_hyde=True)

    stats = aggregate_player_stats("a1", "series", "autumn-cup", [base, clutch, lost, versus])

    assert stats.clutch_wins == 1
    assert stats.decided_on_18 == 1
    assert stats.comeback_wins == 1
    assert stats.blown_leads == 1
    assert stats.never_behind_wins == 3
    assert stats.jekyll_and_hydes == 1
    assert (stats.captain_wins, stats.captain_losses) == (3, 1)
    assert stats.captain_vs_captain_wins == 1


def test_other_players_are_ignored():
    stats = aggregate_player_stats("a1", "round", "r1", [singles_fact(), singles_fact("z9")])

    assert stats.matches_played == 1


def test_scopes_skip_empty_series():
    assert scopes_for_fact(singles_fact()) == [("series", "autumn-cup"), ("tournament", "t1"), ("round", "r1")]
    assert scopes_for_fact(singles_fact(series="")) == [("tournament", "t1"), ("round", "r1")]


def test_to_dict_includes_derived_averages():
    data = aggregate_player_stats("a1", "tournament", "t1", [singles_fact()]).to_dict()

    assert data["points_per_match"] == 1
    assert data["avg_gross"] == data["total_gross"]
    assert data["by_format"]["singles"]["wins"] == 1
