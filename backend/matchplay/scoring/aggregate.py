"""Fold per-player match facts into per-scope season stats."""

from collections.abc import Iterable
from dataclasses import asdict, dataclass, field
from typing import Literal

from .facts import PlayerMatchFact

ScopeType = Literal["series", "tournament", "round"]
SCOPE_TYPES: tuple[str, ...] = ("series", "tournament", "round")


@dataclass
class FormatRecord:
    matches: int = 0
    wins: int = 0
    losses: int = 0
    halves: int = 0
    points: float = 0


@dataclass
class PlayerStats:
    player_id: str
    scope_type: ScopeType
    scope_key: str

    matches_played: int = 0
    wins: int = 0
    losses: int = 0
    halves: int = 0
    points: float = 0
    by_format: dict[str, FormatRecord] = field(default_factory=dict)

    individual_rounds: int = 0
    total_gross: float = 0
    total_net: float = 0
    strokes_vs_par_gross: float = 0
    strokes_vs_par_net: float = 0
    holes_played: int = 0
    birdies: int = 0
    eagles: int = 0

    holes_won: int = 0
    holes_lost: int = 0
    holes_halved: int = 0

    comeback_wins: int = 0
    blown_leads: int = 0
    never_behind_wins: int = 0
    jekyll_and_hydes: int = 0
    decided_on_18: int = 0
    clutch_wins: int = 0
    lead_changes: int = 0

    drives_used: int = 0
    balls_used: int = 0
    balls_used_solo: int = 0
    balls_used_shared: int = 0
    ham_and_eggs: int = 0

    captain_wins: int = 0
    captain_losses: int = 0
    captain_halves: int = 0
    captain_vs_captain_wins: int = 0
    captain_vs_captain_losses: int = 0
    captain_vs_captain_halves: int = 0

    @property
    def points_per_match(self) -> float:
        return self.points / self.matches_played if self.matches_played else 0.0

    @property
    def avg_gross(self) -> float | None:
        return self.total_gross / self.individual_rounds if self.individual_rounds else None

    @property
    def avg_strokes_vs_par_net(self) -> float | None:
        return self.strokes_vs_par_net / self.individual_rounds if self.individual_rounds else None

    def to_dict(self) -> dict[str, object]:
        data = asdict(self)
        data["points_per_match"] = self.points_per_match
        data["avg_gross"] = self.avg_gross
        data["avg_strokes_vs_par_net"] = self.avg_strokes_vs_par_net
        return data


def scope_key_for(fact: PlayerMatchFact, scope_type: str) -> str:
    if scope_type == "series":
        return fact.tournament_series
    if scope_type == "tournament":
        return fact.tournament_id
    if scope_type == "round":
        return fact.round_id
    return ""


def scopes_for_fact(fact: PlayerMatchFact) -> list[tuple[str, str]]:
    """Every (scope_type, scope_key) a fact contributes to; empty keys are skipped."""
    scopes = []
    for scope_type in SCOPE_TYPES:
        key = scope_key_for(fact, scope_type)
        if key:
            scopes.append((scope_type, key))
    return scopes


def _tally_outcome(record: PlayerStats | FormatRecord, outcome: str) -> None:
    if outcome == "win":
        record.wins += 1
    elif outcome == "loss":
        record.losses += 1
    else:
        record.halves += 1


def aggregate_player_stats(
    player_id: str,
    scope_type: ScopeType,
    scope_key: str,
    facts: Iterable[PlayerMatchFact],
) -> PlayerStats | None:
    """Rebuild one player's stats for a scope from scratch.

    Facts for other players or other scopes are ignored. Returns ``None``
    when nothing matches, so the caller deletes the stored row instead of
    keeping an all-zero one.
    """
    stats = PlayerStats(player_id=player_id, scope_type=scope_type, scope_key=scope_key)

    for fact in facts:
        if fact.player_id != player_id or scope_key_for(fact, scope_type) != scope_key:
            continue

        stats.matches_played += 1
        stats.points += fact.points_earned
        _tally_outcome(stats, fact.outcome)

        record = stats.by_format.setdefault(fact.format, FormatRecord())
        record.matches += 1
        record.points += fact.points_earned
        _tally_outcome(record, fact.outcome)

        if fact.total_gross is not None:
            stats.individual_rounds += 1
            stats.total_gross += fact.total_gross
            stats.total_net += fact.total_net or 0
            stats.strokes_vs_par_gross += fact.strokes_vs_par_gross or 0
            stats.strokes_vs_par_net += fact.strokes_vs_par_net or 0
        stats.holes_played += fact.holes_played
        stats.birdies += fact.birdies
        stats.eagles += fact.eagles

        stats.holes_won += fact.holes_won
        stats.holes_lost += fact.holes_lost
        stats.holes_halved += fact.holes_halved

        stats.comeback_wins += int(fact.comeback_win)
        stats.blown_leads += int(fact.blown_lead)
        stats.never_behind_wins += int(fact.was_never_behind and fact.outcome == "win")
        stats.jekyll_and_hydes += int(fact.jekyll_and_hyde)
        stats.decided_on_18 += int(fact.decided_on_18)
        stats.clutch_wins += int(fact.decided_on_18 and fact.outcome == "win")
        stats.lead_changes += fact.lead_changes

        stats.drives_used += fact.drives_used or 0
        stats.balls_used += fact.balls_used or 0
        stats.balls_used_solo += fact.balls_used_solo or 0
        stats.balls_used_shared += fact.balls_used_shared or 0
        stats.ham_and_eggs += fact.ham_and_egg_count or 0

        if fact.is_captain:
            stats.captain_wins += int(fact.outcome == "win")
            stats.captain_losses += int(fact.outcome == "loss")
            stats.captain_halves += int(fact.outcome == "halve")
        if fact.captain_vs_captain:
            stats.captain_vs_captain_wins += int(fact.outcome == "win")
            stats.captain_vs_captain_losses += int(fact.outcome == "loss")
            stats.captain_vs_captain_halves += int(fact.outcome == "halve")

    if stats.matches_played == 0:
        return None
    return stats
