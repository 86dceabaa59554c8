from sqlalchemy import JSON, CheckConstraint, Column, Float, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from .database import Base


class Tournament(Base):
    __tablename__ = "tournaments"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(120), nullable=False)
    year = Column(Integer, nullable=False, default=0)
    series = Column(String(64), nullable=False, default="", index=True)

    # {id, name, captain_id, co_captain_id, roster_by_tier, handicap_by_player}
    team_a = Column(JSON, nullable=False, default=dict)
    team_b = Column(JSON, nullable=False, default=dict)

    round_ids = Column(JSON, nullable=False, default=list)
    version = Column(Integer, nullable=False)

    rounds = relationship("Round", back_populates="tournament")

    __mapper_args__ = {"version_id_col": version}


class Course(Base):
    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(120), nullable=False)
    par = Column(Integer, nullable=False, default=72)
    slope_rating = Column(Float, nullable=False, default=113)
    course_rating = Column(Float, nullable=True)

    # [{number, par, hcp_index}] x 18
    holes = Column(JSON, nullable=False, default=list)


class Round(Base):
    __tablename__ = "rounds"

    id = Column(Integer, primary_key=True, index=True)
    tournament_id = Column(Integer, ForeignKey("tournaments.id"), nullable=False, index=True)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=True, index=True)

    format = Column(String(32), nullable=False)
    day = Column(Integer, nullable=False, default=0)
    points_value = Column(Float, nullable=False, default=1)

    skins_gross_pot = Column(Float, nullable=False, default=0)
    skins_net_pot = Column(Float, nullable=False, default=0)
    skins_handicap_percent = Column(Float, nullable=False, default=100)

    match_ids = Column(JSON, nullable=False, default=list)
    version = Column(Integer, nullable=False)

    tournament = relationship("Tournament", back_populates="rounds")
    course = relationship("Course")
    matches = relationship("Match", back_populates="round")

    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (
        CheckConstraint(
            "format in ('singles', 'twoManBestBall', 'twoManShamble', 'twoManScramble')",
            name="ck_round_format_valid",
        ),
        CheckConstraint("points_value >= 0", name="ck_round_points_nonnegative"),
    )


class Match(Base):
    __tablename__ = "matches"

    id = Column(Integer, primary_key=True, index=True)
    round_id = Column(Integer, ForeignKey("rounds.id"), nullable=False, index=True)
    tournament_id = Column(Integer, ForeignKey("tournaments.id"), nullable=False, index=True)
    format = Column(String(32), nullable=False)

    # 18 format-shaped hole dicts, index 0 = hole 1
    holes = Column(JSON, nullable=False, default=list)
    team_a_players = Column(JSON, nullable=False, default=list)
    team_b_players = Column(JSON, nullable=False, default=list)
    course_handicaps = Column(JSON, nullable=False, default=list)

    status = Column(JSON, nullable=False, default=dict)
    result = Column(JSON, nullable=False, default=dict)
    compute_sig = Column(String(64), nullable=True)

    round = relationship("Round", back_populates="matches")
    facts = relationship("PlayerMatchFact", back_populates="match", cascade="all, delete-orphan")


class PlayerMatchFact(Base):
    __tablename__ = "player_match_facts"

    id = Column(String(128), primary_key=True)
    match_id = Column(Integer, ForeignKey("matches.id"), nullable=False, index=True)
    player_id = Column(String(64), nullable=False, index=True)
    tournament_id = Column(String(64), nullable=False, default="", index=True)
    round_id = Column(String(64), nullable=False, default="", index=True)
    series = Column(String(64), nullable=False, default="", index=True)

    data = Column(JSON, nullable=False, default=dict)

    match = relationship("Match", back_populates="facts")

    __table_args__ = (UniqueConstraint("match_id", "player_id", name="uq_fact_match_player"),)


class PlayerStats(Base):
    __tablename__ = "player_stats"

    id = Column(Integer, primary_key=True, index=True)
    player_id = Column(String(64), nullable=False, index=True)
    scope_type = Column(String(16), nullable=False, index=True)
    scope_key = Column(String(64), nullable=False, index=True)

    data = Column(JSON, nullable=False, default=dict)

    __table_args__ = (
        UniqueConstraint("player_id", "scope_type", "scope_key", name="uq_stats_player_scope"),
        CheckConstraint("scope_type in ('series', 'tournament', 'round')", name="ck_stats_scope_type_valid"),
    )
