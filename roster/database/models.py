"""
SQLAlchemy ORM models for players, team memberships and game statistics.
"""

from sqlalchemy import (
    Column,
    Integer,
    String,
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    CheckConstraint,
    Index,
)
from sqlalchemy.orm import relationship
from roster.database.db import Base


class Player(Base):
    """Player profiles."""

    __tablename__ = "players"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(450), nullable=False)
    name = Column(String(200), nullable=False)
    date_of_birth = Column(Date, nullable=False)
    gender = Column(String(50), nullable=True)
    photo_url = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    created_by = Column(String(450), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=True)
    updated_by = Column(String(450), nullable=True)

    # Relationships
    team_players = relationship(
        "TeamPlayer",
        back_populates="player",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("idx_players_user", "user_id"),
        Index("idx_players_user_name", "user_id", "name"),
    )


class TeamPlayer(Base):
    """A player's membership in a team for one championship. left_date NULL means active."""

    __tablename__ = "team_players"

    id = Column(Integer, primary_key=True, autoincrement=True)
    player_id = Column(
        Integer, ForeignKey("players.id", ondelete="CASCADE"), nullable=False
    )
    team_name = Column(String(200), nullable=False)
    championship_name = Column(String(200), nullable=False)
    joined_date = Column(DateTime(timezone=True), nullable=False)
    left_date = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    created_by = Column(String(450), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=True)
    updated_by = Column(String(450), nullable=True)

    # Relationships
    player = relationship("Player", back_populates="team_players")
    statistics = relationship(
        "PlayerStatistic",
        back_populates="team_player",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("idx_team_players_player", "player_id"),
        Index("idx_team_players_player_active", "player_id", "left_date"),
        # At most one active membership per player/team/championship
        Index(
            "uq_team_players_active_assignment",
            "player_id",
            "team_name",
            "championship_name",
            unique=True,
            postgresql_where=left_date.is_(None),
            sqlite_where=left_date.is_(None),
        ),
    )


class PlayerStatistic(Base):
    """One game's statistics for a team membership."""

    __tablename__ = "player_statistics"

    id = Column(Integer, primary_key=True, autoincrement=True)
    team_player_id = Column(
        Integer, ForeignKey("team_players.id", ondelete="CASCADE"), nullable=False
    )
    game_date = Column(Date, nullable=False)
    minutes_played = Column(Integer, nullable=False)
    is_starter = Column(Boolean, nullable=False, default=False)
    jersey_number = Column(Integer, nullable=False)
    goals = Column(Integer, nullable=False, default=0)
    assists = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False)
    created_by = Column(String(450), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=True)
    updated_by = Column(String(450), nullable=True)

    # Relationships
    team_player = relationship("TeamPlayer", back_populates="statistics")

    __table_args__ = (
        Index("idx_player_statistics_team_player", "team_player_id"),
        Index("idx_player_statistics_game_date", "game_date"),
        Index("idx_player_statistics_team_player_game_date", "team_player_id", "game_date"),
        CheckConstraint("minutes_played >= 0 AND minutes_played <= 120", name="ck_player_statistics_minutes"),
        CheckConstraint("jersey_number >= 1 AND jersey_number <= 99", name="ck_player_statistics_jersey"),
        CheckConstraint("goals >= 0", name="ck_player_statistics_goals"),
        CheckConstraint("assists >= 0", name="ck_player_statistics_assists"),
    )
