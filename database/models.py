"""
Database Models for Cards Against Humanity.

Contains all SQLAlchemy model definitions for game analytics.
Pure data models with no business logic.
"""

from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, Text, DateTime, Index
from sqlalchemy.orm import relationship, declarative_base

# Create the base class for models
Base = declarative_base()


class Game(Base):
    """One game session, from !start until it stops."""

    __tablename__ = 'games'

    id = Column(Integer, primary_key=True)
    channel = Column(String(100), nullable=False, index=True)
    num_rounds = Column(Integer, default=0)

    # Timestamps
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    ended_at = Column(DateTime(timezone=True), nullable=True)

    # Result
    winner_id = Column(Integer, ForeignKey('players.id'), nullable=True)
    point_limit_reached = Column(Boolean, default=False)

    # Relationships
    winner = relationship('Player', foreign_keys=[winner_id])
    rounds = relationship('Round', back_populates='game', cascade='all, delete-orphan')
    points = relationship('Points', back_populates='game', cascade='all, delete-orphan')

    def __repr__(self):
        return f"<Game(channel='{self.channel}', rounds={self.num_rounds})>"


class Player(Base):
    """A nick that has played at least one game."""

    __tablename__ = 'players'

    id = Column(Integer, primary_key=True)
    nick = Column(String(100), unique=True, nullable=False, index=True)
    last_game_id = Column(Integer, nullable=True)

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    def __repr__(self):
        return f"<Player(nick='{self.nick}')>"


class Card(Base):
    """A card from the corpus and how often it has been played."""

    __tablename__ = 'cards'

    id = Column(Integer, primary_key=True)
    text = Column(Text, nullable=False)
    type = Column(String(20), nullable=False)  # prompt, response
    pick = Column(Integer, default=0)
    draw = Column(Integer, default=0)
    times_played = Column(Integer, default=0)

    __table_args__ = (
        Index('idx_card_type_text', 'type', 'text'),
    )

    def __repr__(self):
        return f"<Card(type='{self.type}', times_played={self.times_played})>"


class Round(Base):
    """A round of a game and the prompt that was played."""

    __tablename__ = 'rounds'

    id = Column(Integer, primary_key=True)
    round_number = Column(Integer, nullable=False)
    num_active_players = Column(Integer, default=0)
    total_players = Column(Integer, default=0)

    game_id = Column(Integer, ForeignKey('games.id'), nullable=False)
    question_id = Column(Integer, ForeignKey('cards.id'), nullable=True)
    winner_id = Column(Integer, ForeignKey('players.id'), nullable=True)

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    game = relationship('Game', back_populates='rounds')
    question = relationship('Card')
    winner = relationship('Player')

    __table_args__ = (
        Index('idx_round_game_number', 'game_id', 'round_number'),
    )

    def __repr__(self):
        return f"<Round(game={self.game_id}, round={self.round_number})>"


class CardCombo(Base):
    """The response cards a player played against a prompt."""

    __tablename__ = 'card_combos'

    id = Column(Integer, primary_key=True)
    game_id = Column(Integer, ForeignKey('games.id'), nullable=False)
    player_id = Column(Integer, ForeignKey('players.id'), nullable=False)
    question_id = Column(Integer, ForeignKey('cards.id'), nullable=True)
    answer_ids = Column(String(200), nullable=False)  # comma separated card ids
    winner = Column(Boolean, default=False)

    __table_args__ = (
        Index('idx_combo_game_player', 'game_id', 'player_id'),
    )

    def __repr__(self):
        return f"<CardCombo(player={self.player_id}, answers='{self.answer_ids}')>"


class Points(Base):
    """Points of a player in a game."""

    __tablename__ = 'points'

    id = Column(Integer, primary_key=True)
    game_id = Column(Integer, ForeignKey('games.id'), nullable=False)
    player_id = Column(Integer, ForeignKey('players.id'), nullable=False)
    points = Column(Integer, default=0)
    is_active = Column(Boolean, default=True)

    game = relationship('Game', back_populates='points')
    player = relationship('Player')

    __table_args__ = (
        Index('idx_points_game_player', 'game_id', 'player_id', unique=True),
    )

    def __repr__(self):
        return f"<Points(player={self.player_id}, points={self.points})>"
