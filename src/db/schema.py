"""Database tables / schema"""

from datetime import datetime
from typing import Optional

from sqlalchemy import Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class DBGameComment(Base):
    """
    Free-standing comment on a game / move.

    NOTE game_id is just a free-text join key: there is no games table to point a foreign key at.
    """

    __tablename__ = "game_comments"
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    game_id: Mapped[Optional[str]] = mapped_column(Text)
    move_number: Mapped[Optional[int]]
    comment: Mapped[str] = mapped_column(Text)
    rating: Mapped[Optional[int]]
    player_side: Mapped[Optional[str]] = mapped_column(Text)
    tactical_idea: Mapped[Optional[str]] = mapped_column(Text)
    position: Mapped[Optional[str]] = mapped_column(Text)
    evaluation: Mapped[Optional[str]] = mapped_column(Text)
    time_spent: Mapped[Optional[int]]
    alternative: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(server_default=func.current_timestamp())
