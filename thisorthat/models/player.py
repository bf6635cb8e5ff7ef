from sqlalchemy import Column, DateTime, ForeignKey, Index, String
from sqlalchemy.orm import relationship

from thisorthat.core.database import Base
from thisorthat.models.base import new_id, utcnow


class Player(Base):
    __tablename__ = "players"

    id = Column(String(36), primary_key=True, default=new_id)
    game_id = Column(String(36), ForeignKey("games.id"), nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False, default="")
    created_at = Column(DateTime(timezone=True), default=utcnow)

    game = relationship("Game", back_populates="players")
    answers = relationship("Answer", back_populates="player")

    # Name lookup for join de-duplication (not unique)
    __table_args__ = (
        Index("idx_players_game_names", "game_id", "first_name", "last_name"),
    )
