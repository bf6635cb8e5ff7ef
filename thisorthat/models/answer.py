from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship

from thisorthat.core.database import Base
from thisorthat.models.base import new_id, utcnow


class Answer(Base):
    __tablename__ = "answers"

    id = Column(String(36), primary_key=True, default=new_id)
    game_id = Column(String(36), ForeignKey("games.id"), nullable=False)
    player_id = Column(String(36), ForeignKey("players.id"), nullable=False)
    question_id = Column(String(36), ForeignKey("questions.id"))  # NULL = tiebreaker
    answer_text = Column(String(50), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    seq = Column(Integer, nullable=False, default=0)  # per-player write order

    player = relationship("Player", back_populates="answers")

    __table_args__ = (
        Index("idx_answers_game_created", "game_id", "created_at"),
    )
