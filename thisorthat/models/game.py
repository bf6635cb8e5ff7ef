from sqlalchemy import Boolean, Column, DateTime, String, Text
from sqlalchemy.orm import relationship

from thisorthat.core.database import Base
from thisorthat.models.base import new_id, utcnow


class Game(Base):
    __tablename__ = "games"

    id = Column(String(36), primary_key=True, default=new_id)
    slug = Column(String(100), unique=True, nullable=False, index=True)
    title = Column(String(200), nullable=False)
    is_open = Column(Boolean, nullable=False, default=True)
    option_a_label = Column(String(100))
    option_b_label = Column(String(100))
    option_a_emoji = Column(String(16))
    option_b_emoji = Column(String(16))
    tiebreaker_enabled = Column(Boolean, nullable=False, default=False)
    tiebreaker_prompt = Column(Text)
    tiebreaker_answer = Column(String(50))  # numeric text
    created_by = Column(String(64), index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    theme = Column(String(32), nullable=False, default="default")

    questions = relationship("Question", back_populates="game", order_by="Question.order_index")
    players = relationship("Player", back_populates="game")
