from sqlalchemy import Column, ForeignKey, Integer, String, Text, CheckConstraint
from sqlalchemy.orm import relationship

from thisorthat.core.database import Base
from thisorthat.models.base import new_id


class Question(Base):
    __tablename__ = "questions"

    id = Column(String(36), primary_key=True, default=new_id)
    game_id = Column(String(36), ForeignKey("games.id"), nullable=False, index=True)
    prompt = Column(Text, nullable=False)
    correct_answer = Column(String(8), nullable=False)
    # Display order only; not unique, concurrent appends may collide
    order_index = Column(Integer, nullable=False, default=0)

    game = relationship("Game", back_populates="questions")

    __table_args__ = (
        CheckConstraint("correct_answer IN ('mom', 'dad')", name="valid_correct_answer"),
    )
