"""
Typed records for rows crossing the repository boundary.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from thisorthat.core.game_config import CORRECT_ANSWERS


class GameRecord(BaseModel):
    id: str
    slug: str
    title: str
    is_open: bool = True
    option_a_label: Optional[str] = None
    option_b_label: Optional[str] = None
    option_a_emoji: Optional[str] = None
    option_b_emoji: Optional[str] = None
    tiebreaker_enabled: bool = False
    tiebreaker_prompt: Optional[str] = None
    tiebreaker_answer: Optional[str] = None
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None
    theme: str = "default"

    class Config:
        from_attributes = True


class QuestionRecord(BaseModel):
    id: str
    game_id: str
    prompt: str
    correct_answer: str
    order_index: int

    @field_validator("correct_answer")
    @classmethod
    def check_correct_answer(cls, v):
        if v not in CORRECT_ANSWERS:
            raise ValueError(f"correct_answer must be one of {CORRECT_ANSWERS}")
        return v

    class Config:
        from_attributes = True


class PlayerRecord(BaseModel):
    id: str
    game_id: str
    first_name: str
    last_name: str = ""
    created_at: Optional[datetime] = None

    @field_validator("last_name", mode="before")
    @classmethod
    def default_last_name(cls, v):
        return v or ""

    class Config:
        from_attributes = True


class AnswerRecord(BaseModel):
    id: str
    game_id: str
    player_id: str
    question_id: Optional[str] = None
    answer_text: str
    created_at: Optional[datetime] = None
    seq: int = 0

    @property
    def is_tiebreaker(self) -> bool:
        return self.question_id is None

    class Config:
        from_attributes = True
