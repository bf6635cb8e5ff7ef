from typing import List, Optional, Union

from pydantic import BaseModel, Field

from thisorthat.schemas.records import GameRecord, QuestionRecord


class GameCreate(BaseModel):
    # Fields are loosely typed so that missing values reach the workflow
    # validator and come back as field-specific 400s.
    title: Optional[str] = None
    slug: Optional[str] = None
    is_open: Optional[bool] = None
    option_a_label: Optional[str] = None
    option_b_label: Optional[str] = None
    option_a_emoji: Optional[str] = None
    option_b_emoji: Optional[str] = None
    tiebreaker_enabled: Optional[bool] = False
    tiebreaker_prompt: Optional[str] = None
    tiebreaker_answer: Optional[Union[int, float, str]] = None
    theme: Optional[str] = None


class GameUpdate(BaseModel):
    is_open: Optional[bool] = None
    option_a_label: Optional[str] = None
    option_b_label: Optional[str] = None
    option_a_emoji: Optional[str] = None
    option_b_emoji: Optional[str] = None
    tiebreaker_enabled: Optional[bool] = None
    tiebreaker_prompt: Optional[str] = None
    tiebreaker_answer: Optional[Union[int, float, str]] = None
    theme: Optional[str] = None


class ShareLinks(BaseModel):
    play: str = Field(..., description="Player link, also used as the QR payload")
    leaderboard: str
    admin: str


class GameResponse(GameRecord):
    links: Optional[ShareLinks] = None


class PublicGame(BaseModel):
    """Game fields safe to show players (no expected tiebreaker answer)."""
    id: str
    slug: str
    title: str
    is_open: bool
    option_a_label: Optional[str] = None
    option_b_label: Optional[str] = None
    option_a_emoji: Optional[str] = None
    option_b_emoji: Optional[str] = None
    tiebreaker_enabled: bool
    tiebreaker_prompt: Optional[str] = None
    theme: str

    class Config:
        from_attributes = True


class PublicQuestion(BaseModel):
    id: str
    prompt: str
    order_index: int

    class Config:
        from_attributes = True


class GameView(BaseModel):
    game: PublicGame
    questions: List[PublicQuestion]
    links: ShareLinks


class QuestionCreate(BaseModel):
    prompt: Optional[str] = None
    correct_answer: Optional[str] = None


class QuestionUpdate(BaseModel):
    prompt: Optional[str] = None
    correct_answer: Optional[str] = None
