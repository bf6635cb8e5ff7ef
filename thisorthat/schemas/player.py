from typing import Dict, Optional

from pydantic import BaseModel, Field


class PlayerJoin(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class PlayerResponse(BaseModel):
    id: str
    game_id: str
    first_name: str
    last_name: str = ""
    created: bool = Field(False, description="True when this join created the player")

    class Config:
        from_attributes = True


class SavedAnswers(BaseModel):
    """A player's latest saved answer per question, plus the tiebreaker guess."""
    player_id: str
    answers: Dict[str, str] = {}
    tiebreaker: Optional[str] = None
