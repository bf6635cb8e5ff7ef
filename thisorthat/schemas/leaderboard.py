from typing import List, Optional

from pydantic import BaseModel


class LeaderboardEntry(BaseModel):
    rank: int
    player_id: str
    first_name: str
    last_name: str = ""
    score: int


class QuestionResult(BaseModel):
    question_id: str
    prompt: str
    order_index: int
    correct_answer: str
    expected_choice: str
    answer_text: Optional[str] = None
    is_correct: bool = False


class TiebreakerResult(BaseModel):
    guess: Optional[str] = None
    expected: Optional[str] = None
    distance: Optional[float] = None
    correct: bool = False
    closest: bool = False


class PlayerDetail(BaseModel):
    player_id: str
    first_name: str
    last_name: str = ""
    score: int
    answers: List[QuestionResult]
    tiebreaker: Optional[TiebreakerResult] = None
