from typing import List, Optional

from pydantic import BaseModel, Field

from thisorthat.schemas.records import AnswerRecord


class AnswerIn(BaseModel):
    question_id: str
    answer_text: str


class AnswerSubmission(BaseModel):
    player_id: str = Field(..., description="Player returned by the join endpoint")
    answers: List[AnswerIn] = []
    tiebreaker: Optional[str] = Field(None, description="Numeric tiebreaker guess")


class SubmissionResult(BaseModel):
    saved: int
    answers: List[AnswerRecord]


class SubmitAck(BaseModel):
    ok: bool
    message: str
