"""
Admin endpoints: game creation and management, questions, answer review.
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, Request

from thisorthat.api.deps import get_current_user, get_repository
from thisorthat.core.auth import AuthUser
from thisorthat.core.config import settings
from thisorthat.core.exception_handlers import create_error_response
from thisorthat.core.exceptions import BackendError
from thisorthat.schemas import game as game_schemas
from thisorthat.schemas.leaderboard import PlayerDetail
from thisorthat.schemas.records import GameRecord, QuestionRecord
from thisorthat.services.game_service import build_share_links, game_service_obj
from thisorthat.services.leaderboard_service import leaderboard_service_obj
from thisorthat.services.question_service import question_service_obj
from thisorthat.services.repository import GameRepository

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/admin/games",
    tags=["admin"],
    responses={404: {"description": "Game not found"}}
)


def _with_links(game: GameRecord) -> game_schemas.GameResponse:
    return game_schemas.GameResponse(**game.model_dump(), links=build_share_links(game.slug))


@router.post("", response_model=game_schemas.GameResponse, status_code=201)
def create_game(
        game: game_schemas.GameCreate,
        request: Request,
        user: AuthUser = Depends(get_current_user),
        repo: GameRepository = Depends(get_repository)
):
    """
    Create a new game owned by the caller.

    Validates (in order) title and slug, option labels, and the tiebreaker
    when enabled. A slug that is already taken returns 409.
    """
    try:
        created = game_service_obj.create_game(repo, user.id, game.model_dump())
    except BackendError as e:
        # Raw backend message is passed through here in debug mode
        logger.error(f"Game creation failed: {e}")
        detail = str(e) if settings.DEBUG else "Failed to create game"
        return create_error_response(500, detail, "BACKEND_ERROR", request)
    return _with_links(created)


@router.get("", response_model=List[game_schemas.GameResponse])
def list_games(
        user: AuthUser = Depends(get_current_user),
        repo: GameRepository = Depends(get_repository)
):
    """Games created by the caller, newest first."""
    return [_with_links(g) for g in game_service_obj.list_games(repo, user.id)]


@router.patch("/{game_id}", response_model=game_schemas.GameResponse)
def update_game(
        game_id: str,
        changes: game_schemas.GameUpdate,
        user: AuthUser = Depends(get_current_user),
        repo: GameRepository = Depends(get_repository)
):
    """
    Update labels, emoji, open flag, theme or tiebreaker.

    Only the creator may update a game. Tiebreaker rules are checked
    against the game as it would look after the update.
    """
    updated = game_service_obj.update_game(
        repo, game_id, user.id, changes.model_dump(exclude_unset=True)
    )
    return _with_links(updated)


@router.get("/{game_id}/questions", response_model=List[QuestionRecord])
def list_questions(
        game_id: str,
        repo: GameRepository = Depends(get_repository)
):
    """Questions for the game, ordered by position."""
    return question_service_obj.list_questions(repo, game_id)


@router.post("/{game_id}/questions", response_model=QuestionRecord, status_code=201)
def add_question(
        game_id: str,
        question: game_schemas.QuestionCreate,
        user: AuthUser = Depends(get_current_user),
        repo: GameRepository = Depends(get_repository)
):
    """
    Append a question. `correct_answer` must be "mom" or "dad"; the order
    position is assigned automatically.
    """
    return question_service_obj.add_question(
        repo, game_id, user.id, question.prompt, question.correct_answer
    )


@router.patch("/{game_id}/questions/{question_id}", response_model=QuestionRecord)
def update_question(
        game_id: str,
        question_id: str,
        changes: game_schemas.QuestionUpdate,
        user: AuthUser = Depends(get_current_user),
        repo: GameRepository = Depends(get_repository)
):
    return question_service_obj.update_question(
        repo, game_id, question_id, user.id, changes.model_dump(exclude_unset=True)
    )


@router.get("/{game_id}/players/{player_id}", response_model=PlayerDetail)
def get_player_detail(
        game_id: str,
        player_id: str,
        user: AuthUser = Depends(get_current_user),
        repo: GameRepository = Depends(get_repository)
):
    """
    A player's latest answers with correctness, and how far their
    tiebreaker guess was from the expected number.
    """
    return leaderboard_service_obj.get_player_detail(repo, game_id, player_id, user.id)
