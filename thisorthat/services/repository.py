"""
Data-access boundary for games, questions, players and answers.

Reads return typed records (or None / an empty list when nothing matches).
Storage failures are raised as BackendError so callers can tell an empty
result apart from a failed query.
"""
import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional

from sqlalchemy import and_, func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from thisorthat.core.exceptions import BackendError, PartialWriteError, SlugTaken
from thisorthat.models.answer import Answer
from thisorthat.models.game import Game
from thisorthat.models.player import Player
from thisorthat.models.question import Question
from thisorthat.schemas.records import AnswerRecord, GameRecord, PlayerRecord, QuestionRecord

logger = logging.getLogger(__name__)


class GameRepository:

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _backend(self, action: str) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Database error while trying to {action}: {e}")
            raise BackendError(f"Failed to {action}: {e}") from e

    # Games

    def fetch_game_by_slug(self, slug: str) -> Optional[GameRecord]:
        with self._backend("fetch game by slug"):
            game = self.db.query(Game).filter(Game.slug == slug).first()
        return GameRecord.model_validate(game) if game else None

    def fetch_game(self, game_id: str) -> Optional[GameRecord]:
        with self._backend("fetch game"):
            game = self.db.query(Game).filter(Game.id == game_id).first()
        return GameRecord.model_validate(game) if game else None

    def slug_exists(self, slug: str) -> bool:
        with self._backend("check slug"):
            return self.db.query(Game.id).filter(Game.slug == slug).first() is not None

    def list_games_for_owner(self, owner_id: str) -> List[GameRecord]:
        with self._backend("list games"):
            games = self.db.query(Game).filter(
                Game.created_by == owner_id
            ).order_by(Game.created_at.desc()).all()
        return [GameRecord.model_validate(g) for g in games]

    def insert_game(self, **fields) -> GameRecord:
        """
        Insert a game row.

        Raises SlugTaken when the unique slug index rejects the row, which
        happens when another request claims the slug after the caller checked.
        """
        try:
            with self._backend("create game"):
                game = Game(**fields)
                self.db.add(game)
                self.db.commit()
                self.db.refresh(game)
        except BackendError as e:
            if isinstance(e.__cause__, IntegrityError) and self.slug_exists(fields.get("slug")):
                logger.info(f"Slug '{fields.get('slug')}' was taken concurrently")
                raise SlugTaken("Slug already exists") from e
            raise
        logger.info(f"Game {game.id} created with slug '{game.slug}'")
        return GameRecord.model_validate(game)

    def update_game(self, game_id: str, **fields) -> Optional[GameRecord]:
        with self._backend("update game"):
            game = self.db.query(Game).filter(Game.id == game_id).first()
            if not game:
                return None
            for name, value in fields.items():
                setattr(game, name, value)
            self.db.commit()
            self.db.refresh(game)
        return GameRecord.model_validate(game)

    # Questions

    def list_questions_for_game(self, game_id: str) -> List[QuestionRecord]:
        with self._backend("list questions"):
            questions = self.db.query(Question).filter(
                Question.game_id == game_id
            ).order_by(Question.order_index.asc()).all()
        return [QuestionRecord.model_validate(q) for q in questions]

    def fetch_question(self, game_id: str, question_id: str) -> Optional[QuestionRecord]:
        with self._backend("fetch question"):
            question = self.db.query(Question).filter(
                and_(Question.game_id == game_id, Question.id == question_id)
            ).first()
        return QuestionRecord.model_validate(question) if question else None

    def max_order_index(self, game_id: str) -> Optional[int]:
        with self._backend("read max order index"):
            return self.db.query(func.max(Question.order_index)).filter(
                Question.game_id == game_id
            ).scalar()

    def insert_question(self, game_id: str, prompt: str, correct_answer: str,
                        order_index: int) -> QuestionRecord:
        with self._backend("insert question"):
            question = Question(
                game_id=game_id,
                prompt=prompt,
                correct_answer=correct_answer,
                order_index=order_index
            )
            self.db.add(question)
            self.db.commit()
            self.db.refresh(question)
        return QuestionRecord.model_validate(question)

    def update_question(self, game_id: str, question_id: str, **fields) -> Optional[QuestionRecord]:
        with self._backend("update question"):
            question = self.db.query(Question).filter(
                and_(Question.game_id == game_id, Question.id == question_id)
            ).first()
            if not question:
                return None
            for name, value in fields.items():
                setattr(question, name, value)
            self.db.commit()
            self.db.refresh(question)
        return QuestionRecord.model_validate(question)

    # Players

    def find_player_by_names(self, game_id: str, first_name: str,
                             last_name: str) -> Optional[PlayerRecord]:
        with self._backend("find player"):
            player = self.db.query(Player).filter(
                and_(
                    Player.game_id == game_id,
                    Player.first_name == first_name,
                    Player.last_name == last_name
                )
            ).order_by(Player.created_at.asc()).first()
        return PlayerRecord.model_validate(player) if player else None

    def fetch_player(self, game_id: str, player_id: str) -> Optional[PlayerRecord]:
        with self._backend("fetch player"):
            player = self.db.query(Player).filter(
                and_(Player.game_id == game_id, Player.id == player_id)
            ).first()
        return PlayerRecord.model_validate(player) if player else None

    def insert_player(self, game_id: str, first_name: str, last_name: str) -> PlayerRecord:
        with self._backend("insert player"):
            player = Player(game_id=game_id, first_name=first_name, last_name=last_name)
            self.db.add(player)
            self.db.commit()
            self.db.refresh(player)
        return PlayerRecord.model_validate(player)

    def list_players_for_game(self, game_id: str) -> List[PlayerRecord]:
        with self._backend("list players"):
            players = self.db.query(Player).filter(
                Player.game_id == game_id
            ).order_by(Player.created_at.asc()).all()
        return [PlayerRecord.model_validate(p) for p in players]

    # Answers

    def insert_answers(self, rows: List[dict]) -> List[AnswerRecord]:
        """
        Insert answer rows one commit at a time.

        Each row gets the next `seq` for its player, so rows written within
        the same timestamp still have a fixed order. There is no transaction
        across rows: if a write fails partway the rows already committed
        stay, and PartialWriteError reports how many made it.
        """
        next_seq = {}
        with self._backend("read answer sequence"):
            for player_id in {row["player_id"] for row in rows}:
                current = self.db.query(func.max(Answer.seq)).filter(
                    Answer.player_id == player_id
                ).scalar()
                next_seq[player_id] = (current if current is not None else 0) + 1

        saved = []
        for row in rows:
            try:
                answer = Answer(seq=next_seq[row["player_id"]], **row)
                next_seq[row["player_id"]] += 1
                self.db.add(answer)
                self.db.commit()
                self.db.refresh(answer)
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.error(f"Answer insert failed after {len(saved)} of {len(rows)} rows: {e}")
                raise PartialWriteError(
                    f"Failed to save answers ({len(saved)} of {len(rows)} saved)",
                    saved=len(saved),
                    total=len(rows)
                ) from e
            saved.append(AnswerRecord.model_validate(answer))
        return saved

    def list_answers_for_game(self, game_id: str) -> List[AnswerRecord]:
        with self._backend("list answers"):
            answers = self.db.query(Answer).filter(
                Answer.game_id == game_id
            ).order_by(Answer.created_at.asc(), Answer.seq.asc()).all()
        return [AnswerRecord.model_validate(a) for a in answers]

    def list_answers_for_player(self, game_id: str, player_id: str) -> List[AnswerRecord]:
        with self._backend("list player answers"):
            answers = self.db.query(Answer).filter(
                and_(Answer.game_id == game_id, Answer.player_id == player_id)
            ).order_by(Answer.created_at.asc(), Answer.seq.asc()).all()
        return [AnswerRecord.model_validate(a) for a in answers]
