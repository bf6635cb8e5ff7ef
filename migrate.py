"""
Database migration script to set up the initial schema.
"""
import os

from dotenv import load_dotenv
from sqlalchemy import create_engine, text

# Load environment variables
load_dotenv()

DATABASE_URL = os.getenv(
    "DATABASE_URL",
    "sqlite:///./thisorthat.db"
)

TABLES = [
    """
    CREATE TABLE IF NOT EXISTS games (
        id VARCHAR(36) PRIMARY KEY,
        slug VARCHAR(100) UNIQUE NOT NULL,
        title VARCHAR(200) NOT NULL,
        is_open BOOLEAN NOT NULL DEFAULT TRUE,
        option_a_label VARCHAR(100),
        option_b_label VARCHAR(100),
        option_a_emoji VARCHAR(16),
        option_b_emoji VARCHAR(16),
        tiebreaker_enabled BOOLEAN NOT NULL DEFAULT FALSE,
        tiebreaker_prompt TEXT,
        tiebreaker_answer VARCHAR(50),
        created_by VARCHAR(64),
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        theme VARCHAR(32) NOT NULL DEFAULT 'default'
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS questions (
        id VARCHAR(36) PRIMARY KEY,
        game_id VARCHAR(36) NOT NULL REFERENCES games(id),
        prompt TEXT NOT NULL,
        correct_answer VARCHAR(8) NOT NULL CHECK (correct_answer IN ('mom', 'dad')),
        order_index INTEGER NOT NULL DEFAULT 0
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS players (
        id VARCHAR(36) PRIMARY KEY,
        game_id VARCHAR(36) NOT NULL REFERENCES games(id),
        first_name VARCHAR(100) NOT NULL,
        last_name VARCHAR(100) NOT NULL DEFAULT '',
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS answers (
        id VARCHAR(36) PRIMARY KEY,
        game_id VARCHAR(36) NOT NULL REFERENCES games(id),
        player_id VARCHAR(36) NOT NULL REFERENCES players(id),
        question_id VARCHAR(36) REFERENCES questions(id),
        answer_text VARCHAR(50) NOT NULL,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        seq INTEGER NOT NULL DEFAULT 0
    )
    """,
]

INDEXES = [
    "CREATE INDEX IF NOT EXISTS ix_games_created_by ON games (created_by)",
    "CREATE INDEX IF NOT EXISTS ix_questions_game_id ON questions (game_id)",
    "CREATE INDEX IF NOT EXISTS idx_players_game_names ON players (game_id, first_name, last_name)",
    "CREATE INDEX IF NOT EXISTS idx_answers_game_created ON answers (game_id, created_at)",
]


def run_migrations(database_url: str = None):
    """Run database migrations."""
    engine = create_engine(database_url or DATABASE_URL)

    with engine.connect() as conn:
        for sql in TABLES:
            conn.execute(text(sql))
        for sql in INDEXES:
            conn.execute(text(sql))
        conn.commit()

    engine.dispose()
    print("Database migrations completed successfully.")


if __name__ == "__main__":
    print("Starting database migration...")

    # Run migrations
    run_migrations()

    print("Migration complete!")
