from pydantic_settings import BaseSettings
import os

class Settings(BaseSettings):
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        "sqlite:///./thisorthat.db"
    )
    # Hosted auth provider. The anon key is the browser-tier key, the
    # service role key is only used server side to verify bearer tokens.
    SUPABASE_URL: str = os.getenv("SUPABASE_URL", "")
    SUPABASE_ANON_KEY: str = os.getenv("SUPABASE_ANON_KEY", "")
    SUPABASE_SERVICE_ROLE_KEY: str = os.getenv("SUPABASE_SERVICE_ROLE_KEY", "")
    AUTH_TIMEOUT: float = float(os.getenv("AUTH_TIMEOUT", "10"))

    SITE_URL: str = os.getenv("SITE_URL", "http://localhost:8000")
    DEBUG: bool = os.getenv("DEBUG", "True") == "True"

    class Config:
        env_file = ".env"
        extra = "ignore"

settings = Settings()
