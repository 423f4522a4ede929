from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    # Postgres in deployment (postgresql+asyncpg://...), SQLite for local dev and tests
    DATABASE_URL: str = "sqlite+aiosqlite:///./achievements.db"

    # If DEV and you hit SSL cert issues on Windows, set DB_SSL_VERIFY=false in .env
    DB_SSL_VERIFY: bool = True

    SECRET_KEY: str = "change-me"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    ENV: str = "dev"  # "dev" or "prod"

    # --- VERIFICATION ---
    SCORING_SERVICE_URL: str = "http://localhost:8001"
    SCORING_TIMEOUT_SECONDS: float = 30.0
    APPROVAL_SCORE_THRESHOLD: int = 50

    # --- EMAIL SETTINGS ---
    SMTP_HOST: str | None = None
    SMTP_PORT: int = 2525  # Default to Mailtrap port
    SMTP_USER: str | None = None
    SMTP_PASSWORD: str | None = None
    EMAILS_FROM_EMAIL: str = "no-reply@achievements.local"
    EMAILS_FROM_NAME: str = "Student Achievement Portal"
    FRONTEND_URL: str = "http://localhost:3000"

    # --- FILE STORE ---
    API_BASE_URL: str = "http://localhost:5000"
    SUPABASE_URL: str | None = None
    SUPABASE_KEY: str | None = None
    CERTIFICATE_BUCKET: str = "achievement-certificates"

    # --- EXPORTS ---
    WKHTMLTOPDF_PATH: str | None = None

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

settings = Settings()
