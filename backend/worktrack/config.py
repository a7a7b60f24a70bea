from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./worktrack.db"
    SECRET_KEY: str = "change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    REFRESH_TOKEN_EXPIRE_DAYS: int = 7

    UNDO_WINDOW_MINUTES: int = 10
    STANDARD_WORK_MINUTES: int = 480
    MANAGER_ATTENDANCE_DEFAULT_LIMIT: int = 200

    VACATION_DAYS_PER_YEAR: int = 21
    SICK_DAYS_PER_YEAR: int = 10
    PERSONAL_DAYS_PER_YEAR: int = 5

    LOGIN_PATH: str = "/login"
    DEFAULT_PATH: str = "/"
    CORS_ORIGINS: list[str] = [
        "http://127.0.0.1:3000",
        "http://localhost:3000",
    ]
    LOG_LEVEL: str = "INFO"

    # Account invitations are mailed; provisioning refuses to run without them.
    SMTP_HOST: Optional[str] = None
    SMTP_PORT: int = 587
    SMTP_USERNAME: Optional[str] = None
    SMTP_PASSWORD: Optional[str] = None
    SMTP_FROM_EMAIL: str = "no-reply@worktrack.local"
    FRONTEND_LOGIN_URL: str = "http://localhost:3000/login"

    class Config:
        env_file = ".env"

settings = Settings()
