import os

from dotenv import load_dotenv

load_dotenv()


class Settings:
    def __init__(self):
        self.PROJECT_NAME = "Data Vault API"
        self.PROJECT_VERSION = "1.0.0"
        self.API_PREFIX = os.getenv("API_PREFIX", "/api")
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

        # Database
        self.POSTGRES_USER = os.getenv("POSTGRES_USER")
        self.POSTGRES_PASSWORD = os.getenv("POSTGRES_PASSWORD")
        self.POSTGRES_DB = os.getenv("POSTGRES_DB")
        self.POSTGRES_HOST = os.getenv("POSTGRES_HOST")
        self.POSTGRES_PORT = os.getenv("POSTGRES_PORT", "5432")

        self.DATABASE_URL = os.getenv("DATABASE_URL") or self._default_database_url()
        self.DB_ECHO = os.getenv("DB_ECHO", "false").lower() in ("1", "true", "yes")

        # JWT
        self.JWT_SECRET_KEY = self._load_secret(
            os.getenv("JWT_SECRET_KEY", "datavaultsecret")
        )
        self.JWT_ALGORITHM = "HS256"
        self.ACCESS_TOKEN_EXPIRE_MINUTES = int(
            os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 60 * 24)
        )
        self.BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", 12))

        # Login throttling
        self.LOGIN_RATE_LIMIT = int(os.getenv("LOGIN_RATE_LIMIT", 10))
        self.LOGIN_RATE_WINDOW_SECONDS = int(os.getenv("LOGIN_RATE_WINDOW_SECONDS", 60))

        # Dashboard
        self.RECENT_ITEMS_LIMIT = int(os.getenv("RECENT_ITEMS_LIMIT", 5))

    def _default_database_url(self) -> str:
        if self.POSTGRES_HOST:
            return (
                f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
                f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
            )
        return "sqlite+aiosqlite:///./data_vault.db"

    @staticmethod
    def _load_secret(value: str | None) -> str | None:
        """Return the contents of *value* if it is a path to a file.

        JWT_SECRET_KEY may hold either the raw secret or a path to a file
        containing it (e.g. a mounted container secret).
        """
        if value and os.path.isfile(value):
            with open(value, "r", encoding="utf-8") as fh:
                return fh.read().strip()
        return value


settings = Settings()
