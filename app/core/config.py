from pydantic_settings import BaseSettings
from typing import Optional, List

class Settings(BaseSettings):
    PROJECT_NAME: str = "Lesson Hub"
    VERSION: str = "1.0.0"
    SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"

    # CORS
    ALLOWED_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Database Configuration
    DATABASE_HOST: Optional[str] = None
    DATABASE_PORT: str = "5432"
    DATABASE_USER: Optional[str] = None
    DATABASE_PASSWORD: Optional[str] = None
    DATABASE_NAME: Optional[str] = None

    DATABASE_URL: str = ""
    TEST_DATABASE_URL: Optional[str] = None

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    LOG_TO_FILE: bool = False

    DEFAULT_LESSON_TYPE: str = "Cours"

    def __init__(self, **data):
        super().__init__(**data)
        if not self.DATABASE_URL:
            if self.DATABASE_HOST:
                self.DATABASE_URL = (
                    f'postgresql://{self.DATABASE_USER}:{self.DATABASE_PASSWORD}'
                    f'@{self.DATABASE_HOST}:{self.DATABASE_PORT}/{self.DATABASE_NAME}'
                )
            else:
                self.DATABASE_URL = "sqlite:///./lessons.db"

    class Config:
        env_file = ".env"

settings = Settings()
