from typing import List
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # Настройки базы данных
    DATABASE_USER: str
    DATABASE_PASSWORD: str
    DATABASE_HOST: str
    DATABASE_PORT: int
    DATABASE_NAME: str

    # Настройки JWT токенов (выпуск токенов - во внешнем сервисе авторизации)
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7 # 7 дней

    REDIS_HOST: str
    REDIS_PORT: int

    # Лимитер запросов. Если хранилище не указано - используем Redis
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_STORAGE_URI: str | None = None
    CODE_LOOKUP_RATE_LIMIT: str = "20/minute"

    # --- Движок наград ---
    CODE_LENGTH: int = 6
    # Если секрет задан, коды считаются через HMAC-SHA256 вместо MD5
    CODE_HMAC_SECRET: str | None = None
    REDEMPTION_CODE_TTL_SECONDS: int = 5 * 60
    VOUCHER_LIFETIME_DAYS: int = 30
    REFERRAL_NEW_CUSTOMERS_ONLY: bool = True
    VOUCHER_REQUIRE_SUFFICIENT_BALANCE: bool = True
    RECENT_TRANSACTIONS_LIMIT: int = 5

    # Уровень логов пакета app (DEBUG, INFO, WARNING...)
    LOG_LEVEL: str = "INFO"

    CORS_ORIGINS_STR: str = Field(default="http://localhost:3000", alias="CORS_ORIGINS")

    @property
    def CORS_ORIGINS(self) -> List[str]:
        return [origin.strip() for origin in self.CORS_ORIGINS_STR.split(',') if origin.strip()]

    @property
    def REDIS_URL(self) -> str:
        return f"redis://{self.REDIS_HOST}:{self.REDIS_PORT}"

    @property
    def LIMITER_STORAGE_URI(self) -> str:
        return self.RATE_LIMIT_STORAGE_URI or self.REDIS_URL

    @property
    def DATABASE_URL(self) -> str:
        return f"postgresql+psycopg2://{self.DATABASE_USER}:{self.DATABASE_PASSWORD}@{self.DATABASE_HOST}:{self.DATABASE_PORT}/{self.DATABASE_NAME}"

    model_config = SettingsConfigDict(env_file=".env", populate_by_name=True)

settings = Settings()
