from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    APP_NAME: str = "Gym Admin"
    API_BASE_URL: str = "http://localhost:5000/api"
    API_TIMEOUT: float = 30.0

    SECRET_KEY: str = "change-me"
    SESSION_COOKIE: str = "gym_admin_session"
    SESSION_MAX_AGE: int = 60 * 60 * 8  # 8 hours
    SESSION_HTTPS_ONLY: bool = False

    DEFAULT_TIMEZONE: str = "UTC"
    CURRENCY_PREFIX: str = "Rs."

    DEBUG: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = 8008

    class Config:
        env_file = ".env"


settings = Settings()
