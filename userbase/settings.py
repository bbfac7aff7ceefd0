from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="USERBASE_", extra="ignore")

    db_url: str = "sqlite:///userbase.db"

    log_level: str = "INFO"
    log_json: bool = False

    bcrypt_rounds: int = 12


settings = Settings()
