"""Process settings loaded from environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Process-level settings; repository commands live in the JSON config file."""

    model_config = SettingsConfigDict(
        env_prefix="HOOKRUNNER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    app_name: str = "hookrunner"
    config_file: str = "config.json"
    debug: bool = False
    log_level: str = "INFO"


settings = Settings()
