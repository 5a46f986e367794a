from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="PAYMENTS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Diagnostics go to stderr, stdout carries the account CSV
    LOG_LEVEL: str = "WARNING"
    REPORT_STATS: bool = True

    # Ledger policy
    ALLOW_WITHDRAWAL_DISPUTES: bool = False
    ALLOW_DISPUTES_ON_LOCKED: bool = False
