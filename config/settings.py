from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    APP_NAME: str = "Pari-mutuel Market"
    DEBUG: bool = False  # also runs the global conservation check after every bet and settlement
    LOG_LEVEL: str = "INFO"
    HOST: str = "0.0.0.0"
    PORT: int = 8080
    STATIC_DIR: str = "public"  # client bundle; mounted only when the directory exists

    # Identity: comma-separated allow-list, e.g. INVITE_CODES="ALPHA2026,BETA2026"
    INVITE_CODES: str = "ALPHA2026,BETA2026,GAMMA2026"
    STARTING_BALANCE: int = 1000  # whole tokens
    SESSION_TTL_HOURS: int = 24

    # Markets
    DEFAULT_MARKET_DAYS: int = 7
    MAX_QUESTION_LENGTH: int = 500

    # Chat
    CHAT_HISTORY_LIMIT: int = 100
    CHAT_STATE_LIMIT: int = 50

    # Broadcast: frames buffered per connection before it is dropped as too slow
    OUTBOUND_QUEUE_SIZE: int = 256

    @property
    def invite_codes(self) -> frozenset[str]:
        return frozenset(
            code.strip() for code in self.INVITE_CODES.split(",") if code.strip()
        )


settings = Settings()
