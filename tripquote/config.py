from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Pricing
    default_currency: str = "GBP"
    fx_spread: float = 0.02  # FX margin charged to the traveler

    # Exchange rates
    exchange_rate_api_enabled: bool = True
    exchange_rate_api_base_url: str = "https://api.exchangerate-api.com/v4/latest"
    exchange_rate_timeout_seconds: float = 10.0
    rate_cache_ttl_seconds: int = 300  # 5 minutes, per currency pair

    # Redis (shared rate-table cache, empty disables it)
    redis_url: str = ""
    rate_table_cache_ttl: int = 300

    # Logging
    log_level: str = "INFO"
    log_dir: str = "logs"

    # CORS
    cors_origins: str = "http://localhost:5173"

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",")]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


settings = Settings()
