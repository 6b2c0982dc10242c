from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "sqlite:///./mallaplan.db"
    jwt_secret: str = "change_me_in_production"
    environment: str = "development"
    log_level: str = "INFO"
    log_dir: str = "logs"  # empty string disables file logs
    catalog_cache_ttl_seconds: int = 0  # 0 keeps curricula until invalidated
    default_max_credits: int = 30

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
