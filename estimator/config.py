from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    APP_NAME: str = "Estimate Engine"

    # Estimate totals
    TAX_RATE: float = 0.10

    # Catalog seeding — price column used when a product is added to a section
    DEFAULT_PRICE_TYPE: str = "DESIGN"

    CORS_ORIGINS: list[str] = ["*"]
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    class Config:
        env_file = ".env"


settings = Settings()
