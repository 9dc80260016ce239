from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./estimates.db"
    LOG_LEVEL: str = "INFO"

    # Letterhead for the quotation letter and front sheet
    COMPANY_NAME: str = "Steel Fabrication & Erection"
    COMPANY_ADDRESS: str = "323 Deerhurst Drive, Brampton, Ontario. L6T 5K3"
    QUOTE_VALID_DAYS: int = 30

    # Seed values for a new estimate
    LABOUR_RATE_DEFAULT: float = 85.00
    CONNECTION_ALLOWANCE_DEFAULT: float = 5.0
    REGULAR_TRIP_COST_DEFAULT: float = 300.00
    TRAILER_TRIP_COST_DEFAULT: float = 600.00
    OVERHEAD_DEFAULT: float = 5.0
    PROFIT_DEFAULT: float = 10.0

    class Config:
        env_file = ".env"


settings = Settings()
