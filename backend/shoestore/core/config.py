from pydantic_settings import BaseSettings
from typing import List, Optional

class Settings(BaseSettings):
    # API Settings
    PROJECT_NAME: str = "Shoe Store Catalog"
    ENVIRONMENT: str = "development"

    # AWS Settings
    AWS_REGION: str = "us-west-1"
    DYNAMODB_ENDPOINT: Optional[str] = None

    # DynamoDB Tables
    SHOE_PRODUCTS_TABLE: str = "ShoeProductsTable"

    # botocore client tuning
    BOTO_MAX_POOL_CONNECTIONS: int = 25
    BOTO_CONNECT_TIMEOUT: int = 5
    BOTO_READ_TIMEOUT: int = 30
    BOTO_MAX_RETRY_ATTEMPTS: int = 3
    BOTO_RETRY_MODE: str = "standard"

    # Listing
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100
    INCLUDE_TOTAL_COUNT: bool = True

    # Stripe
    STRIPE_SECRET_KEY: Optional[str] = None
    PAYMENT_CURRENCY: str = "usd"

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000"]

    # Logging
    LOG_LEVEL: Optional[str] = None
    LOG_FORMAT: Optional[str] = None

    class Config:
        env_file = ".env"

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"

    @property
    def debug(self) -> bool:
        return self.ENVIRONMENT == "development"

settings = Settings()
