from decimal import Decimal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Read env from the process + optionally from .env
    model_config = SettingsConfigDict(
        env_file=(".env",),
        extra="ignore",
        case_sensitive=False,
    )

    # App
    ENVIRONMENT: str = Field(default="dev", validation_alias=AliasChoices("ENVIRONMENT", "environment"))
    APP_NAME: str = Field(default="travelbill", validation_alias=AliasChoices("APP_NAME", "app_name"))
    LOG_LEVEL: str = Field(default="INFO", validation_alias=AliasChoices("LOG_LEVEL", "log_level"))
    DEBUG: bool = Field(default=False, validation_alias=AliasChoices("DEBUG", "debug"))

    # Infrastructure
    DATABASE_URL: str = Field(
        default="postgresql+asyncpg://postgres:postgres@db:5432/travelbill",
        validation_alias=AliasChoices("DATABASE_URL", "database_url"),
    )
    DATABASE_SSL: bool = Field(default=False, validation_alias=AliasChoices("DATABASE_SSL", "database_ssl"))

    # Billing rules
    GST_COMPONENT_RATE: Decimal = Field(
        default=Decimal("9"),
        validation_alias=AliasChoices("GST_COMPONENT_RATE", "gst_component_rate"),
    )
    # SAC 996601: rental services of road vehicles with operators
    DEFAULT_HSN_SAC: str = Field(default="996601", validation_alias=AliasChoices("DEFAULT_HSN_SAC", "default_hsn_sac"))
    RENDER_TIMEOUT_SECONDS: float = Field(
        default=30.0,
        validation_alias=AliasChoices("RENDER_TIMEOUT_SECONDS", "render_timeout_seconds"),
    )

    # Supplier identity used when no company_settings row exists yet
    DEFAULT_COMPANY_NAME: str = Field(default="", validation_alias=AliasChoices("DEFAULT_COMPANY_NAME", "default_company_name"))
    DEFAULT_COMPANY_ADDRESS: str = Field(
        default="", validation_alias=AliasChoices("DEFAULT_COMPANY_ADDRESS", "default_company_address")
    )
    DEFAULT_GST_NUMBER: str = Field(default="", validation_alias=AliasChoices("DEFAULT_GST_NUMBER", "default_gst_number"))
    DEFAULT_PAN_NUMBER: str = Field(default="", validation_alias=AliasChoices("DEFAULT_PAN_NUMBER", "default_pan_number"))


settings = Settings()
