"""Application configuration with comprehensive validation."""
from typing import Optional, Literal, Dict
from functools import lru_cache
from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# =============================================================================
# QUADRANT DISPLAY METADATA
# =============================================================================
# Colours used by the 2x2 matrix and badges; the API exposes them so the
# client does not hard-code them.
# =============================================================================

QUADRANT_COLORS: Dict[str, Dict[str, str]] = {
    "Quick Win": {"color": "#22C55E", "background": "#DCFCE7"},
    "Strategic Bet": {"color": "#3B82F6", "background": "#DBEAFE"},
    "Experimental": {"color": "#EAB308", "background": "#FEF3C7"},
    "Watchlist": {"color": "#EF4444", "background": "#FEE2E2"},
}

DEFAULT_QUADRANT_COLOR = {"color": "#6B7280", "background": "#F3F4F6"}


def get_quadrant_colors(quadrant: str) -> Dict[str, str]:
    """
    Get the foreground/background colours for a quadrant label.

    Args:
        quadrant: Quadrant label (e.g., "Quick Win")

    Returns:
        Dict with "color" and "background" hex values
    """
    return QUADRANT_COLORS.get(quadrant, DEFAULT_QUADRANT_COLOR)


class Settings(BaseSettings):
    """Application settings with production-grade validation."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "AI Use-Case Portfolio"
    APP_VERSION: str = "1.0.0"
    APP_ENV: Literal["development", "staging", "production"] = "development"
    DEBUG: bool = False
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    LOG_FORMAT: Literal["json", "console"] = "json"

    # API
    API_PREFIX: str = "/api"

    # Snowflake (optional so the API can boot without a warehouse)
    SNOWFLAKE_ACCOUNT: Optional[str] = None
    SNOWFLAKE_USER: Optional[str] = None
    SNOWFLAKE_PASSWORD: Optional[SecretStr] = None
    SNOWFLAKE_DATABASE: Optional[str] = None
    SNOWFLAKE_SCHEMA: Optional[str] = None
    SNOWFLAKE_WAREHOUSE: Optional[str] = None
    SNOWFLAKE_ROLE: Optional[str] = None

    # Redis
    REDIS_URL: str = "redis://localhost:6379/0"
    CACHE_ENABLED: bool = True
    CACHE_TTL_USE_CASES: int = Field(default=300, ge=1)     # 5 minutes
    CACHE_TTL_METADATA: int = Field(default=3600, ge=1)     # 1 hour

    # Quadrant thresholds
    QUADRANT_IMPACT_THRESHOLD: float = Field(default=4.0, ge=0.0, le=5.0)
    QUADRANT_EFFORT_THRESHOLD: float = Field(default=2.5, ge=0.0, le=5.0)

    # Recommendation engine
    MATURITY_GAP_THRESHOLD: float = Field(default=3.0, ge=0.0, le=5.0)
    LOW_MATURITY_OVERALL_SCORE: float = Field(default=60.0, ge=0.0, le=100.0)
    RECOMMENDATION_MATCH_THRESHOLD: float = Field(default=0.3, gt=0.0, le=2.0)
    RECOMMENDATION_LIMIT: int = Field(default=6, ge=1, le=6)
    RECOMMENDATION_ORDER: Literal["catalog", "score"] = "catalog"

    # Survey auto-save
    AUTOSAVE_DEBOUNCE_SECONDS: float = Field(default=1.5, ge=0.0, le=10.0)

    # Client
    API_BASE_URL: str = "http://localhost:8000"
    CLIENT_TIMEOUT_SECONDS: float = Field(default=10.0, gt=0)

    @model_validator(mode="after")
    def validate_snowflake_settings(self):
        """Snowflake credentials are all-or-nothing."""
        required = [self.SNOWFLAKE_ACCOUNT, self.SNOWFLAKE_USER, self.SNOWFLAKE_PASSWORD]
        if any(required) and not all(required):
            raise ValueError(
                "SNOWFLAKE_ACCOUNT, SNOWFLAKE_USER and SNOWFLAKE_PASSWORD must be set together"
            )
        return self

    @model_validator(mode="after")
    def validate_production_settings(self):
        """Ensure production has required settings."""
        if self.APP_ENV == "production":
            if self.DEBUG:
                raise ValueError("DEBUG must be False in production")
            if not self.SNOWFLAKE_ACCOUNT:
                raise ValueError("Snowflake credentials are required in production")
        return self

    @property
    def snowflake_configured(self) -> bool:
        return bool(self.SNOWFLAKE_ACCOUNT and self.SNOWFLAKE_USER and self.SNOWFLAKE_PASSWORD)


@lru_cache
def get_settings() -> Settings:
    return Settings()

settings = get_settings()
