"""Application configuration with comprehensive validation."""
from typing import Optional, Literal, List, Dict, Tuple
from functools import lru_cache
from pydantic import Field, field_validator, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


# =============================================================================
# SCORING TABLES
# =============================================================================
# Four-tier effectiveness labels used by legacy situational-judgment options
# that carry a label instead of an explicit numeric score.
# =============================================================================

DEFAULT_SCORE_CATEGORY_TABLE: Dict[str, float] = {
    "Most Effective": 4,
    "Effective": 3,
    "Ineffective": 2,
    "Least Effective": 1,
}

# (lower bound inclusive, letter), highest band first. Anything below the
# last bound falls through to the fallback grade.
DEFAULT_GRADE_BANDS: List[Tuple[float, str]] = [
    (90, "A"),
    (80, "B"),
    (70, "C"),
    (60, "D"),
]

DEFAULT_FALLBACK_GRADE = "F"


class Settings(BaseSettings):
    """Application settings with production-grade validation."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "HR Assessment Scoring Engine"
    APP_VERSION: str = "1.0.0"
    APP_ENV: Literal["development", "staging", "production"] = "development"
    DEBUG: bool = False
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    LOG_FORMAT: Literal["json", "console"] = "json"

    # Snowflake
    SNOWFLAKE_ACCOUNT: Optional[str] = None
    SNOWFLAKE_USER: Optional[str] = None
    SNOWFLAKE_PASSWORD: Optional[SecretStr] = None
    SNOWFLAKE_DATABASE: Optional[str] = None
    SNOWFLAKE_SCHEMA: Optional[str] = None
    SNOWFLAKE_WAREHOUSE: Optional[str] = None
    SNOWFLAKE_ROLE: Optional[str] = None

    # Scoring
    LIKERT_SCALE_MAX: int = Field(default=5, ge=2, le=10)
    SCORE_CATEGORY_TABLE: Dict[str, float] = Field(
        default_factory=lambda: dict(DEFAULT_SCORE_CATEGORY_TABLE)
    )
    GRADE_BANDS: List[Tuple[float, str]] = Field(
        default_factory=lambda: list(DEFAULT_GRADE_BANDS)
    )
    FALLBACK_GRADE: str = DEFAULT_FALLBACK_GRADE

    # Recalculation
    RECALC_MAX_PARTICIPANTS: Optional[int] = Field(default=None, ge=1)
    RECALC_MAX_WORKERS: int = Field(default=1, ge=1, le=32)

    @field_validator("SCORE_CATEGORY_TABLE")
    @classmethod
    def validate_category_table(cls, v: Dict[str, float]) -> Dict[str, float]:
        if not v:
            raise ValueError("SCORE_CATEGORY_TABLE must not be empty")
        for label, points in v.items():
            if points <= 0:
                raise ValueError(f"Score for category '{label}' must be positive, got {points}")
        return v

    @field_validator("GRADE_BANDS")
    @classmethod
    def validate_grade_bands(cls, v: List[Tuple[float, str]]) -> List[Tuple[float, str]]:
        """Grade thresholds must lie in [0, 100] and strictly descend."""
        if not v:
            raise ValueError("GRADE_BANDS must not be empty")
        previous = None
        for threshold, letter in v:
            if not 0 <= threshold <= 100:
                raise ValueError(f"Grade threshold for '{letter}' out of range: {threshold}")
            if previous is not None and threshold >= previous:
                raise ValueError("GRADE_BANDS thresholds must be strictly descending")
            previous = threshold
        return v

    @property
    def snowflake_configured(self) -> bool:
        return all([self.SNOWFLAKE_ACCOUNT, self.SNOWFLAKE_USER, self.SNOWFLAKE_PASSWORD])

@lru_cache
def get_settings() -> Settings:
    return Settings()

settings = get_settings()
