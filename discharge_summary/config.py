from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator, model_validator
import os
from dotenv import load_dotenv

from .schemas.llm import GenerationParameters, SummarizationParameters

# Load environment variables from .env file if it exists
if os.path.exists(".env"):
    load_dotenv()


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Application
    PROJECT_NAME: str = "Discharge Summary API"
    API_PREFIX: str = "/api"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False

    # Remote inference (OpenAI-compatible endpoint)
    INFERENCE_API_KEY: str = ""
    INFERENCE_BASE_URL: str = "https://router.huggingface.co/v1"
    INFERENCE_TIMEOUT_SECONDS: float = Field(default=60.0, gt=0)

    SUMMARIZATION_MODEL: str = "facebook/bart-large-cnn"
    SUMMARY_MAX_LENGTH: int = Field(default=150, gt=0)
    SUMMARY_MIN_LENGTH: int = Field(default=30, gt=0)

    GENERATION_MODEL: str = "google/flan-t5-xl"
    GENERATION_MAX_NEW_TOKENS: int = Field(default=500, gt=0)
    GENERATION_TEMPERATURE: float = Field(default=0.7, ge=0.0, le=2.0)

    # Text windows sent for summarization
    CHUNK_SIZE: int = Field(default=1000, gt=0)
    CHUNK_OVERLAP: int = Field(default=200, ge=0)

    # Circuit breaker around the remote API
    BREAKER_FAILURE_THRESHOLD: int = Field(default=1, ge=1)
    BREAKER_RECOVERY_SECONDS: float = Field(default=300.0, ge=0)

    @field_validator("INFERENCE_BASE_URL")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @model_validator(mode="after")
    def check_ranges(self) -> "Settings":
        if self.SUMMARY_MIN_LENGTH > self.SUMMARY_MAX_LENGTH:
            raise ValueError("SUMMARY_MIN_LENGTH must not exceed SUMMARY_MAX_LENGTH")
        if self.CHUNK_OVERLAP >= self.CHUNK_SIZE:
            raise ValueError("CHUNK_OVERLAP must be smaller than CHUNK_SIZE")
        return self

    def is_test_environment(self) -> bool:
        """Check if we're in the test environment."""
        return self.ENVIRONMENT.lower() == "test"

    def is_inference_configured(self) -> bool:
        """Check if the remote inference API key is configured."""
        return bool(self.INFERENCE_API_KEY)

    def summarization_parameters(self) -> SummarizationParameters:
        return SummarizationParameters(
            model=self.SUMMARIZATION_MODEL,
            max_length=self.SUMMARY_MAX_LENGTH,
            min_length=self.SUMMARY_MIN_LENGTH,
        )

    def generation_parameters(self) -> GenerationParameters:
        return GenerationParameters(
            model=self.GENERATION_MODEL,
            max_new_tokens=self.GENERATION_MAX_NEW_TOKENS,
            temperature=self.GENERATION_TEMPERATURE,
        )


# Create a single instance of settings
settings = Settings()
