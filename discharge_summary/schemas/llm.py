from pydantic import BaseModel, Field
from typing import Any, Optional


class LLMResponse(BaseModel):
    """Result of a remote inference call; `error` is set when the call failed."""

    content: Any = None
    error: Optional[str] = None


class SummarizationParameters(BaseModel):
    """Parameters for summarizing one text window."""

    model: str
    max_length: int = Field(gt=0)
    min_length: int = Field(gt=0)


class GenerationParameters(BaseModel):
    """Parameters for the final discharge summary rewrite."""

    model: str
    max_new_tokens: int = Field(gt=0)
    temperature: float = Field(ge=0.0, le=2.0)
