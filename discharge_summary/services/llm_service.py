from typing import Optional, Dict, Any
from openai import AsyncOpenAI
from textwrap import dedent
import logging

from discharge_summary.config import Settings, settings as default_settings
from discharge_summary.schemas.llm import (
    GenerationParameters,
    LLMResponse,
    SummarizationParameters,
)

logger = logging.getLogger(__name__)


class LLMService:
    """Client for the remote summarization and text generation models.

    Talks to any OpenAI-compatible chat completions endpoint. Failures are
    returned as `LLMResponse.error` rather than raised.
    """

    SUMMARIZATION_PROMPT = dedent(
        """
        You are a clinical summarization model. Summarize the medical text you are given
        in plain prose, keeping diagnoses, treatments, medications and follow-up details.
        Write at least {min_length} and at most {max_length} words. Do not invent details.
        """
    ).strip()

    GENERATION_PROMPT = "You write hospital discharge summaries from clinical notes."

    def __init__(self, settings: Optional[Settings] = None, client: Optional[AsyncOpenAI] = None):
        self.settings = settings or default_settings
        if client is None and not self.settings.is_inference_configured():
            raise ValueError(
                "Inference API key not configured. Please set INFERENCE_API_KEY environment variable."
            )

        self.client = client or AsyncOpenAI(
            api_key=self.settings.INFERENCE_API_KEY,
            base_url=self.settings.INFERENCE_BASE_URL,
            timeout=self.settings.INFERENCE_TIMEOUT_SECONDS,
        )

    async def process_prompt(
        self,
        system_prompt: str,
        user_prompt: str,
        model: str,
        temperature: float = 0.3,
        max_tokens: Optional[int] = None,
    ) -> LLMResponse:
        """Send a single prompt to the remote model.

        Args:
            system_prompt: The system prompt to use
            user_prompt: The user prompt to use
            model: The model identifier
            temperature: Temperature for the response (default: 0.3)
            max_tokens: Optional cap on generated tokens

        Returns:
            LLMResponse with the generated text, or with `error` set
        """
        if not user_prompt or not user_prompt.strip():
            return LLMResponse(content=None, error="Prompt text cannot be empty.")

        try:
            completion_params: Dict[str, Any] = {
                "model": model,
                "messages": [
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                "temperature": temperature,
            }
            if max_tokens:
                completion_params["max_tokens"] = max_tokens

            response = await self.client.chat.completions.create(**completion_params)
            content = response.choices[0].message.content

            if not content or not content.strip():
                return LLMResponse(content=None, error=f"Empty response from model {model}")

            return LLMResponse(content=content.strip())

        except Exception as e:
            logger.error(f"Inference request to {model} failed: {str(e)}")
            return LLMResponse(content=None, error=str(e))

    async def summarize(
        self, text: str, parameters: Optional[SummarizationParameters] = None
    ) -> LLMResponse:
        """Summarize one window of document text."""
        parameters = parameters or self.settings.summarization_parameters()
        system_prompt = self.SUMMARIZATION_PROMPT.format(
            min_length=parameters.min_length, max_length=parameters.max_length
        )
        return await self.process_prompt(
            system_prompt=system_prompt,
            user_prompt=text,
            model=parameters.model,
            temperature=0.0,
            max_tokens=parameters.max_length,
        )

    async def generate(
        self, prompt: str, parameters: Optional[GenerationParameters] = None
    ) -> LLMResponse:
        """Generate free text from a complete prompt."""
        parameters = parameters or self.settings.generation_parameters()
        return await self.process_prompt(
            system_prompt=self.GENERATION_PROMPT,
            user_prompt=prompt,
            model=parameters.model,
            temperature=parameters.temperature,
            max_tokens=parameters.max_new_tokens,
        )
