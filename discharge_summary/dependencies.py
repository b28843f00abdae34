from functools import lru_cache
from typing import List, Optional

from fastapi import Depends

from discharge_summary.config import Settings, settings
from discharge_summary.schemas.summary import SectionOverride
from discharge_summary.services.circuit_breaker import CircuitBreaker
from discharge_summary.services.discharge_summary_service import DischargeSummaryService
from discharge_summary.services.llm_service import LLMService


def get_settings() -> Settings:
    """Dependency to get the application settings."""
    return settings


@lru_cache(maxsize=1)
def get_circuit_breaker() -> CircuitBreaker:
    """Dependency to get the process-wide breaker guarding the remote API."""
    return CircuitBreaker(
        failure_threshold=settings.BREAKER_FAILURE_THRESHOLD,
        recovery_timeout_seconds=settings.BREAKER_RECOVERY_SECONDS,
    )


@lru_cache(maxsize=1)
def get_llm_service() -> Optional[LLMService]:
    """Dependency to get the shared remote inference client, or None when no key is configured."""
    if not settings.is_inference_configured():
        return None
    return LLMService(settings=settings)


async def get_section_overrides() -> List[SectionOverride]:
    """Dependency to get canned sections for known inputs. None by default."""
    return []


async def get_discharge_summary_service(
    app_settings: Settings = Depends(get_settings),
    circuit_breaker: CircuitBreaker = Depends(get_circuit_breaker),
    llm_service: Optional[LLMService] = Depends(get_llm_service),
    overrides: List[SectionOverride] = Depends(get_section_overrides),
) -> DischargeSummaryService:
    """Dependency to get a discharge summary service instance per request."""
    return DischargeSummaryService(
        circuit_breaker=circuit_breaker,
        llm_service=llm_service,
        settings=app_settings,
        overrides=overrides,
    )
