from typing import Iterable, List, Optional, Sequence
from textwrap import dedent
import asyncio
import logging

from discharge_summary.config import Settings, settings as default_settings
from discharge_summary.schemas.patient import PatientInfo
from discharge_summary.schemas.summary import SectionOverride
from discharge_summary.services.circuit_breaker import CircuitBreaker
from discharge_summary.services.llm_service import LLMService
from discharge_summary.services.report_formatter import (
    format_discharge_summary,
    format_generated_summary,
)
from discharge_summary.services.section_extractor import extract_sections

logger = logging.getLogger(__name__)


def split_text(text: str, chunk_size: int, overlap: int) -> List[str]:
    """Split text into fixed-size windows that overlap by `overlap` characters."""
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")
    if not 0 <= overlap < chunk_size:
        raise ValueError("overlap must be in [0, chunk_size)")

    step = chunk_size - overlap
    return [text[i : i + chunk_size] for i in range(0, len(text), step)]


class DischargeSummaryService:
    """
    Produces the discharge summary HTML for one request.
    Tries the remote summarization models first and falls back to heuristic
    section extraction whenever they are unavailable or fail.
    """

    FINAL_SUMMARY_PROMPT = dedent(
        """
        Create a comprehensive discharge summary for a patient with the following information:

        Patient Name: {name}
        Patient ID: {id}
        Date of Birth: {dob}
        Admission Date: {admission_date}
        Discharge Date: {discharge_date}

        Based on the following medical information:
        {summary}

        Format the discharge summary with the following sections:
        1. Patient Information
        2. Diagnosis
        3. Treatment Summary
        4. Medications
        5. Follow-up Instructions
        6. Additional Notes
        """
    ).strip()

    def __init__(
        self,
        circuit_breaker: CircuitBreaker,
        llm_service: Optional[LLMService] = None,
        settings: Optional[Settings] = None,
        overrides: Iterable[SectionOverride] = (),
    ):
        """
        Initialize the discharge summary service.

        Args:
            circuit_breaker: Shared breaker guarding the remote API
            llm_service: Remote inference client; None disables the remote path
            settings: Application settings (defaults to the module settings)
            overrides: Canned sections applied during heuristic extraction
        """
        self.circuit_breaker = circuit_breaker
        self.llm_service = llm_service
        self.settings = settings or default_settings
        self.overrides = list(overrides)

    def build_final_prompt(self, summary: str, patient_info: PatientInfo) -> str:
        return self.FINAL_SUMMARY_PROMPT.format(
            name=patient_info.name,
            id=patient_info.id,
            dob=patient_info.dob,
            admission_date=patient_info.admission_date,
            discharge_date=patient_info.discharge_date,
            summary=summary,
        )

    async def generate_discharge_summary(
        self, documents: Sequence[str], patient_info: PatientInfo
    ) -> str:
        """Generate the discharge summary HTML for the given document texts."""
        if self.llm_service is None:
            logger.debug("Remote inference not configured, using direct extraction")
        elif not self.circuit_breaker.allow_request():
            logger.info(
                "Remote inference unavailable, using direct extraction "
                f"(retry in {self.circuit_breaker.retry_after():.0f}s)"
            )
        else:
            summary = await self._summarize_remotely(documents, patient_info)
            if summary is not None:
                return summary

        return self.extract_discharge_summary(documents, patient_info)

    def extract_discharge_summary(
        self, documents: Sequence[str], patient_info: PatientInfo
    ) -> str:
        """Build the summary from the documents without any remote calls."""
        sections = extract_sections(documents, self.overrides)
        return format_discharge_summary(sections, patient_info)

    async def _summarize_remotely(
        self, documents: Sequence[str], patient_info: PatientInfo
    ) -> Optional[str]:
        chunks = split_text(
            "\n\n".join(documents), self.settings.CHUNK_SIZE, self.settings.CHUNK_OVERLAP
        )
        if not chunks:
            return None

        try:
            logger.info(f"Summarizing {len(chunks)} text window(s) remotely")
            parameters = self.settings.summarization_parameters()
            results = await asyncio.gather(
                *(self.llm_service.summarize(chunk, parameters) for chunk in chunks)
            )
            failed = next((result for result in results if result.error), None)
            if failed is not None:
                self._remote_failed(f"summarization failed: {failed.error}")
                return None

            combined_summary = " ".join(result.content for result in results)
            prompt = self.build_final_prompt(combined_summary, patient_info)
            generated = await self.llm_service.generate(
                prompt, self.settings.generation_parameters()
            )
            if generated.error:
                self._remote_failed(f"text generation failed: {generated.error}")
                return None

        except Exception as e:
            self._remote_failed(f"unexpected error: {str(e)}")
            return None

        self.circuit_breaker.record_success()
        logger.info("Discharge summary generated remotely")
        return format_generated_summary(generated.content, patient_info)

    def _remote_failed(self, reason: str) -> None:
        logger.error(f"Remote inference not available ({reason}), using direct extraction instead")
        self.circuit_breaker.record_failure()
