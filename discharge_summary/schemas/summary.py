from enum import Enum
from typing import Dict

from pydantic import BaseModel, Field


class SectionKey(str, Enum):
    """Clinical sections of a discharge summary."""

    DIAGNOSIS = "diagnosis"
    TREATMENT = "treatment"
    MEDICATIONS = "medications"
    FOLLOW_UP = "follow_up"
    ADDITIONAL_NOTES = "additional_notes"


class SectionSet(BaseModel):
    """Resolved text for each clinical section. Empty string means not found yet."""

    diagnosis: str = ""
    treatment: str = ""
    medications: str = ""
    follow_up: str = ""
    additional_notes: str = ""

    def get(self, key: SectionKey) -> str:
        return getattr(self, key.value)

    def set(self, key: SectionKey, value: str) -> None:
        setattr(self, key.value, value)

    def is_resolved(self, key: SectionKey) -> bool:
        return bool(self.get(key))

    def as_dict(self) -> Dict[str, str]:
        return {key.value: self.get(key) for key in SectionKey}


class SectionOverride(BaseModel):
    """Canned text for a section, used when `trigger` occurs in the documents
    and the section is still unresolved after scanning."""

    trigger: str = Field(min_length=1)
    key: SectionKey
    text: str = Field(min_length=1)


class ClinicalFlags(BaseModel):
    """Conditions inferred from the diagnosis and medication text."""

    diabetes: bool = False
    hypertension: bool = False


class SummaryResponse(BaseModel):
    """Response containing the rendered discharge summary HTML."""

    summary: str


class DownloadRequest(BaseModel):
    """Request to wrap a rendered summary into a downloadable HTML document."""

    summary: str
    patient_name: str = Field(min_length=1)
