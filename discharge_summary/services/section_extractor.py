from typing import Dict, Iterable, List, Sequence, Tuple
import logging

from discharge_summary.schemas.summary import SectionKey, SectionOverride, SectionSet
from discharge_summary.services.section_locator import find_section

logger = logging.getLogger(__name__)


SECTION_KEYWORDS: Dict[SectionKey, Tuple[str, ...]] = {
    SectionKey.DIAGNOSIS: ("diagnosis", "diagnoses", "assessment", "impression"),
    SectionKey.TREATMENT: (
        "treatment",
        "hospital course",
        "procedure",
        "therapy",
        "intervention",
    ),
    SectionKey.MEDICATIONS: (
        "medication",
        "medications",
        "prescriptions",
        "drugs",
        "discharge medications",
        "medications at discharge",
    ),
    SectionKey.FOLLOW_UP: (
        "follow-up",
        "follow up",
        "followup",
        "instructions",
        "recommendations",
        "follow-up recommendations",
    ),
    SectionKey.ADDITIONAL_NOTES: (
        "notes",
        "additional",
        "other",
        "preventive",
        "prevention",
        "additional notes",
        "preventive measures",
    ),
}

SECTION_PLACEHOLDERS: Dict[SectionKey, str] = {
    SectionKey.DIAGNOSIS: "No diagnosis information found in documents.",
    SectionKey.TREATMENT: "No treatment information found in documents.",
    SectionKey.MEDICATIONS: "No medication information found in documents.",
    SectionKey.FOLLOW_UP: "No follow-up information found in documents.",
    SectionKey.ADDITIONAL_NOTES: "No additional notes found in documents.",
}


def scan_documents(documents: Sequence[str]) -> SectionSet:
    """Resolve each section from the first document that mentions it.

    Later documents never replace a section already found in an earlier one.
    Unresolved sections are left empty.
    """
    sections = SectionSet()

    for index, document in enumerate(documents):
        if not document.strip():
            continue

        for key, keywords in SECTION_KEYWORDS.items():
            if sections.is_resolved(key):
                continue

            match = find_section(document, keywords)
            if match:
                logger.debug(f"Resolved section '{key.value}' from document {index}")
                sections.set(key, match)

    return sections


def apply_overrides(
    sections: SectionSet, documents: Sequence[str], overrides: Iterable[SectionOverride]
) -> SectionSet:
    """Fill still-empty sections from overrides whose trigger occurs in the documents."""
    all_text = "\n\n".join(documents).lower()

    for override in overrides:
        if sections.is_resolved(override.key):
            continue
        if override.trigger.lower() in all_text:
            logger.debug(
                f"Section '{override.key.value}' filled by override '{override.trigger}'"
            )
            sections.set(override.key, override.text)

    return sections


def fill_placeholders(sections: SectionSet) -> SectionSet:
    for key in SectionKey:
        if not sections.is_resolved(key):
            sections.set(key, SECTION_PLACEHOLDERS[key])
    return sections


def extract_sections(
    documents: Sequence[str], overrides: Iterable[SectionOverride] = ()
) -> SectionSet:
    """Build a fully populated SectionSet from the document texts.

    Args:
        documents: Text of each uploaded document, in upload order
        overrides: Optional canned sections for known inputs

    Returns:
        SectionSet where every section holds extracted text or its placeholder
    """
    sections = scan_documents(documents)
    sections = apply_overrides(sections, documents, overrides)
    missing: List[str] = [key.value for key in SectionKey if not sections.is_resolved(key)]
    if missing:
        logger.info(f"No content found for sections: {', '.join(missing)}")
    return fill_placeholders(sections)
