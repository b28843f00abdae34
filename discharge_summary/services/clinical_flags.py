from discharge_summary.schemas.summary import ClinicalFlags

DIABETES_TERMS = ("diabetes", "insulin", "metformin")

HYPERTENSION_DIAGNOSIS_TERMS = ("hypertension", "high blood pressure")
HYPERTENSION_MEDICATION_TERMS = ("lisinopril", "amlodipine")


def _contains_any(text: str, terms) -> bool:
    lowered = text.lower()
    return any(term in lowered for term in terms)


def detect_clinical_flags(diagnosis: str, medications: str) -> ClinicalFlags:
    """Infer the conditions that get an advisory block in the medications section."""
    return ClinicalFlags(
        diabetes=_contains_any(diagnosis, DIABETES_TERMS)
        or _contains_any(medications, DIABETES_TERMS),
        hypertension=_contains_any(diagnosis, HYPERTENSION_DIAGNOSIS_TERMS)
        or _contains_any(medications, HYPERTENSION_MEDICATION_TERMS),
    )
