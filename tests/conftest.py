import pytest
from fastapi.testclient import TestClient
import logging
import os

from discharge_summary.main import app
from discharge_summary.config import Settings
from discharge_summary.dependencies import (
    get_circuit_breaker,
    get_llm_service,
    get_section_overrides,
    get_settings,
)
from discharge_summary.schemas.patient import PatientInfo
from discharge_summary.schemas.summary import SectionKey, SectionOverride
from discharge_summary.services.circuit_breaker import CircuitBreaker


DIAGNOSIS_BLOCK = (
    "DIAGNOSIS:\n"
    "Community-acquired pneumonia (right lower lobe), bacterial etiology "
    "(Streptococcus pneumoniae)"
)
TREATMENT_BLOCK = (
    "TREATMENT:\n"
    "- Admitted for IV antibiotics and supportive care\n"
    "- Started on IV Ceftriaxone 1g every 24 hours\n"
    "- Supplemental oxygen via nasal cannula at 2L/min\n"
    "- Acetaminophen for fever and pain\n"
    "- IV fluids for hydration"
)
MEDICATIONS_BLOCK = (
    "MEDICATIONS AT DISCHARGE:\n"
    "1. Amoxicillin-Clavulanate 875mg/125mg, 1 tablet twice daily for 7 days\n"
    "2. Acetaminophen 650mg every 6 hours as needed for pain\n"
    "3. Dextromethorphan-Guaifenesin syrup 10mL every 4 hours as needed for cough"
)
FOLLOW_UP_BLOCK = (
    "FOLLOW-UP RECOMMENDATIONS:\n"
    "- Follow-up appointment with primary care physician in 1 week\n"
    "- Repeat chest X-ray in 4-6 weeks to ensure resolution\n"
    "- Rest and gradually increase activity as tolerated\n"
    "- Maintain good hydration\n"
    "- Return to work/school after completing 7 days of antibiotics if symptoms continue to improve"
)
ADDITIONAL_NOTES_BLOCK = (
    "PREVENTIVE MEASURES:\n"
    "- Recommended pneumococcal vaccination at follow-up visit\n"
    "- Annual influenza vaccination\n"
    "- Smoking cessation counseling provided"
)

DISCHARGE_PLAN = (
    "DISCHARGE PLAN\n"
    "Continue oral antibiotics to complete a 7 day course.\n"
    "A follow-up appointment with the primary care physician is scheduled in 1 week.\n"
    "Repeat chest X-ray in 4-6 weeks."
)

# The discharge plan mentions a follow-up appointment, so its own paragraph
# wins over the follow-up override.
PNEUMONIA_SECTIONS = {
    SectionKey.DIAGNOSIS: DIAGNOSIS_BLOCK,
    SectionKey.TREATMENT: TREATMENT_BLOCK,
    SectionKey.MEDICATIONS: MEDICATIONS_BLOCK,
    SectionKey.FOLLOW_UP: DISCHARGE_PLAN,
    SectionKey.ADDITIONAL_NOTES: ADDITIONAL_NOTES_BLOCK,
}


@pytest.fixture(autouse=True)
def setup_test_env():
    """Mark the environment as test for every test."""
    os.environ["ENVIRONMENT"] = "test"


@pytest.fixture(autouse=True)
def setup_logging():
    # Configure logging for specific modules
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)
    logging.getLogger("discharge_summary").setLevel(logging.DEBUG)


@pytest.fixture
def test_settings() -> Settings:
    """Settings isolated from the developer's environment and .env file."""
    return Settings(_env_file=None, ENVIRONMENT="test", INFERENCE_API_KEY="")


@pytest.fixture
def circuit_breaker() -> CircuitBreaker:
    return CircuitBreaker(failure_threshold=1, recovery_timeout_seconds=300.0)


@pytest.fixture
def patient_form():
    """Patient fields as submitted by the upload form."""
    return {
        "name": "John Doe",
        "id": "12345678",
        "dob": "1975-05-12",
        "admissionDate": "2023-11-15",
        "dischargeDate": "2023-11-21",
    }


@pytest.fixture
def patient_info(patient_form) -> PatientInfo:
    return PatientInfo(**patient_form)


@pytest.fixture
def pneumonia_documents():
    """Three sample documents from a community-acquired pneumonia admission."""
    patient_data = (
        "PATIENT ADMISSION RECORD\n"
        "Patient: John Doe\n"
        "\n"
        "Presented with fever, productive cough and shortness of breath for 4 days.\n"
        "Chest X-ray consistent with community-acquired pneumonia of the right lower lobe."
    )
    patient_history = (
        "HOSPITAL STAY\n"
        "The patient was admitted for IV antibiotics and oxygen support.\n"
        "Switched to oral amoxicillin-clavulanate before discharge.\n"
        "\n"
        "Counseling on smoking cessation was provided."
    )
    return [patient_data, patient_history, DISCHARGE_PLAN]


@pytest.fixture
def pneumonia_overrides():
    """Golden-path sections for the pneumonia sample documents."""
    return [
        SectionOverride(
            trigger="community-acquired pneumonia",
            key=SectionKey.DIAGNOSIS,
            text=DIAGNOSIS_BLOCK,
        ),
        SectionOverride(
            trigger="admitted for iv antibiotics",
            key=SectionKey.TREATMENT,
            text=TREATMENT_BLOCK,
        ),
        SectionOverride(
            trigger="amoxicillin-clavulanate",
            key=SectionKey.MEDICATIONS,
            text=MEDICATIONS_BLOCK,
        ),
        SectionOverride(
            trigger="follow-up appointment",
            key=SectionKey.FOLLOW_UP,
            text=FOLLOW_UP_BLOCK,
        ),
        SectionOverride(
            trigger="smoking cessation",
            key=SectionKey.ADDITIONAL_NOTES,
            text=ADDITIONAL_NOTES_BLOCK,
        ),
    ]


@pytest.fixture
def client(test_settings, circuit_breaker) -> TestClient:
    """Create a test client with the remote inference API unavailable.

    This fixture:
    - Overrides settings with the isolated test settings
    - Gives each test a fresh circuit breaker
    - Disables the remote inference client
    - Cleans up dependency overrides after the test
    """

    async def override_get_llm_service():
        return None

    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_circuit_breaker] = lambda: circuit_breaker
    app.dependency_overrides[get_llm_service] = override_get_llm_service
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def golden_client(client, pneumonia_overrides) -> TestClient:
    """Test client that also applies the pneumonia golden-path overrides."""

    async def override_get_section_overrides():
        return pneumonia_overrides

    app.dependency_overrides[get_section_overrides] = override_get_section_overrides
    return client


@pytest.fixture
def pneumonia_sections():
    """Expected section text for the pneumonia sample documents."""
    return dict(PNEUMONIA_SECTIONS)
