from pydantic import BaseModel, ConfigDict, Field


class PatientInfo(BaseModel):
    """Identifying fields submitted with the uploaded documents."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    id: str
    dob: str
    admission_date: str = Field(alias="admissionDate")
    discharge_date: str = Field(alias="dischargeDate")


# Form field names in the order they are validated
REQUIRED_PATIENT_FIELDS = ("name", "id", "dob", "admissionDate", "dischargeDate")
