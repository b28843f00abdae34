from fastapi import FastAPI, Depends, File, Form, HTTPException, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse
from typing import List, Optional
import logging

from .config import settings
from .dependencies import get_discharge_summary_service
from .schemas.patient import PatientInfo, REQUIRED_PATIENT_FIELDS
from .schemas.summary import DownloadRequest, SummaryResponse
from .services.discharge_summary_service import DischargeSummaryService
from .services.document_processor import extract_uploads
from .services.report_formatter import content_disposition, render_standalone_document

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.PROJECT_NAME)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, replace with specific origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
async def root():
    return {"message": settings.PROJECT_NAME}


@app.get("/health")
async def health_check():
    return {"status": "ok"}


@app.post(f"{settings.API_PREFIX}/generate-summary", response_model=SummaryResponse)
async def generate_summary(
    name: Optional[str] = Form(None),
    patient_id: Optional[str] = Form(None, alias="id"),
    dob: Optional[str] = Form(None),
    admission_date: Optional[str] = Form(None, alias="admissionDate"),
    discharge_date: Optional[str] = Form(None, alias="dischargeDate"),
    files: Optional[List[UploadFile]] = File(None),
    service: DischargeSummaryService = Depends(get_discharge_summary_service),
) -> SummaryResponse:
    """Generate a discharge summary from uploaded documents and patient details."""
    form_values = {
        "name": name,
        "id": patient_id,
        "dob": dob,
        "admissionDate": admission_date,
        "dischargeDate": discharge_date,
    }
    for field in REQUIRED_PATIENT_FIELDS:
        value = form_values[field]
        if value is None or not value.strip():
            raise HTTPException(
                status_code=400,
                detail=f"Missing required patient information: {field}",
            )

    uploads = [upload for upload in files or [] if upload.filename]
    if not uploads:
        raise HTTPException(status_code=400, detail="No files provided")

    try:
        patient_info = PatientInfo(**form_values)
        logger.info(f"Extracting text from {len(uploads)} file(s)")
        documents = await extract_uploads(uploads)
        summary = await service.generate_discharge_summary(documents, patient_info)
        return SummaryResponse(summary=summary)
    except Exception as e:
        logger.error(f"Error generating summary: {str(e)}")
        raise HTTPException(
            status_code=500,
            detail={"error": "Failed to generate summary", "details": str(e)},
        )


@app.post(f"{settings.API_PREFIX}/download-summary", response_class=HTMLResponse)
async def download_summary(request: DownloadRequest) -> HTMLResponse:
    """Wrap a rendered summary into a standalone HTML document for download."""
    document = render_standalone_document(request.summary, request.patient_name)
    return HTMLResponse(
        content=document,
        headers={"Content-Disposition": content_disposition(request.patient_name)},
    )
