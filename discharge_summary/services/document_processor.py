from typing import List, Sequence
from pathlib import PurePath
import asyncio
import io
import logging

import docx
from fastapi import UploadFile
from PyPDF2 import PdfReader

logger = logging.getLogger(__name__)


class DocumentProcessingError(Exception):
    """Raised when text cannot be extracted from an uploaded file."""


class UnsupportedFileTypeError(DocumentProcessingError):
    """Raised for files whose extension has no text extractor."""


def _extract_pdf(data: bytes) -> str:
    try:
        reader = PdfReader(io.BytesIO(data))
        pages = [page.extract_text() or "" for page in reader.pages]
    except Exception as e:
        logger.error(f"Error processing PDF: {str(e)}")
        raise DocumentProcessingError("Failed to process PDF file") from e
    return "\n".join(pages)


def _extract_docx(data: bytes) -> str:
    try:
        document = docx.Document(io.BytesIO(data))
    except Exception as e:
        logger.error(f"Error processing DOCX: {str(e)}")
        raise DocumentProcessingError("Failed to process DOCX file") from e
    return "\n".join(paragraph.text for paragraph in document.paragraphs)


def _extract_txt(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


EXTRACTORS = {
    "pdf": _extract_pdf,
    "docx": _extract_docx,
    "txt": _extract_txt,
}


def file_extension(filename: str) -> str:
    return PurePath(filename or "").suffix.lstrip(".").lower()


def extract_text(filename: str, data: bytes) -> str:
    """Extract plain text from file contents, dispatching on the file extension.

    Raises:
        UnsupportedFileTypeError: the extension is not pdf, docx or txt
        DocumentProcessingError: the file could not be parsed
    """
    extension = file_extension(filename)
    extractor = EXTRACTORS.get(extension)
    if extractor is None:
        raise UnsupportedFileTypeError(f"Unsupported file type: {extension or filename}")
    return extractor(data)


def error_placeholder(filename: str) -> str:
    return f"[Error processing file {filename}]"


async def extract_upload(upload: UploadFile) -> str:
    """Extract one upload; failures become an inline placeholder."""
    filename = upload.filename or "unnamed"
    try:
        data = await upload.read()
        return await asyncio.to_thread(extract_text, filename, data)
    except Exception as e:
        logger.error(f"Error processing file {filename}: {str(e)}")
        return error_placeholder(filename)


async def extract_uploads(uploads: Sequence[UploadFile]) -> List[str]:
    """Extract all uploads concurrently, keeping upload order."""
    return list(await asyncio.gather(*(extract_upload(upload) for upload in uploads)))
