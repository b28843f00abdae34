from datetime import date
from html import escape
from textwrap import dedent
from typing import Optional
from urllib.parse import quote
import re

from discharge_summary.schemas.patient import PatientInfo
from discharge_summary.schemas.summary import ClinicalFlags, SectionSet
from discharge_summary.services.clinical_flags import detect_clinical_flags

CONTAINER_STYLE = (
    "font-family: Arial, sans-serif; max-width: 800px; margin: 0 auto; padding: 20px; "
    "background-color: #f8f9fa; border: 1px solid #dee2e6; border-radius: 8px; "
    "box-shadow: 0 4px 6px rgba(0,0,0,0.1);"
)
TITLE_STYLE = (
    "color: #0d47a1; text-align: center; font-size: 28px; margin-bottom: 20px; "
    "padding-bottom: 10px; border-bottom: 2px solid #0d47a1;"
)
CARD_STYLE = (
    "background-color: white; padding: 15px; margin-bottom: 20px; border-radius: 6px; "
    "border: 1px solid #cfd8dc; box-shadow: 0 2px 4px rgba(0,0,0,0.05);"
)
HEADING_STYLE = (
    "color: #0d47a1; font-size: 20px; margin-bottom: 15px; padding-bottom: 8px; "
    "border-bottom: 1px solid #bbdefb;"
)
BODY_STYLE = "white-space: pre-wrap; color: #333; line-height: 1.5;"
FIELD_STYLE = "margin: 5px 0; color: #333;"
FOOTER_STYLE = (
    "margin-top: 30px; padding: 15px; background-color: #e3f2fd; border: 1px solid #bbdefb; "
    "border-radius: 6px; text-align: center; color: #0d47a1;"
)

DIABETES_ADVISORY = (
    "#fff3e0",
    "#ff9800",
    "#e65100",
    "Diabetes Management:",
    "Continue blood glucose monitoring as directed. "
    "Follow diabetic diet plan provided by nutritionist.",
)
HYPERTENSION_ADVISORY = (
    "#e8f5e9",
    "#4caf50",
    "#2e7d32",
    "Hypertension Management:",
    "Monitor blood pressure daily. Maintain low-sodium diet as recommended.",
)

EXTRACTED_NOTICE = (
    "This discharge summary contains information extracted directly from the uploaded documents."
)
GENERATED_NOTICE = (
    "This discharge summary was generated by the remote summarization service "
    "from the uploaded documents."
)
DISCLAIMER = "For testing purposes only. Not for clinical use."


def _text(value: str) -> str:
    return escape(value, quote=False)


def _card(title: str, body: str) -> str:
    return (
        f'  <div style="{CARD_STYLE}">\n'
        f'    <h2 style="{HEADING_STYLE}">{title}</h2>\n'
        f"{body}"
        f"  </div>\n"
    )


def _text_block(value: str) -> str:
    return f'    <div style="{BODY_STYLE}">{_text(value)}</div>\n'


def _advisory(advisory) -> str:
    background, border, color, title, message = advisory
    return (
        f'    <div style="margin-top: 15px; padding: 10px; background-color: {background}; '
        f'border-left: 4px solid {border}; border-radius: 4px;">\n'
        f'      <p style="margin: 0; color: {color}; font-weight: bold;">{title}</p>\n'
        f'      <p style="{FIELD_STYLE}">{message}</p>\n'
        f"    </div>\n"
    )


def _patient_card(patient_info: PatientInfo) -> str:
    fields = [
        ("Name", patient_info.name),
        ("Patient ID", patient_info.id),
        ("Date of Birth", patient_info.dob),
        ("Admission Date", patient_info.admission_date),
        ("Discharge Date", patient_info.discharge_date),
    ]
    rows = "".join(
        f'      <p style="{FIELD_STYLE}"><span style="font-weight: bold;">{label}:</span> '
        f"{_text(value)}</p>\n"
        for label, value in fields
    )
    body = (
        '    <div style="display: grid; grid-template-columns: 1fr 1fr; gap: 10px;">\n'
        f"{rows}"
        "    </div>\n"
    )
    return _card("1. PATIENT INFORMATION", body)


def _footer(notice: str, generated_on: date) -> str:
    return (
        f'  <div style="{FOOTER_STYLE}">\n'
        f'    <p style="margin: 5px 0;">{notice}</p>\n'
        f'    <p style="margin: 5px 0;">Generated on: {generated_on.isoformat()}</p>\n'
        f'    <p style="margin: 5px 0; font-size: 12px;">{DISCLAIMER}</p>\n'
        f"  </div>\n"
    )


def _wrap(cards: str, footer: str) -> str:
    return (
        f'<div class="discharge-summary" style="{CONTAINER_STYLE}">\n'
        f'  <h1 style="{TITLE_STYLE}">DISCHARGE SUMMARY</h1>\n'
        f"{cards}"
        f"{footer}"
        f"</div>\n"
    )


def format_discharge_summary(
    sections: SectionSet,
    patient_info: PatientInfo,
    generated_on: Optional[date] = None,
    flags: Optional[ClinicalFlags] = None,
) -> str:
    """Render resolved sections and patient details as the discharge summary HTML.

    Args:
        sections: Fully resolved sections (extracted text or placeholders)
        patient_info: Patient identifying fields
        generated_on: Date printed in the footer (defaults to today)
        flags: Precomputed clinical flags; detected from the sections if omitted

    Returns:
        Self-contained, inline-styled HTML fragment
    """
    generated_on = generated_on or date.today()
    if flags is None:
        flags = detect_clinical_flags(sections.diagnosis, sections.medications)

    medications_body = _text_block(sections.medications)
    if flags.diabetes:
        medications_body += _advisory(DIABETES_ADVISORY)
    if flags.hypertension:
        medications_body += _advisory(HYPERTENSION_ADVISORY)

    cards = "".join(
        [
            _patient_card(patient_info),
            _card("2. DIAGNOSIS", _text_block(sections.diagnosis)),
            _card("3. TREATMENT SUMMARY", _text_block(sections.treatment)),
            _card("4. MEDICATIONS", medications_body),
            _card("5. FOLLOW-UP INSTRUCTIONS", _text_block(sections.follow_up)),
            _card("6. ADDITIONAL NOTES", _text_block(sections.additional_notes)),
        ]
    )
    return _wrap(cards, _footer(EXTRACTED_NOTICE, generated_on))


def format_generated_summary(
    text: str, patient_info: PatientInfo, generated_on: Optional[date] = None
) -> str:
    """Render text produced by the remote generation model in the report container."""
    generated_on = generated_on or date.today()
    cards = _patient_card(patient_info) + _card("DISCHARGE DETAILS", _text_block(text.strip()))
    return _wrap(cards, _footer(GENERATED_NOTICE, generated_on))


def download_filename(patient_name: str) -> str:
    safe_name = re.sub(r"\s+", "_", patient_name.strip()) or "patient"
    safe_name = re.sub(r'[\\/:*?"<>|]', "", safe_name)
    return f"{safe_name}_discharge_summary.html"


def content_disposition(patient_name: str) -> str:
    """Build an attachment header that survives non-Latin-1 patient names.

    Header values go out as Latin-1, so the plain ``filename`` parameter keeps
    only ASCII and the full name travels in the RFC 5987 ``filename*`` form.
    """
    filename = download_filename(patient_name)
    stem = filename[: -len("_discharge_summary.html")]
    ascii_stem = re.sub(r"_+", "_", stem.encode("ascii", "ignore").decode("ascii")).strip("_")
    fallback = download_filename(ascii_stem)
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename)}"


def render_standalone_document(summary_html: str, patient_name: str) -> str:
    """Wrap a rendered summary fragment into a complete, printable HTML document."""
    title = f"{_text(patient_name)} - Discharge Summary"
    return dedent(
        """\
        <!DOCTYPE html>
        <html>
        <head>
          <meta charset="utf-8">
          <title>{title}</title>
          <style>
            body {{ font-family: Arial, sans-serif; line-height: 1.6; color: #333; margin: 0; padding: 20px; }}
            @media print {{
              body {{ padding: 0; }}
              .discharge-summary {{ box-shadow: none !important; border: none !important; }}
            }}
          </style>
        </head>
        <body>
        {body}
        </body>
        </html>
        """
    ).format(title=title, body=summary_html)
