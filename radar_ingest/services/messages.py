from __future__ import annotations

from dataclasses import dataclass

from radar_ingest.config.loader import BrandingConfig
from radar_ingest.exceptions import ExceptionMessages
from radar_ingest.models.classified_error import ClassifiedError, ErrorKind
from radar_ingest.models.source import SourceKind

"""User-facing copy for classified errors (presentation concern)."""

__all__ = [
    "PresentedError",
    "render_error_message",
    "render_unauthorized_message",
    "render_default_title",
    "FAQ_URL",
]

FAQ_URL = "https://www.thoughtworks.com/radar/byor"

FILE_TYPES = {
    SourceKind.SHEET: "Google Sheet",
    SourceKind.JSON: "JSON file",
    SourceKind.CSV: "CSV file",
}


@dataclass(frozen=True)
class PresentedError:
    message: str
    faq: str = ""
    switch_account: bool = False  # show the "Switch account" affordance
    input_disabled: bool = False  # sheet id entry is locked (invalid configuration)


def render_unauthorized_message(email: str | None) -> str:
    account = email or "this account"
    return (
        f"Oops! Looks like you are accessing this sheet using {account}, "
        "which does not have permission. Try switching to another account."
    )


def render_error_message(error: ClassifiedError, email: str | None = None) -> PresentedError:
    default_faq = f"Please check FAQs ({FAQ_URL}) for possible solutions."

    if error.kind is ErrorKind.INVALID_CONFIG:
        return PresentedError(message=error.message or ExceptionMessages.INVALID_CONFIG, input_disabled=True)

    if error.kind is ErrorKind.UNAUTHORIZED:
        return PresentedError(message=render_unauthorized_message(email), switch_account=True)

    if error.kind is ErrorKind.SHEET_NOT_FOUND:
        return PresentedError(
            message=ExceptionMessages.SHEET_NOT_FOUND,
            faq=f"You can also check the FAQs ({FAQ_URL}) for other possible solutions",
        )

    if error.kind is ErrorKind.FILE_NOT_FOUND:
        file_type = FILE_TYPES.get(error.source_kind, "file") if error.source_kind else "file"
        return PresentedError(message=f"Oops! We can't find the {file_type} you've entered", faq=default_faq)

    return PresentedError(message=error.message, faq=default_faq)


def render_default_title(branding: BrandingConfig, title: str | None) -> str:
    return title or f"{branding.company_name} Tech Radar"
