from __future__ import annotations

from radar_ingest.config.loader import BrandingConfig
from radar_ingest.exceptions import ExceptionMessages
from radar_ingest.models.classified_error import ClassifiedError, ErrorKind
from radar_ingest.models.source import SourceKind
from radar_ingest.services.messages import (
    FAQ_URL,
    render_default_title,
    render_error_message,
    render_unauthorized_message,
)


def test_unauthorized_offers_switch_account():
    error = ClassifiedError(ErrorKind.UNAUTHORIZED, "UNAUTHORIZED", SourceKind.SHEET)
    presented = render_error_message(error, email="a@example.com")
    assert presented.switch_account is True
    assert "a@example.com" in presented.message
    assert presented.input_disabled is False


def test_unauthorized_without_email():
    assert "this account" in render_unauthorized_message(None)


def test_file_not_found_names_file_type():
    csv = render_error_message(ClassifiedError(ErrorKind.FILE_NOT_FOUND, "x", SourceKind.CSV))
    json_ = render_error_message(ClassifiedError(ErrorKind.FILE_NOT_FOUND, "x", SourceKind.JSON))
    assert csv.message == ExceptionMessages.CSV_NOT_FOUND
    assert json_.message == ExceptionMessages.JSON_NOT_FOUND
    assert FAQ_URL in csv.faq


def test_sheet_not_found_copy():
    presented = render_error_message(ClassifiedError(ErrorKind.SHEET_NOT_FOUND, "", SourceKind.SHEET))
    assert presented.message == ExceptionMessages.SHEET_NOT_FOUND
    assert presented.switch_account is False


def test_invalid_config_disables_input():
    presented = render_error_message(ClassifiedError(ErrorKind.INVALID_CONFIG, ExceptionMessages.INVALID_CONFIG, None))
    assert presented.input_disabled is True
    assert presented.message == ExceptionMessages.INVALID_CONFIG


def test_other_kinds_use_classified_message():
    error = ClassifiedError(ErrorKind.MALFORMED_DATA, ExceptionMessages.TOO_MANY_RINGS, SourceKind.CSV)
    assert render_error_message(error).message == ExceptionMessages.TOO_MANY_RINGS


def test_default_title():
    branding = BrandingConfig(company_name="Acme")
    assert render_default_title(branding, "Given") == "Given"
    assert render_default_title(branding, None) == "Acme Tech Radar"
