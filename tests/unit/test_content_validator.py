from __future__ import annotations

import pytest

from radar_ingest.exceptions import ExceptionMessages, MalformedDataError
from radar_ingest.sanitize.content_validator import ContentValidator


def test_valid_columns_pass():
    v = ContentValidator(["name", "ring", "quadrant", "isNew", "description", "status"])
    v.verify_content()
    v.verify_headers()


def test_columns_are_trimmed():
    ContentValidator([" name", "ring ", " quadrant ", "isNew", "description"]).verify()


def test_empty_column_set_is_missing_content():
    with pytest.raises(MalformedDataError, match=ExceptionMessages.MISSING_CONTENT):
        ContentValidator([]).verify_content()


def test_missing_required_header():
    with pytest.raises(MalformedDataError) as e:
        ContentValidator(["name", "ring", "quadrant", "description"]).verify_headers()
    assert str(e.value) == ExceptionMessages.MISSING_HEADERS


def test_header_match_is_case_sensitive():
    with pytest.raises(MalformedDataError):
        ContentValidator(["Name", "ring", "quadrant", "isNew", "description"]).verify_headers()
