"""Tests for audit helpers module."""

import importlib.metadata
from unittest.mock import patch

import pytest

from entmatch.audit.helpers import generate_run_id, get_package_version


@pytest.mark.unit
def test_generate_run_id_format_and_uniqueness() -> None:
    """Test run ID has correct format and successive calls are unique."""
    rid1 = generate_run_id()
    rid2 = generate_run_id()

    # Format: ISO8601__hex8
    parts = rid1.split("__")
    assert len(parts) == 2
    assert parts[0].endswith("Z")
    assert len(parts[1]) == 8

    assert rid1 != rid2


@pytest.mark.unit
def test_get_package_version() -> None:
    """Test version is semver when installed and 'unknown' otherwise."""
    version = get_package_version()
    assert version == "unknown" or "." in version

    with patch(
        "importlib.metadata.version",
        side_effect=importlib.metadata.PackageNotFoundError("entmatch"),
    ):
        assert get_package_version() == "unknown"
