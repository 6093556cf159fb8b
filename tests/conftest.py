"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest

from attrgen.catalogue import load_catalogue
from attrgen.models import Catalogue


@pytest.fixture
def fixture_catalogue_path() -> Path:
    """Path to the sample LLVM-style catalogue."""
    return Path(__file__).parent / "fixtures" / "attributes.toml"


@pytest.fixture
def fixture_catalogue(fixture_catalogue_path: Path) -> Catalogue:
    """Load the sample catalogue."""
    return load_catalogue(fixture_catalogue_path)
