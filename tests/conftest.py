"""
Shared fixtures for the extraction tests.
"""

import pytest

from tests.documents import OFFICIAL_HTML, UNDOCUMENTED_TEXT


@pytest.fixture
def official_html() -> str:
    return OFFICIAL_HTML


@pytest.fixture
def undocumented_text() -> str:
    return UNDOCUMENTED_TEXT
