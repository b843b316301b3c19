from __future__ import annotations

import pytest

from buildburn.ui.console import Console, set_console


@pytest.fixture(autouse=True)
def quiet_console():
    """Reset the shared console between tests."""
    set_console(Console())
    yield
