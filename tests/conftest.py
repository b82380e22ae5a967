import pytest
from rich.console import Console

from cheffy.config.settings import Settings


@pytest.fixture
def console():
    return Console(quiet=True)


@pytest.fixture
def settings():
    return Settings()
