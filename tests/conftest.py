from pathlib import Path

import pytest


PROGRAMS = Path(__file__).parent / 'programs'


@pytest.fixture
def program_path():
    def resolve(name: str) -> Path:
        return PROGRAMS / name
    return resolve
