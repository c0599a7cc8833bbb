import pytest

from tableref import EngineOptions, TableEngine, build_from_rows


@pytest.fixture
def engine() -> TableEngine:
    return TableEngine(EngineOptions(strict=True))


@pytest.fixture
def numbers_grid():
    return build_from_rows([["1", "2", "3"], ["4", "5", "6"], ["7", "8", "9"]])
