"""Shared test fixtures for stackcapture."""

from collections.abc import Iterator

import pytest

from stackcapture.core.code_table import CodeTable
from stackcapture.core.defaults import reset_defaults
from stackcapture.core.frame import Frame
from stackcapture.models.symbol import Symbol

WORKER_PC = 0x100
MAIN_PC = 0x200


class FakeResolver:
    """Dictionary-backed resolver that records every lookup."""

    def __init__(self, symbols: dict[int, Symbol]) -> None:
        self.symbols = symbols
        self.lookups: list[int] = []

    def resolve(self, pc: int) -> Symbol | None:
        self.lookups.append(pc)
        return self.symbols.get(pc)


@pytest.fixture(autouse=True)
def _restore_defaults() -> Iterator[None]:
    """Undo any process-wide configuration a test applies."""
    yield
    reset_defaults()


@pytest.fixture
def fake_resolver() -> FakeResolver:
    """Resolver knowing a worker method and a main function."""
    return FakeResolver(
        {
            WORKER_PC: Symbol(
                file="/src/app/worker.py",
                line=42,
                function="example.com/app/worker.(*Pool).run",
            ),
            MAIN_PC: Symbol(
                file="/src/app/main.py",
                line=7,
                function="example.com/app/main.main",
            ),
        }
    )


@pytest.fixture
def code_table() -> CodeTable:
    """A code table isolated from the process-wide one."""
    return CodeTable()


@pytest.fixture
def worker_frame(fake_resolver: FakeResolver) -> Frame:
    """Frame whose call site is the worker method."""
    return Frame(WORKER_PC + 1, fake_resolver)


@pytest.fixture
def main_frame(fake_resolver: FakeResolver) -> Frame:
    """Frame whose call site is the main function."""
    return Frame(MAIN_PC + 1, fake_resolver)


@pytest.fixture
def unknown_frame(fake_resolver: FakeResolver) -> Frame:
    """Frame that the fake resolver has no metadata for."""
    return Frame(0x901, fake_resolver)
