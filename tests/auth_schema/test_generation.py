import logging

import pytest

from src.auth_schema.generation import (
    CURRENT_GENERATION,
    GENERATION_HISTORY,
    requires_reconciliation,
)


def test_history_documents_every_generation():
    assert sorted(GENERATION_HISTORY) == list(range(CURRENT_GENERATION + 1))
    assert all(note for note in GENERATION_HISTORY.values())


def test_current_generation_is_one():
    assert CURRENT_GENERATION == 1


def test_history_is_read_only():
    with pytest.raises(TypeError):
        GENERATION_HISTORY[2] = "new tables"  # type: ignore[index]


@pytest.mark.parametrize(
    "stored, expected",
    [(None, True), (0, True), (CURRENT_GENERATION, False)],
)
def test_requires_reconciliation(stored, expected):
    assert requires_reconciliation(stored) is expected


def test_newer_stored_generation_is_left_alone(caplog):
    with caplog.at_level(logging.WARNING):
        assert requires_reconciliation(CURRENT_GENERATION + 1) is False
    assert "newer than this node's generation" in caplog.text


def test_negative_stored_generation_is_rejected():
    with pytest.raises(ValueError):
        requires_reconciliation(-1)


def test_explicit_current_generation():
    assert requires_reconciliation(2, current_generation=3) is True
    assert requires_reconciliation(3, current_generation=3) is False
