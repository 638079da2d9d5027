"""Tests for the monotonic sequence counters."""

from ledger_kernel.services.sequence_service import SequenceService


class TestSequenceService:
    def test_first_value_is_one(self, sequence_service):
        assert sequence_service.next_value("test_sequence") == 1

    def test_monotonic(self, sequence_service):
        values = [sequence_service.next_value("test_sequence") for _ in range(5)]
        assert values == [1, 2, 3, 4, 5]

    def test_independent_names(self, sequence_service):
        sequence_service.next_value("a")
        sequence_service.next_value("a")
        assert sequence_service.next_value("b") == 1

    def test_current_value_does_not_increment(self, sequence_service):
        assert sequence_service.current_value("missing") is None
        sequence_service.next_value("x")
        assert sequence_service.current_value("x") == 1
        assert sequence_service.current_value("x") == 1

    def test_initialize_is_idempotent(self, sequence_service):
        sequence_service.initialize_sequences()
        sequence_service.next_value(SequenceService.JOURNAL_ENTRY)
        sequence_service.initialize_sequences()
        assert sequence_service.current_value(SequenceService.JOURNAL_ENTRY) == 1
