import pytest

from app.models.document import DocumentStatus


class TestDocumentStatus:
    def test_forward_transitions(self) -> None:
        assert DocumentStatus.PENDING.can_transition_to(DocumentStatus.PROCESSING)
        assert DocumentStatus.PROCESSING.can_transition_to(DocumentStatus.COMPLETED)
        assert DocumentStatus.PROCESSING.can_transition_to(DocumentStatus.FAILED)

    def test_no_skipping_processing(self) -> None:
        assert not DocumentStatus.PENDING.can_transition_to(DocumentStatus.COMPLETED)
        assert not DocumentStatus.PENDING.can_transition_to(DocumentStatus.FAILED)

    @pytest.mark.parametrize("status", list(DocumentStatus))
    def test_nothing_returns_to_pending(self, status: DocumentStatus) -> None:
        assert not status.can_transition_to(DocumentStatus.PENDING)

    @pytest.mark.parametrize("status", [DocumentStatus.COMPLETED, DocumentStatus.FAILED])
    def test_terminal_states(self, status: DocumentStatus) -> None:
        assert status.is_terminal
        assert not any(status.can_transition_to(target) for target in DocumentStatus)

    def test_predecessors(self) -> None:
        assert DocumentStatus.PROCESSING.predecessors == {DocumentStatus.PENDING}
        assert DocumentStatus.COMPLETED.predecessors == {DocumentStatus.PROCESSING}
        assert DocumentStatus.FAILED.predecessors == {DocumentStatus.PROCESSING}
        assert DocumentStatus.PENDING.predecessors == frozenset()

    def test_values_match_wire_format(self) -> None:
        assert [s.value for s in DocumentStatus] == ["pending", "processing", "completed", "failed"]
