"""Tests for run ID context management."""

from leetsync.observability.context import get_run_id, run_id_context


class TestRunIdContext:
    """Tests for run_id_context."""

    def test_not_set_outside_context(self):
        """Should be None when no run is active."""
        assert get_run_id() is None

    def test_generates_short_hex_id(self):
        """Should generate a 12 character hex ID when none is given."""
        with run_id_context() as run_id:
            assert len(run_id) == 12
            int(run_id, 16)
            assert get_run_id() == run_id

        assert get_run_id() is None

    def test_uses_given_id(self):
        """Should use the provided ID."""
        with run_id_context("run-1") as run_id:
            assert run_id == "run-1"
            assert get_run_id() == "run-1"

    def test_nested_contexts_restore_outer(self):
        """Should restore the outer ID when an inner context exits."""
        with run_id_context("outer"):
            with run_id_context("inner"):
                assert get_run_id() == "inner"
            assert get_run_id() == "outer"

    def test_restores_on_exception(self):
        """Should reset even if the body raises."""
        try:
            with run_id_context("failing"):
                raise ValueError("boom")
        except ValueError:
            pass

        assert get_run_id() is None
