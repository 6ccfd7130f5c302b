"""Tests for the submission guard."""

import json
from datetime import datetime, timedelta, timezone

import pytest

from jobscraper.client.exceptions import SubmissionInProgressError
from jobscraper.client.guard import SubmissionGuard

NOW = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Clock that tests can move forward."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock():
    return FakeClock(NOW)


@pytest.fixture
def state_path(tmp_path):
    return tmp_path / "state" / "guard.json"


@pytest.fixture
def guard(state_path, clock):
    return SubmissionGuard(state_path, clock=clock)


class TestAcquireRelease:
    """Test the single-flight flag."""

    def test_acquire_sets_flag_with_timestamp(self, guard, state_path):
        guard.acquire()

        assert guard.is_held()
        state = json.loads(state_path.read_text())
        assert state["inProgress"] is True
        assert guard.started_at() == NOW

    def test_second_acquire_is_rejected(self, guard):
        guard.acquire()

        with pytest.raises(SubmissionInProgressError):
            guard.acquire()

    def test_flag_survives_a_new_guard_instance(self, guard, state_path, clock):
        """Should persist across client restarts."""
        guard.acquire()

        reloaded = SubmissionGuard(state_path, clock=clock)

        assert reloaded.is_held()
        with pytest.raises(SubmissionInProgressError):
            reloaded.acquire()

    def test_does_not_overwrite_flag_of_another_process(self, guard, state_path, clock):
        """Should leave the first holder's state file untouched."""
        guard.acquire()
        before = state_path.read_text()

        other = SubmissionGuard(state_path, clock=FakeClock(NOW + timedelta(seconds=30)))
        with pytest.raises(SubmissionInProgressError):
            other.acquire()

        assert state_path.read_text() == before
        assert other.started_at() == NOW

    def test_acquire_replaces_cleared_state_file(self, guard, state_path):
        state_path.parent.mkdir(parents=True, exist_ok=True)
        state_path.write_text(json.dumps({"inProgress": False}))

        guard.acquire()

        assert guard.is_held()
        assert guard.started_at() == NOW

    def test_release_clears_flag(self, guard):
        guard.acquire()
        guard.release()

        assert not guard.is_held()
        guard.acquire()

    def test_release_without_flag_is_harmless(self, guard):
        guard.release()

        assert not guard.is_held()


class TestHold:
    """Test the hold() context manager."""

    def test_releases_after_success(self, guard):
        with guard.hold():
            assert guard.is_held()

        assert not guard.is_held()

    def test_releases_after_error(self, guard):
        with pytest.raises(RuntimeError):
            with guard.hold():
                raise RuntimeError("request blew up")

        assert not guard.is_held()

    def test_rejected_hold_keeps_existing_flag(self, guard):
        guard.acquire()

        with pytest.raises(SubmissionInProgressError):
            with guard.hold():
                pass

        assert guard.is_held()


class TestRecoverStale:
    """Test load-time staleness recovery."""

    def test_clears_flag_set_six_minutes_ago(self, guard, clock):
        guard.acquire()
        clock.now = NOW + timedelta(minutes=6)

        assert guard.recover_stale() is True
        assert not guard.is_held()

    def test_keeps_flag_set_two_minutes_ago(self, guard, clock):
        guard.acquire()
        clock.now = NOW + timedelta(minutes=2)

        assert guard.recover_stale() is False
        assert guard.is_held()

    def test_clears_flag_without_timestamp(self, guard, state_path):
        state_path.parent.mkdir(parents=True, exist_ok=True)
        state_path.write_text(json.dumps({"inProgress": True}))

        assert guard.recover_stale() is True
        assert not guard.is_held()

    def test_nothing_to_recover(self, guard):
        assert guard.recover_stale() is False

    def test_custom_threshold(self, state_path, clock):
        guard = SubmissionGuard(state_path, stale_after=timedelta(minutes=1), clock=clock)
        guard.acquire()
        clock.now = NOW + timedelta(minutes=2)

        assert guard.recover_stale() is True

    def test_corrupt_state_counts_as_free(self, guard, state_path):
        state_path.parent.mkdir(parents=True, exist_ok=True)
        state_path.write_text("{not json")

        assert not guard.is_held()
        guard.acquire()
        assert guard.is_held()
