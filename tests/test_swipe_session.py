"""
End-to-end tests for a swipe session over a fake upstream service.
"""

import json

from swipe_service import FeedClientError
from swipe_service.models import FeedStatus, StorageKeys

from conftest import FakeFeedClient, papers


def _ids(items):
    return [p.paper_id for p in items]


def _act(session, timers, action):
    """Run one action and let the action lock expire."""
    accepted = getattr(session, f"on_{action}")()
    if timers.timers:
        timers.last.fire()
    return accepted


class TestSessionFlow:
    """Test the user-facing action flow."""

    def test_start_shows_first_paper(self, make_session):
        session = make_session(FakeFeedClient(feed_responses=[papers("p1", "p2")]))
        assert session.snapshot().status is FeedStatus.LOADING

        session.start()

        assert session.current_paper.paper_id == "p1"
        assert not session.loading
        assert session.error == ""

    def test_five_action_scenario(self, make_session, executor, timers, storage):
        """Test like/dislike/skip bookkeeping and the fifth-action recommendation request."""
        client = FakeFeedClient(
            feed_responses=[papers("p1", "p2", "p3", "p4", "p5")],
            recommendation_responses=[papers("r1", "p3", "r2")],
        )
        session = make_session(client)
        session.start()

        for action in ("like", "dislike", "skip", "like", "skip"):
            assert _act(session, timers, action) is True

        assert _ids(session.liked_papers) == ["p1", "p4"]
        assert _ids(session.disliked_papers) == ["p2"]
        assert session.state.skipped_ids == ["p3", "p5"]
        assert session.queue.action_count == 5
        assert executor.submitted == 1

        # the refetched batch is all seen already
        assert session.current_paper is None
        assert session.snapshot().status is FeedStatus.EMPTY

        executor.run_pending()
        assert client.recommendation_calls == [(["p1", "p4"], ["p2"])]
        assert _ids(session.queue.recommendation_queue) == ["r1", "r2"]

        session.retry()
        assert session.current_paper.paper_id == "r1"

        assert json.loads(storage.get_item(StorageKeys.SKIPPED)) == ["p3", "p5"]
        assert [p["paperId"] for p in json.loads(storage.get_item(StorageKeys.LIKED))] == ["p1", "p4"]

    def test_seen_paper_never_shown_again(self, make_session, timers):
        """Test that a paper acted on does not reappear from a later batch."""
        client = FakeFeedClient(feed_responses=[papers("p1"), papers("p1", "p2")])
        session = make_session(client)
        session.start()

        _act(session, timers, "skip")

        assert session.current_paper.paper_id == "p2"

    def test_action_ignored_while_locked(self, make_session, timers):
        session = make_session(FakeFeedClient(feed_responses=[papers("p1", "p2", "p3")]))
        session.start()

        assert session.on_like() is True
        assert session.locked
        assert session.on_dislike() is False
        assert session.on_skip() is False

        assert _ids(session.liked_papers) == ["p1"]
        assert session.disliked_papers == []
        assert session.current_paper.paper_id == "p2"

        timers.last.fire()
        assert not session.locked
        assert session.on_skip() is True

    def test_action_ignored_without_current_paper(self, make_session):
        session = make_session(FakeFeedClient(feed_responses=[[]]))
        session.start()

        assert session.on_like() is False
        assert session.on_skip() is False
        assert session.liked_papers == []
        assert session.state.skipped_ids == []

    def test_feedback_lists_are_disjoint(self, make_session, timers):
        """Test that a paper already liked is not also recorded as disliked."""
        client = FakeFeedClient(feed_responses=[papers("p1", "p2")])
        session = make_session(client)
        session.start()
        _act(session, timers, "like")

        session.recorder.record_dislike(session.liked_papers[0])
        timers.last.fire()

        assert _ids(session.liked_papers) == ["p1"]
        assert session.disliked_papers == []

    def test_error_then_retry(self, make_session):
        client = FakeFeedClient(feed_responses=[FeedClientError("connection refused"), papers("p1")])
        session = make_session(client)
        session.start()

        snapshot = session.snapshot()
        assert snapshot.status is FeedStatus.ERROR
        assert snapshot.error == "Network error: connection refused"
        assert snapshot.current_paper is None

        session.retry()
        assert session.current_paper.paper_id == "p1"
        assert session.error == ""


class TestPersistence:
    """Test restore across sessions sharing one storage file."""

    def test_history_survives_restart(self, make_session, timers, storage):
        client = FakeFeedClient(feed_responses=[papers("p1", "p2", "p3", "p4")])
        first = make_session(client)
        first.start()
        _act(first, timers, "like")
        _act(first, timers, "dislike")
        _act(first, timers, "skip")
        first.close()

        second = make_session(FakeFeedClient(feed_responses=[papers("p1", "p2", "p3", "p4")]))
        second.start()

        assert _ids(second.liked_papers) == ["p1"]
        assert _ids(second.disliked_papers) == ["p2"]
        assert second.state.skipped_ids == ["p3"]
        assert second.current_paper.paper_id == "p4"

    def test_restore_drops_cross_list_duplicates(self, make_session, storage):
        storage.set_item(StorageKeys.LIKED, json.dumps([{"paperId": "p1"}, {"paperId": "p1"}]))
        storage.set_item(StorageKeys.DISLIKED, json.dumps([{"paperId": "p1"}, {"paperId": "p2"}]))

        session = make_session(FakeFeedClient(feed_responses=[papers("p3")]))
        session.start()

        assert _ids(session.liked_papers) == ["p1"]
        assert _ids(session.disliked_papers) == ["p2"]

    def test_start_runs_once(self, make_session):
        client = FakeFeedClient(feed_responses=[papers("p1")])
        session = make_session(client)

        session.start()
        session.start()

        assert len(client.feed_calls) == 1


class TestReset:
    """Test the full session reset."""

    def test_reset_clears_everything(self, make_session, timers, storage, executor):
        client = FakeFeedClient(
            feed_responses=[papers("p1", "p2", "p3", "p4", "p5", "p6")],
            recommendation_responses=[papers("r1")],
        )
        session = make_session(client, recommendation_interval=2)
        session.start()
        _act(session, timers, "like")
        _act(session, timers, "skip")
        assert executor.submitted == 1

        session.on_reset_session()
        executor.run_pending()

        assert session.liked_papers == []
        assert session.state.skipped_ids == []
        assert session.queue.action_count == 0
        assert session.queue.recommendation_queue == []
        assert session.current_paper.paper_id == "p1"
        assert storage.get_item(StorageKeys.LIKED) is None
        assert storage.get_item(StorageKeys.SKIPPED) is None
        assert client.reset_calls == 1

    def test_reset_twice_with_empty_storage(self, make_session, storage):
        client = FakeFeedClient(feed_responses=[papers("p1")])
        session = make_session(client)
        session.start()

        session.on_reset_session()
        session.on_reset_session()

        assert session.liked_papers == []
        assert session.queue.action_count == 0
        assert session.current_paper.paper_id == "p1"
        assert storage.keys() == []
        assert client.reset_calls == 2

    def test_reset_goes_ahead_when_upstream_unreachable(self, make_session, timers):
        client = FakeFeedClient(feed_responses=[papers("p1", "p2")])
        session = make_session(client)
        session.start()
        _act(session, timers, "like")
        client.reset_error = FeedClientError("down")

        session.on_reset_session()

        assert session.liked_papers == []
        assert session.current_paper.paper_id == "p1"


class TestPreferences:
    """Test topic selection and the history panel toggle."""

    def test_select_field_keeps_history(self, make_session, timers, storage):
        client = FakeFeedClient(feed_responses=[papers("p1", "p2"), papers("b1", "p1")])
        session = make_session(client)
        session.start()
        _act(session, timers, "like")

        session.select_field("  Biology ")

        assert session.selected_field == "Biology"
        assert client.feed_calls[-1] == (5, "Biology")
        assert client.reset_calls == 1
        assert _ids(session.liked_papers) == ["p1"]
        assert session.current_paper.paper_id == "b1"
        assert storage.get_item(StorageKeys.SELECTED_FIELD) == "Biology"

    def test_selected_field_restored_at_start(self, make_session, storage):
        storage.set_item(StorageKeys.SELECTED_FIELD, "Physics")
        client = FakeFeedClient(feed_responses=[papers("p1")])

        session = make_session(client)
        session.start()

        assert client.feed_calls == [(5, "Physics")]

    def test_toggle_history(self, make_session, storage):
        session = make_session(FakeFeedClient(feed_responses=[papers("p1")]))
        session.start()

        assert session.toggle_history() is True
        assert session.snapshot().show_history is True
        assert storage.get_item(StorageKeys.SHOW_HISTORY) == "true"

        reopened = make_session(FakeFeedClient(feed_responses=[papers("p1")]))
        reopened.start()
        assert reopened.show_history is True

    def test_snapshot_reports_storage_use(self, make_session, timers, storage):
        session = make_session(FakeFeedClient(feed_responses=[papers("p1", "p2")]))
        session.start()
        _act(session, timers, "like")

        data = session.snapshot().to_dict()

        assert data["liked_ids"] == ["p1"]
        assert data["paper"]["paperId"] == "p2"
        assert data["storage_kb"] == storage.size_kb()
