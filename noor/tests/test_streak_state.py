from noor.features.streaks.service import StreakTracker


def test_state_before_any_completion(tracker):
    state = tracker.get_state()

    assert state["status"] == "none"
    assert state["streak"] == 0
    assert state["last_completion_date"] is None
    assert state["completed_count"] == 0
    assert "start your streak" in state["next_action_hint"]


def test_state_active_after_completion(tracker, clock):
    tracker.mark_complete("c1")

    state = tracker.get_state()
    assert state["status"] == "active"
    assert state["streak"] == 1
    assert state["last_completion_date"] == clock.now().isoformat()


def test_state_at_risk_next_day(tracker, clock):
    tracker.mark_complete("c1")
    clock.advance(days=1)

    state = tracker.get_state()
    assert state["status"] == "at_risk"
    assert state["streak"] == 1
    assert "2 days" in state["next_action_hint"]


def test_state_reports_zero_once_lapsed_without_reload(tracker, clock):
    """A long-running process crossing two midnights still observes the lapse."""
    tracker.mark_complete("c1")
    clock.advance(days=1)
    tracker.mark_complete("c2")
    clock.advance(days=2)

    state = tracker.get_state()
    assert state["status"] == "lapsed"
    assert state["streak"] == 0
    assert state["longest_streak"] == 2
    assert tracker.streak == 2  # stored value untouched until reconcile


def test_state_counts_completed_ids(store, clock):
    tracker = StreakTracker(store, clock)
    for challenge_id in ("a", "b", "a", "c"):
        tracker.mark_complete(challenge_id)
        clock.advance(minutes=5)

    state = tracker.get_state()
    assert state["completed_count"] == 3
    assert state["streak"] == 1
