"""
Timeline buckets: priority order, mutual exclusivity and the recent-edit ceiling.

2025-06-10 is a Tuesday; its week ends on Sunday 2025-06-15.

Run: pytest test_timeline.py   (or: python test_timeline.py)
"""
from datetime import datetime

from vaultgraph.date_utils import end_of_week, parse_timestamp, start_of_week, was_modified_within
from vaultgraph.schema import Task
from vaultgraph.timeline import (
    BLOCKED,
    DUE_TODAY,
    NEWLY_ACTIONABLE,
    OVERDUE,
    RECENTLY_MODIFIED,
    SCHEDULED_THIS_WEEK,
    SCHEDULED_TODAY,
    build_timeline,
    classify_task,
)

TODAY = "2025-06-10"
NOW = datetime(2025, 6, 10, 12, 0, 0)


def _task(name, status="ready", **kw):
    return Task(path=f"tasks/{name}.md", title=name, status=status, **kw)


def test_week_boundaries():
    print("\n── Test: Week Boundaries ──")

    assert end_of_week(TODAY) == "2025-06-15"
    assert start_of_week(TODAY) == "2025-06-09"
    assert end_of_week("2025-06-15") == "2025-06-15", "a Sunday closes its own week"
    assert end_of_week("2025-06-16") == "2025-06-22"
    print("  ✓ Monday..Sunday weeks")


def test_overdue_not_due_today():
    print("\n── Test: Overdue ──")

    a = _task("A", due="2025-06-05")
    timeline = build_timeline([a], TODAY)
    assert a in timeline.overdue
    assert a not in timeline.due_today
    assert classify_task(a, TODAY) == OVERDUE
    print("  ✓ Past due date lands in overdue only")


def test_deferred_until_today_is_newly_actionable():
    print("\n── Test: Newly Actionable ──")

    b = _task("B", "ready", defer_until=TODAY)
    timeline = build_timeline([b], TODAY)
    assert [t.path for t in timeline.newly_actionable] == ["tasks/B.md"]
    print("  ✓ Deferral ending today surfaces the task")


def test_priority_order():
    print("\n── Test: Bucket Priority ──")

    cases = [
        (_task("1", due="2025-06-01", scheduled=TODAY), OVERDUE),
        (_task("2", "blocked", due=TODAY, scheduled=TODAY), DUE_TODAY),
        (_task("3", scheduled=TODAY, defer_until=TODAY), SCHEDULED_TODAY),
        (_task("4", "blocked", defer_until=TODAY), NEWLY_ACTIONABLE),
        (_task("5", "blocked", scheduled="2025-06-12"), BLOCKED),
        (_task("6", scheduled="2025-06-15"), SCHEDULED_THIS_WEEK),
        (_task("7", scheduled="2025-06-16"), None),
        (_task("8", due="2025-06-12"), None),
    ]
    for task, expected in cases:
        assert classify_task(task, TODAY) == expected, (task.title, expected)
    print("  ✓ First matching bucket wins")


def test_scheduled_this_week_grouped_by_date():
    tasks = [
        _task("Fri", scheduled="2025-06-13"),
        _task("Wed", scheduled="2025-06-11"),
        _task("Fri2", scheduled="2025-06-13"),
        _task("NextMon", scheduled="2025-06-16"),
    ]
    timeline = build_timeline(tasks, TODAY)

    assert list(timeline.scheduled_this_week) == ["2025-06-11", "2025-06-13"]
    assert [t.title for t in timeline.scheduled_this_week["2025-06-13"]] == ["Fri", "Fri2"]
    assert timeline.scheduled_this_week_count == 3


def test_mutual_exclusivity():
    print("\n── Test: Mutual Exclusivity ──")

    tasks = [
        _task("a", due="2025-06-01", updated_at="2025-06-10T10:00:00"),
        _task("b", due=TODAY, scheduled=TODAY),
        _task("c", scheduled=TODAY, defer_until=TODAY),
        _task("d", "blocked", defer_until=TODAY),
        _task("e", "blocked", updated_at="2025-06-10T10:00:00"),
        _task("f", scheduled="2025-06-14", updated_at="2025-06-10T10:00:00"),
        _task("g", updated_at="2025-06-10T10:00:00"),
        _task("h"),
    ]
    timeline = build_timeline(tasks, TODAY, now=NOW)

    paths = timeline.all_paths()
    assert len(paths) == len(set(paths))
    assert timeline.bucket_of("tasks/g.md") == RECENTLY_MODIFIED
    assert timeline.bucket_of("tasks/e.md") == BLOCKED
    assert timeline.bucket_of("tasks/h.md") is None
    assert len(paths) == 7
    print("  ✓ No task appears in two buckets")


def test_recently_modified_ceiling():
    print("\n── Test: Recently Modified Ceiling ──")

    recent = [_task(f"r{i}", updated_at=f"2025-06-10T0{i % 10}:30:00Z") for i in range(21)]

    timeline = build_timeline(recent, TODAY, now=NOW)
    assert timeline.recently_modified == []
    print("  ✓ 21 candidates: bucket emptied, not truncated")

    timeline = build_timeline(recent[:20], TODAY, now=NOW)
    assert len(timeline.recently_modified) == 20
    print("  ✓ 20 candidates: all kept")

    timeline = build_timeline(recent[:3], TODAY, now=NOW, recent_limit=2)
    assert timeline.recently_modified == []


def test_recent_window():
    old = _task("old", updated_at="2025-06-09T11:59:00")
    fresh = _task("fresh", updated_at="2025-06-09T12:30:00")
    broken = _task("broken", updated_at="yesterday-ish")
    timeline = build_timeline([old, fresh, broken], TODAY, now=NOW)
    assert [t.title for t in timeline.recently_modified] == ["fresh"]

    # without `now` the window closes at the end of `today`
    assert was_modified_within("2025-06-10T01:00:00", TODAY)
    assert not was_modified_within("2025-06-09T12:00:00", TODAY, hours=6)
    assert was_modified_within("2025-06-09T20:00:00", TODAY, hours=6, now=datetime(2025, 6, 10, 1, 0))


def test_timestamp_offsets_converted_to_utc():
    assert parse_timestamp("2025-06-10T12:00:00+02:00") == datetime(2025, 6, 10, 10, 0, 0)
    assert parse_timestamp("2025-06-10T12:00:00Z") == datetime(2025, 6, 10, 12, 0, 0)
    assert parse_timestamp("2025-06-10") == datetime(2025, 6, 10)
    assert parse_timestamp("not a date") is None
    assert parse_timestamp(None) is None


def test_malformed_today_raises():
    for bad in ("2025/06/10", "June 10", "", "2025-6-10"):
        try:
            build_timeline([], bad)
        except ValueError:
            continue
        raise AssertionError(f"{bad!r} should be rejected")


def main():
    print("=" * 60)
    print("  TIMELINE")
    print("=" * 60)

    test_week_boundaries()
    test_overdue_not_due_today()
    test_deferred_until_today_is_newly_actionable()
    test_priority_order()
    test_scheduled_this_week_grouped_by_date()
    test_mutual_exclusivity()
    test_recently_modified_ceiling()
    test_recent_window()
    test_timestamp_offsets_converted_to_utc()
    test_malformed_today_raises()

    print("\n  ✓ ALL TESTS PASSED")


if __name__ == "__main__":
    main()
