from __future__ import annotations

import threading

from stockdemo.client.notices import NoticeBoard, NoticeKind, threading_scheduler


def test_notice_dismisses_after_interval(notices, scheduler):
    notices.show_success("done")
    assert notices.current.message == "done"
    assert notices.current.kind is NoticeKind.SUCCESS
    assert [e["delay"] for e in scheduler.active] == [5.0]

    scheduler.fire_all()
    assert notices.current is None


def test_new_notice_replaces_previous_and_cancels_its_timer(notices, scheduler):
    notices.show_success("first")
    notices.show_error("second")

    assert notices.current.message == "second"
    assert notices.current.kind is NoticeKind.ERROR
    assert len(scheduler.active) == 1

    scheduler.fire_all()
    assert notices.current is None


def test_stale_timer_does_not_remove_newer_notice():
    fired = []
    # Cancel is a no-op, so the first timer can still fire late
    board = NoticeBoard(scheduler=lambda delay, cb: fired.append(cb) or (lambda: None))

    board.show_success("first")
    board.show_error("second")
    fired[0]()  # late timer of the first notice
    assert board.current.message == "second"
    fired[1]()
    assert board.current is None


def test_listeners_see_every_change(notices, scheduler):
    seen = []
    notices.subscribe(lambda n: seen.append(n.message if n else None))

    notices.show_success("a")
    notices.show_error("b")
    scheduler.fire_all()

    assert seen == ["a", "b", None]


def test_dismiss_cancels_timer(notices, scheduler):
    notices.show_error("oops")
    notices.dismiss()
    assert notices.current is None
    assert scheduler.active == []


def test_threading_scheduler_runs_and_cancels():
    ran = threading.Event()
    threading_scheduler(0.01, ran.set)
    assert ran.wait(2)

    never = threading.Event()
    cancel = threading_scheduler(0.5, never.set)
    cancel()
    assert not never.wait(0.7)
