import asyncio

import pytest

from raillovable.engine import CancellationController, CancellationToken


@pytest.mark.asyncio
async def test_token_wait_returns_after_cancel():
    token = CancellationToken()
    waiter = asyncio.ensure_future(token.wait())
    await asyncio.sleep(0)
    assert not waiter.done()

    token.cancel()
    await asyncio.wait_for(waiter, timeout=1)
    assert token.cancelled


def test_one_session_per_project():
    controller = CancellationController()
    session = controller.open("p1")

    assert session is not None
    assert controller.open("p1") is None
    assert controller.open("p2") is not None
    assert controller.is_generating("p1")


def test_cancel_signals_token_once():
    controller = CancellationController()
    session = controller.open("p1")

    assert controller.cancel("p1") is True
    assert session.cancel_token.cancelled
    assert controller.cancel("p1") is False
    assert controller.cancel("unknown") is False


def test_cancelled_session_is_replaced_by_next_open():
    controller = CancellationController()
    cancelled = controller.open("p1")
    controller.cancel("p1")

    assert not controller.is_generating("p1")
    replacement = controller.open("p1")
    assert replacement is not None
    assert replacement is not cancelled
    assert not replacement.cancel_token.cancelled

    # The cancelled turn unwinding must not unregister its successor
    controller.close(cancelled)
    assert controller.get("p1") is replacement
    assert controller.is_generating("p1")


def test_close_only_removes_the_registered_session():
    controller = CancellationController()
    stale = controller.open("p1")
    controller.close(stale)
    current = controller.open("p1")

    controller.close(stale)

    assert controller.get("p1") is current
