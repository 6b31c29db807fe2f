import time

from src.directory.context import CONTEXT_CANCELED, DEADLINE_EXCEEDED, RequestContext


def test_background_context_never_done():
    context = RequestContext.background()
    assert not context.done()
    assert context.remaining() is None
    assert context.error() is None


def test_cancel_is_idempotent():
    context = RequestContext()
    context.cancel()
    context.cancel()
    assert context.cancelled
    assert context.error() == CONTEXT_CANCELED


def test_deadline():
    context = RequestContext.with_timeout(0.05)
    assert not context.done()
    time.sleep(0.1)
    assert context.expired
    assert context.remaining() == 0.0
    assert context.error() == DEADLINE_EXCEEDED


def test_cancel_wins_over_deadline():
    context = RequestContext.with_timeout(0)
    context.cancel()
    assert context.error() == CONTEXT_CANCELED


def test_no_timeout():
    assert RequestContext.with_timeout(None).deadline is None
