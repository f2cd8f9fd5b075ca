import logging

import pytest

from byteframes.middlewares.logging_middleware import (
    CorrelationIdFilter,
    LoggingMiddleware,
    _fmt_ctx,
    correlation_id_ctx,
)

LOGGER_NAME = "byteframes.middlewares.logging_middleware"


@pytest.mark.asyncio
async def test_logs_incoming_and_processed(caplog):
    caplog.set_level(logging.INFO, logger=LOGGER_NAME)
    middleware = LoggingMiddleware()

    async def handler(value):
        return value * 2

    result = await middleware(handler, "double", 21)

    assert result == 42
    messages = [r.getMessage() for r in caplog.records]
    assert any(m.startswith("Incoming call") and "operation=double" in m for m in messages)
    assert any(m.startswith("Call processed") and "execution_time_ms=" in m for m in messages)


@pytest.mark.asyncio
async def test_correlation_id_visible_inside_handler_and_reset_after():
    middleware = LoggingMiddleware()
    seen = {}

    async def handler():
        seen["cid"] = correlation_id_ctx.get()

    await middleware(handler, "get_configs")

    assert len(seen["cid"]) == 36
    assert correlation_id_ctx.get() == ""


@pytest.mark.asyncio
async def test_exception_logged_and_reraised(caplog):
    caplog.set_level(logging.INFO, logger=LOGGER_NAME)
    middleware = LoggingMiddleware()

    async def handler():
        raise ValueError("bad flag")

    with pytest.raises(ValueError, match="bad flag"):
        await middleware(handler, "set_config_active")

    errors = [r for r in caplog.records if r.levelno == logging.ERROR]
    assert errors
    assert "error=bad flag" in errors[0].getMessage()
    assert errors[0].exc_info is not None


@pytest.mark.asyncio
async def test_kwargs_are_forwarded():
    middleware = LoggingMiddleware()

    async def handler(a, b=None):
        return (a, b)

    assert await middleware(handler, "pair", 1, b=2) == (1, 2)


def test_filter_injects_correlation_id():
    token = correlation_id_ctx.set("abc")
    try:
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "msg", None, None)
        assert CorrelationIdFilter().filter(record) is True
        assert record.correlation_id == "abc"
    finally:
        correlation_id_ctx.reset(token)


def test_fmt_ctx_skips_none():
    assert _fmt_ctx({"a": 1, "b": None, "c": "x"}) == "a=1 c=x"
