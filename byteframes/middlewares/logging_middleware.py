import logging
import uuid
import time
import contextvars
from typing import Any, Awaitable, Callable, Dict

correlation_id_ctx: contextvars.ContextVar[str] = contextvars.ContextVar("correlation_id", default="")


class CorrelationIdFilter(logging.Filter):
    """
    Logging filter to inject the correlation_id into log records.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = correlation_id_ctx.get()
        return True


logger = logging.getLogger(__name__)
logger.addFilter(CorrelationIdFilter())


def _fmt_ctx(ctx: Dict[str, Any]) -> str:
    """Return a deterministic key=value string used in log messages."""
    return " ".join(f"{k}={v}" for k, v in ctx.items() if v is not None)


class LoggingMiddleware:
    """
    Logs every call coming from the host shell with a correlation ID,
    its failure (if any) and its execution time.
    """

    async def __call__(
        self,
        handler: Callable[..., Awaitable[Any]],
        operation: str,
        *args: Any,
        **kwargs: Any,
    ) -> Any:
        cid = str(uuid.uuid4())
        token = correlation_id_ctx.set(cid)

        incoming_ctx = {
            "correlation_id": cid,
            "operation": operation,
            "arg_count": len(args) + len(kwargs),
        }
        logger.info(f"Incoming call {_fmt_ctx(incoming_ctx)}", extra=incoming_ctx)

        start_time = time.monotonic()
        try:
            return await handler(*args, **kwargs)

        except Exception as e:
            exc_ctx = {
                "correlation_id": cid,
                "operation": operation,
                "error": str(e),
            }
            logger.exception(f"Exception caught in handler {_fmt_ctx(exc_ctx)}", extra=exc_ctx)
            raise

        finally:
            elapsed_ms = int((time.monotonic() - start_time) * 1000)
            processed_ctx = {
                "correlation_id": cid,
                "operation": operation,
                "execution_time_ms": elapsed_ms,
            }
            logger.info(f"Call processed {_fmt_ctx(processed_ctx)}", extra=processed_ctx)
            correlation_id_ctx.reset(token)
