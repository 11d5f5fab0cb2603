from types import TracebackType  # noqa:F401
from typing import Any
from typing import Hashable
from typing import Optional
from typing import Protocol
from typing import runtime_checkable


@runtime_checkable
class Tracer(Protocol):
    """
    Operations the bridge calls on a tracer.

    Any object providing these methods can be passed to
    :func:`tracebridge.telemetry.install`; see
    :class:`tracebridge.contrib.datadog.DatadogTracer` for the ``ddtrace``
    implementation. "Current" always refers to the span or trace active in the
    caller's execution context.
    """

    def start_span(self, name: str, **attributes: Any) -> Any:
        """Start a span named ``name`` as a child of the current span and make it current."""

    def update_top_span(self, **attributes: Any) -> None:
        """Merge ``attributes`` onto the root span of the current trace."""

    def update_span(self, **attributes: Any) -> None:
        """Merge ``attributes`` onto the current span."""

    def current_trace_id(self) -> Optional[Hashable]:
        """Return the id of the current trace, or ``None`` if no trace is active."""

    def finish_span(self) -> None:
        """Finish the current span."""

    def span_error(self, error: BaseException, stacktrace: Optional[TracebackType]) -> None:
        """Record ``error`` and its stack trace on the current span."""

    def finish_trace(self) -> None:
        """Finish the current trace, including every span still open in it."""
