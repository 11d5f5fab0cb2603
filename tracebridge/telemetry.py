"""
Trace web requests from router dispatch events.

The bridge subscribes to the three ``router_dispatch`` events emitted by a
framework integration (see :mod:`tracebridge.contrib.flask`) and forwards
them to a tracer:

* ``start`` opens a span named ``span_name`` with the resource
  ``"<plug>.<plug_opts>"`` and merges the request metadata onto the root span,
* ``stop`` finishes that span,
* ``exception`` records the error and finishes the whole trace.

Install it once at startup::

    from tracebridge import telemetry
    from tracebridge.contrib.datadog import DatadogTracer

    telemetry.install(
        tracer=DatadogTracer(),
        filter_traces=lambda request: request.path != "/health",
    )

Options
~~~~~~~

``tracer``
    The tracer receiving the calls, see :class:`tracebridge.tracer.Tracer`.

    Default: ``tracebridge.config.tracer`` (``TRACEBRIDGE_TRACER``)

``filter_traces``
    A function taking the request and returning ``True`` if a span should be
    created for it.

    Default: include every request

``span_name``
    The name of the span created for each request.

    Default: ``tracebridge.config.span_name`` (``TRACEBRIDGE_SPAN_NAME``, ``"request"``)

``customize_metadata``
    A function taking the request and returning a mapping of attributes merged
    onto the root span.

    Default: :func:`tracebridge.metadata.default_metadata`
"""
from typing import Any
from typing import Callable
from typing import Mapping
from typing import Optional

import attr

from . import events
from .exceptions import ConfigurationError
from .exceptions import SetupError
from .internal.logger import get_logger
from .metadata import default_metadata
from .settings import config as global_config


log = get_logger(__name__)

HANDLER_ID = "tracebridge-telemetry"

EVENTS = (
    events.ROUTER_DISPATCH_START,
    events.ROUTER_DISPATCH_STOP,
    events.ROUTER_DISPATCH_EXCEPTION,
)


def _include_all(request):
    return True


@attr.s(frozen=True, slots=True)
class BridgeConfig(object):
    """Options of an installed bridge. Read-only once created."""

    tracer = attr.ib()
    filter_traces = attr.ib(default=_include_all, type=Callable[[Any], bool])
    customize_metadata = attr.ib(default=default_metadata, type=Callable[[Any], Mapping[str, Any]])
    span_name = attr.ib(default="request", type=str)


def install(
    tracer: Optional[Any] = None,
    filter_traces: Optional[Callable[[Any], bool]] = None,
    customize_metadata: Optional[Callable[[Any], Mapping[str, Any]]] = None,
    span_name: Optional[str] = None,
) -> None:
    """Attach the bridge to the router dispatch events. Calling it again replaces the previous installation."""
    if not getattr(events, "signals_available", False) or not callable(getattr(events, "attach_many", None)):
        raise SetupError(
            "Cannot install dispatch event handlers: blinker is not installed, so the event subsystem "
            "does not support multi-event subscription. Did you mean to use the request hooks integration instead? "
            "See tracebridge.contrib.flask.instrument(app, use_signals=False)."
        )

    if tracer is None:
        tracer = global_config.tracer
    if tracer is None:
        raise ConfigurationError(
            "tracer must be provided or configured with tracebridge.config.tracer / TRACEBRIDGE_TRACER"
        )

    bridge_config = BridgeConfig(
        tracer=tracer,
        filter_traces=filter_traces or _include_all,
        customize_metadata=customize_metadata or default_metadata,
        span_name=span_name or global_config.span_name,
    )

    events.attach_many(HANDLER_ID, EVENTS, handle_event, bridge_config)
    log.debug("installed dispatch tracing with %r", bridge_config)


def uninstall():
    # type: () -> bool
    return events.detach(HANDLER_ID)


def _is_identifier(value):
    # type: (Any) -> bool
    return isinstance(value, str) and bool(value) and all(part.isidentifier() for part in value.split("."))


def handle_event(event, measurements, metadata, config):
    # type: (events.Event, Mapping[str, Any], Mapping[str, Any], BridgeConfig) -> None
    if event == events.ROUTER_DISPATCH_START:
        _on_dispatch_start(metadata, config)
    elif event == events.ROUTER_DISPATCH_STOP:
        _on_dispatch_stop(config)
    elif event == events.ROUTER_DISPATCH_EXCEPTION:
        _on_dispatch_exception(metadata, config)


def _on_dispatch_start(metadata, config):
    request = metadata.get("conn")
    plug = metadata.get("plug")
    plug_opts = metadata.get("plug_opts")
    # The router can hand a request to something other than a view (static
    # files, unmatched routes); only named handlers and actions are traced.
    if not (_is_identifier(plug) and _is_identifier(plug_opts) and config.filter_traces(request)):
        return

    tracer = config.tracer
    tracer.start_span(config.span_name, resource="%s.%s" % (plug, plug_opts))
    tracer.update_top_span(**config.customize_metadata(request))


def _on_dispatch_stop(config):
    tracer = config.tracer
    if tracer.current_trace_id() is None:
        log.debug("no active trace on dispatch stop")
        return
    tracer.finish_span()


def _on_dispatch_exception(metadata, config):
    # older emitters report the exception under "error"
    error = metadata.get("reason")
    if error is None:
        error = metadata.get("error")

    tracer = config.tracer
    if tracer.current_trace_id() is None:
        log.debug("no active trace on dispatch exception %r", error)
        return
    tracer.span_error(error, metadata.get("stacktrace"))
    tracer.update_span(error={"error?": True})
    tracer.finish_trace()
