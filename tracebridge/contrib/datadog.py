"""
The Datadog tracer adapter implements :class:`tracebridge.tracer.Tracer` on top
of a ``ddtrace`` tracer, by default the global ``ddtrace.trace.tracer``::

    from tracebridge import telemetry
    from tracebridge.contrib.datadog import DatadogTracer

    telemetry.install(tracer=DatadogTracer(service="my-web-app"))

Attributes passed to the bridge map onto spans this way:

* ``resource``, ``service`` and ``type`` set the matching span fields,
* nested mappings are flattened into dotted tags, ``http={"method": "GET"}``
  becomes the ``http.method`` tag,
* ``None`` values are skipped,
* ``error={"error?": True}`` marks the span as an error.
"""
from collections.abc import Mapping
from typing import Any  # noqa:F401

from ..internal.logger import get_logger


log = get_logger(__name__)

ERROR_FLAG = "error?"

_SPAN_FIELDS = {
    "resource": "resource",
    "service": "service",
    "type": "span_type",
}


def _set_attributes(span, attributes, prefix=""):
    # type: (Any, Mapping[str, Any], str) -> None
    for key, value in attributes.items():
        if value is None:
            continue
        if not prefix:
            if key in _SPAN_FIELDS:
                setattr(span, _SPAN_FIELDS[key], str(value))
                continue
            if key == "error" and isinstance(value, Mapping) and ERROR_FLAG in value:
                span.error = 1 if value[ERROR_FLAG] else 0
                continue
        name = prefix + str(key)
        if isinstance(value, Mapping):
            _set_attributes(span, value, prefix=name + ".")
        else:
            span.set_tag(name, value)


class DatadogTracer(object):
    def __init__(self, tracer=None, service=None):
        if tracer is None:
            from ddtrace.trace import tracer
        self._tracer = tracer
        self._service = service

    def __repr__(self):
        return "%s(tracer=%r, service=%r)" % (type(self).__name__, self._tracer, self._service)

    def start_span(self, name, **attributes):
        span = self._tracer.trace(
            name,
            service=attributes.pop("service", None) or self._service,
            resource=attributes.pop("resource", None),
            span_type=attributes.pop("type", None),
        )
        _set_attributes(span, attributes)
        return span

    def update_top_span(self, **attributes):
        span = self._tracer.current_root_span()
        if span is None:
            log.debug("no root span to update")
            return
        _set_attributes(span, attributes)

    def update_span(self, **attributes):
        span = self._tracer.current_span()
        if span is None:
            log.debug("no span to update")
            return
        _set_attributes(span, attributes)

    def current_trace_id(self):
        span = self._tracer.current_span()
        return span.trace_id if span is not None else None

    def finish_span(self):
        span = self._tracer.current_span()
        if span is not None:
            span.finish()

    def span_error(self, error, stacktrace=None):
        span = self._tracer.current_span()
        if span is None:
            return
        if stacktrace is None:
            stacktrace = getattr(error, "__traceback__", None)
        span.set_exc_info(type(error), error, stacktrace)

    def finish_trace(self):
        # finishing the active span re-activates its parent
        span = self._tracer.current_span()
        while span is not None:
            span.finish()
            parent = self._tracer.current_span()
            if parent is span:
                break
            span = parent
