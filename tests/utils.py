import itertools


class RecordingTracer(object):
    """
    Tracer keeping every call it receives in ``calls``.

    ``current_trace_id`` is answered from the recorded spans but is not itself
    recorded, so that ``calls`` only holds the calls that change the trace.
    """

    _ids = itertools.count(1)

    def __init__(self):
        self.calls = []
        self.open_spans = []
        self.trace_id = None

    def start_span(self, name, **attributes):
        self.calls.append(("start_span", name, attributes))
        if self.trace_id is None:
            self.trace_id = next(self._ids)
        self.open_spans.append(name)

    def update_top_span(self, **attributes):
        self.calls.append(("update_top_span", attributes))

    def update_span(self, **attributes):
        self.calls.append(("update_span", attributes))

    def current_trace_id(self):
        return self.trace_id

    def finish_span(self):
        self.calls.append(("finish_span",))
        if self.open_spans:
            self.open_spans.pop()
        if not self.open_spans:
            self.trace_id = None

    def span_error(self, error, stacktrace):
        self.calls.append(("span_error", error, stacktrace))

    def finish_trace(self):
        self.calls.append(("finish_trace",))
        self.open_spans = []
        self.trace_id = None

    def call_names(self):
        return [call[0] for call in self.calls]

    def pop(self):
        calls, self.calls = self.calls, []
        return calls
