import pytest

from tracebridge import events
from tracebridge import telemetry
from tracebridge.settings import config

from .utils import RecordingTracer


@pytest.fixture
def tracer():
    return RecordingTracer()


@pytest.fixture
def installed(tracer):
    telemetry.install(tracer=tracer)
    return tracer


@pytest.fixture(autouse=True)
def reset_events():
    yield
    for handler_id in events.list_handlers():
        events.detach(handler_id)


@pytest.fixture(autouse=True)
def reset_default_tracer():
    original = config._tracer
    yield
    config._tracer = original
