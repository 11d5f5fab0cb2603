"""
In-process event dispatch between web framework integrations and the
tracing bridge.

Integrations emit events with :func:`execute`; consumers subscribe a single
handler function to several events with :func:`attach_many`::

    from tracebridge import events

    def handle(event, measurements, metadata, config):
        ...

    events.attach_many("my-handler", [events.ROUTER_DISPATCH_START], handle, config={"x": 1})
    events.execute(events.ROUTER_DISPATCH_START, {"system_time": 0}, {"conn": request})

Handlers run synchronously in the emitting thread. A handler that raises is
logged and detached, and the request being processed carries on.

Each event is backed by a ``blinker`` signal named after the dotted event name.
When blinker cannot be imported ``signals_available`` is false, handlers cannot
be attached and emitting events does nothing.
"""
import threading
from typing import Any  # noqa:F401
from typing import Callable  # noqa:F401
from typing import Dict  # noqa:F401
from typing import Iterable  # noqa:F401
from typing import List  # noqa:F401
from typing import Mapping  # noqa:F401
from typing import Optional  # noqa:F401
from typing import Tuple  # noqa:F401

from .internal.logger import get_logger


try:
    from blinker import Namespace
except ImportError:
    Namespace = None

signals_available = Namespace is not None


log = get_logger(__name__)

Event = Tuple[str, ...]
Handler = Callable[[Event, Mapping[str, Any], Mapping[str, Any], Any], Any]

ROUTER_DISPATCH_START = ("router_dispatch", "start")  # type: Event
ROUTER_DISPATCH_STOP = ("router_dispatch", "stop")  # type: Event
ROUTER_DISPATCH_EXCEPTION = ("router_dispatch", "exception")  # type: Event

_signals = Namespace() if signals_available else None
_lock = threading.Lock()
# handler id -> [(event, receiver)]
_attached = {}  # type: Dict[str, List[Tuple[Event, Callable[..., None]]]]


def _signal(event):
    return _signals.signal(".".join(event))


def _receiver(handler_id, event, function, config):
    def receive(sender, measurements=None, metadata=None, **kwargs):
        try:
            function(event, measurements or {}, metadata or {}, config)
        except Exception:
            log.error(
                "handler %r has failed and has been detached. event=%r", handler_id, event, exc_info=True
            )
            detach(handler_id)

    return receive


def attach_many(handler_id, events, function, config=None):
    # type: (str, Iterable[Event], Handler, Any) -> None
    """
    Attach ``function`` to every event in ``events`` under ``handler_id``.

    A registration already using ``handler_id`` is replaced.
    """
    if not signals_available:
        raise RuntimeError("blinker is required to attach event handlers")
    events = [tuple(e) for e in events]
    with _lock:
        previous = _attached.pop(handler_id, None)
        if previous:
            log.debug("replacing handler %r", handler_id)
            _disconnect(previous)
        receivers = []
        for event in events:
            receiver = _receiver(handler_id, event, function, config)
            _signal(event).connect(receiver, weak=False)
            receivers.append((event, receiver))
        _attached[handler_id] = receivers
    log.debug("attached handler %r to %d events", handler_id, len(events))


def detach(handler_id):
    # type: (str) -> bool
    """Detach every receiver registered under ``handler_id``. Returns ``False`` if none was attached."""
    with _lock:
        receivers = _attached.pop(handler_id, None)
        if receivers is None:
            return False
        _disconnect(receivers)
    log.debug("detached handler %r", handler_id)
    return True


def _disconnect(receivers):
    for event, receiver in receivers:
        _signal(event).disconnect(receiver)


def execute(event, measurements=None, metadata=None):
    # type: (Event, Optional[Mapping[str, Any]], Optional[Mapping[str, Any]]) -> None
    """Emit ``event`` to every attached handler."""
    if not signals_available:
        return
    signal = _signal(tuple(event))
    if not signal.receivers:
        return
    signal.send(None, measurements=measurements, metadata=metadata)


def list_handlers(event=None):
    # type: (Optional[Event]) -> List[str]
    """Return the ids of handlers attached to ``event``, or to any event when ``event`` is ``None``."""
    with _lock:
        if event is None:
            return list(_attached)
        event = tuple(event)
        return [handler_id for handler_id, receivers in _attached.items() if any(e == event for e, _ in receivers)]
