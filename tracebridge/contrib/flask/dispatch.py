"""
Emit router dispatch events for a Flask application.

Requires the ``blinker`` library for Flask signals. When signals are not
available the request hooks are used instead, and exceptions are not
reported.
"""
import inspect
import time

import flask
from flask import g
from flask import request
from flask import signals

from ... import events
from ...internal.logger import get_logger


log = get_logger(__name__)

EXTENSION_KEY = "tracebridge"

_START_TIME_ATTR = "_tracebridge_dispatch_start"


def instrument(app, use_signals=True):
    # type: (flask.Flask, bool) -> None
    """Emit ``router_dispatch`` events for every request handled by ``app``. Instrumenting twice is a no-op."""
    if EXTENSION_KEY in app.extensions:
        return

    # warn the user if signals are unavailable (because blinker isn't
    # installed) if they are asking to use them.
    signals_available = getattr(signals, "signals_available", True)
    if use_signals and not signals_available:
        log.warning(_blinker_not_installed_msg)

    dispatch_signals = {
        "request_started": _request_started,
        "request_finished": _request_finished,
        "got_request_exception": _request_exception,
    }
    if use_signals and signals_available and _signals_exist(dispatch_signals):
        for name, receiver in dispatch_signals.items():
            getattr(signals, name).connect(receiver, app, weak=False)
        app.extensions[EXTENSION_KEY] = ("signals", dispatch_signals)
    else:
        # Fallback to request hooks. Won't catch exceptions.
        app.before_request(_before_request)
        app.after_request(_after_request)
        app.extensions[EXTENSION_KEY] = ("hooks", None)
    log.debug("instrumented %r with %s", app, app.extensions[EXTENSION_KEY][0])


def uninstrument(app):
    # type: (flask.Flask) -> bool
    try:
        mode, dispatch_signals = app.extensions.pop(EXTENSION_KEY)
    except KeyError:
        return False

    if mode == "signals":
        for name, receiver in dispatch_signals.items():
            getattr(signals, name).disconnect(receiver, app)
    else:
        _remove_hook(app.before_request_funcs, _before_request)
        _remove_hook(app.after_request_funcs, _after_request)
    return True


def _remove_hook(funcs_by_blueprint, func):
    hooks = funcs_by_blueprint.get(None, [])
    if func in hooks:
        hooks.remove(func)


def handler_identifiers(app, req):
    """
    Return the ``(plug, plug_opts)`` pair naming the view handling ``req``.

    Function views are named by their blueprint, or their module outside of a
    blueprint, and their function name. Class-based views are named by their
    class and the lowercased HTTP method. Requests without a matched view or
    handled by a bound method such as ``app.send_static_file`` give ``(None, None)``.
    """
    endpoint = req.endpoint
    if endpoint is None:
        return None, None
    view = app.view_functions.get(endpoint)
    if view is None or inspect.ismethod(view):
        return None, None

    view_class = getattr(view, "view_class", None)
    if view_class is not None:
        return view_class.__name__, req.method.lower()
    return req.blueprint or view.__module__, view.__name__


def _metadata(app, **extra):
    plug, plug_opts = handler_identifiers(app, request)
    metadata = {"conn": request._get_current_object(), "plug": plug, "plug_opts": plug_opts}
    metadata.update(extra)
    return metadata


def _duration():
    start = getattr(g, _START_TIME_ATTR, None)
    if start is None:
        return {}
    return {"duration": time.monotonic_ns() - start}


def _dispatch_start(app):
    setattr(g, _START_TIME_ATTR, time.monotonic_ns())
    events.execute(events.ROUTER_DISPATCH_START, {"system_time": time.time_ns()}, _metadata(app))


def _dispatch_stop(app):
    events.execute(events.ROUTER_DISPATCH_STOP, _duration(), _metadata(app))


def _dispatch_exception(app, exception):
    events.execute(
        events.ROUTER_DISPATCH_EXCEPTION,
        _duration(),
        _metadata(app, kind="error", reason=exception, stacktrace=exception.__traceback__),
    )


# signal handling methods


def _request_started(sender, **kwargs):
    _dispatch_start(sender)


def _request_finished(sender, response=None, **kwargs):
    _dispatch_stop(sender)


def _request_exception(sender, exception=None, **kwargs):
    _dispatch_exception(sender, exception)


# request hook methods


def _before_request():
    _dispatch_start(flask.current_app)


def _after_request(response):
    _dispatch_stop(flask.current_app)
    return response


def _signals_exist(names):
    """Return true if all of the given signals exist in this version of flask."""
    return all(getattr(signals, n, False) for n in names)


_blinker_not_installed_msg = (
    "please install blinker to use flask signals. Falling back to request hooks, exceptions will not be reported."
)
