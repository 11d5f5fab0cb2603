"""
The Flask__ integration emits router dispatch events for every request routed
by a Flask application, which the bridge installed with
:func:`tracebridge.telemetry.install` turns into spans::

    from flask import Flask

    from tracebridge import telemetry
    from tracebridge.contrib.datadog import DatadogTracer
    from tracebridge.contrib.flask import instrument

    app = Flask(__name__)
    instrument(app)
    telemetry.install(tracer=DatadogTracer())


    @app.route('/users/<int:user_id>')
    def show(user_id):
        return 'hello'

A request to ``/users/1`` starts a ``request`` span with the resource
``<module>.show``, or ``<blueprint>.show`` for a view registered on a
blueprint, and ``<ViewClass>.get`` for a class-based view.

Events are emitted from Flask signals, which need the ``blinker`` library.
Pass ``use_signals=False`` to emit them from ``before_request`` and
``after_request`` hooks instead; exceptions are then not reported.

.. __: https://flask.palletsprojects.com/
"""
from .dispatch import handler_identifiers
from .dispatch import instrument
from .dispatch import uninstrument


__all__ = ["instrument", "uninstrument", "handler_identifiers"]
