import importlib
from typing import Any  # noqa:F401
from typing import Optional  # noqa:F401

from envier import Env

from ..exceptions import ConfigurationError
from ..internal.logger import get_logger


log = get_logger(__name__)


def _import_object(path):
    # type: (str) -> Any
    """Import ``"package.module:attribute"`` (or ``"package.module.attribute"``)."""
    if ":" in path:
        module_name, _, attribute = path.partition(":")
    else:
        module_name, _, attribute = path.rpartition(".")
    if not module_name or not attribute:
        raise ConfigurationError("TRACEBRIDGE_TRACER must look like 'package.module:attribute', got %r" % path)
    try:
        obj = importlib.import_module(module_name)
        for part in attribute.split("."):
            obj = getattr(obj, part)
    except (ImportError, AttributeError) as e:
        raise ConfigurationError("Cannot load tracer %r: %s" % (path, e)) from e
    return obj


class Config(Env):
    """
    Process-wide default configuration.

    Values are read from ``TRACEBRIDGE_*`` environment variables when the
    object is created. The tracer can also be set in code before
    :func:`tracebridge.telemetry.install` is called::

        from tracebridge import config
        from tracebridge.contrib.datadog import DatadogTracer

        config.tracer = DatadogTracer()
    """

    __prefix__ = "tracebridge"

    tracer_path = Env.var(
        str,
        "tracer",
        default="",
        help_type="String",
        help="Import path of the default tracer, as ``package.module:attribute``",
    )

    span_name = Env.var(
        str,
        "span_name",
        default="request",
        help_type="String",
        help="Name of the span created for each dispatched request",
    )

    debug = Env.var(
        bool,
        "debug",
        default=False,
        help_type="Boolean",
        help="Set the ``tracebridge`` logger level to DEBUG",
    )

    log_file = Env.var(
        str,
        "log_file",
        default="",
        help_type="String",
        help="Path of a file that ``tracebridge`` logs are also written to",
    )

    log_file_level = Env.var(
        str,
        "log_file_level",
        default="DEBUG",
        help_type="String",
        help="Level of the records written to ``TRACEBRIDGE_LOG_FILE``",
    )

    def __init__(self, *args, **kwargs):
        super(Config, self).__init__(*args, **kwargs)
        self._tracer = None  # type: Optional[Any]

    @property
    def tracer(self):
        # type: () -> Optional[Any]
        if self._tracer is None and self.tracer_path:
            self._tracer = _import_object(self.tracer_path)
            log.debug("loaded default tracer %r from %s", self._tracer, self.tracer_path)
        return self._tracer

    @tracer.setter
    def tracer(self, value):
        # type: (Optional[Any]) -> None
        self._tracer = value


config = Config()
