from .settings import config
from ._logger import configure_tracebridge_logger


# configure the tracebridge logger before other modules log
configure_tracebridge_logger(config)

from .exceptions import ConfigurationError  # noqa: E402
from .exceptions import SetupError  # noqa: E402
from .telemetry import install  # noqa: E402
from .telemetry import uninstall  # noqa: E402
from .version import __version__  # noqa: E402


__all__ = [
    "config",
    "install",
    "uninstall",
    "ConfigurationError",
    "SetupError",
    "__version__",
]
