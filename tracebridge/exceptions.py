class ConfigurationError(ValueError):
    """Raised at install time when the bridge cannot be configured, e.g. no tracer is available."""


class SetupError(RuntimeError):
    """
    Raised at install time when the event subsystem cannot subscribe one
    handler to several events.
    """
