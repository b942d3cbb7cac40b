"""Exceptions raised by FlowField."""


class FlowFieldError(Exception):
    """Base class for all FlowField errors."""


class FieldConfigurationError(FlowFieldError, ValueError):
    """A field or lookup was configured with values it cannot work with."""


class InvalidPattern(FieldConfigurationError):
    """The requested field pattern is not one of the known patterns."""


class SchedulerStateError(FlowFieldError, RuntimeError):
    """A scheduler command was issued in a state that does not allow it."""
