"""Exceptions raised while configuring or running a transformation.

Every error here is fatal for the run: the CLI reports the message once and
exits. Non-fatal data problems (over-long tags) are reported as warnings by
the processor instead.
"""


class TransformError(Exception):
    """Base class for all osm-tags-transform errors."""


class ConfigurationError(TransformError, ValueError):
    """Invalid run configuration detected before processing starts."""


class ScriptLoadError(TransformError):
    """The user script could not be found or failed while loading."""


class ScriptCallError(TransformError):
    """A processing callback raised an exception."""

    def __init__(self, function_name: str, error: BaseException):
        self.function_name = function_name
        self.error = error
        super().__init__(
            f"Failed to execute function '{function_name}': {error}")


class ScriptResultError(TransformError, TypeError):
    """A processing callback returned something other than bool or dict."""


class TagTypeError(TransformError, TypeError):
    """A tag key or value returned by a callback is not a string."""


class ScriptContextError(TransformError):
    """The current feature was accessed outside of its callback."""


class IndexPhaseError(TransformError):
    """A spatial index store was used in the wrong lifecycle phase."""
