"""Loading and calling the user processing script.

The script is an ordinary Python file. Before it runs, a global ``ott``
namespace is injected; the script registers its callbacks on it::

    def process_way(obj):
        if 'highway' not in obj.tags:
            return False
        tags = obj.tags
        tags.pop('note', None)
        return tags

    ott.process_way = process_way

Each callback receives a FeatureSnapshot and must return ``True`` (keep),
``False`` (drop) or a dict of new tags.
"""
import runpy
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Optional, Union

from osm_transform.exceptions import (
    ConfigurationError, ScriptCallError, ScriptLoadError
)
from osm_transform.scripting.binding import BoundFunction, CallingContext

NAMESPACE = 'ott'


class ScriptRuntime:
    """Single script interpreter shared by the whole run."""

    def __init__(self):
        from osm_transform import __version__

        self.namespace = SimpleNamespace(version=__version__, config_dir=None)
        self.script_path: Optional[Path] = None
        self.globals: dict = {}

    def load_and_run(self, path: Union[str, Path]) -> None:
        """Execute the user script once.

        Raises:
            ScriptLoadError: If the file is missing or raises while running
        """
        path = Path(path)
        if not path.is_file():
            raise ScriptLoadError(f"Error loading config: file not found: {path}")

        self.namespace.config_dir = str(path.resolve().parent)
        try:
            self.globals = runpy.run_path(
                str(path),
                init_globals={NAMESPACE: self.namespace},
                run_name='__ott_config__',
            )
        except Exception as e:
            raise ScriptLoadError(f"Error loading config: {e}") from e
        self.script_path = path

    def bind(self, name: str, context: CallingContext,
             nresults: int = 1) -> Optional[BoundFunction]:
        """Look up ``ott.<name>``.

        Returns:
            A BoundFunction, or None if the script did not define the name

        Raises:
            ConfigurationError: If the name is defined but not callable
        """
        func = getattr(self.namespace, name, None)
        if func is None:
            return None
        if not callable(func):
            raise ConfigurationError(f"{NAMESPACE}.{name} must be a function.")
        return BoundFunction(name=name, context=context, func=func,
                             nresults=nresults)

    def call(self, bound: BoundFunction, arg: Any) -> Any:
        """Call a bound function with a single argument.

        Raises:
            ScriptCallError: Wrapping any exception raised by the script
        """
        try:
            return bound.func(arg)
        except Exception as e:
            raise ScriptCallError(bound.name, e) from e
