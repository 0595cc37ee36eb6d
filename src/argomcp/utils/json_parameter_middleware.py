"""JSON parameter coercion for FastMCP tools.

Some MCP clients send list and dict arguments (label maps, ``key=value``
parameter overrides, status filters) as JSON-encoded strings. The
``json_convert`` decorator decodes those strings against the tool's type
hints before the tool body runs, and turns malformed input into the standard
``INVALID_INPUT`` error payload.
"""

import functools
import inspect
import json
import logging
import types
from collections.abc import Callable
from typing import Any, TypeVar, Union, get_args, get_origin, get_type_hints

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

_CONTAINER_TYPES = (list, dict, tuple, set)


class JSONParameterMiddleware:
    """Decode JSON-string arguments into the container types a tool expects."""

    def __init__(self, debug: bool = False):
        self.debug = debug

    @staticmethod
    def _container_of(expected_type: Any) -> type | None:
        origin = get_origin(expected_type) or expected_type
        if origin in _CONTAINER_TYPES:
            return origin
        return None

    def _convert_value(self, value: Any, expected_type: Any, param_name: str) -> Any:
        """Convert one argument, raising ValueError when it cannot match."""
        if value is None or not isinstance(value, str):
            return value

        origin = get_origin(expected_type)
        if origin in (types.UnionType, Union):
            members = [arg for arg in get_args(expected_type) if arg is not type(None)]
            # A plain string is acceptable as-is when the union allows it.
            if str in members and not value.strip().startswith(("[", "{")):
                return value
            last_error: ValueError | None = None
            for member in members:
                if member is str:
                    continue
                try:
                    return self._convert_value(value, member, param_name)
                except ValueError as e:
                    last_error = e
            if str in members:
                return value
            if last_error:
                raise last_error
            return value

        container = self._container_of(expected_type)
        if container is None:
            return value

        try:
            parsed = json.loads(value)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in parameter '{param_name}': {e}") from e

        if container is dict and isinstance(parsed, dict):
            result: Any = parsed
        elif container in (list, tuple, set) and isinstance(parsed, list):
            result = container(parsed) if container is not list else parsed
        else:
            raise ValueError(
                f"Parameter '{param_name}' must be a {container.__name__}, got {type(parsed).__name__} from JSON"
            )

        if self.debug:
            logger.debug(f"Converted {param_name} from JSON string to {type(result).__name__}")
        return result

    def _convert_arguments(self, sig: inspect.Signature, hints: dict[str, Any], args, kwargs) -> dict[str, Any]:
        bound = sig.bind(*args, **kwargs)
        bound.apply_defaults()
        converted = {}
        for name, value in bound.arguments.items():
            if name in hints:
                value = self._convert_value(value, hints[name], name)
            converted[name] = value
        return converted

    def convert(self, func: F) -> F:
        """Wrap a sync or async tool so its arguments are JSON-decoded first."""
        sig = inspect.signature(func)
        hints = get_type_hints(func)
        hints.pop("return", None)

        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args, **kwargs):
                try:
                    converted = self._convert_arguments(sig, hints, args, kwargs)
                except ValueError as e:
                    return {"error": {"code": "INVALID_INPUT", "message": str(e)}}
                return await func(**converted)

            return async_wrapper  # type: ignore

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                converted = self._convert_arguments(sig, hints, args, kwargs)
            except ValueError as e:
                return {"error": {"code": "INVALID_INPUT", "message": str(e)}}
            return func(**converted)

        return wrapper  # type: ignore


_default_middleware = JSONParameterMiddleware()


def json_convert(func: F) -> F:
    """Apply JSON parameter conversion to a tool function.

    Usage:
        @mcp.tool
        @json_convert
        async def submit_workflow(manifest: str, labels: dict[str, str] | None = None):
            ...
    """
    return _default_middleware.convert(func)
