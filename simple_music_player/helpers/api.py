"""Helpers for dealing with the command API of Simple Music Player."""

from __future__ import annotations

import inspect
from collections.abc import Callable, Coroutine
from dataclasses import dataclass
from typing import Any, TypeVar, get_args, get_origin, get_type_hints

from mashumaro import DataClassDictMixin

_F = TypeVar("_F", bound=Callable[..., Any])

BOOL_VALUES = {"true": True, "1": True, "on": True, "yes": True}
BOOL_VALUES.update({"false": False, "0": False, "off": False, "no": False})


@dataclass
class APICommandHandler:
    """Model for an API command handler."""

    command: str
    signature: inspect.Signature
    type_hints: dict[str, Any]
    target: Callable[..., Coroutine[Any, Any, Any] | Any]

    @classmethod
    def parse(
        cls, command: str, func: Callable[..., Coroutine[Any, Any, Any] | Any]
    ) -> APICommandHandler:
        """Parse APICommandHandler by providing a function.

        :param command: The command name/path.
        :param func: The function to handle the command.
        """
        type_hints = get_type_hints(func)
        type_hints.pop("return", None)
        return APICommandHandler(
            command=command,
            signature=inspect.signature(func),
            type_hints=type_hints,
            target=func,
        )


def api_command(command: str) -> Callable[[_F], _F]:
    """Decorate a function as API route/command.

    :param command: The command name/path.
    """

    def decorate(func: _F) -> _F:
        func.api_cmd = command  # type: ignore[attr-defined]
        return func

    return decorate


def parse_arguments(handler: APICommandHandler, args: dict[str, Any] | None) -> dict[str, Any]:
    """
    Convert raw (json) arguments to the types the command handler expects.

    Arguments the handler does not accept are ignored. Raises KeyError for a missing
    argument without default and TypeError/ValueError for a value that can't be converted.
    """
    args = args or {}
    final_args = {}
    for name, param in handler.signature.parameters.items():
        if name not in args or args[name] is None:
            if param.default is inspect.Parameter.empty:
                raise KeyError(f"`{name}` is required")
            final_args[name] = param.default
            continue
        final_args[name] = convert_value(name, args[name], handler.type_hints[name])
    return final_args


def convert_value(name: str, value: Any, value_type: Any) -> Any:
    """Convert a single raw value to the given type (a Song, list, int, str or bool)."""
    if get_origin(value_type) is list:
        if not isinstance(value, list):
            raise TypeError(f"`{name}` should be a list, got {type(value).__name__}")
        (item_type,) = get_args(value_type)
        return [convert_value(name, item, item_type) for item in value]
    # bool is a subclass of int, which is no valid position or offset
    if isinstance(value, value_type) and not (value_type is int and isinstance(value, bool)):
        return value
    if isinstance(value, dict) and issubclass(value_type, DataClassDictMixin):
        return value_type.from_dict(value)
    if isinstance(value, str) and value_type is int:
        return int(value)
    if isinstance(value, str) and value_type is bool:
        if (parsed := BOOL_VALUES.get(value.lower())) is None:
            raise TypeError(f"`{name}` should be a boolean, got {value!r}")
        return parsed
    raise TypeError(
        f"`{name}` should be of type {value_type.__name__}, got {type(value).__name__}"
    )
