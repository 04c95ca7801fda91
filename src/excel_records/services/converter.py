"""Conversion between cell text and typed field values.

All parsing and formatting is locale-independent: numbers use ``.`` as the
decimal separator and no digit grouping, dates and times use ISO 8601, and
booleans are ``True``/``False``. Anything written by :meth:`TypeConverter.to_text`
is read back to an equal value by :meth:`TypeConverter.to_value`.
"""

from __future__ import annotations

import re
import types
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from functools import partial
from typing import Annotated, Any, Union, get_args, get_origin

from excel_records.utils.exceptions import ConfigurationError, ConversionError
from excel_records.utils.logging import get_logger

logger = get_logger(__name__)

Parser = Callable[[str], Any]
Formatter = Callable[[Any], str]

_INTEGER = re.compile(r"\s*[+-]?\d+\s*", re.ASCII)
_BOOLEANS = {"true": True, "false": False}


@dataclass(frozen=True)
class _Conversion:
    parse: Parser
    format: Formatter | None = None


def _parse_int(text: str) -> int:
    if not _INTEGER.fullmatch(text):
        raise ValueError(f"invalid integer literal: {text!r}")
    return int(text)


def _parse_float(text: str) -> float:
    if "_" in text:
        raise ValueError(f"digit separators are not allowed: {text!r}")
    return float(text)


def _parse_decimal(text: str) -> Decimal:
    if "_" in text:
        raise ValueError(f"digit separators are not allowed: {text!r}")
    return Decimal(text.strip())


def _parse_bool(text: str) -> bool:
    try:
        return _BOOLEANS[text.strip().lower()]
    except KeyError:
        raise ValueError(f"expected 'True' or 'False', got {text!r}") from None


def _stripped(parse: Parser) -> Parser:
    def wrapper(text: str) -> Any:
        return parse(text.strip())

    return wrapper


def _format_float(value: Any) -> str:
    return repr(float(value))


def _format_iso(value: Any) -> str:
    return str(value.isoformat())


def _is_class(target: Any) -> bool:
    # Parameterized generics such as list[str] are not plain classes.
    return isinstance(target, type) and get_origin(target) is None


def _is_text_type(target: Any) -> bool:
    return (
        _is_class(target)
        and issubclass(target, str)
        and not issubclass(target, Enum)
    )


def type_name(target: Any) -> str:
    """Human readable name of a field type, used in error messages."""
    if target is None or target is type(None):
        return "None"
    if get_origin(target) in (Union, types.UnionType):
        return " | ".join(type_name(arg) for arg in get_args(target))
    return getattr(target, "__name__", None) or str(target)


class TypeConverter:
    """Converts cell text to field values and back.

    Built-in support covers ``str``, ``int``, ``float``, ``Decimal``,
    ``bool``, ``datetime``, ``date``, ``time``, ``UUID``, enums, and
    optional/union forms of those. Further types can be added per instance
    with :meth:`register`.
    """

    def __init__(self) -> None:
        self._registered: set[type] = set()
        self._conversions: dict[type, _Conversion] = {
            str: _Conversion(str),
            int: _Conversion(_parse_int),
            float: _Conversion(_parse_float, _format_float),
            Decimal: _Conversion(_parse_decimal),
            bool: _Conversion(_parse_bool),
            datetime: _Conversion(_stripped(datetime.fromisoformat), _format_iso),
            date: _Conversion(_stripped(date.fromisoformat), _format_iso),
            time: _Conversion(_stripped(time.fromisoformat), _format_iso),
            uuid.UUID: _Conversion(_stripped(uuid.UUID)),
        }

    def register(
        self,
        target_type: type,
        parse: Parser,
        format: Formatter | None = None,
    ) -> None:
        """Register a conversion for a custom type.

        Registrations also apply to subclasses of ``target_type`` and take
        precedence over built-in conversions.

        Args:
            target_type: The field type to support.
            parse: Callable turning cell text into a value. ValueError,
                TypeError and ArithmeticError are reported as conversion
                failures.
            format: Callable turning a value into cell text; ``str`` if omitted.

        Raises:
            ConfigurationError: If the arguments are not a type and callables.
        """
        if not _is_class(target_type):
            raise ConfigurationError(
                f"Can only register conversions for classes, got {target_type!r}",
                setting="target_type",
            )
        if not callable(parse) or (format is not None and not callable(format)):
            raise ConfigurationError(
                f"Conversion for '{target_type.__name__}' needs callable parse/format",
                setting="parse",
            )
        self._conversions[target_type] = _Conversion(parse, format)
        self._registered.add(target_type)
        logger.debug("Registered conversion", target_type=target_type.__name__)

    def to_value(self, text: str, target_type: Any, field_name: str = "") -> Any:
        """Convert cell text to an instance of ``target_type``.

        Blank text converts to ``None`` for optional types and to ``""`` for
        ``str`` and its subclasses; for every other type it is a conversion
        failure.

        Args:
            text: Raw cell text.
            target_type: Declared type of the destination field.
            field_name: Destination field name, reported on failure.

        Returns:
            The converted value.

        Raises:
            ConversionError: If the text cannot be parsed as ``target_type``.
        """
        if not isinstance(text, str):
            text = self.to_text(text)

        if target_type is Any or target_type is object:
            return text

        origin = get_origin(target_type)
        if origin is Annotated:
            return self.to_value(text, get_args(target_type)[0], field_name)
        if origin in (Union, types.UnionType):
            return self._to_union(text, target_type, field_name)

        conversion = self._lookup(target_type)
        if conversion is not None:
            parse = conversion.parse
            if parse is str and _is_text_type(target_type):
                # str subclasses resolve to the str conversion
                parse = target_type
        elif _is_class(target_type) and issubclass(target_type, Enum):
            parse = partial(self._parse_enum, enum_type=target_type)
        else:
            raise ConversionError(
                text,
                field_name,
                type_name(target_type),
                reason="no conversion is registered for this type",
            )
        if not _is_text_type(target_type) and not text.strip():
            raise ConversionError(
                text, field_name, type_name(target_type), reason="empty value"
            )

        try:
            return parse(text)
        except (ValueError, TypeError, ArithmeticError) as e:
            raise ConversionError(
                text, field_name, type_name(target_type), reason=str(e)
            ) from e

    def to_text(self, value: Any) -> str:
        """Convert a field value to its canonical cell text.

        ``None`` converts to an empty string.
        """
        if value is None:
            return ""

        conversion = self._lookup(type(value))
        if conversion is not None and conversion.format is not None:
            return conversion.format(value)
        if isinstance(value, Enum):
            return value.name
        if isinstance(value, bool):
            return "True" if value else "False"
        return str(value)

    def _lookup(self, target_type: Any) -> _Conversion | None:
        if not _is_class(target_type):
            return None
        # Enums only match explicit registrations; IntEnum would otherwise
        # resolve to the int conversion.
        is_enum = issubclass(target_type, Enum)
        for base in target_type.__mro__:
            conversion = self._conversions.get(base)
            if conversion is None:
                continue
            if is_enum and base not in self._registered:
                continue
            return conversion
        return None

    def _to_union(self, text: str, target_type: Any, field_name: str) -> Any:
        args = get_args(target_type)
        members = [arg for arg in args if arg is not type(None)]
        if len(members) != len(args) and not text.strip():
            return None

        last_error: ConversionError | None = None
        for member in members:
            try:
                return self.to_value(text, member, field_name)
            except ConversionError as e:
                last_error = e
        raise ConversionError(
            text,
            field_name,
            type_name(target_type),
            reason=last_error.reason if last_error else None,
        ) from last_error

    def _parse_enum(self, text: str, enum_type: type[Enum]) -> Enum:
        """Match a member by name, ignoring case, then by value text."""
        name = text.strip()
        member = enum_type.__members__.get(name)
        if member is not None:
            return member
        folded = name.casefold()
        for candidate_name, candidate in enum_type.__members__.items():
            if candidate_name.casefold() == folded:
                return candidate
        for candidate in enum_type:
            if self.to_text(candidate.value) == name:
                return candidate
        raise ValueError(f"{name!r} is not a member of {enum_type.__name__}")

