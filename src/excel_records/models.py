"""Field descriptor tables for record types.

A :class:`RecordSchema` lists, in declaration order, the fields a record type
exposes to the mapper: each field has a name, a declared type, and optional
getter/setter callables. Schemas are built once per type and cached, or
supplied explicitly by the caller.
"""

from __future__ import annotations

import dataclasses
import inspect
import typing
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from functools import cache
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel

from excel_records.utils.exceptions import RecordTypeError
from excel_records.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

Getter = Callable[[Any], Any]
Setter = Callable[[Any, Any], None]


@dataclass(frozen=True)
class FieldDescriptor:
    """One bindable field of a record type."""

    name: str
    field_type: Any = str
    getter: Getter | None = None
    setter: Setter | None = None

    @property
    def readable(self) -> bool:
        return self.getter is not None

    @property
    def writable(self) -> bool:
        return self.setter is not None

    def get(self, record: Any) -> Any:
        if self.getter is None:
            raise AttributeError(f"Field '{self.name}' is not readable")
        return self.getter(record)

    def set(self, record: Any, value: Any) -> None:
        if self.setter is None:
            raise AttributeError(f"Field '{self.name}' is not writable")
        self.setter(record, value)

    @classmethod
    def attribute(
        cls, name: str, field_type: Any = str, *, writable: bool = True
    ) -> FieldDescriptor:
        """Describe a plain attribute accessed with getattr/setattr."""
        return cls(
            name=name,
            field_type=field_type,
            getter=_attribute_getter(name),
            setter=_attribute_setter(name) if writable else None,
        )


@dataclass
class RecordSchema(Generic[T]):
    """Ordered field descriptor table for one record type.

    Attributes:
        record_type: The described type.
        fields: Descriptors in declaration order.
        factory: Callable creating a record with default field values, or
            None when the type cannot be created without arguments.
    """

    record_type: type[T]
    fields: tuple[FieldDescriptor, ...]
    factory: Callable[[], T] | None = None
    _by_name: dict[str, FieldDescriptor] = field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        # Later duplicates shadow earlier ones, as attribute lookup would.
        self._by_name = {descriptor.name: descriptor for descriptor in self.fields}

    @property
    def type_name(self) -> str:
        return self.record_type.__name__

    @property
    def readable_fields(self) -> list[FieldDescriptor]:
        return [f for f in self.fields if f.readable]

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    def get_field(self, name: str) -> FieldDescriptor | None:
        """Look up a field by exact name."""
        return self._by_name.get(name)

    def new_record(self) -> T:
        """Create a record with default field values.

        Raises:
            RecordTypeError: If the type has no argument-free constructor.
        """
        if self.factory is None:
            raise RecordTypeError(
                f"Record type '{self.type_name}' cannot be created without "
                "arguments; give every field a default or supply a factory",
                record_type=self.type_name,
            )
        return self.factory()

    @classmethod
    def explicit(
        cls,
        record_type: type[T],
        fields: Iterable[FieldDescriptor],
        factory: Callable[[], T] | None = None,
    ) -> RecordSchema[T]:
        """Build a schema from caller-supplied descriptors.

        Args:
            record_type: The described type.
            fields: Descriptors in column order.
            factory: Record factory; defaults to calling ``record_type()``.
        """
        return cls(
            record_type=record_type,
            fields=tuple(fields),
            factory=factory if factory is not None else record_type,
        )


def schema_for(record_type: type[T]) -> RecordSchema[T]:
    """Return the cached schema for a record type.

    Supported types are dataclasses, pydantic models, and plain classes
    with annotated attributes or properties.

    Schemas live for the life of the process, so a class passed here stays
    referenced until :func:`clear_schema_cache` is called. Code that creates
    record classes at runtime should clear the cache when done with them.

    Raises:
        RecordTypeError: If ``record_type`` is not a class.
    """
    if not isinstance(record_type, type):
        raise RecordTypeError(
            f"Expected a record class, got {record_type!r}",
            record_type=repr(record_type),
        )
    return _build_schema(record_type)


def clear_schema_cache() -> None:
    """Drop every cached schema and the record types it references."""
    _build_schema.cache_clear()


@cache
def _build_schema(record_type: type) -> RecordSchema[Any]:
    if issubclass(record_type, BaseModel):
        fields, factory = _pydantic_fields(record_type)
    elif dataclasses.is_dataclass(record_type):
        fields, factory = _dataclass_fields(record_type)
    else:
        fields, factory = _annotated_fields(record_type)

    fields.extend(_property_fields(record_type, {f.name for f in fields}))

    logger.debug(
        "Built record schema",
        record_type=record_type.__name__,
        fields=len(fields),
        constructible=factory is not None,
    )
    return RecordSchema(record_type=record_type, fields=tuple(fields), factory=factory)


def _type_hints(target: Any) -> dict[str, Any]:
    try:
        return typing.get_type_hints(target)
    except (NameError, TypeError) as e:
        name = getattr(target, "__qualname__", repr(target))
        raise RecordTypeError(
            f"Cannot resolve type annotations of '{name}': {e}",
            record_type=name,
        ) from e


def _dataclass_fields(
    record_type: type,
) -> tuple[list[FieldDescriptor], Callable[[], Any] | None]:
    hints = _type_hints(record_type)
    frozen = record_type.__dataclass_params__.frozen  # type: ignore[attr-defined]
    fields = [
        FieldDescriptor.attribute(f.name, hints.get(f.name, str), writable=not frozen)
        for f in dataclasses.fields(record_type)
        if not f.name.startswith("_")
    ]
    constructible = all(
        f.default is not dataclasses.MISSING
        or f.default_factory is not dataclasses.MISSING
        for f in dataclasses.fields(record_type)
        if f.init
    )
    return fields, record_type if constructible else None


def _pydantic_fields(
    record_type: type[BaseModel],
) -> tuple[list[FieldDescriptor], Callable[[], Any] | None]:
    frozen = bool(record_type.model_config.get("frozen", False))
    fields = []
    for name, info in record_type.model_fields.items():
        field_frozen = frozen or bool(info.frozen)
        fields.append(
            FieldDescriptor.attribute(
                name,
                info.annotation if info.annotation is not None else str,
                writable=not field_frozen,
            )
        )
    # model_construct fills declared defaults and skips validation, so
    # models with required fields still get an empty record to populate.
    return fields, record_type.model_construct


def _annotated_fields(
    record_type: type,
) -> tuple[list[FieldDescriptor], Callable[[], Any] | None]:
    fields = [
        FieldDescriptor.attribute(name, hint)
        for name, hint in _type_hints(record_type).items()
        if not name.startswith("_") and typing.get_origin(hint) is not ClassVar
    ]
    return fields, record_type if _constructible(record_type) else None


def _constructible(record_type: type) -> bool:
    try:
        inspect.signature(record_type).bind()
    except TypeError:
        return False
    except ValueError:
        # No signature to inspect (some builtins); let the call decide.
        return True
    return True


def _property_fields(record_type: type, taken: set[str]) -> list[FieldDescriptor]:
    fields: list[FieldDescriptor] = []
    seen = set(taken)
    for klass in reversed(record_type.__mro__):
        # BaseModel's own properties (model_extra, ...) are not record fields.
        if klass is object or klass.__module__.startswith("pydantic."):
            continue
        for name, attr in vars(klass).items():
            if not isinstance(attr, property) or name.startswith("_"):
                continue
            if name in seen:
                continue
            seen.add(name)
            prop = getattr(record_type, name)
            fields.append(
                FieldDescriptor(
                    name=name,
                    field_type=_property_type(prop),
                    getter=prop.fget,
                    setter=prop.fset,
                )
            )
    return fields


def _property_type(prop: property) -> Any:
    if prop.fget is None:
        return str
    return _type_hints(prop.fget).get("return", str)


def _attribute_getter(name: str) -> Getter:
    def getter(record: Any) -> Any:
        return getattr(record, name, None)

    return getter


def _attribute_setter(name: str) -> Setter:
    def setter(record: Any, value: Any) -> None:
        setattr(record, name, value)

    return setter
