"""Temporal DataConverter for valuator frozen-dataclass types.

Handles serialization of: Decimal, date, time, timedelta, frozenset, Enum,
and discriminated dataclass unions (Product, SwapLeg, SwaptionSettlement)
by adding __type__ tags during encoding.
"""

from __future__ import annotations

import dataclasses
import importlib
import json
import types
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum
from typing import Any, Union, get_args, get_origin, get_type_hints

from temporalio.converter import (
    CompositePayloadConverter,
    DataConverter,
    DefaultPayloadConverter,
    JSONPlainPayloadConverter,
    JSONTypeConverter,
)

# ---------------------------------------------------------------------------
# Recursive serializer
# ---------------------------------------------------------------------------


def _to_json(obj: Any) -> Any:
    """Recursively convert valuator objects to JSON-compatible values.

    Dataclass instances carry a ``__type__`` tag so union-typed fields
    (Product, SwapLeg, SwaptionSettlement) decode to the right variant.
    """
    if obj is None or isinstance(obj, (bool, int, float, str)):
        return obj
    if isinstance(obj, Decimal):
        return {"__decimal__": str(obj)}
    if isinstance(obj, datetime):
        return {"__datetime__": obj.isoformat()}
    if isinstance(obj, date):
        return {"__date__": obj.isoformat()}
    if isinstance(obj, time):
        return {"__time__": obj.isoformat()}
    if isinstance(obj, timedelta):
        return {"__timedelta_s__": obj.total_seconds()}
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, frozenset):
        items = [_to_json(x) for x in obj]
        return {"__frozenset__": sorted(items, key=lambda x: json.dumps(x, sort_keys=True))}
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        d: dict[str, Any] = {
            "__type__": f"{type(obj).__module__}.{type(obj).__qualname__}",
        }
        for field in dataclasses.fields(obj):
            d[field.name] = _to_json(getattr(obj, field.name))
        return d
    if isinstance(obj, (tuple, list)):
        return [_to_json(x) for x in obj]
    if isinstance(obj, dict):
        return {str(k): _to_json(v) for k, v in obj.items()}
    raise TypeError(f"Cannot serialize {type(obj).__name__} for Temporal payload")


class ValuatorJSONEncoder(json.JSONEncoder):
    """JSON encoder using _to_json for full valuator type support."""

    def default(self, o: Any) -> Any:
        result = _to_json(o)
        if result is not o:
            return result
        return super().default(o)


# ---------------------------------------------------------------------------
# Recursive deserializer
# ---------------------------------------------------------------------------

# Only classes from these modules are ever instantiated from a payload.
_ALLOWED_MODULES: frozenset[str] = frozenset({
    "valuator.core.money",
    "valuator.core.types",
    "valuator.product.equity",
    "valuator.product.swap",
    "valuator.product.swaption",
    "valuator.refdata.types",
    "valuator.workflow.types",
})

_CLASS_CACHE: dict[str, type] = {}


def _resolve_class(fqn: str) -> type | None:
    """Resolve a fully qualified class name to a type from ``_ALLOWED_MODULES``."""
    if fqn in _CLASS_CACHE:
        return _CLASS_CACHE[fqn]
    module_name, _, class_name = fqn.rpartition(".")
    if module_name not in _ALLOWED_MODULES:
        return None
    module = importlib.import_module(module_name)
    cls = getattr(module, class_name, None)
    if isinstance(cls, type):
        _CLASS_CACHE[fqn] = cls
        return cls
    return None


def _unwrap_optional(hint: Any) -> Any:
    """``X | None`` -> ``X``; other hints unchanged."""
    if get_origin(hint) in (Union, types.UnionType):
        args = [a for a in get_args(hint) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return hint


def _from_json(hint: Any, value: Any) -> Any:
    """Recursively convert JSON values back to valuator types."""
    if value is None:
        return None
    hint = _unwrap_optional(hint)

    if isinstance(value, dict):
        if "__type__" in value:
            cls = _resolve_class(value["__type__"])
            if cls is None or not dataclasses.is_dataclass(cls):
                raise TypeError(f"Refusing to decode type {value['__type__']!r}")
            hints = get_type_hints(cls)
            kwargs: dict[str, Any] = {}
            for field in dataclasses.fields(cls):
                if field.name in value:
                    kwargs[field.name] = _from_json(hints.get(field.name, Any), value[field.name])
            return cls(**kwargs)
        if "__decimal__" in value:
            return Decimal(value["__decimal__"])
        if "__datetime__" in value:
            return datetime.fromisoformat(value["__datetime__"])
        if "__date__" in value:
            return date.fromisoformat(value["__date__"])
        if "__time__" in value:
            return time.fromisoformat(value["__time__"])
        if "__timedelta_s__" in value:
            return timedelta(seconds=value["__timedelta_s__"])
        if "__frozenset__" in value:
            item_hint = get_args(hint)[0] if get_args(hint) else Any
            return frozenset(_from_json(item_hint, x) for x in value["__frozenset__"])

    if hint is Decimal and isinstance(value, (int, float, str)):
        return Decimal(str(value))
    if isinstance(hint, type) and issubclass(hint, Enum) and not isinstance(value, Enum):
        return hint(value)

    if isinstance(value, list):
        args = get_args(hint)
        item_hint = args[0] if args else Any
        return tuple(_from_json(item_hint, x) for x in value)

    return value


class ValuatorJSONTypeConverter(JSONTypeConverter):
    """Decode tagged JSON values back to valuator types."""

    def to_typed_value(self, hint: type, value: Any) -> Any:
        if isinstance(value, dict) and any(k.startswith("__") for k in value):
            return _from_json(hint, value)
        # Python 3.12 type aliases (type Product = ...) are TypeAliasType
        # instances Temporal cannot resolve on its own.
        if hasattr(hint, "__value__"):
            return _from_json(hint.__value__, value)
        return JSONTypeConverter.Unhandled


# ---------------------------------------------------------------------------
# Wire up
# ---------------------------------------------------------------------------


class ValuatorPayloadConverter(CompositePayloadConverter):
    """Payload converter with valuator-aware JSON handling."""

    def __init__(self) -> None:
        json_converter = JSONPlainPayloadConverter(
            encoder=ValuatorJSONEncoder,
            custom_type_converters=[ValuatorJSONTypeConverter()],
        )
        super().__init__(
            *(
                c
                for c in DefaultPayloadConverter.default_encoding_payload_converters
                if not isinstance(c, JSONPlainPayloadConverter)
            ),
            json_converter,
        )


VALUATOR_DATA_CONVERTER = DataConverter(
    payload_converter_class=ValuatorPayloadConverter,
)
