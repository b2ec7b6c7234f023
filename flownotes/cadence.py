"""
Ledger values as returned by the Flow access node (JSON-Cadence).

Every node on the wire is ``{"type": ..., "value": ...}``. Values are parsed
into a small tagged tree; the ``as_*`` accessors return ``None`` whenever the
value does not have the expected shape, so callers can compose them without
try/except.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Union


UINT64_MAX = 2**64 - 1

COMPOSITE_TYPES = frozenset({"Struct", "Resource", "Event", "Contract", "Enum"})


@dataclass(frozen=True)
class Primitive:
    type: str
    value: Any = None


@dataclass(frozen=True)
class Optional:
    value: LedgerValue | None = None


@dataclass(frozen=True)
class Array:
    items: list[LedgerValue] = field(default_factory=list)


@dataclass(frozen=True)
class Field:
    name: str
    value: LedgerValue


@dataclass(frozen=True)
class Struct:
    type_id: str
    fields: list[Field] = field(default_factory=list)
    kind: str = "Struct"


LedgerValue = Union[Primitive, Optional, Array, Struct]


def parse_value(data: Any) -> LedgerValue:
    if not isinstance(data, dict) or "type" not in data:
        raise ValueError(f"not a JSON-Cadence value: {data!r:.80}")

    kind = data["type"]
    raw = data.get("value")
    if not isinstance(kind, str):
        raise ValueError(f"type tag must be a string, got {kind!r}")

    if kind == "Optional":
        return Optional(None if raw is None else _parse_child(raw))

    if kind in ("Array", "VariableSizedArray", "ConstantSizedArray"):
        if not isinstance(raw, list):
            raise ValueError(f"{kind} value must be a list")
        return Array([_parse_child(item) for item in raw])

    if kind in COMPOSITE_TYPES:
        if not isinstance(raw, dict) or not isinstance(raw.get("fields"), list):
            raise ValueError(f"{kind} value must have fields")
        fields = [_parse_field(f) for f in raw["fields"]]
        return Struct(type_id=str(raw.get("id", "")), fields=fields, kind=kind)

    # Scalars and everything we don't traverse (Dictionary, Path, Type, Capability)
    return Primitive(type=str(kind), value=raw)


def _parse_child(data: Any) -> LedgerValue:
    # A malformed child must not poison its siblings; keep it as an opaque node
    try:
        return parse_value(data)
    except ValueError:
        return Primitive(type="Invalid", value=data)


def _parse_field(data: Any) -> Field:
    if not isinstance(data, dict):
        return Field(name="", value=Primitive(type="Invalid", value=data))
    return Field(name=str(data.get("name", "")), value=_parse_child(data.get("value")))


def as_optional(value: LedgerValue | None) -> Optional | None:
    return value if isinstance(value, Optional) else None


def as_array(value: LedgerValue | None) -> list[LedgerValue] | None:
    return value.items if isinstance(value, Array) else None


def as_struct(value: LedgerValue | None) -> Struct | None:
    return value if isinstance(value, Struct) else None


def field_at(struct: Struct | None, index: int) -> LedgerValue | None:
    if struct is None or not 0 <= index < len(struct.fields):
        return None
    return struct.fields[index].value


def as_uint64(value: LedgerValue | None) -> int | None:
    if not isinstance(value, Primitive) or value.type != "UInt64":
        return None
    raw = value.value
    if isinstance(raw, bool):
        return None
    if isinstance(raw, str):
        if not (raw.isascii() and raw.isdigit()):
            return None
        raw = int(raw)
    if not isinstance(raw, int) or not 0 <= raw <= UINT64_MAX:
        return None
    return raw


def as_string(value: LedgerValue | None) -> str | None:
    if not isinstance(value, Primitive) or value.type != "String":
        return None
    return value.value if isinstance(value.value, str) else None


# Literal encoding for payload templates

_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\0": "\\0",
}

_ADDRESS_RE = re.compile(r"^(0x)?([0-9a-fA-F]{1,16})$")


def string_literal(text: str) -> str:
    if not isinstance(text, str):
        raise ValueError("string literal requires str")
    out: list[str] = []
    for ch in text:
        if ch in _ESCAPES:
            out.append(_ESCAPES[ch])
        elif ord(ch) < 0x20 or ord(ch) == 0x7F:
            out.append(f"\\u{{{ord(ch):x}}}")
        else:
            out.append(ch)
    return '"' + "".join(out) + '"'


def address_literal(address: str) -> str:
    match = _ADDRESS_RE.match(address.strip()) if isinstance(address, str) else None
    if not match:
        raise ValueError(f"invalid Flow address: {address!r}")
    return "0x" + match.group(2).lower().rjust(16, "0")


def uint64_literal(number: int) -> str:
    if isinstance(number, bool) or not isinstance(number, int) or not 0 <= number <= UINT64_MAX:
        raise ValueError(f"not a UInt64: {number!r}")
    return str(number)
