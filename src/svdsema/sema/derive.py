from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Union

from svdsema.sema.errors import (
    AmbiguousReferenceError,
    InvalidReferenceError,
    MissingDescriptionError,
    NotFoundError,
    ResolutionError,
    SelfDerivationError,
)
from svdsema.svd.model import (
    EnumeratedValues,
    Field,
    Peripheral,
    Register,
    Usage,
    register_info,
)
from svdsema.utils.logger import get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class Base:
    """Where a derived enumeratedValues set is actually defined.

    ``register`` is None when the set lives in the register being resolved.
    """

    register: Optional[str]
    field: str


# derivedFrom references on enumeratedValues: "EVS", "FIELD.EVS" or
# "REGISTER.FIELD.EVS"


@dataclass(frozen=True)
class FieldLocal:
    evs: str


@dataclass(frozen=True)
class RegisterLocal:
    field: str
    evs: str


@dataclass(frozen=True)
class CrossRegister:
    register: str
    field: str
    evs: str


DerivedFrom = Union[FieldLocal, RegisterLocal, CrossRegister]


def parse_derived_from(text: str) -> DerivedFrom:
    parts = text.split(".")
    if not all(parts):
        raise InvalidReferenceError(f"malformed derivedFrom reference {text!r}")
    if len(parts) == 1:
        return FieldLocal(parts[0])
    if len(parts) == 2:
        return RegisterLocal(parts[0], parts[1])
    if len(parts) == 3:
        return CrossRegister(parts[0], parts[1], parts[2])
    raise InvalidReferenceError(
        f"derivedFrom reference {text!r} has {len(parts)} components, at most 3 allowed"
    )


Resolved = tuple[EnumeratedValues, Optional[Base]]


def lookup(
    evs: Sequence[EnumeratedValues],
    fields: Sequence[Field],
    register: Register,
    all_registers: Sequence[Register],
    peripheral: Peripheral,
    usage: Usage,
) -> Resolved:
    """Pick the enumeratedValues of a field for ``usage``.

    Every candidate is resolved through at most one ``derivedFrom`` hop.
    The first candidate declared for ``usage`` wins, otherwise the first
    candidate.
    """
    if not evs:
        raise NotFoundError(f"register {register_info(register).name} has a field without enumeratedValues")
    resolved: list[Resolved] = []
    for candidate in evs:
        if candidate.derived_from is None:
            resolved.append((candidate, None))
            continue
        try:
            ref = parse_derived_from(candidate.derived_from)
            if isinstance(ref, CrossRegister):
                resolved.append(
                    _lookup_in_peripheral(ref.register, ref.field, ref.evs, all_registers, peripheral)
                )
            elif isinstance(ref, RegisterLocal):
                resolved.append(_lookup_in_fields(ref.evs, ref.field, fields, register))
            else:
                resolved.append(_lookup_in_register(ref.evs, fields, register))
        except ResolutionError as e:
            e.add_context(f"while resolving derivedFrom {candidate.derived_from!r}")
            raise

    for pair in resolved:
        if pair[0].usage == usage:
            return pair
    return resolved[0]


def _lookup_in_fields(
    base_evs: str, base_field: str, fields: Sequence[Field], register: Register
) -> Resolved:
    for f in fields:
        if f.name == base_field:
            return _lookup_in_field(base_evs, None, f)
    raise NotFoundError(f"field {base_field} not found in register {register_info(register).name}")


def _lookup_in_peripheral(
    base_register: str,
    base_field: str,
    base_evs: str,
    all_registers: Sequence[Register],
    peripheral: Peripheral,
) -> Resolved:
    for r in all_registers:
        info = register_info(r)
        if info.name != base_register:
            continue
        for f in info.fields or ():
            if f.name == base_field:
                return _lookup_in_field(base_evs, base_register, f)
        raise NotFoundError(f"no field {base_field} in register {info.name}")
    raise NotFoundError(f"no register {base_register} in peripheral {peripheral.name}")


def _lookup_in_field(base_evs: str, base_register: Optional[str], field: Field) -> Resolved:
    for evs in field.enumerated_values:
        if evs.name == base_evs:
            return evs, Base(register=base_register, field=field.name)
    raise NotFoundError(f"no enumeratedValues {base_evs} in field {field.name}")


def _lookup_in_register(base_evs: str, fields: Sequence[Field], register: Register) -> Resolved:
    info = register_info(register)
    matches: list[tuple[EnumeratedValues, str]] = []
    for f in fields:
        for evs in f.enumerated_values:
            if evs.name == base_evs:
                matches.append((evs, f.name))
                break

    if not matches:
        raise NotFoundError(f"enumeratedValues {base_evs} not found in register {info.name}")
    if len(matches) > 1:
        raise AmbiguousReferenceError(base_evs, (name for _, name in matches))
    evs, field_name = matches[0]
    return evs, Base(register=None, field=field_name)


def lookup_register(name: str, all_registers: Iterable[Register]) -> Register:
    for r in all_registers:
        if register_info(r).name == name:
            return r
    raise NotFoundError(f"register {name} not found")


def lookup_parent(register: Register, all_registers: Iterable[Register]) -> Register:
    info = register_info(register)
    if info.derived_from is None:
        raise NotFoundError(f"register {info.name} does not derive from another register")
    if info.derived_from == info.name:
        raise SelfDerivationError(f"register {info.name} derives from itself")
    try:
        return lookup_register(info.derived_from, all_registers)
    except ResolutionError as e:
        e.add_context(f"while getting base for register {info.name}")
        raise


def description_of(
    register: Register, all_registers: Sequence[Register], _seen: tuple[str, ...] = ()
) -> str:
    """Description of ``register``, inherited along its derivedFrom chain."""
    info = register_info(register)
    if info.description is not None:
        return info.description
    if info.derived_from is None:
        raise MissingDescriptionError(f"register {info.name} has no description")
    if info.name in _seen:
        chain = " -> ".join(_seen + (info.name,))
        raise SelfDerivationError(f"derivation chain {chain} loops back on itself")

    try:
        base = lookup_parent(register, all_registers)
        log.debug("description of %s falls back to %s", info.name, register_info(base).name)
        return description_of(base, all_registers, _seen + (info.name,))
    except ResolutionError as e:
        e.add_context(f"while getting description of register {info.name}")
        raise
