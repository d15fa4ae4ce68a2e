from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from svdsema.sema.access import access_of
from svdsema.sema.derive import Base, description_of, lookup, lookup_parent
from svdsema.sema.errors import ResolutionError
from svdsema.sema.naming import respace, to_sanitized_pascal_case, to_sanitized_snake_case
from svdsema.svd.address_map import ExpandedRegister, expand
from svdsema.svd.model import (
    Access,
    EnumeratedValues,
    Field,
    Peripheral,
    Register,
    Usage,
    register_info,
)
from svdsema.utils.bits import PrimitiveType, hex_literal, storage_type
from svdsema.utils.logger import get_logger

log = get_logger(__name__)

DEFAULT_REGISTER_SIZE = 32


@dataclass(frozen=True)
class ResolvedEnum:
    evs: EnumeratedValues
    base: Optional[Base]


@dataclass(frozen=True)
class ResolvedField:
    name: str
    type_name: str
    bit_offset: int
    bit_width: int
    ty: PrimitiveType
    access: Optional[Access]
    read: Optional[ResolvedEnum] = None
    write: Optional[ResolvedEnum] = None


@dataclass(frozen=True)
class ResolvedRegister:
    name: str
    type_name: str
    offset: int
    description: str
    access: Access
    ty: PrimitiveType
    reset_value: Optional[int]
    fields: tuple[ResolvedField, ...] = ()


@dataclass(frozen=True)
class ResolvedPeripheral:
    name: str
    base_address: int
    registers: tuple[ResolvedRegister, ...] = ()
    failed: tuple[str, ...] = ()


def _enum_for(
    f: Field,
    fields: tuple[Field, ...],
    register: Register,
    peripheral: Peripheral,
    usage: Usage,
) -> Optional[ResolvedEnum]:
    if not f.enumerated_values:
        return None
    evs, base = lookup(f.enumerated_values, fields, register, peripheral.registers, peripheral, usage)
    return ResolvedEnum(evs=evs, base=base)


def resolve_register(reg: ExpandedRegister, peripheral: Peripheral) -> ResolvedRegister:
    register = reg.register
    info = reg.info
    base: Optional[Register] = None
    if info.derived_from is not None:
        base = lookup_parent(register, peripheral.registers)
    base_info = register_info(base) if base is not None else None

    size = info.size
    if size is None and base_info is not None:
        size = base_info.size
    ty = storage_type(size if size is not None else DEFAULT_REGISTER_SIZE)

    fields = info.fields
    if fields is None and base_info is not None:
        fields = base_info.fields
    fields = fields or ()

    out: list[ResolvedField] = []
    for f in fields:
        try:
            out.append(
                ResolvedField(
                    name=to_sanitized_snake_case(f.name),
                    type_name=to_sanitized_pascal_case(f.name),
                    bit_offset=f.bit_offset,
                    bit_width=f.bit_width,
                    ty=storage_type(f.bit_width),
                    access=f.access,
                    read=_enum_for(f, fields, register, peripheral, Usage.READ),
                    write=_enum_for(f, fields, register, peripheral, Usage.WRITE),
                )
            )
        except ResolutionError as e:
            e.add_context(f"while resolving field {f.name}")
            raise

    return ResolvedRegister(
        name=reg.name,
        type_name=reg.type_name,
        offset=reg.offset,
        description=respace(description_of(register, peripheral.registers)),
        access=access_of(register, base),
        ty=ty,
        reset_value=info.reset_value if info.reset_value is not None else (
            base_info.reset_value if base_info is not None else None
        ),
        fields=tuple(out),
    )


def resolve_peripheral(peripheral: Peripheral, keep_going: bool = False) -> ResolvedPeripheral:
    """Resolve every register instance of ``peripheral``.

    With ``keep_going`` a register that fails to resolve is logged and
    left out; otherwise the first failure propagates.
    """
    registers: list[ResolvedRegister] = []
    failed: list[str] = []
    for reg in expand(peripheral.registers):
        try:
            registers.append(resolve_register(reg, peripheral))
        except ResolutionError as e:
            e.add_context(f"while resolving register {reg.info.name} of peripheral {peripheral.name}")
            if not keep_going:
                raise
            log.error("%s", e)
            failed.append(reg.name)

    log.info(
        "Resolved peripheral=%s registers=%d failed=%d",
        peripheral.name,
        len(registers),
        len(failed),
    )
    return ResolvedPeripheral(
        name=peripheral.name,
        base_address=peripheral.base_address,
        registers=tuple(registers),
        failed=tuple(failed),
    )


def _fmt_enum(label: str, e: Optional[ResolvedEnum]) -> Optional[str]:
    if e is None:
        return None
    name = e.evs.name or "<anonymous>"
    if e.base is None:
        return f"{label}={name}"
    where = e.base.field if e.base.register is None else f"{e.base.register}.{e.base.field}"
    return f"{label}={name} (from {where})"


def format_peripheral(p: ResolvedPeripheral) -> str:
    lines = [f"{p.name} @ 0x{p.base_address:08X}"]
    for r in p.registers:
        lines.append(
            f"  +0x{r.offset:04X} {r.name:<20} {r.type_name:<16} {r.ty!s:<4} "
            f"{r.access.value:<10} {r.description}"
        )
        for f in r.fields:
            extra = [s for s in (_fmt_enum("r", f.read), _fmt_enum("w", f.write)) if s]
            lines.append(
                f"      [{f.bit_offset + f.bit_width - 1}:{f.bit_offset}] {f.name:<16} "
                f"{f.type_name:<16} {f.ty!s:<4} {' '.join(extra)}".rstrip()
            )
        if r.reset_value is not None:
            lines.append(f"      reset = {hex_literal(r.reset_value)}")
    for name in p.failed:
        lines.append(f"  !! {name} could not be resolved")
    return "\n".join(lines)
