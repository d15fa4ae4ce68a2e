from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional

from svdsema.sema.naming import to_sanitized_pascal_case, to_sanitized_snake_case
from svdsema.svd.model import (
    ArrayRegister,
    Peripheral,
    Register,
    RegisterInfo,
    SingleRegister,
    placeholder_of,
)
from svdsema.utils.logger import get_logger

log = get_logger(__name__)


@dataclass(frozen=True)
class ExpandedRegister:
    register: Register
    info: RegisterInfo
    name: str  # snake_case instance name
    offset: int  # relative to the peripheral base
    type_name: str  # PascalCase; one object shared by all instances of an array
    shared_type: bool = False


def _indices(register: ArrayRegister) -> tuple[str, ...]:
    if register.array.dim_index is not None:
        return register.array.dim_index
    return tuple(str(i) for i in range(register.array.dim))


def expand(registers: Iterable[Register]) -> list[ExpandedRegister]:
    """Flatten register arrays into individually addressed instances.

    The result is sorted by offset; registers at the same offset keep
    their input order. Array instance ``i`` lives at
    ``address_offset + i * dim_increment`` where ``i`` is the position in
    the index list, not the value of the index label.
    """
    out: list[ExpandedRegister] = []

    for r in registers:
        if isinstance(r, SingleRegister):
            info = r.info
            out.append(
                ExpandedRegister(
                    register=r,
                    info=info,
                    name=to_sanitized_snake_case(info.name),
                    offset=info.address_offset,
                    type_name=to_sanitized_pascal_case(info.name),
                )
            )
        elif isinstance(r, ArrayRegister):
            info = r.info
            placeholder = placeholder_of(info.name)
            ty = to_sanitized_pascal_case(info.name.replace(placeholder, ""))

            for i, idx in enumerate(_indices(r)):
                out.append(
                    ExpandedRegister(
                        register=r,
                        info=info,
                        name=to_sanitized_snake_case(info.name.replace(placeholder, idx)),
                        offset=info.address_offset + i * r.array.dim_increment,
                        type_name=ty,
                        shared_type=True,
                    )
                )
        else:
            raise TypeError(f"not a register: {r!r}")

    out.sort(key=lambda x: x.offset)
    log.debug("expanded %d registers", len(out))
    return out


@dataclass(frozen=True)
class RegisterMap:
    peripheral: Peripheral
    registers: tuple[ExpandedRegister, ...] = ()
    _by_name: Dict[str, ExpandedRegister] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self) -> None:
        # Build a stable lowercase name -> instance map
        m: Dict[str, ExpandedRegister] = {}
        for r in self.registers:
            m.setdefault(r.name.lower(), r)
        object.__setattr__(self, "_by_name", m)

    def find_register(self, offset: int) -> Optional[ExpandedRegister]:
        for r in self.registers:
            if r.offset == offset:
                return r
        return None

    def find_by_name(self, name: str) -> Optional[ExpandedRegister]:
        if not name:
            return None
        return self._by_name.get(name.lower())


def build_register_map(peripheral: Peripheral) -> RegisterMap:
    return RegisterMap(peripheral=peripheral, registers=tuple(expand(peripheral.registers)))
