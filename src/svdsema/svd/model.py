from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional, Union


class Access(enum.Enum):
    READ_ONLY = "read-only"
    WRITE_ONLY = "write-only"
    READ_WRITE = "read-write"

    @classmethod
    def from_svd(cls, text: Optional[str]) -> Optional["Access"]:
        if text is None:
            return None
        return _ACCESS_SPELLINGS.get(text.strip())


_ACCESS_SPELLINGS = {
    "read-only": Access.READ_ONLY,
    "write-only": Access.WRITE_ONLY,
    "writeOnce": Access.WRITE_ONLY,
    "read-write": Access.READ_WRITE,
    "read-writeOnce": Access.READ_WRITE,
}


class Usage(enum.Enum):
    READ = "read"
    WRITE = "write"
    READ_WRITE = "read-write"

    @classmethod
    def from_svd(cls, text: Optional[str]) -> Optional["Usage"]:
        if text is None:
            return None
        try:
            return cls(text.strip())
        except ValueError:
            return None


@dataclass(frozen=True)
class EnumeratedValue:
    name: str
    value: Optional[int] = None
    description: Optional[str] = None
    is_default: bool = False


@dataclass(frozen=True)
class EnumeratedValues:
    name: Optional[str] = None
    usage: Optional[Usage] = None
    derived_from: Optional[str] = None
    values: tuple[EnumeratedValue, ...] = ()


@dataclass(frozen=True)
class Field:
    name: str
    bit_offset: int
    bit_width: int
    description: Optional[str] = None
    access: Optional[Access] = None
    enumerated_values: tuple[EnumeratedValues, ...] = ()


@dataclass(frozen=True)
class RegisterInfo:
    name: str  # may hold a "%s" / "[%s]" placeholder
    address_offset: int
    size: Optional[int] = None  # bits
    reset_value: Optional[int] = None
    description: Optional[str] = None
    access: Optional[Access] = None
    fields: Optional[tuple[Field, ...]] = None
    derived_from: Optional[str] = None


@dataclass(frozen=True)
class ArrayInfo:
    dim: int
    dim_increment: int
    dim_index: Optional[tuple[str, ...]] = None


@dataclass(frozen=True)
class SingleRegister:
    info: RegisterInfo


@dataclass(frozen=True)
class ArrayRegister:
    info: RegisterInfo
    array: ArrayInfo


Register = Union[SingleRegister, ArrayRegister]


def register_info(register: Register) -> RegisterInfo:
    if isinstance(register, (SingleRegister, ArrayRegister)):
        return register.info
    raise TypeError(f"not a register: {register!r}")


def placeholder_of(name: str) -> str:
    return "[%s]" if "[%s]" in name else "%s"


def name_of(register: Register) -> str:
    """Register name with any array placeholder removed."""
    if isinstance(register, SingleRegister):
        return register.info.name
    if isinstance(register, ArrayRegister):
        return register.info.name.replace(placeholder_of(register.info.name), "")
    raise TypeError(f"not a register: {register!r}")


@dataclass(frozen=True)
class Peripheral:
    name: str
    base_address: int
    size: int  # bytes (from addressBlock.size if present; else heuristic)
    description: Optional[str] = None
    registers: tuple[Register, ...] = ()
    derived_from: Optional[str] = None


@dataclass(frozen=True)
class Device:
    name: str
    peripherals: tuple[Peripheral, ...] = ()
