from __future__ import annotations

import enum

from svdsema.sema.errors import UnsupportedWidthError


class PrimitiveType(enum.Enum):
    U8 = 8
    U16 = 16
    U32 = 32

    @property
    def bits(self) -> int:
        return self.value

    def __str__(self) -> str:
        return f"u{self.value}"


def storage_type(bit_width: int) -> PrimitiveType:
    if 1 <= bit_width <= 8:
        return PrimitiveType.U8
    if 9 <= bit_width <= 16:
        return PrimitiveType.U16
    if 17 <= bit_width <= 32:
        return PrimitiveType.U32
    # wider registers need a representation we don't generate
    raise UnsupportedWidthError(bit_width)


def mask_for_width(bit_width: int) -> int:
    return (1 << bit_width) - 1


def hex_literal(n: int) -> str:
    return f"0x{n:X}"
