from __future__ import annotations

from typing import Optional

from svdsema.svd.model import Access, Field, Register, register_info


def access_of(register: Register, base: Optional[Register] = None) -> Access:
    """Effective access of ``register``.

    Explicit access on the register wins, then explicit access on its base
    register. Otherwise it is inferred from the fields of both: all
    read-only or all write-only fields give that mode, anything else
    (including no fields at all) is read-write.
    """
    info = register_info(register)
    base_info = register_info(base) if base is not None else None

    if info.access is not None:
        return info.access
    if base_info is not None and base_info.access is not None:
        return base_info.access

    # FIXME: a derived register may override some of the base fields; both
    # lists are counted here.
    fields: list[Field] = list(info.fields or ())
    if base_info is not None:
        fields.extend(base_info.fields or ())

    if not fields:
        return Access.READ_WRITE
    if all(f.access == Access.READ_ONLY for f in fields):
        return Access.READ_ONLY
    if all(f.access == Access.WRITE_ONLY for f in fields):
        return Access.WRITE_ONLY
    return Access.READ_WRITE
