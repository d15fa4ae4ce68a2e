from __future__ import annotations

import re
import string
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Optional

from svdsema.svd.model import (
    Access,
    ArrayInfo,
    ArrayRegister,
    Device,
    EnumeratedValue,
    EnumeratedValues,
    Field,
    Peripheral,
    Register,
    RegisterInfo,
    SingleRegister,
    Usage,
)
from svdsema.utils.logger import get_logger

log = get_logger(__name__)


class SvdLoadError(ValueError):
    pass


def _t(node: Optional[ET.Element], tag: str) -> Optional[str]:
    if node is None:
        return None
    e = node.find(tag)
    return e.text.strip() if (e is not None and e.text) else None


def _int(s: Optional[str], default: Optional[int] = None) -> Optional[int]:
    if s is None:
        return default
    s = s.strip()
    if s.startswith("#"):
        # binary; don't-care bits (x) read as 0
        try:
            return int(s[1:].replace("x", "0").replace("X", "0"), 2)
        except ValueError:
            return default
    try:
        return int(s, 0)
    except ValueError:
        # some SVDs use hex without 0x
        try:
            return int(s, 16)
        except ValueError:
            return default


def _bool(s: Optional[str]) -> bool:
    return s is not None and s.strip().lower() in ("true", "1")


_RANGE = re.compile(r"^\s*(\w+)\s*-\s*(\w+)\s*$")


def parse_dim_index(text: Optional[str], dim: int) -> Optional[tuple[str, ...]]:
    """Expand a ``dimIndex`` value: ``"A,B,C"``, ``"0-3"`` or ``"A-D"``."""
    if text is None:
        return None
    m = _RANGE.match(text)
    if m:
        lo, hi = m.groups()
        if lo.isdigit() and hi.isdigit():
            return tuple(str(i) for i in range(int(lo), int(hi) + 1))
        letters = string.ascii_uppercase if lo.isupper() else string.ascii_lowercase
        if len(lo) == 1 and len(hi) == 1 and lo in letters and hi in letters:
            return tuple(letters[letters.index(lo) : letters.index(hi) + 1])
    idx = tuple(p.strip() for p in text.split(",") if p.strip())
    if len(idx) != dim:
        log.warning("dimIndex %r has %d entries but dim is %d", text, len(idx), dim)
    return idx


def _bit_range(f: ET.Element) -> tuple[int, int]:
    bo = _int(_t(f, "bitOffset"))
    if bo is not None:
        return bo, _int(_t(f, "bitWidth"), 1) or 1
    lsb = _int(_t(f, "lsb"))
    msb = _int(_t(f, "msb"))
    if lsb is not None and msb is not None:
        return lsb, msb - lsb + 1
    br = _t(f, "bitRange")
    if br:
        m = re.match(r"^\[\s*(\d+)\s*:\s*(\d+)\s*\]$", br)
        if m:
            msb, lsb = int(m.group(1)), int(m.group(2))
            return lsb, msb - lsb + 1
    return 0, 1


def _parse_enumerated_values(node: ET.Element) -> EnumeratedValues:
    values: list[EnumeratedValue] = []
    for v in node.findall("enumeratedValue"):
        vname = _t(v, "name")
        if not vname:
            continue
        values.append(
            EnumeratedValue(
                name=vname,
                value=_int(_t(v, "value")),
                description=_t(v, "description"),
                is_default=_bool(_t(v, "isDefault")),
            )
        )
    return EnumeratedValues(
        name=_t(node, "name"),
        usage=Usage.from_svd(_t(node, "usage")),
        derived_from=node.get("derivedFrom"),
        values=tuple(values),
    )


def _parse_fields(fnode: Optional[ET.Element]) -> Optional[tuple[Field, ...]]:
    if fnode is None:
        return None
    fields: list[Field] = []
    for f in fnode.findall("field"):
        fname = _t(f, "name") or ""
        if not fname:
            continue
        bo, bw = _bit_range(f)
        fields.append(
            Field(
                name=fname,
                bit_offset=bo,
                bit_width=bw,
                description=_t(f, "description"),
                access=Access.from_svd(_t(f, "access")),
                enumerated_values=tuple(
                    _parse_enumerated_values(e) for e in f.findall("enumeratedValues")
                ),
            )
        )
    return tuple(fields)


def parse_registers(
    regs_node: Optional[ET.Element], default_size: Optional[int] = None
) -> tuple[Register, ...]:
    if regs_node is None:
        return ()
    if regs_node.find("cluster") is not None:
        log.debug("ignoring <cluster> elements")
    regs: list[Register] = []
    for r in regs_node.findall("register"):
        rname = _t(r, "name")
        if not rname:
            continue

        info = RegisterInfo(
            name=rname,
            address_offset=_int(_t(r, "addressOffset"), 0) or 0,
            size=_int(_t(r, "size"), default_size),
            reset_value=_int(_t(r, "resetValue"), None),
            description=_t(r, "description"),
            access=Access.from_svd(_t(r, "access")),
            fields=_parse_fields(r.find("fields")),
            derived_from=r.get("derivedFrom"),
        )

        dim = _int(_t(r, "dim"))
        if dim is None:
            regs.append(SingleRegister(info))
            continue
        regs.append(
            ArrayRegister(
                info,
                ArrayInfo(
                    dim=dim,
                    dim_increment=_int(_t(r, "dimIncrement"), 0) or 0,
                    dim_index=parse_dim_index(_t(r, "dimIndex"), dim),
                ),
            )
        )
    return tuple(regs)


def parse_device(root: ET.Element, default_name: str = "device") -> Device:
    dev_name = _t(root, "name") or default_name
    dev_size = _int(_t(root, "size"))
    perips_node = root.find("peripherals")

    if perips_node is None:
        log.warning("No <peripherals> found in SVD device %s", dev_name)
        return Device(name=dev_name, peripherals=())

    # ---- first pass: capture XML + basic fields
    raw: dict[str, dict] = {}

    for p in perips_node.findall("peripheral"):
        pname = _t(p, "name")
        if not pname:
            continue

        ab = p.find("addressBlock")
        raw[pname] = {
            "name": pname,
            "derivedFrom": p.get("derivedFrom"),  # attribute on peripheral element
            "base": _int(_t(p, "baseAddress"), 0) or 0,
            "size": _int(_t(ab, "size"), None),
            "description": _t(p, "description"),
            "reg_size": _int(_t(p, "size"), dev_size),
            "regs_node": p.find("registers"),  # keep xml node
        }

    # ---- resolve derivedFrom by copying missing pieces
    resolved: dict[str, Peripheral] = {}

    def resolve(name: str, depth: int = 0) -> Peripheral:
        if name in resolved:
            return resolved[name]
        if depth > 8:
            raise SvdLoadError(f"derivedFrom chain too deep at peripheral {name}")

        entry = raw.get(name)
        if entry is None:
            raise SvdLoadError(f"peripheral not found: {name}")

        parent_name = entry["derivedFrom"]
        parent: Optional[Peripheral] = None
        if parent_name:
            if parent_name == name:
                raise SvdLoadError(f"peripheral {name} derives from itself")
            parent = resolve(parent_name, depth + 1)

        # inherit size/regs/description if missing
        size = entry["size"]
        description = entry["description"]
        regs = parse_registers(entry["regs_node"], entry["reg_size"])

        if parent is not None:
            if size is None:
                size = parent.size
            if description is None:
                description = parent.description
            if not regs:
                regs = parent.registers

        if size is None:
            size = 0x400  # fallback heuristic

        periph = Peripheral(
            name=entry["name"],
            base_address=entry["base"],
            size=int(size),
            description=description,
            registers=tuple(regs),
            derived_from=parent_name,
        )
        resolved[name] = periph
        return periph

    peripherals = [resolve(n) for n in raw.keys()]
    log.info("Loaded SVD device=%s peripherals=%d", dev_name, len(peripherals))
    return Device(name=dev_name, peripherals=tuple(peripherals))


def load_svd(path: Path) -> Device:
    tree = ET.parse(path)
    return parse_device(tree.getroot(), default_name=path.stem)


def loads_svd(text: str) -> Device:
    return parse_device(ET.fromstring(text))
