from __future__ import annotations

from typing import Optional

import pytest

from svdsema.svd.model import (
    Access,
    ArrayInfo,
    ArrayRegister,
    EnumeratedValues,
    Field,
    Peripheral,
    RegisterInfo,
    SingleRegister,
    Usage,
)


def evs(name: Optional[str] = None, usage: Optional[Usage] = None, derived_from: Optional[str] = None) -> EnumeratedValues:
    return EnumeratedValues(name=name, usage=usage, derived_from=derived_from)


def field(name: str, access: Optional[Access] = None, *enums: EnumeratedValues, bit_offset: int = 0, bit_width: int = 1) -> Field:
    return Field(
        name=name,
        bit_offset=bit_offset,
        bit_width=bit_width,
        access=access,
        enumerated_values=tuple(enums),
    )


def single(name: str, offset: int = 0, fields=None, **kw) -> SingleRegister:
    return SingleRegister(
        RegisterInfo(
            name=name,
            address_offset=offset,
            fields=tuple(fields) if fields is not None else None,
            **kw,
        )
    )


def array(name: str, offset: int, dim: int, increment: int, dim_index=None, fields=None, **kw) -> ArrayRegister:
    return ArrayRegister(
        RegisterInfo(
            name=name,
            address_offset=offset,
            fields=tuple(fields) if fields is not None else None,
            **kw,
        ),
        ArrayInfo(
            dim=dim,
            dim_increment=increment,
            dim_index=tuple(dim_index) if dim_index is not None else None,
        ),
    )


def peripheral(name: str, *registers, base_address: int = 0x40000000) -> Peripheral:
    return Peripheral(name=name, base_address=base_address, size=0x400, registers=tuple(registers))


SAMPLE_SVD = """<?xml version="1.0" encoding="utf-8"?>
<device>
  <name>DEMO</name>
  <size>32</size>
  <peripherals>
    <peripheral>
      <name>TIM1</name>
      <description>Timer   one</description>
      <baseAddress>0x40010000</baseAddress>
      <addressBlock><offset>0</offset><size>0x400</size><usage>registers</usage></addressBlock>
      <registers>
        <register>
          <name>CTRL</name>
          <description>Control
            register</description>
          <addressOffset>0x00</addressOffset>
          <resetValue>0x00000001</resetValue>
          <fields>
            <field>
              <name>MODE</name>
              <bitRange>[2:1]</bitRange>
              <enumeratedValues>
                <name>STD</name>
                <enumeratedValue><name>Off</name><value>0</value></enumeratedValue>
                <enumeratedValue><name>On</name><value>1</value></enumeratedValue>
              </enumeratedValues>
            </field>
            <field>
              <name>EN</name>
              <bitOffset>0</bitOffset>
              <bitWidth>1</bitWidth>
              <access>read-write</access>
            </field>
          </fields>
        </register>
        <register>
          <name>CCR[%s]</name>
          <description>Capture/compare</description>
          <addressOffset>0x10</addressOffset>
          <dim>3</dim>
          <dimIncrement>4</dimIncrement>
          <size>16</size>
          <fields>
            <field>
              <name>MODE</name>
              <lsb>0</lsb>
              <msb>1</msb>
              <enumeratedValues derivedFrom="CTRL.MODE.STD"></enumeratedValues>
            </field>
          </fields>
        </register>
        <register>
          <name>SR</name>
          <description>Status</description>
          <addressOffset>0x04</addressOffset>
          <fields>
            <field><name>UIF</name><bitOffset>0</bitOffset><bitWidth>1</bitWidth><access>read-only</access></field>
            <field><name>CC1IF</name><bitOffset>1</bitOffset><bitWidth>1</bitWidth><access>read-only</access></field>
          </fields>
        </register>
        <register derivedFrom="SR">
          <name>SR2</name>
          <addressOffset>0x08</addressOffset>
        </register>
      </registers>
    </peripheral>
    <peripheral derivedFrom="TIM1">
      <name>TIM2</name>
      <baseAddress>0x40020000</baseAddress>
    </peripheral>
  </peripherals>
</device>
"""


@pytest.fixture
def sample_svd(tmp_path):
    path = tmp_path / "demo.svd"
    path.write_text(SAMPLE_SVD, encoding="utf-8")
    return path
