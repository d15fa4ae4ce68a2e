import pytest

from svdsema.sema.naming import (
    BLACKLIST_CHARS,
    respace,
    to_sanitized_pascal_case,
    to_sanitized_snake_case,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("TIMER0", "timer0"),
        ("GPIO_MODER", "gpio_moder"),
        ("I2C1", "i2c1"),
        ("ABCDef", "abc_def"),
        ("someField", "some_field"),
        ("CR(1)", "cr1"),
        ("2ndTimer", "_2nd_timer"),
        ("0", "_0"),
    ],
)
def test_snake_case(raw, expected):
    assert to_sanitized_snake_case(raw) == expected


@pytest.mark.parametrize("raw", ["mod", "MOD", "Mod", "(mod)"])
def test_snake_case_escapes_keywords(raw):
    assert to_sanitized_snake_case(raw) == "mod_"


def test_keyword_escape_is_not_applied_to_pascal_case():
    assert to_sanitized_pascal_case("type") == "Type"
    assert to_sanitized_snake_case("TYPE") == "type_"
    assert to_sanitized_snake_case("self") == "self_"


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("TIMER", "Timer"),
        ("gpio_moder", "GpioModer"),
        ("CCR", "Ccr"),
        ("CH_CTRL", "ChCtrl"),
        ("2ndTimer", "_2ndTimer"),
        ("USART(2)", "Usart2"),
    ],
)
def test_pascal_case(raw, expected):
    assert to_sanitized_pascal_case(raw) == expected


@pytest.mark.parametrize(
    "raw", ["(foo)", "9lives", "A-B", "type", "x(1)", "Reg Name", "_hidden", "_3V3", "-5", " 2nd", "()"]
)
def test_snake_output_is_a_legal_identifier(raw):
    out = to_sanitized_snake_case(raw)
    assert out[0] == "_" or out[0].isalpha()
    assert not any(c in out for c in BLACKLIST_CHARS)


def test_sanitizing_is_deterministic():
    assert to_sanitized_snake_case("Foo(Bar)") == to_sanitized_snake_case("Foo(Bar)")


def test_respace():
    assert respace("Control\n    register  for\ttimer ") == "Control register for timer"


@pytest.mark.parametrize(
    "raw, snake, pascal",
    [
        ("_3V3", "_3v3", "_3v3"),
        ("-5", "_5", "_5"),
        (" 2nd", "_2nd", "_2nd"),
    ],
)
def test_digit_exposed_by_dropped_separators(raw, snake, pascal):
    assert to_sanitized_snake_case(raw) == snake
    assert to_sanitized_pascal_case(raw) == pascal
