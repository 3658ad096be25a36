from __future__ import annotations

import locale
from decimal import Decimal

import pytest

from sqlgrid.rows import BufferedRows, NumericFormatter, SqlType
from sqlgrid.shared.exceptions import ConfigurationError
from tests.rows.fakes import FakeColumn, FakeCursor


@pytest.mark.parametrize("pattern", ["default", "", None])
def test_default_sentinel_disables_formatting(pattern) -> None:
    assert NumericFormatter.from_pattern(pattern) is None


def test_grouping_pattern_formats_thousands() -> None:
    formatter = NumericFormatter.from_pattern(",")

    assert formatter is not None
    assert formatter.format(1234567) == "1,234,567"
    assert formatter.format(Decimal("1234.5")) == "1,234.5"


def test_fixed_point_pattern() -> None:
    formatter = NumericFormatter.from_pattern(",.2f")

    assert formatter is not None
    assert formatter.format(1234.5) == "1,234.50"


def test_non_numeric_values_fall_back_to_str() -> None:
    formatter = NumericFormatter.from_pattern(",")

    assert formatter is not None
    assert formatter.format("n/a") == "n/a"
    assert formatter.format(True) == "True"


def test_invalid_pattern_is_a_configuration_error() -> None:
    with pytest.raises(ConfigurationError):
        NumericFormatter.from_pattern("not-a-spec")


@pytest.mark.parametrize("pattern", ["d", "x", "b", "c"])
def test_integer_only_patterns_are_rejected(pattern: str) -> None:
    with pytest.raises(ConfigurationError, match="float values"):
        NumericFormatter.from_pattern(pattern)


def test_accepted_pattern_formats_every_numeric_family() -> None:
    formatter = NumericFormatter.from_pattern(",.1f")
    columns = [
        FakeColumn("qty", SqlType.INTEGER),
        FakeColumn("ratio", SqlType.DOUBLE),
        FakeColumn("price", SqlType.DECIMAL),
    ]

    source = BufferedRows(FakeCursor(columns, [(1200, 1.5, Decimal("2.25"))]), formatter=formatter)
    rows = list(source)

    assert rows[1].values == ("1,200.0", "1.5", "2.2")


@pytest.fixture
def grouping_locale():
    previous = locale.setlocale(locale.LC_NUMERIC)
    for name in ("en_US.UTF-8", "en_US.utf8", "C.UTF-8"):
        try:
            locale.setlocale(locale.LC_NUMERIC, name)
        except locale.Error:
            continue
        if locale.localeconv()["thousands_sep"]:
            break
    else:
        locale.setlocale(locale.LC_NUMERIC, previous)
        pytest.skip("no locale with digit grouping is installed")
    yield locale.localeconv()["thousands_sep"]
    locale.setlocale(locale.LC_NUMERIC, previous)


def test_locale_pattern_groups_with_the_active_locale(grouping_locale: str) -> None:
    formatter = NumericFormatter.from_pattern("n")

    assert formatter is not None
    assert formatter.format(1234567) == f"1{grouping_locale}234{grouping_locale}567"
