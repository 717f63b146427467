from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from smart_plotter.data_processing.parse_smart_log import (
    parse,
    parse_number,
    parse_timestamp_ms,
    split_fields,
)
from smart_plotter.data_processing.schemas import Sample

UTC = timezone.utc


def ms(*args: int) -> int:
    return int(datetime(*args, tzinfo=UTC).timestamp()) * 1000


T0 = ms(2020, 7, 14, 13, 4, 23)


def test_well_formed_line():
    r = parse("2020-07-14 13:04:23; 1; 67; 5113173; 3; 96; 0;", tz=UTC)

    assert r.rows == 1
    assert r.attrs == ("1", "3")
    assert r.by_attr["1"].raw == (Sample(t=T0, v=5113173),)
    assert r.by_attr["1"].norm == (Sample(t=T0, v=67),)
    assert r.by_attr["3"].raw == (Sample(t=T0, v=0),)
    assert r.by_attr["3"].norm == (Sample(t=T0, v=96),)
    assert r.t_min == r.t_max == T0


def test_tabs_and_crlf():
    text = "2020-07-14 13:04:23;\t1;67;5113173;\t3;96;0;\r\n\r\n2020-07-14 14:04:23;\t1;66;5113180;\r\n"
    r = parse(text, tz=UTC)

    assert r.rows == 2
    assert [p.v for p in r.by_attr["1"].raw] == [5113173, 5113180]
    assert r.t_max == T0 + 3_600_000


def test_non_numeric_raw_keeps_norm():
    r = parse("2020-07-14 13:04:23; 5; 100; N/A;", tz=UTC)

    assert r.rows == 1
    assert r.by_attr["5"].norm == (Sample(t=T0, v=100),)
    assert r.by_attr["5"].raw == ()


def test_non_numeric_norm_keeps_raw():
    r = parse("2020-07-14 13:04:23; 5; ---; 12;", tz=UTC)

    assert r.by_attr["5"].raw == (Sample(t=T0, v=12),)
    assert r.by_attr["5"].norm == ()


def test_both_slots_unusable_skips_triplet_but_counts_row():
    r = parse("2020-07-14 13:04:23; 5; x; y;", tz=UTC)

    assert r.rows == 1
    assert r.attrs == ()
    assert r.by_attr == {}
    assert r.t_min == r.t_max == T0


def test_invalid_timestamp_contributes_nothing():
    text = "\n".join(
        [
            "2020-07-14 13:04:23; 1; 67; 100;",
            "not-a-date; 1; 67; 100;",
            "2020-13-45 99:00:00; 1; 1; 1;",
            "2020-07-14T13:04:24; 1; 1; 1;",
        ]
    )
    r = parse(text, tz=UTC)

    assert r.rows == 1
    assert len(r.by_attr["1"].raw) == 1
    assert r.t_min == r.t_max == T0


def test_short_lines_are_skipped():
    text = "2020-07-14 13:04:23; 1; 67;\n2020-07-14 13:04:24;;;;\n2020-07-14 13:04:25"
    r = parse(text, tz=UTC)

    assert r.rows == 0
    assert r.t_min is None and r.t_max is None


def test_incomplete_trailing_triplet_ignored():
    r = parse("2020-07-14 13:04:23; 1; 67; 100; 3; 96;", tz=UTC)

    assert r.attrs == ("1",)


def test_attr_keys_sorted_numerically():
    r = parse("2020-07-14 13:04:23; 194; 1; 1; 9; 1; 1; 5; 1; 1; 10; 1; 1;", tz=UTC)

    assert r.attrs == ("5", "9", "10", "194")
    assert list(r.by_attr) == ["5", "9", "10", "194"]


def test_non_numeric_keys_follow_numeric_in_discovery_order():
    r = parse("2020-07-14 13:04:23; b; 1; 1; 7; 1; 1; a; 1; 1;", tz=UTC)

    assert r.attrs == ("7", "b", "a")


def test_series_sorted_by_time_regardless_of_input_order():
    text = "2020-07-15 00:00:00; 1; 2; 20;\n2020-07-14 00:00:00; 1; 1; 10;"
    r = parse(text, tz=UTC)

    t1, t2 = ms(2020, 7, 14), ms(2020, 7, 15)
    assert [p.t for p in r.by_attr["1"].raw] == [t1, t2]
    assert [p.t for p in r.by_attr["1"].norm] == [t1, t2]
    assert (r.t_min, r.t_max) == (t1, t2)


def test_equal_timestamps_keep_file_order():
    text = "\n".join(
        [
            "2020-07-14 00:00:01; 1; 1; 3;",
            "2020-07-14 00:00:00; 1; 1; 1;",
            "2020-07-14 00:00:00; 1; 1; 2;",
        ]
    )
    r = parse(text, tz=UTC)

    assert [p.v for p in r.by_attr["1"].raw] == [1, 2, 3]


def test_empty_input():
    for text in ("", "\n\n  \r\n\t\n", None):
        r = parse(text, tz=UTC)
        assert r.rows == 0
        assert r.attrs == ()
        assert r.t_min is None and r.t_max is None


def test_idempotent():
    text = "2020-07-14 13:04:23; 1; 67; 5113173; 3; 96; 0;\n2020-07-13 13:04:23; 1; 68; 5;"
    assert parse(text, tz=UTC) == parse(text, tz=UTC)


def test_result_is_read_only():
    r = parse("2020-07-14 13:04:23; 1; 67; 5113173;", tz=UTC)

    with pytest.raises(TypeError):
        r.by_attr["2"] = r.by_attr["1"]  # type: ignore[index]
    with pytest.raises(AttributeError):
        r.rows = 5  # type: ignore[misc]


def test_tz_shifts_instant():
    plus_two = timezone(timedelta(hours=2))
    utc = parse_timestamp_ms("2020-07-14 13:04:23", UTC)
    local = parse_timestamp_ms("2020-07-14 13:04:23", plus_two)

    assert utc - local == 2 * 3_600_000


def test_default_tz_is_local_wall_clock():
    expected = int(datetime(2020, 7, 14, 13, 4, 23).timestamp()) * 1000
    assert parse_timestamp_ms("2020-07-14 13:04:23") == expected


def test_split_fields():
    assert split_fields(" 2020-07-14 13:04:23;\t1 ; ;67;5;;") == ["2020-07-14 13:04:23", "1", "67", "5"]


@pytest.mark.parametrize(
    "s,expected",
    [
        ("67", 67.0),
        (" -3.5 ", -3.5),
        ("1e3", 1000.0),
        (".5", 0.5),
        ("0x1A", 26.0),
        ("N/A", None),
        ("inf", None),
        ("nan", None),
        ("Infinity", None),
        ("1_000", None),
        ("1e999", None),
        ("", None),
    ],
)
def test_parse_number(s, expected):
    assert parse_number(s) == expected


def test_result_is_hashable():
    text = "2020-07-14 13:04:23; 1; 67; 5113173;"
    assert hash(parse(text, tz=UTC)) == hash(parse(text, tz=UTC))


def test_non_ascii_digits_rejected():
    assert parse_number("١٢") is None
    assert parse_timestamp_ms("٢٠٢٠-07-14 13:04:23", UTC) is None

    r = parse("2020-07-14 13:04:23; 5; ١٠٠; 7;", tz=UTC)
    assert r.by_attr["5"].norm == ()
    assert r.by_attr["5"].raw == (Sample(t=T0, v=7),)
