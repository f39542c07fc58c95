"""Testes do cálculo de tempo decorrido."""
from restmine.core.elapsed import format_hours, iso_to_millis, time_delta

ONE_HOUR = 60 * 60 * 1000


def test_time_delta_in_decimal_hours():
    assert time_delta(0, 2 * ONE_HOUR) == 2
    assert time_delta(0, 0.5 * ONE_HOUR) == 0.5
    assert time_delta(0, 0.25 * ONE_HOUR) == 0.25
    assert time_delta(0.5 * ONE_HOUR, 3 * ONE_HOUR) == 2.5


def test_time_delta_is_not_rounded():
    assert time_delta(0, 1_000) == 1_000 / ONE_HOUR


def test_format_hours():
    assert format_hours(3) == '3.00'
    assert format_hours(25 / 60) == '0.42'
    assert format_hours(0.001) == '0.00'


def test_iso_to_millis():
    assert iso_to_millis('2018-01-10T10:00:00.000Z') == 1515578400000
    assert iso_to_millis('2018-01-10T12:00:00+02:00') == 1515578400000
