"""Tests for the car and lap models."""

import pytest

from racehistory.models.car import (
    CarStatus,
    Driver,
    RaceClass,
    find_current_driver,
)


@pytest.mark.parametrize(
    "label, race_class",
    [
        ("HYPERCAR", RaceClass.HYPERCAR),
        ("LMGTE Pro", RaceClass.LMGTE_PRO),
        ("INNOVATIVE CAR", RaceClass.INNOVATIVE_CAR),
        ("None", RaceClass.NONE),
    ],
)
def test_race_class_from_label(label, race_class):
    assert RaceClass.from_label(label) is race_class
    assert race_class.label == label


def test_race_class_labels_are_case_sensitive():
    assert RaceClass.from_label("hypercar") is None
    assert RaceClass.from_label("") is None


def test_gt3_color_changes_after_2024():
    assert RaceClass.LMGT3.hex_color(2024) == "#f60"
    assert RaceClass.LMGT3.hex_color(2025) == "#060"
    assert RaceClass.HYPERCAR.hex_color(2025) == "#f00"


def test_every_class_has_a_color():
    for race_class in RaceClass:
        assert race_class.hex_color(2025).startswith("#")


def test_find_current_driver():
    drivers = [Driver("A", is_current=False), Driver("B", is_current=True)]
    assert find_current_driver(drivers).name == "B"
    assert find_current_driver([Driver("A")]) is None


def test_car_lap_lookup(make_car):
    car = make_car("8", [(1, 100), (2, 200), (3, 300)])

    assert car.lap(2).elapsed == 200
    assert car.lap(4) is None
    assert car.final_lap().lap_number == 3
    assert make_car("9").final_lap() is None
    assert "8" in repr(car)


def test_car_status():
    assert CarStatus.PRE_RACE.label == "Pre-Race"


def test_retired_flag(make_car):
    assert make_car("1", status=CarStatus.RETIRED).has_retired()
    assert not make_car("1").has_retired()
