"""
Shared test fixtures and configuration.
"""

import pytest

from racehistory.models.car import Car, CarMetadata, CarStatus, Driver, RaceClass
from racehistory.models.lap import LapRecord
from racehistory.utils import config_loader

TIMING_COLUMNS = [
    "NUMBER",
    "DRIVER_NUMBER",
    "LAP_NUMBER",
    "LAP_TIME",
    "LAP_IMPROVEMENT",
    "CROSSING_FINISH_LINE_IN_PIT",
    "S1",
    "S1_IMPROVEMENT",
    "S2",
    "S2_IMPROVEMENT",
    "S3",
    "S3_IMPROVEMENT",
    "KPH",
    "ELAPSED",
    "HOUR",
    "TOP_SPEED",
    "DRIVER_NAME",
    "PIT_TIME",
    "CLASS",
    "GROUP",
    "TEAM",
    "MANUFACTURER",
]

DEFAULT_ROW = {
    "NUMBER": "7",
    "DRIVER_NUMBER": "1",
    "LAP_NUMBER": "1",
    "LAP_TIME": "3:40.000",
    "LAP_IMPROVEMENT": "0",
    "CROSSING_FINISH_LINE_IN_PIT": "",
    "S1": "35.000",
    "S1_IMPROVEMENT": "0",
    "S2": "1:20.000",
    "S2_IMPROVEMENT": "0",
    "S3": "1:45.000",
    "S3_IMPROVEMENT": "0",
    "KPH": "223.4",
    "ELAPSED": "20:00.000",
    "HOUR": "14:20:00.000",
    "TOP_SPEED": "300.0",
    "DRIVER_NAME": "Sebastien BUEMI",
    "PIT_TIME": "",
    "CLASS": "HYPERCAR",
    "GROUP": "H",
    "TEAM": "Toyota Gazoo Racing",
    "MANUFACTURER": "Toyota",
}


@pytest.fixture
def timing_row():
    """Factory for one export row as a column -> text dict."""

    def _make(**overrides):
        row = dict(DEFAULT_ROW)
        row.update(overrides)
        return row

    return _make


@pytest.fixture
def timing_csv():
    """Factory rendering rows as export text (header uses the leading-space aliases)."""

    def _make(rows, extra_columns=(), delimiter=";", leading_space=True):
        columns = TIMING_COLUMNS + list(extra_columns)
        header = [columns[0]] + [f" {c}" if leading_space else c for c in columns[1:]]
        lines = [delimiter.join(header)]
        for row in rows:
            lines.append(delimiter.join(row.get(c, "") for c in columns))
        return "\n".join(lines) + "\n"

    return _make


@pytest.fixture
def sample_race_csv(timing_row, timing_csv):
    """
    Three cars over three laps.

    #7 leads lap 1 and lap 3, #51 leads lap 2, #92 stops after lap 2 well
    before the one-hour mark. #7 changes driver on lap 2.
    """
    ferrari = dict(
        NUMBER="51",
        DRIVER_NUMBER="1",
        DRIVER_NAME="Antonio FUOCO",
        TEAM="Ferrari AF Corse",
        MANUFACTURER="Ferrari",
    )
    porsche = dict(
        NUMBER="92",
        DRIVER_NUMBER="1",
        DRIVER_NAME="Klaus BACHLER",
        CLASS="LMGT3",
        GROUP="GT3",
        TEAM="Manthey PureRxcing",
        MANUFACTURER="Porsche",
    )
    rows = [
        timing_row(LAP_NUMBER="1", LAP_TIME="3:40.000", ELAPSED="20:00.000"),
        timing_row(**ferrari, LAP_NUMBER="1", LAP_TIME="3:41.000", ELAPSED="20:01.000"),
        timing_row(**porsche, LAP_NUMBER="1", LAP_TIME="3:59.000", ELAPSED="20:30.000"),
        timing_row(
            LAP_NUMBER="2",
            LAP_TIME="3:38.000",
            S1="34.500",
            S2="",
            S3="1:44.000",
            ELAPSED="40:00.000",
            DRIVER_NUMBER="2",
            DRIVER_NAME="Brendon HARTLEY",
        ),
        timing_row(**ferrari, LAP_NUMBER="2", LAP_TIME="3:36.000", ELAPSED="39:50.000"),
        timing_row(**porsche, LAP_NUMBER="2", LAP_TIME="4:10.000", ELAPSED="45:00.000"),
        timing_row(LAP_NUMBER="3", LAP_TIME="3:39.000", ELAPSED="1:00:05.000"),
        timing_row(
            **ferrari,
            LAP_NUMBER="3",
            LAP_TIME="3:50.000",
            ELAPSED="1:00:10.000",
            PIT_TIME="1:02.500",
            CROSSING_FINISH_LINE_IN_PIT="B",
        ),
    ]
    return timing_csv(rows)


@pytest.fixture
def make_lap():
    """Factory for lap records with every time defaulting to 0."""

    def _make(
        car_number="7",
        lap_number=1,
        elapsed=0,
        time=0,
        sectors=(0, 0, 0),
        driver="Driver A",
        checkpoints=None,
    ):
        s1, s2, s3 = sectors
        return LapRecord(
            car_number=car_number,
            driver=driver,
            lap_number=lap_number,
            time=time,
            best=time,
            sector_1=s1,
            sector_2=s2,
            sector_3=s3,
            s1_best=s1,
            s2_best=s2,
            s3_best=s3,
            elapsed=elapsed,
            checkpoints=checkpoints,
        )

    return _make


@pytest.fixture
def make_car(make_lap):
    """Factory for a car from a list of (lap_number, elapsed) pairs."""

    def _make(car_number, laps=(), race_class=RaceClass.HYPERCAR, status=CarStatus.RACING):
        return Car(
            car_number=car_number,
            drivers=[Driver(name="Driver A", is_current=True)],
            metadata=CarMetadata(
                race_class=race_class, group="H", team=f"Team {car_number}", manufacturer="Maker"
            ),
            laps=[
                make_lap(car_number=car_number, lap_number=n, elapsed=e) for n, e in laps
            ],
            status=status,
        )

    return _make


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    """Point the config singleton at a temporary YAML file and reset it afterwards."""

    def _write(text):
        path = tmp_path / "config.yaml"
        path.write_text(text)
        monkeypatch.setenv(config_loader.CONFIG_ENV_VAR, str(path))
        monkeypatch.setattr(config_loader.Config, "_instance", None)
        monkeypatch.setattr(config_loader.Config, "_config", None)
        return path

    return _write
