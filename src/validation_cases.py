"""
Labelled reference flights for the validation harness.

Weather cases fly one standard shot (70 m/s, 23 deg, 2500 rpm backspin)
through dry, light rain, heavy rain, hot and cold air. Club cases use tour
launch-monitor averages for a driver, a 7 iron and a pitching wedge.
"""

from dataclasses import replace
from typing import List

from flight_types import BallProperties, Environment, PressureUnit, launch_state
from validation_harness import ExpectedMetrics, ValidationCase

STANDARD_ENVIRONMENT = Environment(
    temperature_f=68.0,
    pressure=101325.0,
    pressure_unit=PressureUnit.PA,
    altitude_ft=0.0,
    humidity=0.5,
)

STANDARD_BALL = BallProperties(
    mass=0.0459,
    radius=0.02135,
    drag_coefficient=0.22,
    lift_coefficient=0.36,
    magnus_coefficient=0.23,
    spin_decay_rate=0.08,
)

STANDARD_SHOT = launch_state(ball_speed=70.0, launch_angle_deg=23.0, spin_rpm=2500.0)


def _weather(name, expected, **env_changes) -> ValidationCase:
    return ValidationCase(
        name=f"Weather - {name}",
        initial_state=STANDARD_SHOT,
        environment=replace(STANDARD_ENVIRONMENT, **env_changes),
        properties=STANDARD_BALL,
        expected=expected,
    )


WEATHER_CASES = [
    _weather("Dry", ExpectedMetrics(245, 255, 32, 6.2, 2500, 23, 0, 70), humidity=0.2),
    _weather("Light rain", ExpectedMetrics(238, 248, 31, 6.1, 2500, 22.5, 0, 70), humidity=0.5),
    _weather("Heavy rain", ExpectedMetrics(220, 230, 29, 5.8, 2500, 21, 0, 70), humidity=0.9),
    _weather("Hot", ExpectedMetrics(250, 260, 33, 6.3, 2500, 23, 0, 70), temperature_f=95.0),
    _weather("Cold", ExpectedMetrics(240, 250, 31, 6.1, 2500, 22.5, 0, 70), temperature_f=41.0),
]


def _club(name, ball_speed, launch_angle, spin_rpm, expected) -> ValidationCase:
    return ValidationCase(
        name=f"Club - {name}",
        initial_state=launch_state(ball_speed, launch_angle, 0.0, spin_rpm),
        environment=STANDARD_ENVIRONMENT,
        properties=STANDARD_BALL,
        expected=expected,
    )


CLUB_CASES = [
    _club("Driver", 75.0, 10.9, 2686, ExpectedMetrics(275, 285, 35, 6.6, 2686, 10.9, 0, 75.0)),
    _club("7 iron", 53.6, 16.3, 7097, ExpectedMetrics(172, 182, 32, 5.9, 7097, 16.3, 0, 53.6)),
    _club("Pitching wedge", 45.6, 24.2, 9304, ExpectedMetrics(136, 146, 29, 5.6, 9304, 24.2, 0, 45.6)),
]


def canonical_cases() -> List[ValidationCase]:
    return WEATHER_CASES + CLUB_CASES
