import os
import sys

import pytest

# Ensure src is on sys.path for test imports.
SRC_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir, "src"))
if SRC_ROOT not in sys.path:
    sys.path.insert(0, SRC_ROOT)

from flight_types import BallProperties, Environment, PressureUnit, launch_state  # noqa: E402


@pytest.fixture
def standard_env():
    """20 C, sea level, dry-ish still air."""
    return Environment(
        temperature_f=68.0,
        pressure=101325.0,
        pressure_unit=PressureUnit.PA,
        altitude_ft=0.0,
        humidity=0.2,
    )


@pytest.fixture
def ball():
    return BallProperties(
        mass=0.0459,
        radius=0.02135,
        drag_coefficient=0.22,
        lift_coefficient=0.36,
        magnus_coefficient=0.23,
        spin_decay_rate=0.08,
    )


@pytest.fixture
def standard_shot():
    return launch_state(ball_speed=70.0, launch_angle_deg=23.0, spin_rpm=2500.0)
