import math
from dataclasses import replace

import pytest

from air_density import (
    air_density,
    altitude_factor,
    condition,
    flight_time_factor,
    humidity_spin_factor,
    pressure_to_pa,
)
from flight_errors import InvalidInput
from flight_types import Environment, PressureUnit


def test_sea_level_density_is_near_standard(standard_env):
    rho = air_density(standard_env)
    assert rho == pytest.approx(1.2, rel=0.02), f"Unexpected sea level density: {rho}"


def test_density_non_increasing_with_altitude(standard_env):
    """Hold temperature and pressure fixed; only altitude changes."""
    previous = math.inf
    for altitude in range(0, 30001, 500):
        rho = air_density(replace(standard_env, altitude_ft=float(altitude)))
        assert rho <= previous, f"Density increased at {altitude} ft: {rho} > {previous}"
        previous = rho


def test_altitude_attenuation_is_capped(standard_env):
    high = condition(replace(standard_env, altitude_ft=20000.0))
    higher = condition(replace(standard_env, altitude_ft=60000.0))
    assert high.altitude_factor == pytest.approx(0.70)
    assert high.air_density == higher.air_density
    assert higher.air_density > 0


def test_negative_altitude_accepted_out_of_model(standard_env):
    assert altitude_factor(-1000.0) > 1.0
    assert air_density(replace(standard_env, altitude_ft=-1000.0)) > air_density(standard_env)


def test_humid_air_is_lighter(standard_env):
    dry = condition(replace(standard_env, humidity=0.0))
    humid = condition(replace(standard_env, humidity=0.9))
    assert humid.air_density < dry.air_density
    assert dry.humidity_factor == pytest.approx(1.0)
    assert humid.humidity_factor < 1.0
    # Secondary effect: well under a couple of percent at room temperature.
    assert humid.air_density / dry.air_density > 0.98


def test_pressure_units_agree():
    hpa = air_density(Environment(pressure=1013.25, pressure_unit=PressureUnit.HPA))
    pa = air_density(Environment(pressure=101325.0, pressure_unit=PressureUnit.PA))
    inhg = air_density(Environment(pressure=29.92, pressure_unit=PressureUnit.INHG))
    assert hpa == pytest.approx(pa, rel=1e-12)
    assert inhg == pytest.approx(pa, rel=1e-3)
    assert pressure_to_pa(29.92, "inhg") == pytest.approx(101320.8, rel=1e-5)


def test_colder_air_is_denser(standard_env):
    cold = air_density(replace(standard_env, temperature_f=40.0))
    hot = air_density(replace(standard_env, temperature_f=95.0))
    assert cold > hot


def test_density_ratio_against_standard(standard_env):
    air = condition(standard_env)
    assert air.density_ratio == pytest.approx(air.air_density / 1.225)


@pytest.mark.parametrize(
    "changes, field",
    [
        ({"humidity": 50.0}, "humidity"),
        ({"humidity": -0.1}, "humidity"),
        ({"temperature_f": float("nan")}, "temperature_f"),
        ({"pressure": 0.0}, "pressure"),
        ({"pressure": float("inf")}, "pressure"),
        ({"altitude_ft": float("inf")}, "altitude_ft"),
        ({"temperature_f": -500.0}, "temperature_f"),
    ],
)
def test_rejects_non_physical_input(standard_env, changes, field):
    with pytest.raises(InvalidInput) as excinfo:
        condition(replace(standard_env, **changes))
    assert excinfo.value.field == field


def test_thin_air_lengthens_hang_time(standard_env):
    assert flight_time_factor(replace(standard_env, altitude_ft=5000.0)) > flight_time_factor(standard_env)


def test_humidity_spin_factor():
    assert humidity_spin_factor(0.0) == 1.0
    assert humidity_spin_factor(1.0) == pytest.approx(0.93)
    factors = [humidity_spin_factor(h / 10.0) for h in range(11)]
    assert factors == sorted(factors, reverse=True)
