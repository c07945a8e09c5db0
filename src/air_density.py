"""
Environmental conditioning: weather snapshot -> air density and the correction
factors that went into it.

Density model:
  - ideal gas law for the dry-air and water-vapour partial pressures
    (moist air is lighter than dry air at equal pressure and temperature)
  - Buck-style saturation vapour pressure for the vapour partial pressure
  - a calibrated linear altitude attenuation, capped so density stays positive
    (this is a model ceiling, not a barometric formula)
"""

import logging
import math
from dataclasses import dataclass

from flight_constants import DEFAULT_CONSTANTS, HPA_TO_PA, INHG_TO_PA, ModelConstants
from flight_errors import InvalidInput
from flight_types import Environment, PressureUnit, check_environment

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConditionedAir:
    air_density: float        # kg/m^3, all corrections applied
    dry_density: float        # kg/m^3, dry air at the same T and P
    temperature_k: float
    pressure_pa: float
    vapor_pressure_pa: float
    humidity_factor: float    # moist / dry density, <= 1
    altitude_factor: float    # 1 - capped altitude attenuation
    density_ratio: float      # air_density / standard density


def fahrenheit_to_kelvin(temp_f: float) -> float:
    return (temp_f - 32.0) * 5.0 / 9.0 + 273.15


def pressure_to_pa(value: float, unit: PressureUnit) -> float:
    unit = PressureUnit(unit)
    if unit is PressureUnit.HPA:
        return value * HPA_TO_PA
    if unit is PressureUnit.INHG:
        return value * INHG_TO_PA
    return value


def saturation_vapor_pressure(temp_c: float) -> float:
    """Saturation vapour pressure over water in Pa."""
    return 611.21 * math.exp((17.502 * temp_c) / (240.97 + temp_c))


def altitude_factor(altitude_ft: float, constants: ModelConstants = DEFAULT_CONSTANTS) -> float:
    # Negative altitude is out of model: the linear term is applied as-is.
    loss = constants.altitude_density_loss_per_1000ft * altitude_ft / 1000.0
    return 1.0 - min(loss, constants.max_altitude_density_loss)


def condition(env: Environment, constants: ModelConstants = DEFAULT_CONSTANTS) -> ConditionedAir:
    """Compute air density for an environment snapshot.

    Raises InvalidInput for non-finite inputs and for combinations that
    produce a non-finite or non-positive density.
    """
    check_environment(env)

    temp_k = fahrenheit_to_kelvin(env.temperature_f)
    if temp_k <= 0:
        raise InvalidInput("temperature_f", env.temperature_f, "below absolute zero")
    temp_c = temp_k - 273.15
    pressure_pa = pressure_to_pa(env.pressure, env.pressure_unit)

    vapor_pa = env.humidity * saturation_vapor_pressure(temp_c)
    if vapor_pa >= pressure_pa:
        raise InvalidInput("pressure", env.pressure, "vapour pressure exceeds total pressure")

    dry = pressure_pa / (constants.r_dry_air * temp_k)
    moist = (pressure_pa - vapor_pa) / (constants.r_dry_air * temp_k) + vapor_pa / (
        constants.r_water_vapor * temp_k
    )
    alt = altitude_factor(env.altitude_ft, constants)
    density = moist * alt

    if not math.isfinite(density) or density <= 0:
        raise InvalidInput("environment", env, f"non-physical air density {density!r}")

    logger.debug("air density %.4f kg/m^3 (T=%.1f K, P=%.0f Pa, alt factor %.3f)",
                 density, temp_k, pressure_pa, alt)
    return ConditionedAir(
        air_density=density,
        dry_density=dry,
        temperature_k=temp_k,
        pressure_pa=pressure_pa,
        vapor_pressure_pa=vapor_pa,
        humidity_factor=moist / dry,
        altitude_factor=alt,
        density_ratio=density / constants.standard_density,
    )


def air_density(env: Environment, constants: ModelConstants = DEFAULT_CONSTANTS) -> float:
    return condition(env, constants).air_density


def humidity_spin_factor(humidity: float, constants: ModelConstants = DEFAULT_CONSTANTS) -> float:
    """Scale on the spin-driven forces (lift and Magnus); 1.0 in dry air."""
    return (
        1.0
        - constants.humidity_spin_loss_linear * humidity
        - constants.humidity_spin_loss_quadratic * humidity ** 2
    )


def flight_time_factor(env: Environment, constants: ModelConstants = DEFAULT_CONSTANTS) -> float:
    """Multiplier on hang time: thinner air keeps the ball up longer."""
    ratio = condition(env, constants).density_ratio
    return 1.0 + (1.0 - ratio) * constants.flight_time_density_scale
