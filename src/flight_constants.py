import math
from dataclasses import dataclass

# Unit conversions
HPA_TO_PA = 100.0
INHG_TO_PA = 3386.39
METERS_TO_YARDS = 1.09361
MS_TO_MPH = 2.23694
RPM_TO_RAD_S = 2.0 * math.pi / 60.0
GRAVITY = 9.81


@dataclass(frozen=True)
class ModelConstants:
    """Empirically tuned model numbers.

    None of these have a documented derivation; they are calibrated values
    kept overridable so callers can retune without touching the models:

        faster = dataclasses.replace(DEFAULT_CONSTANTS, roll_out_yards=15.0)
    """

    # Air
    standard_density: float = 1.225          # kg/m^3
    r_dry_air: float = 287.058               # J/(kg K)
    r_water_vapor: float = 461.495           # J/(kg K)
    altitude_density_loss_per_1000ft: float = 0.029
    max_altitude_density_loss: float = 0.30  # model ceiling, ~10,300 ft
    # Moist air damps the spin forces: factor 1 - a*h - b*h^2
    humidity_spin_loss_linear: float = 0.035
    humidity_spin_loss_quadratic: float = 0.035

    # Simplified shot model
    standard_temperature_f: float = 70.0
    density_effect_scale: float = 5.0        # % per unit density ratio change, denser air is positive
    density_effect_cap: float = 5.0          # +/- %
    temperature_effect_per_step: float = 3.0 # % per temperature step
    temperature_step_f: float = 20.0
    temperature_effect_cap: float = 6.0      # +/- %
    altitude_effect_per_1000ft: float = 5.0  # %
    altitude_effect_cap: float = 10.0        # %
    headwind_yards_per_mph: float = 1.5
    crosswind_yards_per_mph: float = 1.0
    wind_shift_cap_yards: float = 40.0
    spin_adjustment_scale: float = -50.0     # % per unit density ratio change
    launch_adjustment_per_mph: float = 0.1   # degrees per mph of headwind
    flight_time_density_scale: float = 0.1

    # Integrator
    roll_out_yards: float = 10.0
    default_dt: float = 0.01
    max_steps: int = 10_000

    # Validation harness
    validation_tolerance: float = 0.05


DEFAULT_CONSTANTS = ModelConstants()
