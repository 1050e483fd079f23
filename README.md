# accsim

An adaptive cruise control (ACC) controller and a simple longitudinal
vehicle model to try it on. It has no dependencies beyond the standard
library.

## What is in it

- `accsim.controller`
  - `ACCController` is a PID speed controller with a time-gap following
    mode.
    - `calculate_target_speed(...)` picks the speed to track from the gap to
      the lead vehicle. It also sets `state` to a `VehicleState` (`CRUISE`,
      `FOLLOW`, `STOP`, ...) and records `safe_distance`.
    - `calculate_torque(target, actual, tau_max, dt)` returns a PID torque
      clipped to `[-tau_max, tau_max]`.
    - `calculate_torque_with_lead(...)` does both steps in one call.
    - `run_acc(...)` runs a full cycle. It first calls
      `feature_enable_precheck(...)`, which checks the enable flag, the
      brake, a throttle override and a low speed while `OFF`. It then
      applies `process_ress_button(...)` and returns `-1` when the
      controller may not act.
    - `ACCController.from_gains_file(path="gains.csv")` builds a controller
      in `CRUISE` mode. It starts from the built-in gains and overrides them
      with any found in the file.
  - Constructing a controller directly prints a summary of its parameters.
    Pass `report=False` to turn that off.
- `accsim.dynamics`
  - `VehicleDynamics.update(torque, v_actual, dt)` gives the next speed of a
    point mass under drive force, aerodynamic drag and rolling resistance.
  - `VehicleModel` is a kinematic bicycle model. It has `update(force,
    delta)`, `reset_state()`, `set_state(x, y, theta, v)`, and a `state`
    property that returns a `VehicleState2D`.
- `accsim.block`
  - `ACCBlock` builds a controller once from its tuning values. Each
    `output(v_ego, driver_set_speed, v_lead, distance_to_lead, max_torque)`
    call returns one engine torque request. A negative `distance_to_lead`
    means there is no lead vehicle.
- `accsim.simulation`
  - `Simulation(dt, T, *, vehicle=None, gains=None,
    gains_path="gains.csv", dynamics_path="dynamics_parameters.csv",
    log_dir=".")` runs closed-loop simulations. When `vehicle` or `gains`
    is not given, it loads `VehicleParameters` or `ControllerParameters`
    from the files and keeps the defaults for missing keys.
    - `run_simulation(...)`: one vehicle, speed control only. It writes
      `simulation_log.csv`.
    - `run_simulation_with_two_vehicles(...)`: the ego vehicle follows a
      lead vehicle using target-speed selection. It writes
      `simulation_log_ACC.csv`.
    - `run_simulation_with_checks(...)`: the same scenario, driven through
      `run_acc` with a controller from `from_gains_file`. It writes
      `simulation_log_ACC.csv`.
    - Each run applies the torque limit and the torque-rate limit. It
      returns the ego speeds in km/h and prints the overshoot;
      `display_results` also returns the overshoot.
  - `sin_target(initial_value, amplitude, frequency, dt, T)` makes a
    sinusoidal lead-vehicle speed profile.
- `accsim.params`
  - `load_parameters(filename)` reads `name,value` lines into a dict.
    Unreadable lines are skipped. A file that cannot be opened gives an
    empty dict and a message on stderr.
- `accsim.cli`
  - `main(argv=None)` is the `accsim` command.
  - `load_simulation_parameters(path)` returns a `SimulationSettings`.

## Installing

```
pip install .
```

## Running a simulation

```
accsim 1    # one vehicle, speed control only
accsim 2    # ego vehicle following a lead vehicle
accsim 3    # following, driven through the full ACC checks
```

Any other choice, or no argument, exits with status 1.

The command reads these files from the current directory if they exist:

- `sim_parameters.csv`:
  - `v_target`, `v_initial` and `v2_initial` in km/h
  - `dt` and `T` in seconds
  - `distance` in metres
  - `sin_amplitude` and `sin_freq` for a sinusoidal lead-vehicle speed;
    it is used only when both are positive
- `gains.csv`: `Kp`, `Ki`, `Kd`, `d_Kp`, `d_Ki`, `d_Kd`, `time_gap`,
  `time_gap_tolerance`, `pid_speed_control`, `minimum_distance`.
- `dynamics_parameters.csv`: `m`, `r`, `rho`, `Cd`, `A`, `Cr`, `g`,
  `tau_max`, `max_torque_rate`.

Missing values keep their built-in defaults. The defaults are 35 km/h
target, 15 km/h initial, `dt` 0.1 s, `T` 500 s, 10 km/h lead vehicle and a
100 m gap. Speeds are converted to m/s before the run.

## Using the controller directly

```python
from accsim.controller import ACCController

acc = ACCController(
    time_gap=1.5, time_gap_tolerance=0.1, pid_speed_control=0,
    kp=100, ki=0.82, kd=0, d_kp=0.3, d_ki=0.01, d_kd=0.0,
    report=False,
)
target = acc.calculate_target_speed(
    distance=60.0, minimum_distance=10.0, v_ego=20.0,
    lead_vehicle_speed=18.0, driver_set_speed=25.0,
    lead_vehicle_present=True, dt=0.1,
)
torque = acc.calculate_torque(target, 20.0, tau_max=400.0, dt=0.1)
```

## What it does not do

The simulations only write CSV logs and print the overshoot. There is no
plotting of results. There is also no connection to a real vehicle or to a
simulation host: `ACCBlock` is a plain Python object that you call step by
step.