import csv
import math

import pytest

from accsim.simulation import (
    ControllerParameters,
    Simulation,
    VehicleParameters,
    sin_target,
)


@pytest.fixture
def sim(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return Simulation(
        0.1,
        5.0,
        vehicle=VehicleParameters(),
        gains=ControllerParameters(),
        log_dir=tmp_path,
    )


def read_log(path):
    with open(path, newline="", encoding="utf-8") as handle:
        rows = list(csv.reader(handle))
    return rows[0], rows[1:]


def test_sin_target_zero_amplitude_is_constant():
    profile = sin_target(7.0, 0.0, 1.0, 0.5, 2.0)
    assert len(profile) == 5
    assert all(value == 7.0 for value in profile)


def test_sin_target_follows_sine():
    profile = sin_target(5.0, 2.0, math.pi / 4, 1.0, 2.0)
    assert profile[0] == pytest.approx(5.0)
    assert profile[1] == pytest.approx(5.0 + 2.0)
    assert profile[2] == pytest.approx(5.0, abs=1e-9)


def test_parameters_loaded_from_files(tmp_path):
    gains = tmp_path / "g.csv"
    gains.write_text("Kp,5\nminimum_distance,3\n")
    dynamics = tmp_path / "d.csv"
    dynamics.write_text("m,2000\nCd,0.5\n")
    sim = Simulation(0.1, 1.0, gains_path=gains, dynamics_path=dynamics, log_dir=tmp_path)
    assert sim.gains.kp == 5
    assert sim.gains.minimum_distance == 3
    assert sim.gains.ki == ControllerParameters().ki
    assert sim.vehicle.m == 2000
    assert sim.vehicle.cd == 0.5
    assert sim.vehicle.r == VehicleParameters().r


def test_missing_files_keep_defaults(tmp_path):
    sim = Simulation(
        0.1, 1.0, gains_path=tmp_path / "no1", dynamics_path=tmp_path / "no2", log_dir=tmp_path
    )
    assert sim.gains == ControllerParameters()
    assert sim.vehicle == VehicleParameters()


def test_run_simulation_logs_each_step(sim, tmp_path):
    speeds = sim.run_simulation(10.0, 8.0, 0.5, 2.0)
    header, rows = read_log(tmp_path / "simulation_log.csv")
    assert header == ["Time", "Error", "Actual Speed", "Torque", "Target Speed"]
    assert len(speeds) == len(rows) == 5
    for speed, row in zip(speeds, rows):
        assert float(row[2]) == pytest.approx(speed, rel=1e-4)
        assert float(row[4]) == pytest.approx(10.0 * 3.6, rel=1e-4)


def test_run_simulation_respects_torque_limits(sim, tmp_path):
    sim.run_simulation(15.0, 5.0, 0.1, 5.0)
    _, rows = read_log(tmp_path / "simulation_log.csv")
    torques = [0.0] + [float(row[3]) for row in rows]
    limit = sim.vehicle.max_torque_rate * 0.1 + 1e-2
    for before, after in zip(torques, torques[1:]):
        assert abs(after - before) <= limit
        assert abs(after) <= sim.vehicle.tau_max


def test_two_vehicles_far_lead_cruises(sim, tmp_path):
    speeds = sim.run_simulation_with_two_vehicles(10.0, 10.0, 0.1, 2.0, 30.0, 1000.0, 0.0, 0.0)
    header, rows = read_log(tmp_path / "simulation_log_ACC.csv")
    assert len(header) == 11
    assert header[7] == "Gap(m)"
    assert len(rows) == len(speeds)
    for row in rows:
        assert row[4] == row[6]
        assert float(row[5]) == pytest.approx(30.0 * 3.6, rel=1e-4)


def test_two_vehicles_close_lead_targets_stop(sim, tmp_path):
    speeds = sim.run_simulation_with_two_vehicles(10.0, 10.0, 0.1, 1.0, 10.0, 5.0, 0.0, 0.0)
    _, rows = read_log(tmp_path / "simulation_log_ACC.csv")
    assert len(speeds) == len(rows) == 11
    assert speeds[0] < 10.0 * 3.6
    assert all(later < earlier for earlier, later in zip(speeds, speeds[1:]))
    assert float(rows[0][4]) == 0.0
    assert float(rows[0][3]) < 0


def test_two_vehicles_sine_lead_profile(sim, tmp_path):
    sim.run_simulation_with_two_vehicles(10.0, 10.0, 0.1, 2.0, 12.0, 500.0, 2.0, 1.0)
    _, rows = read_log(tmp_path / "simulation_log_ACC.csv")
    expected = sin_target(12.0, 2.0, 1.0, 0.1, 2.0)
    assert len(rows) == len(expected)
    for row, lead in zip(rows, expected):
        assert float(row[5]) == pytest.approx(lead * 3.6, rel=1e-4)


def test_checks_mode_far_lead_uses_set_speed(sim, tmp_path):
    speeds = sim.run_simulation_with_checks(10.0, 10.0, 0.1, 2.0, 30.0, 1000.0, 0.0, 0.0)
    _, rows = read_log(tmp_path / "simulation_log_ACC.csv")
    assert len(rows) == len(speeds)
    for row in rows:
        assert row[4] == row[6]
        assert abs(float(row[3])) <= sim.vehicle.tau_max


def test_display_results_reports_overshoot(sim, capsys):
    overshoot = sim.display_results([10.0 / 0.2778, 1.0], [0.0, 0.0], [0.0, 0.0], 10.0, 0.1)
    assert overshoot == pytest.approx(0.0, abs=1e-9)
    assert capsys.readouterr().out.startswith("Overshoot: ")


def test_display_results_positive_when_above_target(sim):
    assert sim.display_results([50.0], [0.0], [0.0], 10.0, 0.1) > 0