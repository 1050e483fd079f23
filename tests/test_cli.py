import csv

import pytest

from accsim.cli import SimulationSettings, load_simulation_parameters, main


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "sim_parameters.csv").write_text("T,1\ndt,0.1\nv_target,36\n")
    return tmp_path


def read_rows(path):
    with open(path, newline="", encoding="utf-8") as handle:
        return list(csv.reader(handle))


def test_load_overrides_only_given_keys(tmp_path):
    path = tmp_path / "sim.csv"
    path.write_text("v_target,50\ndistance,42\nunknown,3\n")
    settings = load_simulation_parameters(path)
    assert settings.v_target == 50
    assert settings.distance == 42
    assert settings.dt == SimulationSettings().dt
    assert settings.T == SimulationSettings().T


def test_load_missing_file_gives_defaults(tmp_path):
    assert load_simulation_parameters(tmp_path / "absent.csv") == SimulationSettings()


def test_main_without_arguments_prints_usage(capsys):
    assert main([]) == 1
    assert "Usage" in capsys.readouterr().err


def test_main_rejects_unknown_choice(workdir, capsys):
    assert main(["7"]) == 1
    assert "Invalid choice. Exiting..." in capsys.readouterr().err


def test_main_rejects_non_numeric_choice(workdir):
    assert main(["abc"]) == 1


def test_main_single_vehicle(workdir, capsys):
    assert main(["1"]) == 0
    out = capsys.readouterr().out
    assert "Running simulation with one vehicle..." in out
    assert "Simulation completed!" in out
    rows = read_rows(workdir / "simulation_log.csv")
    assert len(rows) == 12
    assert float(rows[1][4]) == pytest.approx(36 * 0.27778 * 3.6, rel=1e-4)


def test_main_two_vehicles(workdir, capsys):
    assert main(["2"]) == 0
    assert "Running simulation with two vehicles..." in capsys.readouterr().out
    rows = read_rows(workdir / "simulation_log_ACC.csv")
    assert rows[0][0] == "Time"
    assert len(rows) == 12


def test_main_choice_with_trailing_text(workdir, capsys):
    assert main(["3x"]) == 0
    assert "Running simulation with checks..." in capsys.readouterr().out
    assert (workdir / "simulation_log_ACC.csv").exists()