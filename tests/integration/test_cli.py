"""
Integration tests for the command-line interface.
"""

import json

import pytest
import yaml
from finforecast.cli import main


def _run(argv) -> int:
    with pytest.raises(SystemExit) as exc_info:
        main(argv)
    return exc_info.value.code


@pytest.fixture
def config_file(tmp_path, scenario_dict):
    path = tmp_path / "scenario.yaml"
    path.write_text(yaml.safe_dump(scenario_dict))
    return path


@pytest.fixture
def snapshot_file(tmp_path):
    path = tmp_path / "snapshot.json"
    path.write_text(
        json.dumps(
            {
                "accounts": [
                    {"id": "tfsa", "type": "tfsa", "balance": 25000},
                    {
                        "id": "loan",
                        "type": "loan",
                        "is_asset": False,
                        "balance": -10000,
                    },
                ],
                "debts": [
                    {
                        "account_id": "loan",
                        "kind": "loan",
                        "annual_rate": 0.05,
                        "payment_amount": 299.71,
                    }
                ],
            }
        )
    )
    return path


class TestRunCommand:
    """`finforecast run`."""

    def test_run_to_file(self, config_file, snapshot_file, tmp_path, capsys):
        out = tmp_path / "result.json"
        csv = tmp_path / "frame.csv"
        code = _run(
            [
                "run",
                "-c",
                str(config_file),
                "-s",
                str(snapshot_file),
                "-o",
                str(out),
                "--csv",
                str(csv),
            ]
        )
        assert code == 0
        data = json.loads(out.read_text())
        assert len(data["net_worth"]) == 13
        assert data["debt_payoff"][0]["debts"] == {"loan": 10000}
        assert "final_net_worth" in data["summary"]
        assert csv.read_text().splitlines()[0].startswith("month,net_worth")
        assert "Results saved" in capsys.readouterr().out

    def test_run_to_stdout_with_embedded_snapshot(
        self, tmp_path, scenario_dict, capsys
    ):
        path = tmp_path / "bundle.json"
        path.write_text(
            json.dumps(
                {
                    "config": scenario_dict,
                    "snapshot": {
                        "accounts": [{"id": "tfsa", "type": "tfsa", "balance": 1000}]
                    },
                }
            )
        )
        assert _run(["run", "-c", str(path)]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["net_worth"][0]["value"] == 1000

    def test_start_override(self, config_file, snapshot_file, capsys):
        code = _run(
            [
                "run",
                "-c",
                str(config_file),
                "-s",
                str(snapshot_file),
                "--start",
                "2030-05-20",
            ]
        )
        assert code == 0
        data = json.loads(capsys.readouterr().out)
        assert data["net_worth"][0]["date"] == "2030-05-01"

    def test_warnings_printed(self, tmp_path, scenario_dict, capsys):
        scenario_dict["extra_debt_payments"] = {"ghost": 100}
        path = tmp_path / "scenario.json"
        path.write_text(json.dumps(scenario_dict))
        assert _run(["run", "-c", str(path), "-o", str(tmp_path / "r.json")]) == 0
        assert "event_target_missing" in capsys.readouterr().err

    def test_invalid_config_fails(self, tmp_path, capsys):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"time_horizon_years": -3}))
        assert _run(["run", "-c", str(path)]) == 1
        assert "Error running projection" in capsys.readouterr().err


class TestValidateCommand:
    """`finforecast validate`."""

    def test_valid_human(self, config_file, capsys):
        assert _run(["validate", "-i", str(config_file)]) == 0
        assert "Config is valid: 1 years" in capsys.readouterr().out

    def test_invalid_json_report(self, tmp_path, capsys):
        path = tmp_path / "bad.yaml"
        path.write_text("time_horizon_years: 500\n")
        assert _run(["validate", "-i", str(path), "--format", "json"]) == 1
        report = json.loads(capsys.readouterr().out)
        assert report["is_valid"] is False
        assert "time_horizon_years" in report["error"]

    def test_alias_warning_reported(self, tmp_path, capsys):
        path = tmp_path / "alias.yaml"
        path.write_text(
            yaml.safe_dump(
                {
                    "provincial_tax_brackets": [{"up_to_income": 0, "rate": 0.1}],
                    "regional_tax_brackets": [{"up_to_income": 0, "rate": 0.2}],
                }
            )
        )
        assert _run(["validate", "-i", str(path), "--format", "json"]) == 0
        report = json.loads(capsys.readouterr().out)
        assert report["is_valid"] is True
        assert any("provincial_tax_brackets" in w for w in report["warnings"])

    def test_missing_file(self, tmp_path):
        assert _run(["validate", "-i", str(tmp_path / "missing.yaml")]) == 1


class TestSensitivityCommand:
    """`finforecast sensitivity`."""

    def test_values_to_csv(self, config_file, snapshot_file, tmp_path):
        out = tmp_path / "sweep.csv"
        code = _run(
            [
                "sensitivity",
                "-c",
                str(config_file),
                "-s",
                str(snapshot_file),
                "-p",
                "investment_returns.tfsa",
                "--values",
                "0.03",
                "0.07",
                "-o",
                str(out),
            ]
        )
        assert code == 0
        lines = out.read_text().splitlines()
        assert lines[0].startswith("parameter_value,final_net_worth")
        assert len(lines) == 3

    def test_range_to_json(self, config_file, snapshot_file, tmp_path):
        out = tmp_path / "sweep.json"
        code = _run(
            [
                "sensitivity",
                "-c",
                str(config_file),
                "-s",
                str(snapshot_file),
                "-p",
                "annual_salary",
                "--min",
                "60000",
                "--max",
                "90000",
                "--step",
                "15000",
                "-o",
                str(out),
            ]
        )
        assert code == 0
        data = json.loads(out.read_text())
        assert data["parameter"] == "annual_salary"
        assert [row["parameter_value"] for row in data["rows"]] == [60000, 75000, 90000]

    def test_unknown_parameter(self, config_file, snapshot_file, capsys):
        code = _run(
            [
                "sensitivity",
                "-c",
                str(config_file),
                "-s",
                str(snapshot_file),
                "-p",
                "nope",
            ]
        )
        assert code == 1
        assert "nope" in capsys.readouterr().err


class TestMisc:
    def test_example_is_runnable(self, tmp_path, capsys):
        """The example bundle runs end to end."""
        assert _run(["example"]) == 0
        path = tmp_path / "example.json"
        path.write_text(capsys.readouterr().out)
        assert _run(["run", "-c", str(path), "-o", str(tmp_path / "out.json")]) == 0

    def test_version(self, capsys):
        assert _run(["--version"]) == 0
        assert "FinForecast 0.1.0" in capsys.readouterr().out

    def test_command_required(self):
        assert _run([]) == 2
