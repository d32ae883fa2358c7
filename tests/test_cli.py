"""Tests for the command-line entry point, driven against a fake source."""

import json
from datetime import date, timedelta

import pytest

from peril_oracle.cli import build_parser, load_policies, run
from peril_oracle.models.observation import Station
from peril_oracle.services.weather_analysis import utc_today
from tests.conftest import START_DAY, FakeObservationSource, make_observation, make_policy, make_series


def stormy_source() -> FakeObservationSource:
    series = make_series(30)
    series[10] = make_observation(day=START_DAY + timedelta(days=10), precipitation_rate=30.0)
    latest = make_observation(humidity=15.0, temperature=42.0, precipitation_rate=0.0)
    return FakeObservationSource.from_series(
        series,
        latest={"ST001": latest},
        stations=[Station(id="ST001", name="Athens", latitude=37.98, longitude=23.72)],
    )


async def invoke(argv: list[str], source: FakeObservationSource) -> int:
    return await run(build_parser().parse_args(argv), source)


class TestParser:
    def test_defaults(self):
        args = build_parser().parse_args(["analyze", "--station", "ST001"])
        assert args.date is None
        assert args.lookback == 30
        assert args.table is False

    def test_date_parsed(self):
        args = build_parser().parse_args(["analyze", "--station", "ST001", "--date", "2025-07-31"])
        assert args.date == date(2025, 7, 31)

    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    @pytest.mark.parametrize("argv", [
        ["analyze", "--station", "ST001", "--lookback", "0"],
        ["analyze", "--station", "ST001", "--lookback", "-3"],
        ["analyze", "--station", "ST001", "--lookback", "week"],
        ["alerts", "--limit", "0"],
    ])
    def test_non_positive_counts_rejected(self, argv):
        with pytest.raises(SystemExit):
            build_parser().parse_args(argv)


class TestCommands:
    @pytest.mark.asyncio
    async def test_analyze_prints_json(self, capsys):
        code = await invoke(["analyze", "--station", "ST001", "--date", "2025-07-31"], stormy_source())

        out = json.loads(capsys.readouterr().out)
        assert code == 0
        assert out["station_id"] == "ST001"
        assert out["period"] == "30d"
        assert out["risk_scores"]["flood"] > 0
        assert out["payout_recommendation"] is None
        assert {e["event_type"] for e in out["trigger_events"]} == {"flood"}

    @pytest.mark.asyncio
    async def test_analyze_table(self, capsys):
        code = await invoke(
            ["analyze", "--station", "ST001", "--date", "2025-07-31", "--table"], stormy_source()
        )
        out = capsys.readouterr().out
        assert code == 0
        assert "| Peril" in out
        assert "flood" in out

    @pytest.mark.asyncio
    async def test_snapshot(self, capsys):
        code = await invoke(["snapshot", "--station", "ST001"], stormy_source())
        out = json.loads(capsys.readouterr().out)
        assert code == 0
        assert out["risks"]["drought_risk"] == 100
        assert out["should_trigger_payout"]["drought"] is True

    @pytest.mark.asyncio
    async def test_alerts(self, capsys):
        code = await invoke(["alerts", "--limit", "5"], stormy_source())
        out = json.loads(capsys.readouterr().out)
        assert code == 0
        assert out["alert_count"] == 1
        assert out["alerts"][0]["alert_type"] == "drought"

    @pytest.mark.asyncio
    async def test_check_with_policy_file(self, capsys, tmp_path):
        path = tmp_path / "policies.json"
        path.write_text(json.dumps([make_policy().model_dump(mode="json")]))

        code = await invoke(
            ["check", "--station", "ST001", "--policies", str(path), "--date", "2025-07-31"],
            stormy_source(),
        )

        out = json.loads(capsys.readouterr().out)
        assert code == 0
        assert len(out) == 1
        assert out[0]["policy_id"] == "POL-001"
        assert out[0]["payout_amount"] == pytest.approx(9000.0)

    @pytest.mark.asyncio
    async def test_error_payload_and_exit_code(self, capsys):
        code = await invoke(
            ["analyze", "--station", "ST001", "--date", "2025-07-31"], FakeObservationSource()
        )
        out = json.loads(capsys.readouterr().out)
        assert code == 1
        assert out["error"]["code"] == "DATA_UNAVAILABLE"
        assert out["error"]["station_id"] == "ST001"

    @pytest.mark.asyncio
    async def test_invalid_policy_file_is_an_error_payload(self, capsys, tmp_path):
        path = tmp_path / "policies.json"
        path.write_text(json.dumps([{"policy_id": "POL-001", "coverage_type": "earthquake"}]))

        code = await invoke(["check", "--station", "ST001", "--policies", str(path)], stormy_source())

        out = json.loads(capsys.readouterr().out)
        assert code == 1
        assert out["error"]["code"] == "INVALID_POLICY_CONFIGURATION"
        assert out["error"]["path"] == str(path)
        assert out["error"]["errors"]

    @pytest.mark.asyncio
    async def test_missing_policy_file_is_an_error_payload(self, capsys, tmp_path):
        code = await invoke(
            ["check", "--station", "ST001", "--policies", str(tmp_path / "absent.json")],
            stormy_source(),
        )
        out = json.loads(capsys.readouterr().out)
        assert code == 1
        assert out["error"]["code"] == "INVALID_POLICY_CONFIGURATION"

    @pytest.mark.asyncio
    async def test_analyze_and_check_default_to_the_same_window(self, capsys, tmp_path):
        today = utc_today()
        path = tmp_path / "policies.json"
        policy = make_policy(start_date=today - timedelta(days=365), end_date=today + timedelta(days=365))
        path.write_text(json.dumps([policy.model_dump(mode="json")]))

        analyze_source = FakeObservationSource()
        check_source = FakeObservationSource()
        await invoke(["analyze", "--station", "ST001"], analyze_source)
        await invoke(["check", "--station", "ST001", "--policies", str(path)], check_source)
        capsys.readouterr()

        assert sorted(analyze_source.requested_days) == sorted(check_source.requested_days)
        assert max(analyze_source.requested_days) == today - timedelta(days=1)


class TestLoadPolicies:
    def test_round_trips_policy_file(self, tmp_path):
        policy = make_policy()
        path = tmp_path / "policies.json"
        path.write_text(json.dumps([policy.model_dump(mode="json")]))
        assert load_policies(path) == [policy]
