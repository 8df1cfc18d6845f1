"""
Tests for the analytics management script.
"""

import json
from datetime import date, datetime

import pytest

import config_manager
import manage_analytics
from config_manager import PathsConfig
from app.analytics.recorder import EventRecorder
from app.analytics.session_store import SessionStore

UA = "Mozilla/5.0 (Windows NT 10.0; Win64; x64) Chrome/120.0.0.0 Safari/537.36"


@pytest.fixture
def data_dir(tmp_path):
    path = tmp_path / "data"
    recorder = EventRecorder(SessionStore(path))
    recorder.record_visit("s1", "10.0.0.1", UA)
    recorder.record_visit("s2", "10.0.0.2", UA)
    recorder.record_action("s2", "form_submit", "hire-form")
    return path


def run(capsys, *argv):
    code = manage_analytics.main(list(argv))
    return code, capsys.readouterr().out


class TestManageAnalytics:

    def test_stats(self, capsys, data_dir):
        code, out = run(capsys, "--data-dir", str(data_dir), "stats")

        assert code == 0
        stats = json.loads(out)
        assert stats["totalVisitors"] == 2
        assert stats["totalHires"] == 1

    def test_dashboard(self, capsys, data_dir):
        code, out = run(capsys, "--data-dir", str(data_dir), "dashboard", "--days", "7")

        assert code == 0
        summary = json.loads(out)["summary"]
        assert summary["totalVisitors"] == 2
        assert summary["conversionRate"] == 50.0

    def test_dashboard_invalid_days(self, capsys, data_dir):
        code, out = run(capsys, "--data-dir", str(data_dir), "dashboard", "--days", "0")
        assert code == 1
        assert out == ""

    def test_rollup_today(self, capsys, data_dir):
        code, out = run(capsys, "--data-dir", str(data_dir), "rollup")

        assert code == 0
        summaries = json.loads(out)
        assert len(summaries) == 1
        assert summaries[0]["total_visitors"] == 2
        assert SessionStore(data_dir).load_daily_summary(datetime.now().date()) is not None

    def test_rollup_specific_date(self, capsys, data_dir):
        code, out = run(capsys, "--data-dir", str(data_dir), "rollup", "--date", "2020-02-29")

        assert code == 0
        summary = json.loads(out)[0]
        assert summary["date"] == "2020-02-29"
        assert summary["total_visitors"] == 0
        assert SessionStore(data_dir).load_daily_summary(date(2020, 2, 29)).total_visitors == 0

    def test_rollup_days(self, capsys, data_dir):
        code, out = run(capsys, "--data-dir", str(data_dir), "rollup", "--days", "3")

        assert code == 0
        dates = [s["date"] for s in json.loads(out)]
        assert dates == sorted(dates)
        assert len(dates) == 3

    def test_date_and_days_are_exclusive(self, data_dir):
        with pytest.raises(SystemExit):
            manage_analytics.main(["--data-dir", str(data_dir), "rollup", "--date", "2024-01-01", "--days", "2"])

    def test_command_required(self):
        with pytest.raises(SystemExit):
            manage_analytics.main([])

    def test_relative_data_dir_resolved_from_project_root(self, capsys, tmp_path, monkeypatch):
        root = tmp_path / "project"
        recorder = EventRecorder(SessionStore(root / "rel-data"))
        recorder.record_visit("s1", "10.0.0.1", UA)

        elsewhere = tmp_path / "elsewhere"
        elsewhere.mkdir()
        monkeypatch.chdir(elsewhere)
        monkeypatch.setattr(config_manager, "PROJECT_ROOT", root)
        monkeypatch.setattr(manage_analytics, "get_paths_config", lambda: PathsConfig(data_dir="rel-data"))

        code, out = run(capsys, "stats")

        assert code == 0
        assert json.loads(out)["totalVisitors"] == 1
        assert not (elsewhere / "rel-data").exists()
