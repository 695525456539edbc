"""Integration tests for CLI commands."""

import json
from pathlib import Path

from typer.testing import CliRunner

from kairo import __version__, cli, config_manager
from kairo.cli import app

runner = CliRunner()


class TestAnalyzeCommand:
    """Tests for 'kairo analyze'."""

    def test_analyze_prints_summary(self, sample_project_path: Path):
        result = runner.invoke(app, ["analyze", str(sample_project_path)])

        assert result.exit_code == 0
        assert "Total components: 9" in result.stdout
        assert "Total dependencies: 12" in result.stdout
        assert "ApexTrigger" in result.stdout

    def test_analyze_writes_json(self, sample_project_path: Path, temp_dir: Path):
        output = temp_dir / "out" / "graph.json"
        result = runner.invoke(app, ["analyze", str(sample_project_path), "--output", str(output)])

        assert result.exit_code == 0
        assert "Graph written to" in result.stdout
        payload = json.loads(output.read_text(encoding="utf-8"))
        assert payload["stats"]["totalComponents"] == 9
        assert len(payload["graph"]["dependencies"]) == 12

    def test_analyze_writes_dot(self, sample_project_path: Path, temp_dir: Path):
        output = temp_dir / "graph.dot"
        result = runner.invoke(
            app, ["analyze", str(sample_project_path), "-o", str(output), "--format", "dot"]
        )

        assert result.exit_code == 0
        assert output.read_text(encoding="utf-8").startswith("digraph Kairo {")

    def test_analyze_rejects_unknown_format(self, sample_project_path: Path, temp_dir: Path):
        result = runner.invoke(
            app, ["analyze", str(sample_project_path), "-o", str(temp_dir / "x"), "--format", "html"]
        )

        assert result.exit_code != 0

    def test_analyze_nonexistent_path(self):
        result = runner.invoke(app, ["analyze", "/nonexistent/path"])

        assert result.exit_code != 0

    def test_analyze_uses_configured_interval(self, sample_project_path: Path, monkeypatch):
        config_manager.save_config(3)
        intervals = []
        real_analyzer = cli.MetadataAnalyzer

        def recording_analyzer(**kwargs):
            intervals.append(kwargs["progress_log_interval"])
            return real_analyzer(**kwargs)

        monkeypatch.setattr(cli, "MetadataAnalyzer", recording_analyzer)
        result = runner.invoke(app, ["analyze", str(sample_project_path)])

        assert result.exit_code == 0
        assert intervals == [3]


class TestStatsCommand:
    """Tests for 'kairo stats'."""

    def test_stats_shows_categories(self, sample_project_path: Path):
        result = runner.invoke(app, ["stats", str(sample_project_path)])

        assert result.exit_code == 0
        assert "Business Logic" in result.stdout
        assert "Infrastructure" in result.stdout


def test_version():
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.stdout
