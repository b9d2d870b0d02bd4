import os
import re
import subprocess
import sys

import pytest

from elevation_profile import cli

SAMPLE_GPX_PATH = os.path.join(
    os.path.dirname(__file__), "data", "sample_ride.gpx"
)
SRC_DIR = os.path.join(os.path.dirname(__file__), "..", "..", "src")


def run_cli(*args, cwd=None):
    env = dict(os.environ)
    env["PYTHONIOENCODING"] = "utf-8"
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [os.path.abspath(SRC_DIR), env.get("PYTHONPATH")]))
    return subprocess.run(
        [sys.executable, "-m", "elevation_profile", *args],
        capture_output=True,
        encoding="utf-8",
        env=env,
        cwd=cwd,
    )


class TestCli:
    def test_run_with_sample_file(self, tmp_path):
        result = run_cli(SAMPLE_GPX_PATH, cwd=tmp_path)
        assert result.returncode == 0
        output = result.stdout
        assert "=== Elevation Profile ===" in output
        assert "Loaded 1 of 1 tracks" in output
        assert "--- Sample Ride ---" in output
        assert "Points:         6" in output
        assert "Distance:" in output
        assert "Elevation gain: 40 m" in output
        assert "Range: 10–40 m" in output

    def test_distance_excludes_segment_gap(self, tmp_path):
        result = run_cli(SAMPLE_GPX_PATH, cwd=tmp_path)
        match = re.search(r"Distance: ([\d.]+) km", result.stdout)
        assert match, "Could not find 'Distance:' in output"
        # two short segments of ~0.28 km each; the ~0.7 km gap is not counted
        assert 0.4 < float(match.group(1)) < 0.7

    def test_failed_source_is_skipped(self, tmp_path):
        result = run_cli("/nonexistent/file.gpx", SAMPLE_GPX_PATH, cwd=tmp_path)
        assert result.returncode == 0
        assert "Loaded 1 of 2 tracks" in result.stdout
        assert "Error loading track /nonexistent/file.gpx" in result.stderr

    def test_nonexistent_file(self, tmp_path):
        result = run_cli("/nonexistent/file.gpx", cwd=tmp_path)
        assert result.returncode != 0
        assert "Error" in result.stderr

    def test_no_arguments(self):
        result = run_cli()
        assert result.returncode != 0

    def test_track_out_of_range(self, tmp_path):
        result = run_cli("--track", "3", SAMPLE_GPX_PATH, cwd=tmp_path)
        assert result.returncode != 0
        assert "out of range" in result.stderr

    def test_png_output(self, tmp_path):
        png_path = tmp_path / "profile.png"
        result = run_cli("--png", str(png_path), SAMPLE_GPX_PATH, cwd=tmp_path)
        assert result.returncode == 0
        assert f"Chart written to {png_path}" in result.stdout
        assert png_path.read_bytes().startswith(b"\x89PNG")

    def test_zero_aspect_is_clamped(self, tmp_path):
        png_path = tmp_path / "profile.png"
        result = run_cli("--png", str(png_path), "--aspect", "0", SAMPLE_GPX_PATH, cwd=tmp_path)
        assert result.returncode == 0
        assert png_path.read_bytes().startswith(b"\x89PNG")


class TestMain:
    def test_selected_track_only(self, capsys, no_config, tmp_path, gpx_factory):
        other = tmp_path / "other.gpx"
        other.write_text(gpx_factory([[(45.0, 6.0, 1000.0), (45.001, 6.0, 1020.0)]], name="Other"))

        cli.main(["--track", "1", SAMPLE_GPX_PATH, str(other)])

        output = capsys.readouterr().out
        assert "Loaded 2 of 2 tracks" in output
        assert "--- Other ---" in output
        assert "Sample Ride" not in output

    def test_no_tracks_exits(self, capsys, no_config, tmp_path):
        with pytest.raises(SystemExit) as exc_info:
            cli.main([str(tmp_path / "missing.gpx")])
        assert exc_info.value.code == 1
        assert "No tracks could be loaded" in capsys.readouterr().err
