import json
from pathlib import Path

import pytest
from PIL import Image
from typer.testing import CliRunner

from autoframe.cli import app

runner = CliRunner()

SESSION = {
    "inputSize": {"width": 1000, "height": 1000},
    "outputSize": {"width": 1000, "height": 1000},
    "outputWindows": [{"id": "all", "startMs": 0, "endMs": 10000}],
    "events": [
        {"type": "click", "timestamp": 5000, "x": 500, "y": 500},
        {"type": "mousedown", "timestamp": 5200, "x": 500, "y": 500},
        {"type": "mouseup", "timestamp": 5400, "x": 600, "y": 500},
        {"type": "mouse", "timestamp": 5500, "x": 100, "y": 100},
        {"type": "mouse", "timestamp": 6000, "x": 100, "y": 100},
        {"type": "mouse", "timestamp": 6600, "x": 102, "y": 101},
    ],
}


@pytest.fixture
def session_path(tmp_path: Path) -> Path:
    path = tmp_path / "session.json"
    path.write_text(json.dumps(SESSION), encoding="utf-8")
    return path


def test_validate(session_path):
    result = runner.invoke(app, ["validate", "--input", str(session_path)])
    assert result.exit_code == 0
    assert "6 event(s)" in result.output
    assert "10000 ms" in result.output


def test_validate_rejects_bad_session(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({**SESSION, "zoom": {"maxZoom": 0.5}}), encoding="utf-8")
    result = runner.invoke(app, ["validate", "--input", str(path)])
    assert result.exit_code == 1


def test_schedule_writes_motions(session_path, tmp_path):
    out = tmp_path / "out" / "motions.json"
    result = runner.invoke(app, ["schedule", "--input", str(session_path), "--out", str(out)])
    assert result.exit_code == 0
    motions = json.loads(out.read_text(encoding="utf-8"))
    assert [m["reason"] for m in motions] == ["click", "hover", "end"]
    assert motions[0]["rect"] == {"x": 250.0, "y": 250.0, "width": 500.0, "height": 500.0}
    assert motions[0]["duration_ms"] == 500


def test_schedule_max_zoom_override(session_path):
    result = runner.invoke(app, ["schedule", "--input", str(session_path), "--max-zoom", "4"])
    assert result.exit_code == 0
    motions = json.loads(result.output)
    assert motions[0]["rect"]["width"] == 250.0


def test_hovers(session_path):
    result = runner.invoke(app, ["hovers", "--input", str(session_path)])
    assert result.exit_code == 0
    hovers = json.loads(result.output)
    assert len(hovers) == 1
    assert hovers[0]["timestamp"] == 5500
    assert hovers[0]["end_time"] == 6600


def test_sample_at_times(session_path):
    result = runner.invoke(app, ["sample", "--input", str(session_path), "--time", "0", "--time", "5000"])
    assert result.exit_code == 0
    lines = [json.loads(line) for line in result.output.splitlines()]
    assert lines[0]["rect"] == {"x": 0.0, "y": 0.0, "width": 1000.0, "height": 1000.0}
    assert lines[1]["rect"]["width"] == 500.0


def test_sample_every_frame(session_path):
    result = runner.invoke(app, ["sample", "--input", str(session_path), "--fps", "2"])
    assert result.exit_code == 0
    assert len(result.output.splitlines()) == 20


def test_effects(session_path):
    result = runner.invoke(app, ["effects", "--input", str(session_path)])
    assert result.exit_code == 0
    effects = json.loads(result.output)
    assert [e["type"] for e in effects] == ["click", "drag"]


def test_preview(session_path, tmp_path):
    frame = tmp_path / "frame.png"
    Image.new("RGB", (500, 500), (40, 120, 200)).save(frame)
    out = tmp_path / "preview.png"
    result = runner.invoke(
        app,
        ["preview", "--input", str(session_path), "--frame", str(frame), "--time", "5100", "--out", str(out)],
    )
    assert result.exit_code == 0
    with Image.open(out) as image:
        assert image.size == (1000, 1000)
