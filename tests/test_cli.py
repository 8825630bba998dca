import logging

import pytest

from exact_penrose.cli import Timing, main, read_config_file


def test_single_window(caplog):
    caplog.set_level(logging.INFO)
    assert main(["--no-render", "--bounds", "-1", "-1", "1", "1"]) == 0
    assert "window [-1, 1] x [-1, 1]: level 1" in caplog.text


def test_moving_window(caplog):
    caplog.set_level(logging.INFO)
    argv = [
        "--no-render", "--precision", "1000",
        "--bounds", "-1", "-1", "1", "1",
        "--bounds", "1/2", "0", "3/2", "1",
        "--bounds", "-5", "-5", "5", "5",
    ]
    assert main(argv) == 0
    assert "window [1/2, 1+1/2] x [0, 1]" in caplog.text
    assert "level 2" in caplog.text


def test_invalid_expression():
    with pytest.raises(SystemExit) as exc:
        main(["--no-render", "--bounds", "1", "x", "2", "3"])
    assert exc.value.code == 2


def test_render_output(tmp_path):
    pytest.importorskip("cairo")
    out = tmp_path / "out.png"
    assert main(["--bounds", "-1", "-1", "1", "1", "--width", "32", "--height", "32",
                 "--output", str(out)]) == 0
    assert out.exists()


def test_read_config_file(tmp_path):
    path = tmp_path / "config.ini"
    path.write_text(
        "[Settings]\n"
        "width = 320\n"
        "precision = 1000\n"
        "inner_frame = 0.1, 0.9\n"
        "fill = #cccccc\n"
    )
    assert read_config_file(str(path)) == {
        "width": 320,
        "precision": 1000,
        "inner_frame": (0.1, 0.9),
        "fill": 0xcccccc,
    }


def test_read_config_file_without_settings(tmp_path):
    path = tmp_path / "config.ini"
    path.write_text("[Other]\nwidth = 1\n")
    assert read_config_file(str(path)) == {}
    with pytest.raises(FileNotFoundError):
        read_config_file(str(tmp_path / "missing.ini"))


def test_config_overridden_by_arguments(tmp_path, caplog):
    caplog.set_level(logging.INFO)
    path = tmp_path / "config.ini"
    path.write_text("[Settings]\nprecision = 0\n")
    # a zero precision from the file would fail; the argument wins
    assert main(["--no-render", "--config", str(path), "--precision", "100"]) == 0
    assert "level 2" in caplog.text


def test_timing():
    with Timing() as t:
        pass
    assert str(t).endswith(("s", "ms", "µs"))


@pytest.mark.parametrize("argv", [
    ["--precision", "0"],
    ["--precision", "-1000"],
    ["--width", "0"],
    ["--precision", "ten"],
    # zero height, zero width
    ["--bounds", "0", "0", "1", "0"],
    ["--bounds", "1", "0", "1", "1"],
])
def test_invalid_settings_are_usage_errors(argv):
    with pytest.raises(SystemExit) as exc:
        main(["--no-render"] + argv)
    assert exc.value.code == 2


def test_invalid_precision_from_config(tmp_path):
    path = tmp_path / "config.ini"
    path.write_text("[Settings]\nprecision = -5\n")
    with pytest.raises(SystemExit) as exc:
        main(["--no-render", "--config", str(path)])
    assert exc.value.code == 2
