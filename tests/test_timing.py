import re
import time

import pytest

from kinfer.timing import tick


def test_tick_prints_label_and_seconds(capsys):
    with tick("forward") as timing:
        pass
    assert timing.label == "forward"
    assert timing.elapsed >= 0.0
    out = capsys.readouterr().out
    assert re.fullmatch(r"forward: \d+\.\d{6}s\n", out)


def test_tick_measures_elapsed_time(capsys):
    with tick("sleep") as timing:
        time.sleep(0.01)
    assert timing.elapsed >= 0.01
    assert timing.label == "sleep"
    printed = float(capsys.readouterr().out.split(": ")[1].rstrip("s\n"))
    assert printed == pytest.approx(timing.elapsed, abs=1e-6)


def test_tick_does_not_report_on_error(capsys):
    with pytest.raises(RuntimeError):
        with tick("broken"):
            raise RuntimeError("boom")
    assert capsys.readouterr().out == ""