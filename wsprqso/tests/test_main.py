"""
tests/test_main.py

Tests for main.py — call sign resolution and the command-line run,
end to end from a CSV file to ADIF on stdout.
"""

from __future__ import annotations

import pytest

from wsprqso.config import Settings, settings
from wsprqso.errors import ConfigurationError
from wsprqso.main import build_correlator, main, resolve_self_call
from wsprqso.metrics import METRICS

T0 = 1_700_000_040

SPOTS = (
    f"1,{T0},DK1ABC,JO31,-12,14.097100,K1XYZ,FN42,37,0,6123\n"
    f"2,{T0 + 30},K1XYZ,FN42,-20,14.097150,DK1ABC,JO31,30,0,6123\n"
    f"3,{T0 + 60},DL6WAB,JO62,-5,14.097120,DK1ABC,JO31,30,0,450\n"
    f"4,{T0 + 60},DK1ABC,JO31,-7,14.097120,DL6WAB,JO62,37,0,450\n"
    "not,a,spot\n"
)


@pytest.fixture(autouse=True)
def _reset_metrics():
    METRICS.reset_all()
    yield


@pytest.fixture
def spot_file(tmp_path):
    path = tmp_path / "wsprspots.csv"
    path.write_text(SPOTS, encoding="utf-8")
    return str(path)


# ---------------------------------------------------------------------------
# resolve_self_call / build_correlator
# ---------------------------------------------------------------------------

class TestResolveSelfCall:

    def test_argument_wins(self):
        assert resolve_self_call("DK1ABC", Settings(SELF_CALL="W1AW")) == "DK1ABC"

    def test_falls_back_to_setting(self):
        assert resolve_self_call(None, Settings(SELF_CALL="W1AW")) == "W1AW"

    def test_missing_everywhere_raises(self):
        with pytest.raises(ConfigurationError):
            resolve_self_call(None, Settings(SELF_CALL=""))

    def test_blank_argument_counts_as_missing(self):
        with pytest.raises(ConfigurationError):
            resolve_self_call("  ", Settings(SELF_CALL=""))


class TestBuildCorrelator:

    def test_merges_configured_and_extra_exclusions(self):
        cfg = Settings(EXCLUDED_CALLS=["DL6WAB"], RETENTION_CYCLES=3)
        corr = build_correlator("DK1ABC", ["db0xyz"], cfg)
        assert corr._excluded == frozenset({"DL6WAB", "DB0XYZ"})
        assert corr.clock.retention == 3


# ---------------------------------------------------------------------------
# main()
# ---------------------------------------------------------------------------

class TestMain:

    def test_logs_one_qso(self, spot_file, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["DK1ABC", "--input", spot_file])
        assert exc_info.value.code == 0

        out, err = capsys.readouterr()
        assert out.startswith("Mutual WSPR spots for DK1ABC\n")
        assert "<EOH>" in out
        assert out.count("<EOR>") == 1
        assert "<CALL:5>K1XYZ" in out
        assert "DL6WAB" not in out
        assert "Logged 1 QSOs with 1 unique call signs" in err

    def test_extra_exclusion_from_command_line(self, spot_file, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["DK1ABC", "--input", spot_file, "--exclude", "k1xyz"])
        assert exc_info.value.code == 0
        out, err = capsys.readouterr()
        assert "<EOR>" not in out
        assert "Logged 0 QSOs with 0 unique call signs" in err

    def test_missing_call_sign_exits_1(self, spot_file, monkeypatch, capsys):
        monkeypatch.setattr(settings, "SELF_CALL", "")
        with pytest.raises(SystemExit) as exc_info:
            main(["--input", spot_file])
        assert exc_info.value.code == 1
        out, err = capsys.readouterr()
        assert out == ""
        assert "ERROR: Missing operator call sign" in err

    def test_unreadable_input_exits_1(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["DK1ABC", "--input", str(tmp_path / "missing.csv")])
        assert exc_info.value.code == 1

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert "wsprqso" in capsys.readouterr().out
