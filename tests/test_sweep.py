import math
import numpy as np
import pandas as pd
import pytest
import yaml
from core.components.resistor import Resistor
from core.exceptions import NetlistError, SweepError
from core.inout.sweep import AcAnalysis, load_sweep_config, parse_sweep_config
from core.solver import CircuitSolver
from evaluation.probes import parse_probes
from evaluation.report import format_dc_report, format_operating_point, format_sweep_table
from evaluation.sweep import SweepResult, SweepPoint, run_operating_point, run_sweep


def test_linear_frequencies():
    freqs = AcAnalysis(1.0, 10.0, 10, "lin").frequencies()
    np.testing.assert_allclose(freqs, np.arange(1.0, 11.0))
    assert AcAnalysis(1.0, 10.0, 10, "linear").exponent == 0


@pytest.mark.parametrize("scale, base, steps", [("dec", 10.0, 20), ("oct", 2.0, 66)])
def test_geometric_frequencies(scale, base, steps):
    analysis = AcAnalysis(10.0, 1e5, 5, scale)
    freqs = analysis.frequencies()
    assert analysis.exponent == base
    assert freqs[0] == pytest.approx(10.0)
    assert freqs[-1] == pytest.approx(1e5)
    ratios = freqs[1:] / freqs[:-1]
    np.testing.assert_allclose(ratios, ratios[0])
    assert len(freqs) == steps


def test_short_geometric_sweep_keeps_endpoints():
    freqs = AcAnalysis(1.0, 1.5, 10, "dec").frequencies()
    assert len(freqs) == 2
    np.testing.assert_allclose(freqs, [1.0, 1.5])


def test_log_scale_total_points():
    freqs = AcAnalysis(1.0, 1e3, 4, "log").frequencies()
    np.testing.assert_allclose(freqs, [1.0, 10.0, 100.0, 1000.0])


def test_omegas():
    analysis = AcAnalysis(1.0, 2.0, 2)
    np.testing.assert_allclose(analysis.omegas(), [2 * math.pi, 4 * math.pi])


@pytest.mark.parametrize("kwargs", [
    {"start": 0.0, "stop": 10.0, "points": 5},
    {"start": 10.0, "stop": 1.0, "points": 5},
    {"start": 1.0, "stop": 10.0, "points": 0},
    {"start": 1.0, "stop": 10.0, "points": 5, "scale": "cubic"},
])
def test_invalid_analysis(kwargs):
    with pytest.raises(NetlistError):
        AcAnalysis(**kwargs)


def test_load_sweep_config(tmp_path):
    cfg = {
        "sweep": [{"param": "f", "range": ["1k", 1e6], "points": 10, "scale": "dec"}],
        "probes": ["Vmag(out)"],
        "stop_on_error": True,
    }
    path = tmp_path / "sweep.yml"
    path.write_text(yaml.dump(cfg))
    result = load_sweep_config(path)
    assert result.analysis == AcAnalysis(1e3, 1e6, 10, "dec")
    assert result.probes == ["Vmag(out)"]
    assert result.stop_on_error is True


def test_sweep_config_defaults():
    cfg = parse_sweep_config({"sweep": [{"param": "f", "range": [1, 10], "points": 3}]})
    assert cfg.analysis.scale == "lin"
    assert cfg.probes == []
    assert cfg.stop_on_error is False


@pytest.mark.parametrize("cfg", [
    {"sweep": [{"param": "R1", "range": [1, 10], "points": 3}]},
    {"sweep": [{"param": "f", "range": [1], "points": 3}]},
    {"sweep": [{"param": "f", "range": [1, 10], "points": 3, "scale": "cubic"}]},
    {"sweep": []},
    {"unknown": 1},
    ["not", "a", "mapping"],
])
def test_sweep_config_schema_errors(cfg):
    with pytest.raises(NetlistError):
        parse_sweep_config(cfg)


def test_sweep_config_bad_file(tmp_path):
    path = tmp_path / "broken.yml"
    path.write_text("sweep: [\n")
    with pytest.raises(NetlistError, match="Failed to read"):
        load_sweep_config(path)


def test_run_sweep_rc(rc_lowpass):
    solver = CircuitSolver(rc_lowpass)
    probes = parse_probes("Vmag(out) Vph(out)", rc_lowpass)
    f_c = 1 / (2 * math.pi * 1000 * 1e-6)
    result = run_sweep(solver, AcAnalysis(f_c / 10, f_c * 10, 3, "lin"), probes)
    assert result.ok
    assert result.stats["points"] == 3
    mags = result.column("Vmag(out)")
    assert mags[0] > mags[1] > mags[2]
    for point in result.points:
        expected = 1 / (1 + 1j * point.frequency / f_c)
        assert point.values["Vmag(out)"] == pytest.approx(abs(expected))
        assert point.values["Vph(out)"] == pytest.approx(np.angle(expected))


def test_run_sweep_records_failures(rc_lowpass):
    rc_lowpass.add_component(Resistor("R9", ["8", "9"], R=1.0))
    solver = CircuitSolver(rc_lowpass)
    probes = parse_probes("V(out)", rc_lowpass)
    result = run_sweep(solver, AcAnalysis(1.0, 10.0, 2), probes)
    assert not result.ok
    assert len(result.errors) == 2
    assert all(p.error and "operating point" in p.error for p in result.points)
    assert all(math.isnan(v) for v in result.column("V(out)"))


def test_run_sweep_stop_on_error(rc_lowpass):
    rc_lowpass.add_component(Resistor("R9", ["8", "9"], R=1.0))
    solver = CircuitSolver(rc_lowpass)
    with pytest.raises(SweepError) as excinfo:
        run_sweep(solver, AcAnalysis(1.0, 10.0, 2), [], stop_on_error=True)
    assert excinfo.value.step == 0
    assert excinfo.value.frequency == pytest.approx(1.0)


def test_sweep_result_to_dataframe():
    points = [
        SweepPoint(step=0, frequency=1e3, values={"V(2)": 1.0}),
        SweepPoint(step=1, frequency=2e3, error="boom"),
    ]
    sweep_result = SweepResult(points, ["boom"], stats={}, probe_names=["V(2)"])
    df = sweep_result.to_dataframe()
    assert isinstance(df, pd.DataFrame)
    assert list(df.columns) == ["step", "frequency", "V(2)", "error"]
    assert len(df) == 2
    assert df.loc[0, "V(2)"] == 1.0
    assert df.loc[1, "error"] == "boom"
    assert points[0].omega == pytest.approx(2 * math.pi * 1e3)


def test_operating_point_and_reports(divider):
    solver = CircuitSolver(divider)
    values = run_operating_point(solver, parse_probes("V(3) I(V1)", divider))
    assert values == {"V(3)": pytest.approx(2.5), "I(V1)": pytest.approx(-0.0025)}
    assert format_operating_point(values) == "V(3) = 2.5\nI(V1) = -0.0025"

    report = format_dc_report(solver)
    assert "\tV(3) = 2.5 V" in report
    assert "R1 - [2, 3]:" in report
    assert "\tI(V1) = -0.0025 A" in report
    assert report.endswith("Total power: 0.0125 W.")


def test_sweep_table():
    points = [
        SweepPoint(step=0, frequency=10.0, values={"V(2)": 0.5}),
        SweepPoint(step=1, frequency=20.0, error="singular"),
    ]
    table = format_sweep_table(SweepResult(points, ["singular"], probe_names=["V(2)"]))
    assert table.splitlines() == ["step\tfrequency\tV(2)", "0\t10\t0.5", "1\t20\t# singular"]
