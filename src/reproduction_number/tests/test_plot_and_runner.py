import logging

import numpy as np
import pandas as pd
import pytest

from reproduction_number import runner
from reproduction_number.estimate.wallinga_teunis import estimate_reproduction_number
from reproduction_number.plotting.plot_rt import plot_cases, plot_estimates


@pytest.fixture
def case_csv(tmp_path):
    """
    Forty days of growing cases, written the way a downloaded table would be
    """
    dates = pd.date_range("2020-03-01", periods=40, freq="D")
    cases = np.round(5 * 1.1 ** np.arange(40)).astype(int)
    path = tmp_path / "cases.csv"
    pd.DataFrame({"date": dates.strftime("%Y-%m-%d"), "cases": cases}).to_csv(path, index=False)
    return path


def test_plots_are_written(tmp_path):
    frame = pd.DataFrame({
        "date": pd.date_range("2020-03-01", periods=40, freq="D"),
        "cases": np.arange(1, 41),
    })
    est = estimate_reproduction_number(frame)

    cases_png = plot_cases(frame, save_path=str(tmp_path / "figs" / "cases.png"))
    rt_png = plot_estimates(est, save_path=str(tmp_path / "figs" / "rt.png"))
    assert cases_png.exists() and cases_png.stat().st_size > 0
    assert rt_png.exists() and rt_png.stat().st_size > 0


def test_plot_empty_raises(tmp_path):
    with pytest.raises(ValueError):
        plot_cases(pd.DataFrame({"date": [], "cases": []}), save_path=str(tmp_path / "x.png"))


def test_runner_estimate_writes_csv(case_csv, tmp_path, capsys):
    out = tmp_path / "out" / "rt.csv"
    runner.main(["estimate", "--csv", str(case_csv), "--out", str(out)])

    df = pd.read_csv(out)
    assert len(df) == 40
    assert list(df.columns) == ["date", "cases", "R_t", "reliable"]
    printed = capsys.readouterr().out
    assert "Mean R_t over reliable days" in printed


def test_runner_plot_writes_figures(case_csv, tmp_path):
    out_cases = tmp_path / "cases.png"
    out_rt = tmp_path / "rt.png"
    runner.main([
        "plot", "--csv", str(case_csv),
        "--mean", "5.0", "--std", "2.0", "--k-max", "12", "--family", "gamma",
        "--out-cases", str(out_cases), "--out-rt", str(out_rt),
    ])
    assert out_cases.exists()
    assert out_rt.exists()


def test_runner_strict_tail_fails(case_csv):
    with pytest.raises(ValueError):
        runner.main(["estimate", "--csv", str(case_csv), "--k-max", "3", "--strict-tail"])


def test_cli_logs_error_before_exiting(case_csv, caplog):
    with caplog.at_level(logging.ERROR):
        with pytest.raises(ValueError):
            runner.cli(["estimate", "--csv", str(case_csv), "--k-max", "3", "--strict-tail"])
    assert any(rec.levelno == logging.ERROR and rec.exc_info for rec in caplog.records)
