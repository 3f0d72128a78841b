import logging

import numpy as np
import pytest
from scipy.stats import norm

from reproduction_number.estimate.serial_interval import (
    compute_serial_interval,
    truncated_tail_fraction,
)


def slow_reference_weights(mean, std, k_max):
    """
    Lag by lag CDF differences, renormalised.
    """
    w = np.zeros(k_max, dtype=float)
    for lag in range(1, k_max + 1):
        w[lag - 1] = norm.cdf(lag, loc=mean, scale=std) - norm.cdf(lag - 1, loc=mean, scale=std)
    w /= w.sum()
    return w


@pytest.mark.parametrize("mean, std, k_max", [
    (3.96, 4.75, 18),
    (5.0, 1.0, 10),
    (2.0, 0.5, 4),
    (7.0, 3.0, 25),
    (1.0, 10.0, 1),
])
def test_weights_sum_to_one(mean, std, k_max):
    w = compute_serial_interval(mean=mean, std=std, k_max=k_max)
    assert w.shape == (k_max,)
    assert np.all(w >= 0)
    assert abs(w.sum() - 1.0) < 1e-12


def test_weights_match_reference():
    w = compute_serial_interval(3.96, 4.75, 18)
    assert np.allclose(w, slow_reference_weights(3.96, 4.75, 18), atol=1e-12)


def test_gamma_family_sums_to_one():
    w = compute_serial_interval(mean=5.0, std=2.0, k_max=20, family="gamma")
    assert w.shape == (20,)
    assert np.all(w >= 0)
    assert w.sum() == pytest.approx(1.0)
    # gamma(6.25, scale=0.8) has its mode at 4.2 days
    assert int(np.argmax(w)) + 1 in (4, 5)


def test_weights_are_read_only():
    w = compute_serial_interval(3.96, 4.75, 18)
    with pytest.raises(ValueError):
        w[0] = 1.0


@pytest.mark.parametrize("kwargs", [
    dict(mean=4.0, std=2.0, k_max=0),
    dict(mean=4.0, std=2.0, k_max=2.5),
    dict(mean=4.0, std=0.0, k_max=10),
    dict(mean=4.0, std=-1.0, k_max=10),
    dict(mean=float("nan"), std=1.0, k_max=10),
    dict(mean=-1.0, std=1.0, k_max=10, family="gamma"),
    dict(mean=4.0, std=2.0, k_max=10, family="lognormal"),
])
def test_invalid_parameters(kwargs):
    with pytest.raises(ValueError):
        compute_serial_interval(**kwargs)


def test_degenerate_distribution_raises():
    # all the mass sits far below lag 0
    with pytest.raises(RuntimeError):
        compute_serial_interval(mean=-1000.0, std=1.0, k_max=5)


def test_tail_fraction_default_parameters_is_small():
    assert truncated_tail_fraction(3.96, 4.75, 18) < 0.01
    assert truncated_tail_fraction(10.0, 5.0, 5) > 0.5


def test_large_tail_logs_warning(caplog):
    with caplog.at_level(logging.WARNING):
        w = compute_serial_interval(mean=10.0, std=5.0, k_max=5)
    assert w.sum() == pytest.approx(1.0)
    assert any("truncated" in rec.message for rec in caplog.records)


def test_large_tail_warns_on_every_call(caplog):
    """
    Repeated calls hit the cached weights but still report the truncation
    """
    compute_serial_interval(mean=9.0, std=4.0, k_max=4)
    caplog.clear()
    with caplog.at_level(logging.WARNING):
        first = compute_serial_interval(mean=9.0, std=4.0, k_max=4)
        second = compute_serial_interval(mean=9.0, std=4.0, k_max=4)
    assert first is second
    assert sum("truncated" in rec.message for rec in caplog.records) == 2


def test_default_parameters_do_not_warn(caplog):
    with caplog.at_level(logging.WARNING):
        compute_serial_interval(mean=3.96, std=4.75, k_max=18)
    assert not caplog.records


def test_large_tail_strict_raises():
    with pytest.raises(ValueError):
        compute_serial_interval(mean=10.0, std=5.0, k_max=5, strict=True)
