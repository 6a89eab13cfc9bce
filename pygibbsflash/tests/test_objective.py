#!/usr/bin/env python3
"""
Validation tests for the Gibbs energy objective.
Run with: python3 -m pytest pygibbsflash/tests/ -v
Or standalone: python3 pygibbsflash/tests/test_objective.py
"""

import sys
import os
import warnings
import numpy as np

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))
from pygibbsflash.constants import R, BIGNUM
from pygibbsflash.eos import as_eos, IdealMixture
from pygibbsflash.flash import obj_de_tp_flash, GibbsObjective

P = 1e5
T = 300.0

# =============================================================================
# Normalisation
# =============================================================================

def test_sum_over_phases_divided_by_rt():
    """Objective is the sum of phase Gibbs energies over RT"""
    eos = as_eos(lambda p, t, n: 1000.0, nc=2)
    val = obj_de_tp_flash(eos, P, T, [1.0, 1.0], np.full((2, 2), 0.5), numphases=3)
    assert abs(val - 3000.0 / (R * T)) < 1e-12, f"Got {val}"

def test_eos_called_once_per_phase():
    """The EoS sees every phase exactly once, with that phase's moles"""
    seen = []
    def stub(p, t, n):
        seen.append(np.array(n))
        return 0.0
    obj_de_tp_flash(as_eos(stub, nc=2), P, T, [1.0, 2.0], [[0.5, 0.25]], numphases=2)
    assert len(seen) == 2
    assert np.allclose(seen[0], [0.5, 0.5])
    assert np.allclose(seen[1], [0.5, 1.5])

def test_ideal_single_composition_split():
    """Equal-composition split of an equimolar binary gives 2 ln(1/2)"""
    eos = IdealMixture(['A', 'B'])
    val = obj_de_tp_flash(eos, P, T, [1.0, 1.0], [0.3, 0.3], numphases=2)
    assert abs(val - 2 * np.log(0.5)) < 1e-12, f"Got {val}"

def test_ideal_uneven_split_is_higher():
    """Demixing raises the ideal-solution Gibbs energy"""
    eos = IdealMixture(['A', 'B'])
    mixed = obj_de_tp_flash(eos, P, T, [1.0, 1.0], [0.5, 0.5], numphases=2)
    split = obj_de_tp_flash(eos, P, T, [1.0, 1.0], [0.8, 0.2], numphases=2)
    assert split > mixed

# =============================================================================
# Sentinel substitution
# =============================================================================

def test_nan_eos_gives_sentinel():
    """An EoS that always fails yields the sentinel, not NaN or an exception"""
    eos = as_eos(lambda p, t, n: np.nan, nc=2)
    with warnings.catch_warnings():
        warnings.simplefilter('error')
        val = obj_de_tp_flash(eos, P, T, [1.0, 1.0], [0.5, 0.5], numphases=2)
    assert val == BIGNUM

def test_custom_sentinel():
    eos = as_eos(lambda p, t, n: np.nan, nc=1)
    assert obj_de_tp_flash(eos, P, T, [1.0], [0.5], numphases=2, sentinel=1e10) == 1e10

def test_single_failed_phase_gives_sentinel():
    """Failure of one phase discards the whole partition"""
    eos = as_eos(lambda p, t, n: np.nan if np.sum(n) < 0.5 else -1.0, nc=1)
    assert obj_de_tp_flash(eos, P, T, [1.0], [0.1], numphases=2) == BIGNUM
    assert obj_de_tp_flash(eos, P, T, [1.0], [0.5], numphases=2) == -2.0 / (R * T)

def test_infinite_eos_gives_sentinel():
    eos = as_eos(lambda p, t, n: -np.inf, nc=1)
    assert obj_de_tp_flash(eos, P, T, [1.0], [0.5], numphases=2) == BIGNUM

def test_empty_phase_reaches_eos():
    """Zero-amount phases are passed to the EoS, not rejected"""
    seen = []
    def stub(p, t, n):
        seen.append(np.sum(n))
        return 0.0
    val = obj_de_tp_flash(as_eos(stub, nc=2), P, T, [0.0, 0.0], [0.5, 0.5], numphases=2)
    assert val == 0.0
    assert seen == [0.0, 0.0]

# =============================================================================
# Bound objective
# =============================================================================

def test_gibbs_objective_matches_function():
    eos = IdealMixture(['A', 'B', 'C'])
    n = np.array([1.0, 2.0, 0.5])
    obj = GibbsObjective(eos, P, T, n, numphases=3)
    vec = np.array([0.1, 0.5, 0.9, 0.3, 0.7, 0.2])
    assert obj.dim == 6
    assert obj(vec) == obj_de_tp_flash(eos, P, T, n, vec.reshape(2, 3), numphases=3)

def test_gibbs_objective_feed_is_read_only():
    n = np.array([1.0, 1.0])
    obj = GibbsObjective(IdealMixture(['A', 'B']), P, T, n, numphases=2)
    n[0] = 5.0
    assert obj.n[0] == 1.0, "Objective must own its copy of the feed"
    try:
        obj.n[0] = 2.0
        assert False, "Bound feed should be read-only"
    except ValueError:
        pass


if __name__ == '__main__':
    print("=" * 70)
    print("OBJECTIVE VALIDATION TESTS")
    print("=" * 70)

    tests = [v for k, v in globals().items() if k.startswith('test_')]
    passed = 0
    failed = 0

    for test in tests:
        try:
            test()
            passed += 1
            print(f"  PASS: {test.__name__}")
        except Exception as e:
            failed += 1
            print(f"  FAIL: {test.__name__}: {e}")

    print(f"\n{'=' * 70}")
    print(f"Results: {passed} passed, {failed} failed out of {passed + failed}")

    print("=" * 70)
    sys.exit(1 if failed > 0 else 0)
