#!/usr/bin/python3
# -*- coding: utf-8 -*-

"""
    pyGibbsFlash - Multiphase flash by global Gibbs energy minimisation
              Copyright (C) 2022, Mark Burgoyne

    This program is free software: you can redistribute it and/or modify
    it under the terms of the GNU General Public License as published by
    the Free Software Foundation, either version 3 of the License, or
    (at your option) any later version.

    This program is distributed in the hope that it will be useful,
    but WITHOUT ANY WARRANTY; without even the implied warranty of
    MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
    GNU General Public License for more details.

    The GNU General Public License can be found in the LICENSE directory,
    and at  <https://www.gnu.org/licenses/>.

          Contact author at mark.w.burgoyne@gmail.com
"""

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np
import numpy.typing as npt
import pandas as pd
from tabulate import tabulate

from pygibbsflash.classes import de_init
from pygibbsflash.validate import validate_methods
from pygibbsflash.constants import R, BIGNUM, DEFAULT_SEED, DEFAULT_POPULATION, MIN_POPULATION, STEPS_PER_PHASE
from pygibbsflash.shared_fns import check_state, check_moles, check_count
from pygibbsflash.eos import as_eos
from pygibbsflash.flash._lib_partition import partition, allocate, mole_fractions, decision_size, dividers_from_vector
from pygibbsflash.flash._lib_optimizer import minimize

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DETPFlash:
    """
    Differential evolution TP flash settings.

    Multiphase TP flash by global minimisation of the Gibbs free energy. The
    user assumes a number of phases, numphases. If the true number of phases
    is smaller, the minimum should show either (a) identical composition in
    two or more phases, or (b) one phase with a negligible total number of
    moles. If the true number is larger, a thermodynamically unstable solution
    is returned.

    The optimizer stops at max_evaluations objective calls or at time_limit
    seconds, whichever comes first, and always returns its best candidate.

    numphases: Assumed number of phases (>= 2)
    max_evaluations: Objective evaluation budget, default 1e4 * (numphases - 1)
    population_size: DE population size (>= 5)
    time_limit: Wall-clock limit in seconds
    seed: Seed for the initial population and the search
    """
    numphases: int = 2
    max_evaluations: Optional[int] = None
    population_size: int = DEFAULT_POPULATION
    time_limit: float = np.inf
    seed: Optional[int] = DEFAULT_SEED
    init: de_init = de_init.LHS
    strategy: str = 'best1bin'
    mutation: Tuple[float, float] = (0.5, 1.0)
    recombination: float = 0.7
    workers: int = 1
    sentinel: float = BIGNUM

    def __post_init__(self):
        object.__setattr__(self, 'numphases', check_count(self.numphases, 'numphases', 2))
        if self.max_evaluations is None:
            object.__setattr__(self, 'max_evaluations', int(STEPS_PER_PHASE * (self.numphases - 1)))
        object.__setattr__(self, 'max_evaluations', check_count(self.max_evaluations, 'max_evaluations'))
        object.__setattr__(self, 'population_size',
                           check_count(self.population_size, 'population_size', MIN_POPULATION))
        object.__setattr__(self, 'workers', check_count(self.workers, 'workers'))
        if not self.time_limit > 0:
            raise ValueError(f"time_limit must be positive, got {self.time_limit}")
        if not (np.isfinite(self.sentinel) and self.sentinel > 0):
            raise ValueError(f"sentinel must be a large positive finite value, got {self.sentinel}")
        object.__setattr__(self, 'init', validate_methods(['deinit'], [self.init]))


def numphases(method: DETPFlash) -> int:
    return method.numphases


def obj_de_tp_flash(model, p: float, T: float, n: npt.ArrayLike, dividers: npt.ArrayLike,
                    numphases: int, sentinel: float = BIGNUM) -> float:
    """
    Gibbs free energy / RT of the partition encoded by dividers.

    The phase amounts are rebuilt from the dividers into arrays owned by this
    call, then each phase is passed to the EoS. If the EoS fails for any
    phase (NaN, or a non-finite total) the sentinel is returned so the point
    is discarded by the optimizer.

    Args:
        model: EoS evaluator with gibbs_free_energy(p, T, n)
        p: Pressure (Pa)
        T: Temperature (K)
        n: Feed mole amounts
        dividers: Flat decision vector or (numphases - 1, nc) divider matrix
        numphases: Number of phases
        sentinel: Value returned for failed evaluations

    Returns:
        G / (R T), dimensionless
    """
    n = np.asarray(n, dtype=float)
    dividers = np.reshape(np.asarray(dividers, dtype=float), (numphases - 1, n.size))
    nvals = allocate(dividers, n)
    G = 0.0
    with np.errstate(all='ignore'):
        for i in range(numphases):
            G += model.gibbs_free_energy(p, T, nvals[i])
        G = G / (R * T)
    if not np.isfinite(G):
        return sentinel
    return float(G)


class GibbsObjective:
    """ Binds the read-only flash arguments so the optimizer sees f(vector) -> float """

    def __init__(self, model, p: float, T: float, n: np.ndarray, numphases: int, sentinel: float = BIGNUM):
        self.model = model
        self.p = p
        self.T = T
        self.n = np.array(n, dtype=float)
        self.n.flags.writeable = False
        self.numphases = numphases
        self.sentinel = sentinel
        self.dim = decision_size(numphases, self.n.size)

    def __call__(self, vector: np.ndarray) -> float:
        dividers = dividers_from_vector(vector, self.numphases, self.n.size)
        return obj_de_tp_flash(self.model, self.p, self.T, self.n, dividers, self.numphases, self.sentinel)


@dataclass(frozen=True)
class FlashResult:
    x: np.ndarray            # (numphases, nc) mole fractions, NaN rows for empty phases
    n: np.ndarray            # (numphases, nc) mole amounts
    value: float             # G / RT at the solution
    p: float
    T: float
    nfev: int = 0
    elapsed: float = 0.0
    stop_reason: str = 'max_evaluations'
    components: List[str] = field(default_factory=list)

    def __post_init__(self):
        for name in ('x', 'n'):
            arr = np.array(getattr(self, name), dtype=float)
            arr.flags.writeable = False
            object.__setattr__(self, name, arr)
        if not self.components:
            object.__setattr__(self, 'components', [f"C{i + 1}" for i in range(self.n.shape[1])])

    @property
    def numphases(self) -> int:
        return self.n.shape[0]

    @property
    def phase_amounts(self) -> np.ndarray:
        return np.sum(self.n, axis=1)

    @property
    def phase_fractions(self) -> np.ndarray:
        """ Phase mole fractions of the feed (beta) """
        amounts = self.phase_amounts
        return amounts / np.sum(amounts)

    @property
    def gibbs_per_mole(self) -> float:
        """ G / (R T) per mole of feed """
        return self.value / float(np.sum(self.n))

    def to_dataframe(self) -> pd.DataFrame:
        df = pd.DataFrame(self.x, columns=self.components,
                          index=[f"Phase {i + 1}" for i in range(self.numphases)])
        df.insert(0, 'Beta', self.phase_fractions)
        df.insert(0, 'Moles', self.phase_amounts)
        return df

    def summary(self) -> str:
        lines = [f"p = {self.p:g} Pa, T = {self.T:g} K",
                 f"G/RT = {self.value:.6g} ({self.gibbs_per_mole:.6g} per mole)",
                 f"{self.nfev} evaluations in {self.elapsed:.3g} s, stopped on {self.stop_reason}",
                 tabulate(self.to_dataframe(), headers='keys', floatfmt='.6g')]
        return '\n'.join(lines)


def tp_flash(model, p: float, T: float, n: npt.ArrayLike, method: Optional[DETPFlash] = None) -> FlashResult:
    """
    Multiphase flash at fixed pressure and temperature by global minimisation
    of the total Gibbs free energy with differential evolution.

    Args:
        model: EoS evaluator with gibbs_free_energy(p, T, n), or a callable f(p, T, n),
               returning NaN on failure
        p: Pressure (Pa)
        T: Temperature (K)
        n: Feed mole amounts, one per component
        method: DETPFlash settings (defaults to two phases)

    Returns:
        FlashResult with phase compositions, mole amounts and G/RT

    Raises:
        ValueError: non-positive p or T, invalid feed, or invalid settings
    """
    if method is None:
        method = DETPFlash()
    check_state(p, T)
    nc_model = len(model) if hasattr(model, '__len__') else None
    n = check_moles(n, nc_model)
    model = as_eos(model, nc=n.size)
    nc = n.size
    numph = method.numphases

    objective = GibbsObjective(model, p, T, n, numph, method.sentinel)
    logger.debug("DE TP flash: %d phases, %d components, p = %s Pa, T = %s K", numph, nc, p, T)

    opt = minimize(objective, [(0.0, 1.0)] * objective.dim,
                   population_size=method.population_size,
                   max_evaluations=method.max_evaluations,
                   time_limit=method.time_limit, seed=method.seed, init=method.init,
                   strategy=method.strategy, mutation=method.mutation,
                   recombination=method.recombination, workers=method.workers,
                   sentinel=method.sentinel)

    # Fresh decode of the best point; no evaluation scratch is reused
    x, nvals = partition(dividers_from_vector(opt.x, numph, nc), n)

    if opt.fun >= method.sentinel:
        logger.warning("DE TP flash found no partition the EoS could evaluate; result is not physical")
    logger.info("DE TP flash finished: G/RT = %.6g, %d evaluations, %.3g s, stopped on %s",
                opt.fun, opt.nfev, opt.elapsed, opt.stop_reason)

    components = list(getattr(model, 'components', []))
    return FlashResult(x=x, n=nvals, value=opt.fun, p=p, T=T, nfev=opt.nfev,
                       elapsed=opt.elapsed, stop_reason=opt.stop_reason, components=components)


def de_flash(model, p: float, T: float, n: npt.ArrayLike, numphases: int = 2, **kwargs) -> FlashResult:
    """ Convenience form of tp_flash; keyword arguments are DETPFlash settings """
    return tp_flash(model, p, T, n, DETPFlash(numphases=numphases, **kwargs))


def merge_phases(result: FlashResult, xtol: float = 1e-3, ntol: float = 1e-8) -> FlashResult:
    """
    Collapse a flash result onto its distinct phases.

    Phases holding less than ntol of the feed are dropped, their moles going
    to the kept phase of closest composition. A phase joins a group when its
    composition agrees within xtol (max absolute difference) with the
    mole-weighted composition of the group so far. G/RT is unchanged.
    """
    amounts = result.phase_amounts
    total = np.sum(amounts)
    keep = [i for i in range(result.numphases) if amounts[i] > ntol * total]
    if not keep:
        keep = [int(np.argmax(amounts))]

    groups = []
    for i in keep:
        for g in groups:
            if np.max(np.abs(result.x[i] - mole_fractions(np.sum(result.n[g], axis=0))[0])) < xtol:
                g.append(i)
                break
        else:
            groups.append([i])

    nvals = np.array([np.sum(result.n[g], axis=0) for g in groups])
    xgroups = mole_fractions(nvals)
    for i in range(result.numphases):
        if i in keep or not amounts[i] > 0:
            continue
        dist = np.max(np.abs(result.x[i] - xgroups), axis=1)
        nvals[int(np.argmin(dist))] += result.n[i]

    return dataclasses.replace(result, x=mole_fractions(nvals), n=nvals)
