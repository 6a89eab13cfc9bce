"""
Budgeted global optimizer driver
================================
Minimizes a scalar objective over a bounded box with scipy's differential
evolution, under two independent stopping conditions:

  - max_evaluations: hard cap on objective calls. The DE generation count is
    chosen so population_size * (generations + 1) <= max_evaluations, and the
    BudgetedObjective wrapper refuses any call beyond the cap.
  - time_limit: wall-clock seconds. Checked before every objective call and
    between generations. On expiry the best point found so far is returned.

No convergence tolerance is used (tol = atol = 0). Given the same seed,
bounds and objective, and workers == 1, the sequence of evaluated points is
reproducible.
"""

import logging
import threading
import time
import warnings
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np
from scipy.optimize import differential_evolution
from scipy.stats import qmc

from pygibbsflash.classes import de_init
from pygibbsflash.validate import validate_methods
from pygibbsflash.constants import BIGNUM, DEFAULT_SEED, DEFAULT_POPULATION, MIN_POPULATION
from pygibbsflash.shared_fns import check_count

logger = logging.getLogger(__name__)


@dataclass
class OptimizerResult:
    x: np.ndarray          # Best point evaluated
    fun: float             # Objective value at x
    nfev: int              # Objective calls actually performed
    nit: int               # DE generations completed
    elapsed: float         # Wall-clock seconds
    stop_reason: str       # 'max_evaluations', 'time_limit' or 'converged'
    history: Optional[List[np.ndarray]] = field(default=None, repr=False)


class BudgetedObjective:
    """
    Wraps an objective with an evaluation cap and a wall-clock deadline, and
    keeps the best point actually evaluated. Calls past either limit return
    the sentinel without invoking the objective. The very first call is
    always evaluated so a result exists.
    """

    def __init__(self, func: Callable[[np.ndarray], float], max_evaluations: int,
                 time_limit: float = np.inf, sentinel: float = BIGNUM, history: bool = False):
        self.func = func
        self.max_evaluations = max_evaluations
        self.time_limit = time_limit
        self.sentinel = sentinel
        self.history = [] if history else None
        self.nfev = 0
        self.best_x = None
        self.best_f = np.inf
        self.expired = False
        self._lock = threading.Lock()
        self.start = time.perf_counter()

    @property
    def elapsed(self) -> float:
        return time.perf_counter() - self.start

    @property
    def exhausted(self) -> bool:
        return self.nfev >= self.max_evaluations

    def should_stop(self) -> bool:
        if self.elapsed > self.time_limit:
            self.expired = True
        return self.expired or self.exhausted

    def __call__(self, x: np.ndarray) -> float:
        with self._lock:
            if self.nfev > 0 and self.should_stop():
                return self.sentinel
            self.nfev += 1
            if self.history is not None:
                self.history.append(np.array(x, dtype=float))
        f = self.func(x)
        with self._lock:
            if self.best_x is None or f < self.best_f:
                self.best_x = np.array(x, dtype=float)
                self.best_f = f
        return f


def initial_population(method, population_size: int, dim: int, seed: Optional[int]) -> np.ndarray:
    """
    Seeded initial population in the unit hypercube, shape (population_size, dim).
    """
    method = validate_methods(['deinit'], [method])
    if method == de_init.LHS:
        return qmc.LatinHypercube(d=dim, rng=seed).random(population_size)
    if method == de_init.SOBOL:
        with warnings.catch_warnings():
            # Sobol balance warning for non power-of-two sizes
            warnings.simplefilter('ignore', UserWarning)
            return qmc.Sobol(d=dim, scramble=True, rng=seed).random(population_size)
    if method == de_init.HALTON:
        return qmc.Halton(d=dim, scramble=True, rng=seed).random(population_size)
    return np.random.default_rng(seed).random((population_size, dim))


def minimize(objective: Callable[[np.ndarray], float], bounds: Sequence[Tuple[float, float]],
             population_size: int = DEFAULT_POPULATION, max_evaluations: int = 10000,
             time_limit: float = np.inf, seed: Optional[int] = DEFAULT_SEED,
             init=de_init.LHS, strategy: str = 'best1bin', mutation=(0.5, 1.0),
             recombination: float = 0.7, workers: int = 1, sentinel: float = BIGNUM,
             history: bool = False) -> OptimizerResult:
    """
    Minimize objective over a bounded box by differential evolution.

    Args:
        objective: f(x) -> float. Must not raise for any x inside bounds
        bounds: Sequence of (low, high) per dimension
        population_size: DE population size (>= 5)
        max_evaluations: Maximum objective calls
        time_limit: Wall-clock limit in seconds (np.inf for none)
        seed: Seed for the initial population and the DE search
        init: Initial population sampling (de_init member or name)
        strategy, mutation, recombination: Passed to scipy differential_evolution
        workers: Concurrent objective evaluations per generation (threads)
        sentinel: Value returned for calls refused by the budget
        history: Record every evaluated point

    Returns:
        OptimizerResult
    """
    bounds = [tuple(b) for b in bounds]
    dim = len(bounds)
    if dim == 0:
        raise ValueError("At least one decision variable is required")
    population_size = check_count(population_size, 'population_size', MIN_POPULATION)
    max_evaluations = check_count(max_evaluations, 'max_evaluations')
    workers = check_count(workers, 'workers')
    if not time_limit > 0:
        raise ValueError(f"time_limit must be positive, got {time_limit}")

    lo = np.array([b[0] for b in bounds], dtype=float)
    hi = np.array([b[1] for b in bounds], dtype=float)
    pop = lo + initial_population(init, population_size, dim, seed) * (hi - lo)
    maxiter = max(0, max_evaluations // population_size - 1)

    budget = BudgetedObjective(objective, max_evaluations, time_limit, sentinel, history)

    def callback(intermediate_result):
        return budget.should_stop()

    logger.debug("DE over %d variables: population %d, %d generations, %d evaluations, time limit %s s",
                 dim, population_size, maxiter, max_evaluations, time_limit)

    executor = ThreadPoolExecutor(max_workers=workers) if workers > 1 else None
    try:
        with np.errstate(over='ignore', invalid='ignore'):
            res = differential_evolution(budget, bounds, strategy=strategy, maxiter=maxiter,
                                         tol=0.0, atol=0.0, mutation=mutation,
                                         recombination=recombination, rng=seed,
                                         callback=callback, polish=False, init=pop,
                                         updating='deferred',
                                         workers=executor.map if executor else 1)
    finally:
        if executor is not None:
            executor.shutdown()

    if budget.expired:
        stop_reason = 'time_limit'
        logger.info("DE time limit of %s s reached after %d evaluations", time_limit, budget.nfev)
    elif budget.exhausted or res.nit >= maxiter:
        stop_reason = 'max_evaluations'
    else:
        stop_reason = 'converged'

    return OptimizerResult(x=budget.best_x, fun=float(budget.best_f), nfev=budget.nfev,
                           nit=int(res.nit), elapsed=budget.elapsed,
                           stop_reason=stop_reason, history=budget.history)
