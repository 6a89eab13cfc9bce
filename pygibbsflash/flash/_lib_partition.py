"""
Partition codec for the differential evolution flash
====================================================
Maps a decision vector with every entry in (0, 1) onto a non-negative
allocation of each species' feed moles across a fixed number of phases.

We must find a way of uniquely converting a vector of numbers, each in
(0, 1), to a partition. The mapping has to be 1-to-1: if many inputs map to
the same physical state there will be multiple global optima and the
global optimizer will perform poorly.

Each species gets (numphases - 1) dividers. The first divider is the fraction
of the feed placed in phase 1, the next the fraction of what is left placed in
phase 2, and so on; the last phase takes the remainder. Column sums of the
allocation therefore equal the feed for any dividers, and every point of the
open unit cube gives a distinct allocation.

Decode only: nothing here maps an allocation back to dividers.
"""

from typing import Tuple

import numpy as np
import numpy.typing as npt


def decision_size(numphases: int, nc: int) -> int:
    """ Length of the decision vector for numphases phases and nc species """
    return (numphases - 1) * nc


def dividers_from_vector(vector: npt.ArrayLike, numphases: int, nc: int) -> np.ndarray:
    """
    Reshape a flat decision vector into the (numphases - 1, nc) divider matrix.
    Row i holds the dividers of phase i + 1 for every species.
    """
    vector = np.asarray(vector, dtype=float)
    if vector.size != decision_size(numphases, nc):
        raise ValueError(f"Decision vector of length {vector.size} does not match "
                         f"{numphases} phases x {nc} species ({decision_size(numphases, nc)} values expected)")
    return vector.reshape((numphases - 1, nc))


def allocate(dividers: np.ndarray, n: np.ndarray) -> np.ndarray:
    """
    Nested-interval allocation of feed moles n across phases.

    Args:
        dividers: (numphases - 1, nc) matrix, entries in (0, 1)
        n: Feed mole amounts (nc,), entries >= 0

    Returns:
        nvals: (numphases, nc) mole amounts, column sums equal n
    """
    n = np.asarray(n, dtype=float)
    dividers = np.atleast_2d(np.asarray(dividers, dtype=float))
    nphm1, nc = dividers.shape
    nvals = np.empty((nphm1 + 1, nc))
    remaining = n.copy()
    for i in range(nphm1):
        nvals[i] = dividers[i] * remaining
        remaining = n - np.sum(nvals[:i + 1], axis=0)
    nvals[-1] = n - np.sum(nvals[:-1], axis=0)
    return nvals


def mole_fractions(nvals: np.ndarray) -> np.ndarray:
    """
    Row-normalise an allocation matrix into mole fractions.
    Rows for phases holding no material are NaN.
    """
    nvals = np.atleast_2d(np.asarray(nvals, dtype=float))
    totals = np.sum(nvals, axis=1, keepdims=True)
    x = np.full(nvals.shape, np.nan)
    has_moles = totals[:, 0] != 0
    x[has_moles] = nvals[has_moles] / totals[has_moles]
    return x


def partition(dividers: np.ndarray, n: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Decode dividers into phase compositions and mole amounts.

    Args:
        dividers: (numphases - 1, nc) matrix, entries in (0, 1)
        n: Feed mole amounts (nc,)

    Returns:
        x: (numphases, nc) mole fractions (NaN rows for empty phases)
        nvals: (numphases, nc) mole amounts
    """
    nvals = allocate(dividers, n)
    return mole_fractions(nvals), nvals
