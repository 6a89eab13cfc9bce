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

import numpy as np
import numpy.typing as npt
from typing import Union, List, Optional

def convert_to_numpy(input_data) -> np.ndarray:
    # Convert input data to a float numpy array ensuring it is always sizeable
    if isinstance(input_data, np.ndarray):
        return input_data.astype(float, copy=False)
    else:
        # Convert list, tuple, scalar, or other types to numpy array
        # Ensuring even scalars become arrays with one element
        return np.atleast_1d(np.asarray(input_data, dtype=float))

def check_state(p: float, T: float) -> None:
    """ Reject non-physical pressure or temperature """
    if not np.isfinite(p) or p <= 0:
        raise ValueError(f"Pressure must be positive and finite, got {p}")
    if not np.isfinite(T) or T <= 0:
        raise ValueError(f"Temperature must be positive and finite, got {T}")

def check_moles(n: Union[float, List[float], npt.ArrayLike], nc: Optional[int] = None) -> np.ndarray:
    """ Validate a feed mole vector and return it as a 1-D float array.

    The vector must be non-empty, finite, non-negative and carry a positive total.
    When nc is given the vector length must match it.
    """
    n = convert_to_numpy(n)
    if n.ndim != 1:
        raise ValueError(f"Mole amounts must be a 1-D sequence, got shape {n.shape}")
    if n.size == 0:
        raise ValueError("At least one species is required")
    if nc is not None and n.size != nc:
        raise ValueError(f"Expected {nc} mole amounts to match the model, got {n.size}")
    if not np.all(np.isfinite(n)):
        raise ValueError("Mole amounts must be finite")
    if np.any(n < 0):
        raise ValueError(f"Mole amounts must be non-negative, got {n}")
    if np.sum(n) <= 0:
        raise ValueError("Total feed moles must be positive")
    return n

def check_count(value, name: str, minimum: int = 1) -> int:
    """ Return value as an int, rejecting non-integral or too-small counts.
    Integral floats such as 1e4 are accepted.
    """
    try:
        ivalue = int(value)
    except (TypeError, ValueError, OverflowError):
        raise ValueError(f"{name} must be an integer, got {value!r}") from None
    if ivalue != value:
        raise ValueError(f"{name} must be an integer, got {value!r}")
    if ivalue < minimum:
        raise ValueError(f"{name} must be at least {minimum}, got {value}")
    return ivalue
