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


# Constants
R = 8.314462618  # Universal gas constant, J/(mol·K)
P_REF = 101325.0  # Reference pressure for the ideal gas standard state (Pa)
BIGNUM = 1e300  # Objective value substituted for a failed Gibbs energy evaluation

# Differential evolution flash defaults
DEFAULT_SEED = 373
DEFAULT_POPULATION = 50
MIN_POPULATION = 5  # scipy differential_evolution needs at least 5 members
STEPS_PER_PHASE = 1e4  # Default evaluation budget per additional phase
