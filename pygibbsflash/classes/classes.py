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

from enum import Enum

class eos_family(Enum):  # Cubic equation of state family
    PR = 0
    SRK = 1
    RK = 2
    VDW = 3

class de_init(Enum):  # Initial population sampling for differential evolution
    LHS = 0
    SOBOL = 1
    HALTON = 2
    RANDOM = 3

class_dic = {
    "eosfamily": eos_family,
    "deinit": de_init,
}
