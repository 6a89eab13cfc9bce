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

from dataclasses import dataclass, astuple, fields
from typing import List

import pandas as pd
from tabulate import tabulate


@dataclass(frozen=True)
class ComponentProperties:
    """Critical properties used by the cubic equations of state."""
    name: str
    Tc: float      # Critical temperature (K)
    Pc: float      # Critical pressure (Pa)
    omega: float   # Acentric factor
    MW: float      # Molecular weight (g/mol)


# Soreide & Whitson (1992) Table 5 values, H2 from NIST
COMPONENTS = {
    'H2O': ComponentProperties('Water', 647.3, 22.12e6, 0.3434, 18.015),
    'H2': ComponentProperties('Hydrogen', 33.145, 1.2964e6, -0.219, 2.016),
    'CO2': ComponentProperties('Carbon Dioxide', 304.2, 7.38e6, 0.2273, 44.01),
    'H2S': ComponentProperties('Hydrogen Sulfide', 373.2, 8.94e6, 0.1081, 34.082),
    'N2': ComponentProperties('Nitrogen', 126.1, 3.40e6, 0.0403, 28.014),
    'CH4': ComponentProperties('Methane', 190.6, 4.60e6, 0.0108, 16.043),
    'C2H6': ComponentProperties('Ethane', 305.4, 4.88e6, 0.0986, 30.07),
    'C3H8': ComponentProperties('Propane', 369.8, 4.25e6, 0.1524, 44.097),
    'iC4H10': ComponentProperties('i-Butane', 408.1, 3.65e6, 0.1770, 58.123),
    'nC4H10': ComponentProperties('n-Butane', 425.2, 3.80e6, 0.1931, 58.123),
    'iC5H12': ComponentProperties('i-Pentane', 460.4, 3.38e6, 0.2270, 72.15),
    'nC5H12': ComponentProperties('n-Pentane', 469.6, 3.37e6, 0.2510, 72.15),
    'nC6H14': ComponentProperties('n-Hexane', 507.4, 3.01e6, 0.2990, 86.18),
    'nC7H16': ComponentProperties('n-Heptane', 540.3, 2.74e6, 0.3490, 100.2),
    'nC8H18': ComponentProperties('n-Octane', 568.8, 2.49e6, 0.3980, 114.2),
    'nC10H22': ComponentProperties('n-Decane', 617.7, 2.10e6, 0.4900, 142.3),
}


class component_library:
    def __init__(self):
        self.cols = [f.name for f in fields(ComponentProperties)]
        self.df = pd.DataFrame([astuple(c) for c in COMPONENTS.values()],
                               index=list(COMPONENTS.keys()), columns=self.cols)
        self.df.index.name = 'Component'
        self.components = list(COMPONENTS.keys())
        self._lookup = {c.upper(): c for c in self.components}

    def key(self, comp: str) -> str:
        try:
            return self._lookup[comp.upper()]
        except KeyError:
            raise ValueError(f"Component '{comp}' not in library. Choose from {self.components}")

    def get(self, comp: str) -> ComponentProperties:
        return COMPONENTS[self.key(comp)]

    def prop(self, comp: str, prop: str):
        comp = self.key(comp)
        if prop.upper() == 'ALL':
            return list(astuple(COMPONENTS[comp]))
        props = {c.upper(): c for c in self.cols}
        if prop.upper() not in props:
            raise ValueError(f"Property '{prop}' not in library. Choose from {self.cols}")
        return getattr(COMPONENTS[comp], props[prop.upper()])

    def critical(self, names: List[str]):
        """ Return (Tc, Pc, omega) lists for an ordered set of component names """
        props = [self.get(name) for name in names]
        return [c.Tc for c in props], [c.Pc for c in props], [c.omega for c in props]

    def table(self) -> str:
        return tabulate(self.df, headers='keys', tablefmt='simple')

comp_library = component_library()
