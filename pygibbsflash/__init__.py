"""
pygibbsflash
===================================

-------------------------------------------------------------
Multiphase flash by global minimisation of Gibbs free energy
-------------------------------------------------------------

Given a feed composition, pressure and temperature, finds the split of the
feed into an assumed number of phases that minimises total Gibbs free energy.
The partition of each species across phases is encoded as a vector in the
open unit cube and searched with differential evolution, so no initial
guess and no derivatives are needed, and any equation of state that can
return a phase Gibbs energy can be used.

Includes;

- Differential evolution multiphase TP flash (flash)
- Ideal mixture and cubic (PR, SRK, RK, vdW) Gibbs energy evaluators (eos)
- Critical properties for common reservoir and process components (library)

"""

submodules = [
    'classes',
    'constants',
    'eos',
    'flash',
    'library',
    'shared_fns',
    'validate'
]

__all__ = submodules 

import importlib

def __dir__():
    return __all__


def __getattr__(name):
    if name in submodules:
        return importlib.import_module(f'pygibbsflash.{name}')
    else:
        try:
            return globals()[name]
        except KeyError:
            raise AttributeError(
                f"Module 'pygibbsflash' has no attribute '{name}'"
            )
