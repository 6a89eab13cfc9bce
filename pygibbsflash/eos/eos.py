"""
Equation of state evaluators for the Gibbs energy minimisation flash
====================================================================
The flash engine only needs one thing from a thermodynamic model: the Gibbs
free energy of a single candidate phase, gibbs_free_energy(p, T, n), in Joules,
with the phase volume solved internally. When no physical volume root exists
the evaluator returns NaN rather than raising, so that a single infeasible
partition never aborts a population-based search.

Two reference evaluators are provided:
  - IdealMixture: ideal solution, G = sum(n_i g0_i) + RT sum(n_i ln x_i)
  - CubicEoS: two-parameter cubic (PR, SRK, RK, vdW) with van der Waals
    one-fluid mixing rules and minimum-Gibbs root selection

Gibbs energies are referenced to the pure component ideal gas at P_REF and
the system temperature. Those reference chemical potentials are identical in
every phase, so they cancel in any mass-balanced comparison of partitions.

Units: p in Pa, T in K, n in mol, G in J.
"""

from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np
import numpy.typing as npt

from pygibbsflash.classes import eos_family
from pygibbsflash.validate import validate_methods
from pygibbsflash.constants import R, P_REF
from pygibbsflash.library import comp_library


# =============================================================================
# Evaluator contract
# =============================================================================
class EoSModel(ABC):
    """ Black-box Gibbs free energy evaluator for one phase at (p, T, n) """

    def __init__(self, components: Sequence[str]):
        self.components = list(components)

    def __len__(self) -> int:
        return len(self.components)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.components})"

    @abstractmethod
    def gibbs_free_energy(self, p: float, T: float, n: npt.ArrayLike) -> float:
        """ Gibbs free energy (J) of a phase holding mole amounts n. NaN on failure. """


class CallableEoS(EoSModel):
    """ Adapts a plain function f(p, T, n) -> G to the EoSModel contract """

    def __init__(self, func: Callable[[float, float, np.ndarray], float], components: Sequence[str]):
        super().__init__(components)
        self.func = func

    def gibbs_free_energy(self, p: float, T: float, n: npt.ArrayLike) -> float:
        return self.func(p, T, np.asarray(n, dtype=float))


def as_eos(func, nc: Optional[int] = None, components: Optional[Sequence[str]] = None) -> EoSModel:
    """
    Return an EoSModel for func. Objects already honouring the contract are
    returned unchanged; plain callables are wrapped.

    Args:
        func: EoSModel, object with a gibbs_free_energy method, or callable f(p, T, n)
        nc: Number of components (used to name them when components is not given)
        components: Component names

    Returns:
        EoSModel (or the original object if it already has gibbs_free_energy)
    """
    if hasattr(func, 'gibbs_free_energy'):
        return func
    if not callable(func):
        raise ValueError(f"Expected an EoS model or a callable, got {type(func).__name__}")
    if components is None:
        if nc is None:
            raise ValueError("Either nc or components is required to wrap a callable")
        components = [f"C{i + 1}" for i in range(nc)]
    return CallableEoS(func, components)


def ideal_mixing(n: npt.ArrayLike) -> float:
    """
    Ideal mixing term sum(n_i ln x_i) with 0 ln 0 taken as 0.
    Returns NaN when the phase holds no material.
    """
    n = np.asarray(n, dtype=float)
    ntot = np.sum(n)
    if not ntot > 0:
        return np.nan
    nz = n[n > 0]
    return float(np.dot(nz, np.log(nz / ntot)))


# =============================================================================
# Ideal solution
# =============================================================================
class IdealMixture(EoSModel):
    """
    Ideal solution: G = sum(n_i g0_i) + RT sum(n_i ln x_i)

    With the default g0 = 0 any split of a feed into phases of equal
    composition has the same Gibbs energy as the single phase, and any other
    split is higher.
    """

    def __init__(self, components: Sequence[str], g0: Optional[npt.ArrayLike] = None):
        super().__init__(components)
        if g0 is None:
            g0 = np.zeros(len(self.components))
        self.g0 = np.asarray(g0, dtype=float)
        if self.g0.shape != (len(self.components),):
            raise ValueError(f"g0 must hold one value per component, got shape {self.g0.shape}")

    def gibbs_free_energy(self, p: float, T: float, n: npt.ArrayLike) -> float:
        n = np.asarray(n, dtype=float)
        return float(np.dot(n, self.g0)) + R * T * ideal_mixing(n)


# =============================================================================
# Cubic equations of state
# =============================================================================
def alpha_pr(Tr: np.ndarray, omega: np.ndarray) -> np.ndarray:
    """ Peng-Robinson (1976) alpha """
    m = 0.37464 + 1.54226 * omega - 0.26992 * omega**2
    return (1.0 + m * (1.0 - np.sqrt(Tr)))**2


def alpha_srk(Tr: np.ndarray, omega: np.ndarray) -> np.ndarray:
    """ Soave (1972) alpha """
    m = 0.480 + 1.574 * omega - 0.176 * omega**2
    return (1.0 + m * (1.0 - np.sqrt(Tr)))**2


def alpha_rk(Tr: np.ndarray, omega: np.ndarray) -> np.ndarray:
    """ Redlich-Kwong alpha, 1/sqrt(Tr) """
    return 1.0 / np.sqrt(Tr)


def alpha_vdw(Tr: np.ndarray, omega: np.ndarray) -> np.ndarray:
    return np.ones_like(Tr)


# (OmegaA, OmegaB, u, w, alpha) for Z^3 - (1 + B - uB)Z^2 + (A + wB^2 - uB - uB^2)Z - (AB + wB^2 + wB^3) = 0
CUBIC_PARAMS = {
    eos_family.PR: (0.45724, 0.07780, 2.0, -1.0, alpha_pr),
    eos_family.SRK: (0.42748, 0.08664, 1.0, 0.0, alpha_srk),
    eos_family.RK: (0.42748, 0.08664, 1.0, 0.0, alpha_rk),
    eos_family.VDW: (27.0 / 64.0, 1.0 / 8.0, 0.0, 0.0, alpha_vdw),
}


def solve_cubic_eos(A: float, B: float, u: float, w: float) -> List[float]:
    """
    Real compressibility factor roots of the generic two-parameter cubic.

    Args:
        A: EOS parameter a*P/(R*T)^2
        B: EOS parameter b*P/(R*T)
        u, w: Family constants (PR: 2, -1; SRK/RK: 1, 0; vdW: 0, 0)

    Returns:
        List of roots with Z > B, sorted ascending (empty if none)
    """
    coeffs = [1.0,
              -(1.0 + B - u * B),
              A + w * B**2 - u * B - u * B**2,
              -(A * B + w * B**2 + w * B**3)]
    if not np.all(np.isfinite(coeffs)):
        return []
    roots = np.roots(coeffs)
    valid = [r.real for r in roots if abs(r.imag) < 1e-10 and r.real > B + 1e-12]
    return sorted(valid)


class CubicEoS(EoSModel):
    """
    Two-parameter cubic EOS evaluator (PR, SRK, RK or vdW).

    Mixing: a = sum_ij x_i x_j sqrt(a_i a_j)(1 - k_ij), b = sum_i x_i b_i

    Usage:
        eos = CubicEoS.from_library(['CH4', 'nC10H22'], family='PR')
        G = eos.gibbs_free_energy(5e6, 350.0, [0.7, 0.3])
    """

    def __init__(self, components: Sequence[str], Tc: npt.ArrayLike, Pc: npt.ArrayLike,
                 omega: npt.ArrayLike, kij: Optional[npt.ArrayLike] = None, family=eos_family.PR):
        super().__init__(components)
        nc = len(self.components)
        self.family = validate_methods(['eosfamily'], [family])
        self.Tc = np.asarray(Tc, dtype=float)
        self.Pc = np.asarray(Pc, dtype=float)
        self.omega = np.asarray(omega, dtype=float)
        for name, arr in (('Tc', self.Tc), ('Pc', self.Pc), ('omega', self.omega)):
            if arr.shape != (nc,):
                raise ValueError(f"{name} must hold one value per component, got shape {arr.shape}")
        if np.any(self.Tc <= 0) or np.any(self.Pc <= 0):
            raise ValueError("Critical temperatures and pressures must be positive")
        self.kij = np.zeros((nc, nc)) if kij is None else np.asarray(kij, dtype=float)
        if self.kij.shape != (nc, nc):
            raise ValueError(f"kij must be {nc}x{nc}, got shape {self.kij.shape}")
        if not np.allclose(self.kij, self.kij.T):
            raise ValueError("kij must be symmetric")

        self.omega_a, self.omega_b, self.u, self.w, self._alpha = CUBIC_PARAMS[self.family]
        disc = np.sqrt(self.u**2 - 4.0 * self.w)
        self.d1 = (self.u + disc) / 2.0
        self.d2 = (self.u - disc) / 2.0

    @classmethod
    def from_library(cls, names: Sequence[str], family=eos_family.PR, kij: Optional[npt.ArrayLike] = None):
        Tc, Pc, omega = comp_library.critical(list(names))
        return cls(names, Tc, Pc, omega, kij=kij, family=family)

    def _calc_ai_bi(self, T: float) -> Tuple[np.ndarray, np.ndarray]:
        alpha = self._alpha(T / self.Tc, self.omega)
        ai = self.omega_a * (R * self.Tc)**2 * alpha / self.Pc
        bi = self.omega_b * R * self.Tc / self.Pc
        return ai, bi

    def _ln_phi_mix(self, Z: float, A: float, B: float) -> float:
        if self.d1 == self.d2:
            return Z - 1.0 - np.log(Z - B) - A / Z
        return (Z - 1.0 - np.log(Z - B)
                - A / (B * (self.d1 - self.d2)) * np.log((Z + self.d1 * B) / (Z + self.d2 * B)))

    def compressibility(self, p: float, T: float, x: npt.ArrayLike) -> Tuple[float, float]:
        """
        Minimum Gibbs energy compressibility factor for composition x.

        Returns:
            (Z, ln_phi_mix), both NaN when no physical root exists
        """
        x = np.asarray(x, dtype=float)
        RT = R * T
        ai, bi = self._calc_ai_bi(T)
        sqrt_ai = np.sqrt(ai)
        aij = np.outer(sqrt_ai, sqrt_ai) * (1.0 - self.kij)
        A = np.einsum('i,j,ij', x, x, aij) * p / RT**2
        B = np.dot(x, bi) * p / RT
        if not (A > 0 and B > 0):
            return np.nan, np.nan

        roots = solve_cubic_eos(A, B, self.u, self.w)
        best_Z, best_lnphi = np.nan, np.nan
        for Z in roots:
            lnphi = self._ln_phi_mix(Z, A, B)
            if np.isfinite(lnphi) and (np.isnan(best_lnphi) or lnphi < best_lnphi):
                best_Z, best_lnphi = Z, lnphi
        return best_Z, best_lnphi

    def gibbs_free_energy(self, p: float, T: float, n: npt.ArrayLike) -> float:
        n = np.asarray(n, dtype=float)
        ntot = np.sum(n)
        if not ntot > 0:
            return np.nan
        with np.errstate(all='ignore'):
            Z, lnphi = self.compressibility(p, T, n / ntot)
            if np.isnan(Z):
                return np.nan
            return R * T * (ideal_mixing(n) + ntot * np.log(p / P_REF) + ntot * lnphi)
