from .eos import (EoSModel, CallableEoS, IdealMixture, CubicEoS, as_eos, ideal_mixing,
                  solve_cubic_eos, alpha_pr, alpha_srk, alpha_rk, alpha_vdw, CUBIC_PARAMS)
