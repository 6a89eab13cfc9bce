from .flash import DETPFlash, FlashResult, GibbsObjective, obj_de_tp_flash, tp_flash, de_flash, merge_phases, numphases
from ._lib_partition import partition, allocate, mole_fractions, decision_size, dividers_from_vector
from ._lib_optimizer import minimize, BudgetedObjective, OptimizerResult, initial_population
