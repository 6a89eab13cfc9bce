from .constants import R, P_REF, BIGNUM, DEFAULT_SEED, DEFAULT_POPULATION, MIN_POPULATION, STEPS_PER_PHASE
