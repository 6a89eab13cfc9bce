from .shared_fns import convert_to_numpy, check_state, check_moles, check_count
