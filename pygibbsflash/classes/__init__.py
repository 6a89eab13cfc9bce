from .classes import eos_family, de_init, class_dic
