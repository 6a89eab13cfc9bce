from pygibbsflash.classes import class_dic

def validate_methods(names, variables):
    variables = list(variables)
    for m, method in enumerate(names):
        if type(variables[m]) == str:
            try:
                variables[m] = class_dic[method][variables[m].upper()]
            except KeyError:
                choices = [e.name for e in class_dic[method]]
                raise ValueError(f"An incorrect {method} was specified: '{variables[m]}'. Choose from {choices}")
    if len(variables) == 1:
        return variables[0]
    else:
        return variables
