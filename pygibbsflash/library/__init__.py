from .library import ComponentProperties, COMPONENTS, component_library, comp_library
