
class OreoreError(Exception):
    """ Base class for all oreore errors"""
    pass

class OreoreInternalError(OreoreError):
    """ Raised when an invariant of the analysis is broken (a bug, never bad input)"""
    pass
