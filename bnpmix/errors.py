class ConfigurationError(ValueError):
    """Bad model setup: detected before sampling starts, never recovered."""
    pass


class InconsistencyError(RuntimeError):
    """The inference state was corrupted; the chain cannot continue."""
    pass


class InvalidWeightsError(InconsistencyError):
    """A weight vector handed to a categorical draw was NaN, infinite,
    negative or all zero."""
    pass
