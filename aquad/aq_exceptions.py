"""
    module specific exceptions

    Numerical difficulties during a run are never raised, they are reported by the
    classification of the result. Exceptions signal misuse which can be detected before
    any evaluation, or an integrand which fails to evaluate.
"""


class AQError(Exception):
    pass


class AQConfigurationError(AQError, ValueError):
    pass


class AQNotOperableError(AQError):
    pass


class AQFunctionEvaluationError(AQError):
    pass
