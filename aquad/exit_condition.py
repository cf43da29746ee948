"""
    Exit conditions shared by the one-dimensional integrators

    An exit condition bounds a run by a maximal number of iterations and function evaluations
    and optionally by an absolute and/or a relative tolerance. A tolerance set to NaN is not
    taken into account.
"""

# python import
import enum
import math
import numbers

# aquad module imports
from . import aqconfig
from .aq_exceptions import AQConfigurationError


class ToleranceType(enum.Enum):
    NONE = "none"
    ABSOLUTE = "absolute"
    RELATIVE = "relative"


def _check_budget(name, value):
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise AQConfigurationError("{} must be an integer, got {!r}".format(name, value))
    if value < 0:
        raise AQConfigurationError("{} must not be negative, got {}".format(name, value))
    return int(value)


class ExitCondition(object):
    """
    Convergence and resource-limit policy of an integrator.

    A candidate value is accepted (compare with the benchmark value of the lower order
    estimate) if

        factor * |benchmark - candidate| < absolute_tolerance

    or

        factor * |benchmark - candidate| / |benchmark| < relative_tolerance

    where the division is skipped for a vanishing benchmark. The `factor` lets an
    adaptive scheme tighten the tolerance for deeper sub-intervals.

    :param max_iterations: maximal number of iterations (its meaning depends on the integrator)
    :param max_evaluations: maximal number of function evaluations
    :param absolute_tolerance: absolute tolerance, NaN if not used
    :param relative_tolerance: relative tolerance, NaN if not used
    """

    __slots__ = (
        "_max_iterations",
        "_max_evaluations",
        "_absolute_tolerance",
        "_relative_tolerance",
    )

    def __init__(
        self,
        max_iterations: int,
        max_evaluations: int = aqconfig.MAX_EVALUATIONS,
        absolute_tolerance: float = math.nan,
        relative_tolerance: float = math.nan,
    ):
        self._max_iterations = _check_budget("max_iterations", max_iterations)
        self._max_evaluations = _check_budget("max_evaluations", max_evaluations)
        self._absolute_tolerance = float(absolute_tolerance)
        self._relative_tolerance = float(relative_tolerance)

    @classmethod
    def create(
        cls,
        max_iterations: int,
        tolerance: float = math.nan,
        tolerance_type: ToleranceType = ToleranceType.NONE,
        max_evaluations: int = aqconfig.MAX_EVALUATIONS,
    ) -> "ExitCondition":
        """
        Create an exit condition with a single tolerance, interpreted according to `tolerance_type`.
        """
        if tolerance_type == ToleranceType.ABSOLUTE:
            return cls(max_iterations, max_evaluations, absolute_tolerance=tolerance)
        elif tolerance_type == ToleranceType.RELATIVE:
            return cls(max_iterations, max_evaluations, relative_tolerance=tolerance)
        elif tolerance_type == ToleranceType.NONE:
            return cls(max_iterations, max_evaluations)
        raise AQConfigurationError("unknown tolerance type {!r}".format(tolerance_type))

    @property
    def max_iterations(self) -> int:
        return self._max_iterations

    @property
    def max_evaluations(self) -> int:
        return self._max_evaluations

    @property
    def absolute_tolerance(self) -> float:
        return self._absolute_tolerance

    @property
    def relative_tolerance(self) -> float:
        return self._relative_tolerance

    @property
    def tolerance(self) -> float:
        """the single tolerance of schemes which know only one: relative if set, absolute otherwise"""
        if not math.isnan(self._relative_tolerance):
            return self._relative_tolerance
        return self._absolute_tolerance

    def check_convergence_criterion(self, value, benchmark_value, factor=1) -> bool:
        err = factor * abs(benchmark_value - value)

        if not math.isnan(self._absolute_tolerance):
            if err < self._absolute_tolerance:
                return True

        if not math.isnan(self._relative_tolerance):
            if abs(benchmark_value) > 0:
                err /= abs(benchmark_value)
            if err < self._relative_tolerance:
                return True
        return False

    def is_fulfilled(self, candidate, benchmark) -> bool:
        return self.check_convergence_criterion(candidate, benchmark, 1)

    def __str__(self):
        return "max. iterations: {}; max. evaluations: {}; abs. tolerance: {}; rel. tolerance: {}".format(
            self._max_iterations,
            self._max_evaluations,
            self._absolute_tolerance,
            self._relative_tolerance,
        )

    def __repr__(self):
        return "ExitCondition(max_iterations={}, max_evaluations={}, absolute_tolerance={}, relative_tolerance={})".format(
            self._max_iterations,
            self._max_evaluations,
            self._absolute_tolerance,
            self._relative_tolerance,
        )
