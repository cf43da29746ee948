"""
    Romberg integration

    The trapezoidal rule with 2^j panels, T(j, 0), is refined row by row and extrapolated by

        T(j, k) = T(j, k-1) + (T(j, k-1) - T(j-1, k-1)) / (4^k - 1)

    The diagonal element T(j, j) is the estimate of row j, the one of the row before serves as
    benchmark value.
"""

# python import
import logging

# aquad module imports
from . import aqconfig
from .exit_condition import ExitCondition
from .integrator import BoundKind
from .integrator import Classification
from .integrator import OneDimIntegrator
from .integrator import OneDimIntegratorAlgorithm
from .integrator import ResultState


class RombergIntegrator(OneDimIntegrator):
    """
    Romberg extrapolation of the trapezoidal rule on a closed interval.

    :param exit_condition: `max_iterations` bounds the number of rows of the Romberg table
        (at most `aqconfig.romberg_max_rows`)
    """

    bound_kind = BoundKind.CLOSED
    supports_unbounded = False
    name = "Romberg"

    @classmethod
    def default_exit_condition(cls) -> ExitCondition:
        return ExitCondition(
            max_iterations=aqconfig.romberg_max_iterations,
            absolute_tolerance=aqconfig.romberg_abs_tol,
            relative_tolerance=aqconfig.romberg_rel_tol,
        )

    def create(self) -> "_RombergAlgorithm":
        return _RombergAlgorithm(self)


class _RombergAlgorithm(OneDimIntegratorAlgorithm):
    def _run(self, lower, upper, track_state):
        f = self._f
        ec = self.exit_condition
        max_rows = min(ec.max_iterations, aqconfig.romberg_max_rows)

        length = upper - lower
        row = [length / 2 * (f(lower) + f(upper))]
        benchmark_value = row[0]
        evaluations = 2
        rows = 1
        panels = 1

        classification = None
        while rows < max_rows:
            panels *= 2
            h = length / panels
            new_points = panels // 2
            if evaluations + new_points > ec.max_evaluations:
                classification = Classification.EVALUATION_LIMIT_EXCEEDED
                break

            # the new nodes are the midpoints of the previous panels
            s = sum(f(lower + (2 * i - 1) * h) for i in range(1, new_points + 1))
            evaluations += new_points

            new_row = [row[0] / 2 + h * s]
            for k in range(1, rows + 1):
                new_row.append(new_row[k - 1] + (new_row[k - 1] - row[k - 1]) / (4 ** k - 1))

            benchmark_value = row[-1]
            row = new_row
            rows += 1

            if ec.is_fulfilled(row[-1], benchmark_value):
                classification = Classification.PROPER_RESULT
                break

        if classification is None:
            classification = Classification.ITERATION_LIMIT_EXCEEDED

        logging.debug("Romberg: {} after {} rows and {} evaluations".format(classification.name, rows, evaluations))
        if not track_state:
            return ResultState(Classification.UNKNOWN, row[-1], benchmark_value)
        return ResultState(classification, row[-1], benchmark_value, rows, evaluations)
