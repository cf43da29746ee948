"""
    Adaptive Gauss-Lobatto integration

    The scheme of W. Gander and W. Gautschi, "Adaptive Quadrature - Revisited", BIT 40 (2000).
    Each panel is integrated by a 7 point Kronrod extension of the 4 point Gauss-Lobatto rule and
    by the 4 point Gauss-Lobatto rule itself. A panel is accepted if the difference of both
    estimates vanishes relative to a rough estimate of the modulus of the whole integral, i.e.
    the floating point test

        modulus + (value1 - value2) == modulus

    holds. Otherwise the panel is split into the six sub-panels given by its nodes.
"""

# python import
import logging
import math

# aquad module imports
from . import aqconfig
from .exit_condition import ExitCondition
from .integrator import BoundKind
from .integrator import Classification
from .integrator import OneDimIntegrator
from .integrator import OneDimIntegratorAlgorithm
from .integrator import ResultState

# fixed relative offsets of the 13 point start
x1 = 0.942882415695480
x2 = 0.641853342345781
x3 = 0.236383199662150
sqrt_two_over_three = math.sqrt(2 / 3)
one_over_sqrt5 = 1 / math.sqrt(5)


class _LobattoRun(object):
    """
    accumulator of a single run, the classification is set by
    the first panel which stops and only the first failure is kept
    """

    __slots__ = ("classification", "benchmark_value", "iterations", "evaluations")

    def __init__(self):
        self.classification = Classification.NO_RESULT
        self.benchmark_value = 0.0
        self.iterations = 0
        self.evaluations = 0

    def has_failed(self):
        return self.classification not in (Classification.PROPER_RESULT, Classification.NO_RESULT)


class AdaptiveGaussLobattoIntegrator(OneDimIntegrator):
    """
    Adaptive Gauss-Lobatto integration with 6-way refinement.

    The integrand is evaluated at both bounds. The single tolerance of the scheme is taken from
    `exit_condition.tolerance`, if that is NaN panels are refined until a budget is exhausted.

    :param exit_condition: `max_iterations` bounds the number of refinement steps
    """

    bound_kind = BoundKind.CLOSED
    supports_unbounded = False
    name = "adaptive Gauss-Lobatto"

    @classmethod
    def default_exit_condition(cls) -> ExitCondition:
        return ExitCondition(
            max_iterations=aqconfig.lobatto_max_iterations,
            relative_tolerance=aqconfig.lobatto_rel_tol,
        )

    def create(self) -> "_AdaptiveGaussLobattoAlgorithm":
        return _AdaptiveGaussLobattoAlgorithm(self)


class _AdaptiveGaussLobattoAlgorithm(OneDimIntegratorAlgorithm):
    def _run(self, lower, upper, track_state):
        f = self._f
        ec = self.exit_condition

        # calculate the integral in the first step at 13 points
        h = (upper - lower) / 2
        m = (lower + upper) / 2

        f1 = f(lower)
        f2 = f(m - x1 * h)
        f3 = f(m - sqrt_two_over_three * h)
        f4 = f(m - x2 * h)
        f5 = f(m - one_over_sqrt5 * h)
        f6 = f(m - x3 * h)
        f7 = f(m)
        f8 = f(m + x3 * h)
        f9 = f(m + one_over_sqrt5 * h)
        f10 = f(m + x2 * h)
        f11 = f(m + sqrt_two_over_three * h)
        f12 = f(m + x1 * h)
        f13 = f(upper)

        run = _LobattoRun()
        run.evaluations = 13

        # two approximations of the integral
        value1 = (h / 1470) * (77 * (f1 + f13) + 432 * (f3 + f11) + 625 * (f5 + f9) + 672 * f7)
        value2 = (h / 6) * (f1 + f13 + 5 * (f5 + f9))

        # rough estimate of the modulus of the integral
        modulus = h * (
            0.0158271919734802 * (f1 + f13)
            + 0.0942738402188500 * (f2 + f12)
            + 0.155071987336585 * (f3 + f11)
            + 0.188821573960182 * (f4 + f10)
            + 0.199773405226859 * (f5 + f9)
            + 0.224926465333340 * (f6 + f8)
            + 0.242611071901408 * f7
        )

        absolute_difference = abs(value2 - modulus)
        magnitude = abs(value1 - modulus) / absolute_difference if absolute_difference != 0 else 0.0

        tolerance = ec.tolerance
        if 0 < magnitude < 1:
            tolerance = tolerance / magnitude
        modulus = modulus * tolerance / aqconfig.SUPER_TINY_EPSILON

        if modulus == 0:
            modulus = upper - lower

        run.iterations = 1
        value = self._refine(f, lower, upper, f1, f13, modulus, run)

        logging.debug(
            "Gauss-Lobatto: {} after {} steps and {} evaluations".format(
                run.classification.name, run.iterations, run.evaluations
            )
        )
        if not track_state:
            return ResultState(Classification.UNKNOWN, value, run.benchmark_value)
        return ResultState(run.classification, value, run.benchmark_value, run.iterations, run.evaluations)

    def _refine(self, f, lower, upper, f_lower, f_upper, modulus, run: _LobattoRun) -> float:
        """
        Integrate over [lower, upper] and refine the panels depth first, from left to right.
        A panel which is not accepted is split into the six sub-panels given by its nodes.

        :return: the value of the integral over [lower, upper]
        """
        ec = self.exit_condition
        check_plateau = not math.isnan(ec.tolerance)

        value = 0.0
        stack = [(lower, upper, f_lower, f_upper)]
        while stack:
            a, b, fa, fb = stack.pop()

            h = (b - a) / 2
            m = (a + b) / 2

            mll = m - sqrt_two_over_three * h
            fmll = f(mll)
            ml = m - one_over_sqrt5 * h
            fml = f(ml)
            fm = f(m)
            mr = m + one_over_sqrt5 * h
            fmr = f(mr)
            mrr = m + sqrt_two_over_three * h
            fmrr = f(mrr)

            run.evaluations += 5

            # two approximations of the sub-integral
            value1 = (h / 1470) * (77 * (fa + fb) + 432 * (fmll + fmrr) + 625 * (fml + fmr) + 672 * fm)
            value2 = (h / 6) * (fa + fb + 5 * (fml + fmr))

            if run.has_failed():
                # do not refine further once the algorithm has failed
                accept = True
            elif (m <= a) or (b <= m):
                run.classification = Classification.DIVERGENT
                accept = True
            elif run.iterations >= ec.max_iterations:
                run.classification = Classification.ITERATION_LIMIT_EXCEEDED
                accept = True
            elif run.evaluations >= ec.max_evaluations:
                run.classification = Classification.EVALUATION_LIMIT_EXCEEDED
                accept = True
            elif check_plateau and (modulus + (value1 - value2) == modulus):
                run.classification = Classification.PROPER_RESULT
                accept = True
            elif check_plateau and ((mll <= a) or (b <= mrr)):
                # the nodes of the sub-panels collapse onto the bounds, refining is meaningless
                run.classification = Classification.ROUND_OFF_ERROR
                accept = True
            else:
                accept = False

            if accept:
                value += value1
                run.benchmark_value += value2
            else:
                run.iterations += 1
                # pushed in reverse order, so the left-most sub-panel is taken next
                stack.append((mrr, b, fmrr, fb))
                stack.append((mr, mrr, fmr, fmrr))
                stack.append((m, mr, fm, fmr))
                stack.append((ml, m, fml, fm))
                stack.append((mll, ml, fmll, fml))
                stack.append((a, mll, fa, fmll))
        return value
