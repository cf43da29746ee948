"""
    Adaptive Gauss-Kronrod integration

    On each panel [a, b] a Kronrod rule with 2n+1 nodes and its embedded Gauss-Legendre rule
    with n nodes are evaluated from the same function values. The Kronrod sum is the estimate
    of the integral, the Gauss sum serves as benchmark value: their difference estimates the
    error without extra function calls.

    If the estimate of the whole interval does not meet the exit condition the interval is
    bisected. Sub-intervals which fail the convergence check (with a tolerance tightened by the
    factor 2^(depth+1)) are put on an explicit stack and bisected again, converged ones are
    added to the running total. The depth of the bisection tree is bounded by
    `max_iterations` of the exit condition.
"""

# python import
import logging
import math
import typing

import numpy as np

# aquad module imports
from . import aqconfig
from . import generate_kronrod_nodes_weights

generate_kronrod_nodes_weights.run()
from . import kronrod_nodes_weights
from .aq_exceptions import AQConfigurationError
from .aq_exceptions import AQNotOperableError
from .exit_condition import ExitCondition
from .integrator import BoundKind
from .integrator import Classification
from .integrator import OneDimIntegrator
from .integrator import OneDimIntegratorAlgorithm
from .integrator import ResultState


########################################################################################################################
##    tables of the embedded Gauss-Kronrod rules
########################################################################################################################


class QuadratureTable(object):
    """
    Abscissas and weights of the Kronrod rule of order `order` = 2k+1 on [-1, 1].

    Only the k positive nodes (descending) are stored in `evaluation_points`. `kronrod_weights`
    has k+1 entries, the last one belongs to the center node. `gauss_weights` belong to the
    nodes at odd positions, plus the center if k is odd.
    """

    __slots__ = ("_order", "_evaluation_points", "_gauss_weights", "_kronrod_weights")

    def __init__(self, order, evaluation_points, gauss_weights, kronrod_weights):
        k = order // 2
        if len(evaluation_points) != k:
            raise AQConfigurationError("expected {} evaluation points for order {}".format(k, order))
        if len(kronrod_weights) != k + 1:
            raise AQConfigurationError("expected {} Kronrod weights for order {}".format(k + 1, order))
        if len(gauss_weights) != (k + 1) // 2:
            raise AQConfigurationError("expected {} Gauss weights for order {}".format((k + 1) // 2, order))

        self._order = order
        self._evaluation_points = tuple(float(x) for x in evaluation_points)
        self._gauss_weights = tuple(float(w) for w in gauss_weights)
        self._kronrod_weights = tuple(float(w) for w in kronrod_weights)

    @property
    def order(self) -> int:
        return self._order

    @property
    def evaluation_points(self) -> typing.Tuple[float, ...]:
        return self._evaluation_points

    @property
    def gauss_weights(self) -> typing.Tuple[float, ...]:
        return self._gauss_weights

    @property
    def kronrod_weights(self) -> typing.Tuple[float, ...]:
        return self._kronrod_weights

    @property
    def abscissas(self) -> np.ndarray:
        """all 2k+1 nodes on [-1, 1], ascending"""
        x = np.array(self._evaluation_points)
        r = np.concatenate((-x, [0.0], x[::-1]))
        r.setflags(write=False)
        return r

    @property
    def kronrod_weights_full(self) -> np.ndarray:
        """Kronrod weights matching `abscissas`"""
        w = np.array(self._kronrod_weights[:-1])
        r = np.concatenate((w, [self._kronrod_weights[-1]], w[::-1]))
        r.setflags(write=False)
        return r

    @property
    def gauss_weights_full(self) -> np.ndarray:
        """Gauss weights matching `abscissas`, zero for nodes which belong to the Kronrod extension only"""
        k = self._order // 2
        half = np.zeros(k + 1)
        for i in range(1, k, 2):
            half[i] = self._gauss_weights[i // 2]
        if k % 2 == 1:
            half[k] = self._gauss_weights[k // 2]
        r = np.concatenate((half[:-1], [half[-1]], half[:-1][::-1]))
        r.setflags(write=False)
        return r

    def __repr__(self):
        return "QuadratureTable(order={})".format(self._order)


_tables = {
    order: QuadratureTable(
        order,
        kronrod_nodes_weights.evaluation_points[order],
        kronrod_nodes_weights.gauss_weights[order],
        kronrod_nodes_weights.kronrod_weights[order],
    )
    for order in aqconfig.kronrod_orders
}


def get_quadrature_table(order: int) -> QuadratureTable:
    try:
        return _tables[order]
    except (KeyError, TypeError):
        raise AQConfigurationError(
            "Gauss-Kronrod rule of order {!r} is not available, choose one of {}".format(order, aqconfig.kronrod_orders)
        ) from None


########################################################################################################################
##    the adaptive scheme
########################################################################################################################


class SubInterval(object):
    __slots__ = ("lower_bound", "upper_bound", "value", "benchmark_value", "depth")

    def __init__(self, lower_bound, upper_bound, value, benchmark_value, depth):
        self.lower_bound = lower_bound
        self.upper_bound = upper_bound
        self.value = value
        self.benchmark_value = benchmark_value
        self.depth = depth


def _depth_factor(depth):
    """the factor 2 << depth, i.e. 2^(depth+1), as float"""
    if depth >= 1022:
        return math.inf
    return float(2 << depth)


def _is_degenerate(lower, upper):
    if abs(upper - lower) < aqconfig.MACHINE_EPSILON:
        return True
    m = lower + (upper - lower) / 2
    return not (lower < m < upper)


class AdaptiveGaussKronrodIntegrator(OneDimIntegrator):
    """
    Adaptive bisection driven by an embedded Gauss-Kronrod pair.

    The integrand is never evaluated at the bounds. Infinite bounds are supported by the
    variable transformation t = 1/(x-a) (see `_AdaptiveGaussKronrodAlgorithm._run`).

    :param order: order 2n+1 of the Kronrod rule, one of 15, 21, 31, 41, 51, 61
    :param exit_condition: `max_iterations` bounds the depth of the bisection tree
    """

    bound_kind = BoundKind.OPEN
    supports_unbounded = True

    def __init__(self, order: int = aqconfig.kronrod_order, exit_condition: typing.Optional[ExitCondition] = None):
        super().__init__(exit_condition)
        self._table = get_quadrature_table(order)

    @classmethod
    def default_exit_condition(cls) -> ExitCondition:
        return ExitCondition(
            max_iterations=aqconfig.kronrod_max_iterations,
            absolute_tolerance=aqconfig.kronrod_abs_tol,
            relative_tolerance=aqconfig.kronrod_rel_tol,
        )

    @property
    def order(self) -> int:
        return self._table.order

    @property
    def table(self) -> QuadratureTable:
        return self._table

    @property
    def name(self):
        return "adaptive Gauss-Kronrod{}".format(self.order)

    def create(self) -> "_AdaptiveGaussKronrodAlgorithm":
        return _AdaptiveGaussKronrodAlgorithm(self)


class _AdaptiveGaussKronrodAlgorithm(OneDimIntegratorAlgorithm):
    def one_step_integration(self, lower_bound: float, upper_bound: float) -> typing.Tuple[float, float]:
        """
        Apply the Kronrod rule and its embedded Gauss rule once on [lower_bound, upper_bound].
        :return: the tuple (value, benchmark_value) of Kronrod and Gauss estimate
        """
        if self.function_to_integrate is None:
            raise AQNotOperableError("function_to_integrate is not set")
        return self._one_step_integration(self._f, lower_bound, upper_bound)

    def _one_step_integration(self, f, lower_bound, upper_bound):
        table = self.integrator.table
        x_k = table.evaluation_points
        w_k = table.kronrod_weights
        w_g = table.gauss_weights

        # map [-1, 1] to [a, b] by x = h * node + m
        h = (upper_bound - lower_bound) / 2
        m = (upper_bound + lower_bound) / 2

        value = 0.0
        benchmark_value = 0.0

        k = table.order // 2
        for i in range(k):
            y1 = f(h * x_k[i] + m)
            y2 = f(-h * x_k[i] + m)

            value += w_k[i] * (y1 + y2)
            if i % 2 == 1:
                benchmark_value += w_g[i // 2] * (y1 + y2)

        # the center belongs to the Gauss rule only if that has odd order
        y = f(m)
        value += w_k[k] * y
        if k % 2 == 1:
            benchmark_value += w_g[k // 2] * y

        return value * h, benchmark_value * h

    def _integrate(self, f, lower_bound, upper_bound, track_state):
        ec = self.exit_condition
        order = self.integrator.order

        value, benchmark_value = self._one_step_integration(f, lower_bound, upper_bound)
        iterations = 1
        evaluations = order

        if ec.max_iterations < 1:
            classification = Classification.ITERATION_LIMIT_EXCEEDED
        elif ec.max_evaluations < order:
            classification = Classification.EVALUATION_LIMIT_EXCEEDED
        elif ec.is_fulfilled(value, benchmark_value):
            classification = Classification.PROPER_RESULT
        else:
            classification = None

        if classification is not None:
            return self._make_state(classification, value, benchmark_value, iterations, evaluations, track_state)

        # explicit stack of the sub-intervals which have to be bisected
        stack = [SubInterval(lower_bound, upper_bound, value, benchmark_value, 1)]
        value = benchmark_value = 0.0
        classification = Classification.PROPER_RESULT

        while stack:
            interval = stack.pop()
            a = interval.lower_bound
            c = interval.upper_bound

            degenerate = _is_degenerate(a, c)
            if (
                (interval.depth <= ec.max_iterations)
                and (not degenerate)
                and (evaluations + 2 * order <= ec.max_evaluations)
            ):
                iterations += 1
                evaluations += 2 * order

                b = a + (c - a) / 2
                factor = _depth_factor(interval.depth)

                # consider [a, b] and [b, c]
                sub_value, sub_benchmark_value = self._one_step_integration(f, a, b)
                if not ec.check_convergence_criterion(sub_value, sub_benchmark_value, factor):
                    stack.append(SubInterval(a, b, sub_value, sub_benchmark_value, interval.depth + 1))
                else:
                    value += sub_value
                    benchmark_value += sub_benchmark_value

                sub_value, sub_benchmark_value = self._one_step_integration(f, b, c)
                if not ec.check_convergence_criterion(sub_value, sub_benchmark_value, factor):
                    stack.append(SubInterval(b, c, sub_value, sub_benchmark_value, interval.depth + 1))
                else:
                    value += sub_value
                    benchmark_value += sub_benchmark_value
            else:
                # accept the current interval and everything left on the stack without refinement
                value += interval.value
                benchmark_value += interval.benchmark_value
                while stack:
                    pending = stack.pop()
                    value += pending.value
                    benchmark_value += pending.benchmark_value

                if interval.depth > ec.max_iterations:
                    classification = Classification.ITERATION_LIMIT_EXCEEDED
                elif degenerate:
                    classification = Classification.ROUND_OFF_ERROR
                else:
                    classification = Classification.EVALUATION_LIMIT_EXCEEDED
                logging.debug(
                    "Gauss-Kronrod{}: stop at [{}, {}] (depth {}) -> {}".format(
                        order, a, c, interval.depth, classification.name
                    )
                )

        return self._make_state(classification, value, benchmark_value, iterations, evaluations, track_state)

    @staticmethod
    def _make_state(classification, value, benchmark_value, iterations, evaluations, track_state):
        if not track_state:
            return ResultState(Classification.UNKNOWN, value, benchmark_value)
        return ResultState(classification, value, benchmark_value, iterations, evaluations)

    ####################################################################################################################
    ##  treat improper integral (unbound integration interval) by a mapping to a finite region
    ####################################################################################################################

    def _integrate_upper_infinite(self, f, a, track_state):
        """
        Integrate to infinity by splitting into [a, a+1] and [a+1, inf].
        The second interval is mapped to [0, 1] by t = 1/(x-a):

            int_(a+1)^inf f(x) dx = int_0^1 f(1/t + a) / t**2 dt
        """
        res1 = self._integrate(f, a, a + 1, track_state)
        res2 = self._integrate(lambda t: f(1 / t + a) / t ** 2, 0, 1, track_state)
        return res1 + res2

    def _integrate_lower_infinite(self, f, b, track_state):
        """
        As in `_integrate_upper_infinite` split into [-inf, b-1] and [b-1, b] and use t = -1/(x-b):

            int_-inf^(b-1) f(x) dx = int_0^1 f(-1/t + b) / t**2 dt
        """
        res1 = self._integrate(f, b - 1, b, track_state)
        res2 = self._integrate(lambda t: f(-1 / t + b) / t ** 2, 0, 1, track_state)
        return res1 + res2

    def _run(self, lower, upper, track_state):
        f = self._f
        if lower == -math.inf:
            if upper == math.inf:
                res = self._integrate_lower_infinite(f, 0, track_state) + self._integrate_upper_infinite(
                    f, 0, track_state
                )
            else:
                res = self._integrate_lower_infinite(f, upper, track_state)
        elif upper == math.inf:
            res = self._integrate_upper_infinite(f, lower, track_state)
        else:
            res = self._integrate(f, lower, upper, track_state)
        return res
