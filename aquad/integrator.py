"""
    Common ground of the one-dimensional integrators

    An integrator object (e.g. `AdaptiveGaussKronrodIntegrator`) only holds the immutable
    configuration. Each call of its `create()` method returns a new algorithm object which
    carries the state of a single integration: the bounds, the function to integrate and,
    while running, the work-list of the scheme.

        integrator = AdaptiveGaussKronrodIntegrator(order=21)
        algorithm = integrator.create()
        algorithm.try_set_bounds(0, 1)
        algorithm.function_to_integrate = math.exp
        res = algorithm.get_result()

    Several algorithm objects of the same integrator do not share mutable state and can
    therefore be used concurrently.
"""

# python import
import enum
import logging
import math
import typing

# aquad module imports
from .aq_exceptions import AQConfigurationError
from .aq_exceptions import AQFunctionEvaluationError
from .aq_exceptions import AQNotOperableError
from .exit_condition import ExitCondition

########################################################################################################################
##    typedefs
########################################################################################################################
numeric = typing.Union[int, float]


########################################################################################################################
##    result of a run
########################################################################################################################


class Classification(enum.Enum):
    PROPER_RESULT = "proper result"
    ROUND_OFF_ERROR = "round-off error"
    ITERATION_LIMIT_EXCEEDED = "iteration limit exceeded"
    EVALUATION_LIMIT_EXCEEDED = "evaluation limit exceeded"
    DIVERGENT = "divergent"
    NO_RESULT = "no result"
    UNKNOWN = "unknown"


class ResultState(typing.NamedTuple):
    """
    The outcome of a single run: the classification of the termination, the value of the
    integral, the benchmark value (the lower order estimate used for error estimation only)
    and the number of iterations and function evaluations spent.

    A result state is immutable, `+` and unary `-` return new objects.
    """

    classification: Classification = Classification.NO_RESULT
    value: float = 0.0
    benchmark_value: float = 0.0
    iterations: int = 0
    evaluations: int = 0

    @property
    def estimated_absolute_error(self):
        return abs(self.benchmark_value - self.value)

    @property
    def estimated_relative_error(self):
        err = self.estimated_absolute_error
        if abs(self.benchmark_value) > 0:
            err /= abs(self.benchmark_value)
        return err

    @property
    def is_proper(self):
        return self.classification == Classification.PROPER_RESULT

    def __add__(self, other):
        # the first failure wins
        if self.classification != Classification.PROPER_RESULT:
            classification = self.classification
        else:
            classification = other.classification

        r = ResultState(
            classification=classification,
            value=self.value + other.value,
            benchmark_value=self.benchmark_value + other.benchmark_value,
            iterations=self.iterations + other.iterations,
            evaluations=self.evaluations + other.evaluations,
        )
        return r

    def __neg__(self):
        return ResultState(
            classification=self.classification,
            value=-self.value,
            benchmark_value=-self.benchmark_value,
            iterations=self.iterations,
            evaluations=self.evaluations,
        )

    def __str__(self):
        return "ResultState(classification={}, value={}, benchmark_value={}, iterations={}, evaluations={})".format(
            self.classification.name,
            self.value,
            self.benchmark_value,
            self.iterations,
            self.evaluations,
        )

    def __repr__(self):
        return self.__str__()


########################################################################################################################
##    integration bounds
########################################################################################################################


class BoundKind(enum.Enum):
    CLOSED = "closed"  # the integrand is evaluated at the bound
    OPEN = "open"  # the integrand is never evaluated at the bound
    UNBOUNDED = "unbounded"  # the bound is -inf (lower) or +inf (upper)


class Bound(typing.NamedTuple):
    value: float
    kind: BoundKind


def _f_x_exception_wrapper(f, x):
    try:
        return f(x)
    except Exception as e:
        logging.error(
            "calling function at x={:.8e} failed with exception {}".format(x, e.__class__.__name__)
        )
        raise AQFunctionEvaluationError(
            "Failed to evaluate function (Exception occurred during function call at x={:.8e})".format(x)
        ) from e


########################################################################################################################
##    integrator (configuration) and algorithm (single run) base classes
########################################################################################################################


class OneDimIntegrator(object):
    """
    Base class of the immutable integrator configuration.

    Subclasses set `bound_kind` to the way their scheme treats finite bounds and
    `supports_unbounded` if infinite bounds are allowed. They implement `create()`.

    :param exit_condition: the exit condition, `None` selects the default of the integrator
    """

    bound_kind = BoundKind.CLOSED
    supports_unbounded = False
    name = "one-dimensional integrator"

    def __init__(self, exit_condition: typing.Optional[ExitCondition] = None):
        if exit_condition is None:
            exit_condition = self.default_exit_condition()
        elif not isinstance(exit_condition, ExitCondition):
            raise AQConfigurationError(
                "exit_condition must be an ExitCondition instance, got {!r}".format(exit_condition)
            )
        self._exit_condition = exit_condition

    @classmethod
    def default_exit_condition(cls) -> ExitCondition:
        raise NotImplementedError

    @property
    def exit_condition(self) -> ExitCondition:
        return self._exit_condition

    def create(self) -> "OneDimIntegratorAlgorithm":
        raise NotImplementedError

    def __str__(self):
        return "{}; {}".format(self.name, self._exit_condition)

    @staticmethod
    def _mathyfi_inf_str(c):
        """convert '+-inf' as str to +-math.inf"""
        if (c == "inf") or (c == "+inf"):
            c = math.inf
        elif c == "-inf":
            c = -math.inf
        return c

    def quad(self, f: typing.Callable, a: [numeric, str], b: [numeric, str], args: tuple = tuple()) -> ResultState:
        """
        General method used to integrate f(x, *args) from a to b.
        Infinite boundaries can be given by math.inf or numpy.inf or 'inf', they are
        accepted only if the integrator supports unbounded domains.
        If b < a the integral over [b, a] is calculated and its negative returned.
        :param f: function to integrate, callable of the form f(x, *args)
        :param a: lower boundary
        :param b: upper boundary
        :param args: arguments passed to `f`
        :return: the result as ResultState
        """
        a = self._mathyfi_inf_str(a)
        b = self._mathyfi_inf_str(b)

        if a == b:
            return ResultState(Classification.PROPER_RESULT, 0.0, 0.0, 0, 0)

        if b < a:
            a, b = b, a
            sign = -1
        else:
            sign = +1

        algorithm = self.create()
        if not algorithm.try_set_bounds(a, b):
            raise AQConfigurationError("bounds [{}, {}] are not supported by {}".format(a, b, self.name))
        if args:
            algorithm.function_to_integrate = lambda x: f(x, *args)
        else:
            algorithm.function_to_integrate = f

        res = algorithm.get_result()
        if sign < 0:
            res = -res
        return res


class OneDimIntegratorAlgorithm(object):
    """
    Base class of the per-run algorithm objects, holds the bounds and the integrand.

    Subclasses implement `_run(lower, upper, track_state)` for bounds with `lower < upper`.
    """

    def __init__(self, integrator: OneDimIntegrator):
        self.integrator = integrator
        self.function_to_integrate = None
        self._lower = None
        self._upper = None

    @property
    def exit_condition(self) -> ExitCondition:
        return self.integrator.exit_condition

    @property
    def lower_bound(self) -> float:
        return math.nan if self._lower is None else self._lower.value

    @property
    def upper_bound(self) -> float:
        return math.nan if self._upper is None else self._upper.value

    @property
    def lower_bound_descriptor(self) -> typing.Optional[Bound]:
        return self._lower

    @property
    def upper_bound_descriptor(self) -> typing.Optional[Bound]:
        return self._upper

    @property
    def is_operable(self) -> bool:
        return (self.function_to_integrate is not None) and (self._lower is not None) and (self._upper is not None)

    def _make_bound(self, x, infinity) -> typing.Optional[Bound]:
        """return the bound for x, or None if x is not acceptable"""
        try:
            x = float(x)
        except (TypeError, ValueError):
            return None
        if math.isnan(x):
            return None
        if math.isinf(x):
            if self.integrator.supports_unbounded and x == infinity:
                return Bound(x, BoundKind.UNBOUNDED)
            return None
        return Bound(x, self.integrator.bound_kind)

    def try_set_lower_bound(self, lower_bound: numeric) -> bool:
        bound = self._make_bound(lower_bound, -math.inf)
        if bound is None:
            return False
        if (self._upper is not None) and (bound.value > self._upper.value):
            return False
        self._lower = bound
        return True

    def try_set_upper_bound(self, upper_bound: numeric) -> bool:
        bound = self._make_bound(upper_bound, math.inf)
        if bound is None:
            return False
        if (self._lower is not None) and (self._lower.value > bound.value):
            return False
        self._upper = bound
        return True

    def try_set_bounds(self, lower_bound: numeric, upper_bound: numeric) -> bool:
        lower = self._make_bound(lower_bound, -math.inf)
        upper = self._make_bound(upper_bound, math.inf)
        if (lower is None) or (upper is None) or (lower.value > upper.value):
            return False
        self._lower = lower
        self._upper = upper
        return True

    def _f(self, x):
        return _f_x_exception_wrapper(self.function_to_integrate, x)

    def _check_operable(self):
        if not self.is_operable:
            raise AQNotOperableError(
                "set the bounds and the function to integrate before calling get_value/get_result"
            )

    def get_result(self) -> ResultState:
        """
        Integrate the function from the lower to the upper bound.
        :return: the result as ResultState, including the classification of the run
        """
        self._check_operable()
        if self._lower.value == self._upper.value:
            return ResultState(Classification.PROPER_RESULT, 0.0, 0.0, 0, 0)
        logging.debug("{}: integrate from {} to {}".format(self.integrator.name, self._lower.value, self._upper.value))
        return self._run(self._lower.value, self._upper.value, track_state=True)

    def get_value(self) -> float:
        """
        Integrate the function from the lower to the upper bound.
        :return: the approximation of the integral only
        """
        self._check_operable()
        if self._lower.value == self._upper.value:
            return 0.0
        return self._run(self._lower.value, self._upper.value, track_state=False).value

    def _run(self, lower: float, upper: float, track_state: bool) -> ResultState:
        raise NotImplementedError

    def __str__(self):
        return "{}; lower bound: {}; upper bound: {}".format(self.integrator, self.lower_bound, self.upper_bound)
