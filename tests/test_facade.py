from aquad import *
from aquad import aqconfig
import math

import pytest


@pytest.mark.parametrize("integrator_cls", [AdaptiveGaussKronrodIntegrator, AdaptiveGaussLobattoIntegrator, RombergIntegrator])
def test_bounds(integrator_cls):
    alg = integrator_cls().create()
    assert math.isnan(alg.lower_bound)
    assert math.isnan(alg.upper_bound)
    assert alg.lower_bound_descriptor is None
    assert not alg.is_operable

    assert not alg.try_set_bounds(1, 0)
    assert not alg.try_set_lower_bound(math.nan)
    assert not alg.try_set_upper_bound("a")

    assert alg.try_set_lower_bound(0)
    assert not alg.try_set_upper_bound(-1)
    assert alg.try_set_upper_bound(1)
    assert alg.lower_bound == 0
    assert alg.upper_bound == 1
    assert not alg.try_set_lower_bound(2)
    assert alg.lower_bound == 0

    assert not alg.is_operable
    alg.function_to_integrate = math.cos
    assert alg.is_operable
    assert abs(alg.get_value() - math.sin(1)) < 1e-10


def test_unbounded_descriptor():
    alg = AdaptiveGaussKronrodIntegrator().create()
    # the lower bound may be -inf only, the upper bound +inf only
    assert not alg.try_set_lower_bound(math.inf)
    assert not alg.try_set_upper_bound(-math.inf)
    assert alg.try_set_bounds(-math.inf, 3)
    assert alg.lower_bound_descriptor == Bound(-math.inf, BoundKind.UNBOUNDED)
    assert alg.upper_bound_descriptor.kind == BoundKind.OPEN


def test_not_operable():
    alg = AdaptiveGaussLobattoIntegrator().create()
    alg.try_set_bounds(0, 1)
    try:
        alg.get_result()
    except AQNotOperableError:
        pass
    else:
        assert False

    alg = AdaptiveGaussKronrodIntegrator().create()
    alg.function_to_integrate = math.exp
    try:
        alg.get_value()
    except AQNotOperableError:
        pass
    else:
        assert False


def test_create_independent():
    integrator = AdaptiveGaussKronrodIntegrator()
    alg1 = integrator.create()
    alg2 = integrator.create()
    assert alg1 is not alg2
    assert alg1.exit_condition is alg2.exit_condition

    alg1.try_set_bounds(0, 1)
    alg1.function_to_integrate = math.exp
    alg2.try_set_bounds(0, 2)
    alg2.function_to_integrate = lambda x: x

    assert abs(alg1.get_value() - (math.e - 1)) < 1e-12
    assert abs(alg2.get_value() - 2) < 1e-12
    assert alg1.upper_bound == 1


def test_invalid_exit_condition():
    for integrator_cls in [AdaptiveGaussKronrodIntegrator, AdaptiveGaussLobattoIntegrator, RombergIntegrator]:
        try:
            integrator_cls(exit_condition=1e-8)
        except AQConfigurationError:
            pass
        else:
            assert False


def test_default_exit_condition():
    assert AdaptiveGaussKronrodIntegrator().exit_condition.max_iterations == aqconfig.kronrod_max_iterations
    assert AdaptiveGaussLobattoIntegrator().exit_condition.relative_tolerance == aqconfig.lobatto_rel_tol
    assert RombergIntegrator().exit_condition.max_iterations == aqconfig.romberg_max_iterations

    ec = ExitCondition(7)
    assert RombergIntegrator(exit_condition=ec).exit_condition is ec


def test_function_evaluation_error():
    def f(x):
        return 1 / (x - x)

    try:
        AdaptiveGaussKronrodIntegrator().quad(f, 0, 1)
    except AQFunctionEvaluationError as e:
        assert isinstance(e.__cause__, ZeroDivisionError)
    else:
        assert False


def test_quad_args():
    f = lambda x, c: c * x
    for integrator in [AdaptiveGaussKronrodIntegrator(), AdaptiveGaussLobattoIntegrator(), RombergIntegrator()]:
        r = integrator.quad(f, 0, 2, args=(3,))
        assert abs(r.value - 6) < 1e-12

        r = integrator.quad(f, 2, 0, args=(3,))
        assert abs(r.value + 6) < 1e-12


def test_quad_equal_bounds():
    r = AdaptiveGaussLobattoIntegrator().quad(lambda x: 1 / 0, 1, 1)
    assert r.is_proper
    assert r.value == 0


def test_str():
    integrator = AdaptiveGaussLobattoIntegrator()
    alg = integrator.create()
    alg.try_set_bounds(-1, 1)
    assert "Gauss-Lobatto" in str(integrator)
    assert "upper bound: 1.0" in str(alg)
