from aquad import *
import math


def _algorithm(f, a, b, exit_condition=None):
    alg = RombergIntegrator(exit_condition=exit_condition).create()
    assert alg.try_set_bounds(a, b)
    alg.function_to_integrate = f
    return alg


def test_cubic():
    """Simpson's rule T(1, 1) is already exact, the next row confirms it"""
    r = _algorithm(lambda x: x ** 3, 0, 2).get_result()
    assert r.classification == Classification.PROPER_RESULT
    assert r.value == 4
    assert r.benchmark_value == 4
    assert r.iterations == 3
    assert r.evaluations == 5


def test_exp():
    r = _algorithm(math.exp, 0, 1).get_result()
    assert r.is_proper
    assert abs(r.value - (math.e - 1)) < 1e-10


def test_evaluation_limit():
    ec = ExitCondition(20, max_evaluations=3, relative_tolerance=1e-12)
    r = _algorithm(math.exp, 0, 1, ec).get_result()
    assert r.classification == Classification.EVALUATION_LIMIT_EXCEEDED
    assert r.iterations == 2
    assert r.evaluations == 3


def test_iteration_limit():
    ec = ExitCondition(1, relative_tolerance=1e-12)
    r = _algorithm(math.exp, 0, 1, ec).get_result()
    assert r.classification == Classification.ITERATION_LIMIT_EXCEEDED
    assert r.iterations == 1
    assert r.evaluations == 2
    assert abs(r.value - (1 + math.e) / 2) < 1e-15

    ec = ExitCondition(4)
    r = _algorithm(math.exp, 0, 1, ec).get_result()
    assert r.classification == Classification.ITERATION_LIMIT_EXCEEDED
    assert r.iterations == 4
    assert r.evaluations == 2 + 1 + 2 + 4


def test_agrees_with_kronrod():
    f = lambda x: math.cos(x) ** 2
    r_rom = RombergIntegrator().quad(f, 0, 3)
    r_kr = AdaptiveGaussKronrodIntegrator().quad(f, 0, 3)
    assert abs(r_rom.value - r_kr.value) < 1e-10
    assert abs(r_kr.value - (1.5 + math.sin(6) / 4)) < 1e-12


def test_no_infinite_bounds():
    alg = RombergIntegrator().create()
    assert not alg.try_set_bounds(0, math.inf)
    assert alg.try_set_bounds(0, 1)
    assert alg.upper_bound_descriptor.kind == BoundKind.CLOSED
