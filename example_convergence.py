import math

import matplotlib
import matplotlib.pyplot as plt

plt.rcParams.update({"text.usetex": True, "font.family": "Helvetica"})

from aquad import AdaptiveGaussKronrodIntegrator
from aquad import AdaptiveGaussLobattoIntegrator
from aquad import ExitCondition
from aquad import RombergIntegrator


def _error_vs_evaluations(integrator_factory, f, a, b, r_ref, tolerances):
    evaluations = []
    err = []
    for tol in tolerances:
        r = integrator_factory(tol).quad(f, a, b)
        evaluations.append(r.evaluations)
        err.append(max(abs(r.value - r_ref), 1e-17))
    return evaluations, err


def example_runge():
    f = lambda x: 1 / (1 + 25 * x**2)
    r_ref = 2 / 5 * math.atan(5)
    tolerances = [10 ** (-k) for k in range(2, 14)]

    fig, ax = plt.subplots(ncols=2, figsize=(10, 5))

    axc = ax[0]
    for order in [15, 31, 61]:
        n, err = _error_vs_evaluations(
            lambda tol: AdaptiveGaussKronrodIntegrator(
                order=order, exit_condition=ExitCondition(50, absolute_tolerance=tol)
            ),
            f,
            -1,
            1,
            r_ref,
            tolerances,
        )
        axc.plot(n, err, ls="", marker=".", label="Gauss-Kronrod {}".format(order))

    n, err = _error_vs_evaluations(
        lambda tol: AdaptiveGaussLobattoIntegrator(exit_condition=ExitCondition(10000, relative_tolerance=tol)),
        f,
        -1,
        1,
        r_ref,
        tolerances,
    )
    axc.plot(n, err, ls="", marker="x", label="Gauss-Lobatto")

    n, err = _error_vs_evaluations(
        lambda tol: RombergIntegrator(exit_condition=ExitCondition(20, absolute_tolerance=tol)),
        f,
        -1,
        1,
        r_ref,
        tolerances,
    )
    axc.plot(n, err, ls="", marker="+", label="Romberg")

    axc.legend()
    axc.set_xlabel("number of function evaluations")
    axc.set_ylabel("abs error")
    axc.set_xscale("log")
    axc.set_yscale("log")

    axc = ax[1]
    for order in [15, 31, 61]:
        err_est = []
        err = []
        for tol in tolerances:
            r = AdaptiveGaussKronrodIntegrator(
                order=order, exit_condition=ExitCondition(50, absolute_tolerance=tol)
            ).quad(f, -1, 1)
            err_est.append(max(r.estimated_absolute_error, 1e-17))
            err.append(max(abs(r.value - r_ref), 1e-17))
        axc.plot(err_est, err, ls="", marker=".", label="Gauss-Kronrod {}".format(order))

    axc.plot([1e-17, 1], [1e-17, 1], color="k", ls="--", lw=1)
    axc.legend()
    axc.set_xlabel("estimated abs error $|K - G|$")
    axc.set_ylabel("abs error")
    axc.set_xscale("log")
    axc.set_yscale("log")

    fig.suptitle(
        "adaptive quadrature, error vs. cost\n"
        + "example: $\\int_{-1}^1 \\frac{1}{1 + 25 x^2} \\mathrm{d}x = \\frac{2}{5}\\arctan(5)$"
    )

    fig.savefig("example_runge.pdf")


def example_inf():
    f = lambda x: x**6 * math.exp(-x)
    r_ref = 720

    fig, ax = plt.subplots(figsize=(5, 5))
    for order in [15, 21, 31]:
        n, err = _error_vs_evaluations(
            lambda tol: AdaptiveGaussKronrodIntegrator(
                order=order, exit_condition=ExitCondition(50, relative_tolerance=tol)
            ),
            f,
            0,
            "inf",
            r_ref,
            [10 ** (-k) for k in range(2, 14)],
        )
        ax.plot(n, err, ls="", marker=".", label="Gauss-Kronrod {}".format(order))

    ax.legend()
    ax.set_xlabel("number of function evaluations")
    ax.set_ylabel("abs error")
    ax.set_yscale("log")

    fig.suptitle("example: $\\int_0^\\infty x^6 e^{-x} \\mathrm{d}x = 720$")
    fig.savefig("example_inf.pdf")


if __name__ == "__main__":
    example_runge()
    # example_inf()
