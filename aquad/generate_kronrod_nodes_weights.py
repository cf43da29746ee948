"""
generate the nodes and weights of the embedded Gauss-Kronrod rules

Use high precision mpmath library to pre-calculate the nodes and weights
and save them to a file.

The Kronrod rule of order 2n+1 extends the n point Gauss-Legendre rule by the n+1 zeros of the
Stieltjes polynomial E_(n+1), which is defined by

    int_-1^1 P_n(x) E_(n+1)(x) x^m dx = 0    for m = 0, ..., n

The coefficients of P_n and E_(n+1) are calculated exactly (rational arithmetic), the zeros and
weights with the working precision `aqconfig.generator_dps`.

See `aqconfig.py` for parameters to control the pre-calculation
"""

# python imports
from fractions import Fraction
import logging
import os

# third party imports
import mpmath as mp

# aquad module imports
from . import aqconfig

_header = '''"""
pre-calculated abscissas and weights of the embedded Gauss-Kronrod rules

Only the non-negative half of the symmetric rules on [-1, 1] is stored, nodes in descending order.
The Kronrod weights carry one additional trailing entry for the center node 0. The Gauss weights belong
to the nodes at odd positions of `evaluation_points`, plus a trailing center weight if the embedded
Gauss rule has odd order.

This file is written by `generate_kronrod_nodes_weights.py`.
"""
'''


def legendre_coefficients(n):
    """exact coefficients of P_n, index is the power of x"""
    p0 = [Fraction(1)]
    if n == 0:
        return p0
    p1 = [Fraction(0), Fraction(1)]
    for k in range(1, n):
        # (k+1) P_(k+1) = (2k+1) x P_k - k P_(k-1)
        p2 = [Fraction(0)] + [(2 * k + 1) * c for c in p1]
        for i, c in enumerate(p0):
            p2[i] -= k * c
        p0, p1 = p1, [c / (k + 1) for c in p2]
    return p1


def _int_monomial(p):
    """int_-1^1 x^p dx"""
    return Fraction(2, p + 1) if p % 2 == 0 else Fraction(0)


def _solve_exact(a, b):
    """
    Gauss-Jordan elimination with rational numbers

    The moment matrix of the Stieltjes polynomial is severely ill-conditioned for the higher
    orders, so it is solved exactly and the coefficients are converted to mpf afterwards.
    """
    n = len(b)
    m = [list(row) + [bi] for row, bi in zip(a, b)]
    for col in range(n):
        pivot = next(r for r in range(col, n) if m[r][col] != 0)
        m[col], m[pivot] = m[pivot], m[col]
        piv = m[col][col]
        m[col] = [c / piv for c in m[col]]
        for r in range(n):
            if r != col and m[r][col] != 0:
                fac = m[r][col]
                m[r] = [c - fac * d for c, d in zip(m[r], m[col])]
    return [m[r][n] for r in range(n)]


def stieltjes_coefficients(n):
    """exact coefficients of the monic Stieltjes polynomial E_(n+1), index is the power of x"""
    deg = n + 1
    p_n = legendre_coefficients(n)
    # E = x^deg + sum_j c_j x^(deg - 2j)
    powers = list(range(deg - 2, -1, -2))
    odd_m = list(range(1, n + 1, 2))

    def moment(power, m):
        return sum(c * _int_monomial(i + power + m) for i, c in enumerate(p_n) if c != 0)

    a = [[moment(p, m) for p in powers] for m in odd_m]
    b = [-moment(deg, m) for m in odd_m]
    c = _solve_exact(a, b)

    e = [Fraction(0)] * (deg + 1)
    e[deg] = Fraction(1)
    for p, cp in zip(powers, c):
        e[p] = cp
    return e


def _mpf(c):
    return mp.mpf(c.numerator) / c.denominator


def gauss_nodes_weights(n):
    """positive nodes (descending) and weights of the n point Gauss-Legendre rule, center last if n is odd"""
    coeffs = [_mpf(c) for c in legendre_coefficients(n)]
    eps = mp.mpf(10) ** (-mp.mp.dps + 5)

    nodes = []
    weights = []
    for j in range(1, n // 2 + 1):
        # newton iteration, starting from the asymptotic location of the zero
        x = mp.cos(mp.pi * (j - mp.mpf(0.25)) / (n + mp.mpf(0.5)))
        for _ in range(100):
            p, dp = mp.polyval(coeffs, x, derivative=True, asc=True)
            dx = p / dp
            x -= dx
            if abs(dx) < eps:
                break
        else:
            raise RuntimeError("newton iteration for zero {} of P_{} did not converge".format(j, n))
        p, dp = mp.polyval(coeffs, x, derivative=True, asc=True)
        nodes.append(x)
        weights.append(2 / ((1 - x ** 2) * dp ** 2))

    if n % 2 == 1:
        p, dp = mp.polyval(coeffs, mp.mpf(0), derivative=True, asc=True)
        weights.append(2 / dp ** 2)
    return nodes, weights


def stieltjes_positive_zeros(n):
    """positive zeros of E_(n+1), descending"""
    e = stieltjes_coefficients(n)
    deg = n + 1
    # E(x) = x^(deg%2) Q(x^2), find the zeros of Q
    q = e[deg % 2 :: 2]
    y = mp.polyroots([_mpf(c) for c in q], maxsteps=500, extraprec=300, asc=True)
    return sorted((mp.sqrt(mp.re(yi)) for yi in y), reverse=True)


def kronrod_weights(nodes):
    """
    weights of the symmetric rule with the positive `nodes` and the center,
    fixed by the exact integration of x^(2m) for m = 0, ..., len(nodes)
    """
    k = len(nodes)
    a = mp.matrix(k + 1, k + 1)
    b = mp.matrix(k + 1, 1)
    for m in range(k + 1):
        for i, x in enumerate(nodes):
            a[m, i] = 2 * x ** (2 * m)
        a[m, k] = 1 if m == 0 else 0
        b[m] = mp.mpf(2) / (2 * m + 1)
    w = mp.lu_solve(a, b)
    return [w[i] for i in range(k + 1)]


def gauss_kronrod(order):
    """
    :return: the tuple (evaluation_points, gauss_weights, kronrod_weights) as mpf lists
        in the layout of `kronrod_nodes_weights`
    """
    n = order // 2
    g_nodes, g_weights = gauss_nodes_weights(n)
    nodes = sorted(g_nodes + stieltjes_positive_zeros(n), reverse=True)
    assert len(nodes) == n
    return nodes, g_weights, kronrod_weights(nodes)


def _write_dict(name, data, f):
    print("{} = {{".format(name), file=f)
    for order, values in data.items():
        print("    {}: [".format(order), file=f)
        for v in values:
            print(
                "        {},".format(mp.nstr(v, aqconfig.generator_digits, min_fixed=-10, max_fixed=10, strip_zeros=False)),
                file=f,
            )
        print("    ],", file=f)
    print("}", file=f)


def write_nodes_weights(orders, f_name):
    points, g_weights, k_weights = {}, {}, {}
    with mp.workdps(aqconfig.generator_dps):
        for order in orders:
            logging.info("calculate Gauss-Kronrod rule of order {}".format(order))
            points[order], g_weights[order], k_weights[order] = gauss_kronrod(order)

        with open(f_name, "w") as f:
            print(_header, file=f)
            _write_dict("evaluation_points", points, f)
            print(file=f)
            _write_dict("gauss_weights", g_weights, f)
            print(file=f)
            _write_dict("kronrod_weights", k_weights, f)


########################################################################################################################
##    pre-calculate nodes and weights if needed
########################################################################################################################


def run(overwrite=False):
    pth, fl = os.path.split(__file__)
    _f_name_abs = os.path.join(pth, aqconfig._f_name)

    # generate, if missing, using mpmath routines
    if not os.path.exists(_f_name_abs):
        logging.info("pre-calculated nodes/weights missing ({})".format(_f_name_abs))
    elif overwrite:
        logging.info("overwrite existing file {}".format(_f_name_abs))
    else:
        return

    logging.info("generate nodes and weights ...")
    write_nodes_weights(orders=aqconfig.kronrod_orders, f_name=_f_name_abs)
    logging.info("done!")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    run(overwrite=True)
