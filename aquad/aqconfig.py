"""
These parameters control the default behaviour of the adaptive integrators and the
pre-calculation of the Gauss-Kronrod nodes and weights.
"""

import numpy as np

# machine constants used verbatim in the plateau and degenerate-width tests
MACHINE_EPSILON = float(np.finfo(float).eps)
SUPER_TINY_EPSILON = MACHINE_EPSILON

# upper limit for the number of function evaluations if not specified otherwise
MAX_EVALUATIONS = 2 ** 31 - 1

# defaults of the adaptive Gauss-Kronrod integrator,
# max_iterations bounds the depth of the bisection tree
kronrod_order = 15
kronrod_max_iterations = 50
kronrod_abs_tol = 1e-12
kronrod_rel_tol = 1e-12

# defaults of the adaptive Gauss-Lobatto integrator,
# max_iterations bounds the number of refinement steps
lobatto_max_iterations = 10000
lobatto_rel_tol = 1e-12

# defaults of the Romberg integrator
romberg_max_iterations = 20
romberg_abs_tol = 1e-12
romberg_rel_tol = 1e-12
# the row index j is used as exponent in 2**j panels, keep it within the int32 range
romberg_max_rows = 29

# this file holds the pre-calculated nodes and weights of the Gauss-Kronrod rules
_f_name = "kronrod_nodes_weights.py"

# supported orders 2n+1 of the Kronrod rules (n is the order of the embedded Gauss rule)
kronrod_orders = (15, 21, 31, 41, 51, 61)

# decimal digits used by mpmath when generating the nodes and weights
generator_dps = 80

# number of significant digits written to the generated file
generator_digits = 33
