from .aq_exceptions import *
from .exit_condition import ExitCondition
from .exit_condition import ToleranceType
from .integrator import Bound
from .integrator import BoundKind
from .integrator import Classification
from .integrator import ResultState
from .kronrod import AdaptiveGaussKronrodIntegrator
from .kronrod import QuadratureTable
from .kronrod import get_quadrature_table
from .lobatto import AdaptiveGaussLobattoIntegrator
from .romberg import RombergIntegrator
