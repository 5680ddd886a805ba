"""State namespace."""

from .body import Body  # noqa: F401
from .derivative import BodyDerivative, SimDerivative  # noqa: F401
from .sim_state import SimState  # noqa: F401
