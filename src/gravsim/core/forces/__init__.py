"""Force kernels."""

from .power_law import power_law_accel, suppression_mask  # noqa: F401
