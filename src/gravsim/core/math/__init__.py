"""Math utilities namespace."""

from .vector import DIM, norm, unit  # noqa: F401
