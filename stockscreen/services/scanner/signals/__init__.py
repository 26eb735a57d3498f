"""
Alert Implementations.

All detectors are auto-registered when imported.
Import all detector modules here to trigger registration.
"""

# Import all alert groups to trigger registration
from . import trend
from . import momentum
from . import volume
from . import comprehensive
