"""Volume Alerts."""
from .volume_surge import HighVolumeAlert
