"""Composite Alerts - evaluated only when nothing else fired."""
from .strong_technicals import StrongTechnicalsAlert
