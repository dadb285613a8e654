"""
Xolyd: helpers for plugins hosted in the Dynamics 365 execution sandbox.

Wraps the host's tracing and organization services behind one traced
facade and renders execution contexts as human-readable trace text.
"""

__version__ = "0.3.0"
