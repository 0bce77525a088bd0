"""
otherside — Audio anomaly detection and trigger-driven VOX synthesis.

Layers:
    otherside.core         Pure computation (numpy/scipy), no I/O.
    otherside.api.schemas  Pydantic models for the JSON boundary.
"""

__version__ = "1.0.0"
