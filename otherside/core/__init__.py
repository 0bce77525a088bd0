"""
otherside/core — Pure signal-processing core.

Everything under core/ is side-effect free: arrays and frozen configs in,
frozen dataclasses out. Persistence, HTTP and file decoding live outside
this package.
"""
