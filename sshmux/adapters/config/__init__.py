"""
Configuration adapters
"""
from .loader import ConfigLoader, build_dialer

__all__ = ["ConfigLoader", "build_dialer"]
