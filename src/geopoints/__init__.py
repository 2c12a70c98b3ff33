"""Spherical-earth geodesy with pluggable radius-query and geocoding backends."""

__version__ = "0.1.0"
