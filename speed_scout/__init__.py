"""
SpeedScout package initializer.
Defines package version; the CLI lives in :mod:`speed_scout.cli`.
"""
__version__ = "0.1.0"
