"""
Wind Profile Import

Reads wind soundings and forecasts from pibal XML, CSV and Windsond text
files, normalizes them into one canonical list of wind layers and ranks
layers from several pilots against a target heading.
"""

__version__ = "1.0.0"
__author__ = "Wind Profile Import Project"
