"""
Time series for the COVID-19 Canada Open Data Working Group dataset, built from spreadsheet exports.
"""

import importlib.metadata

__version__ = importlib.metadata.version("ccodwg-update")
