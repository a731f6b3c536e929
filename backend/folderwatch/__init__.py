"""
folderwatch — watched folder state for a continuous test runner.
"""

__version__ = "0.1.0"
