"""
Central version constant for NaturaCode.
"""

__version__ = "1.0.0"
