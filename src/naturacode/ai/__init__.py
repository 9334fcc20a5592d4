"""
Model-call subsystem with the provider interface and the deterministic mock.
"""

from .providers import MockModelProvider, ModelProvider, select_canned_reply

__all__ = ["ModelProvider", "MockModelProvider", "select_canned_reply"]
