"""
NaturaCode core package.
"""

from .version import __version__  # noqa: F401
from .errors import NaturaCodeError  # noqa: F401
from .parser import classify_line  # noqa: F401
from .runtime.interpreter import Interpreter  # noqa: F401

__all__ = [
    "ast_nodes",
    "parser",
    "errors",
    "runtime",
    "speech",
    "Interpreter",
    "NaturaCodeError",
    "classify_line",
    "__version__",
]
