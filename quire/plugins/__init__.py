from quire.plugins.code import code
from quire.plugins.math import math

__all__ = [
    "code",
    "math",
]
