from .base import Function
from .library import ConstantFunction, ZeroFunction, CallableFunction
from .analytic import Analytic, x, y, z

__all__ = ["Function", "ConstantFunction", "ZeroFunction", "CallableFunction",
           "Analytic", "x", "y", "z"]
