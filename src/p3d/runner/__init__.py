"""Evolution runner and command line."""

from .experiment import EvolutionRunner

__all__ = ["EvolutionRunner"]
