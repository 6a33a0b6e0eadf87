"""
p3d: packing five-cell pieces into a 5×5×5 cube.

Public API:
    from p3d.core import Cube, Piece, first_valid, next_valid
    from p3d.config import SolverConfig, Verbosity, load_config
    from p3d.algorithms.evolution import Evolution
    from p3d.runner.experiment import EvolutionRunner
"""

__version__ = "0.1.0"
