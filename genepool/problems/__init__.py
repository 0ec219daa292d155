from genepool.problems.base import EvolutionProblem, default_identity
from genepool.problems.functional import FunctionalProblem

__all__ = ["EvolutionProblem", "FunctionalProblem", "default_identity"]
