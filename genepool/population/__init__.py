from genepool.population.candidate import Candidate, Population

__all__ = ["Candidate", "Population"]
