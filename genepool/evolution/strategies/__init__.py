from genepool.evolution.strategies.diversity import replenish, unique_by
from genepool.evolution.strategies.elite_selectors import (
    EliteSelector,
    UniqueEliteSelector,
)
from genepool.evolution.strategies.ranking import attach_rank, order_by_fitness
from genepool.evolution.strategies.removers import (
    BottomFractionRemover,
    FitnessThresholdRemover,
    MemberRemover,
)
from genepool.evolution.strategies.selectors import (
    ParentSelector,
    RankWeightedParentSelector,
    WeightedPopulation,
)

__all__ = [
    "BottomFractionRemover",
    "EliteSelector",
    "FitnessThresholdRemover",
    "MemberRemover",
    "ParentSelector",
    "RankWeightedParentSelector",
    "UniqueEliteSelector",
    "WeightedPopulation",
    "attach_rank",
    "order_by_fitness",
    "replenish",
    "unique_by",
]
