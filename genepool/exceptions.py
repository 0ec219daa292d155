class GenePoolError(Exception):
    """Base for all genepool exceptions."""

    pass


class ConfigurationError(GenePoolError):
    """Invalid engine configuration, detected before the first generation."""

    pass


class EvolutionError(GenePoolError):
    """Evolution process failures."""

    pass


class EmptyPopulationError(EvolutionError):
    """Selection or ranking attempted on an empty population."""

    pass


class StrategyError(GenePoolError):
    """A caller-supplied strategy hook raised.

    The original exception is chained as ``__cause__`` and kept on
    :pyattr:`original`.
    """

    def __init__(self, hook: str, original: BaseException):
        self.hook = hook
        self.original = original
        super().__init__(f"Strategy '{hook}' failed: {original!r}")
