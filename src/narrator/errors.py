class NarratorError(Exception):
    pass


class StepDefinitionError(NarratorError):
    """Step modules or environment hooks could not be loaded."""
