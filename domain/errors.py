"""Exception types raised by the curve statistics core."""


class ShapeMismatchError(ValueError):
    """Label, score, name or orientation inputs disagree in length or shape."""


class TypeMismatchError(TypeError):
    """Labels are not boolean, scores are not numeric, or names are not strings."""


class SamplingNonTerminationError(RuntimeError):
    """A rejection-sampling loop exceeded its round cap without filling its quota."""
