"""Exceptions raised by the hierarchic finite elements."""

import numpy as np


class InvalidArgumentError(ValueError):
    """An index, codimension, degree or array shape outside its valid range."""


class UnsupportedOperationError(NotImplementedError):
    """An operation that is not defined for the reference element."""


class NumericalDegeneracyError(np.linalg.LinAlgError):
    """The evaluation nodes do not determine a unique expansion."""
