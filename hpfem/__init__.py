from .exceptions import (  # noqa: F401
    InvalidArgumentError,
    NumericalDegeneracyError,
    UnsupportedOperationError,
)
from .fe_space import (  # noqa: F401
    check_orientations,
    rsf_layout,
    shape_function_layout,
)
from .finite_elements import (  # noqa: F401
    HierarchicFiniteElement,
    HierarchicPoint,
    HierarchicSegment,
    HierarchicTriangle,
    HierarchicQuadrilateral,
)
from .quadrature import gauss_quadrature  # noqa: F401
from .reference_elements import (  # noqa: F401
    Orientation,
    RefElType,
    ReferencePoint,
    ReferenceInterval,
    ReferenceTriangle,
    ReferenceQuadrilateral,
)
