"""Time-scoped finders ("by year", "by month", "yesterday", "as of 2 weeks ago") for table models.

The temporal layer resolves loosely-typed finder arguments into a strict `BoundaryPair`, which is
then used to build a deterministic, parameterized range query.
"""

from bystar.finders import ByStarModel
from bystar.model import Model
from bystar.sql.builder import Refinement, SQLBuilderError
from bystar.temporal.relative import RelativeParseError
from bystar.temporal.schema import BoundaryPair, Duration, Unit
from bystar.temporal.validate import ParseError

__version__ = "0.1.0"
__all__ = [
    "BoundaryPair",
    "ByStarModel",
    "Duration",
    "Model",
    "ParseError",
    "Refinement",
    "RelativeParseError",
    "SQLBuilderError",
    "Unit",
]
