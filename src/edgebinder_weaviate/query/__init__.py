from .builder import BindingQueryBuilder, QueryExecutor
from .criteria import (
    SORT_ASC,
    SORT_DESC,
    EntityCriteria,
    OrderByCriteria,
    QueryCriteria,
    WhereCriteria,
)
from .evaluator import MISSING, MemoryOperator, MemoryOperatorRegistry
from .filter_engine import FilterEngine, resolve_field
from .operators import VALID_OPERATORS, QueryOperator
from .operators_memory import build_default_registry
from .result import QueryResult
from .transformer import CriteriaTransformer

__all__ = [
    "BindingQueryBuilder",
    "QueryExecutor",
    "EntityCriteria",
    "WhereCriteria",
    "OrderByCriteria",
    "QueryCriteria",
    "SORT_ASC",
    "SORT_DESC",
    "MISSING",
    "MemoryOperator",
    "MemoryOperatorRegistry",
    "build_default_registry",
    "FilterEngine",
    "resolve_field",
    "QueryOperator",
    "VALID_OPERATORS",
    "QueryResult",
    "CriteriaTransformer",
]
