from enum import Enum


class QueryOperator(str, Enum):
    """Supported where-condition operators."""

    # Standard comparison
    EQ = "="
    NE = "!="
    GT = ">"
    GE = ">="
    LT = "<"
    LE = "<="

    # Set
    IN = "in"
    NOT_IN = "notIn"
    BETWEEN = "between"

    # Presence / null checks
    EXISTS = "exists"
    IS_NULL = "null"
    NOT_NULL = "notNull"


VALID_OPERATORS: tuple[str, ...] = tuple(op.value for op in QueryOperator)
