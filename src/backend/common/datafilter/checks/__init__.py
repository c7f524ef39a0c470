from .value import CHECK_VALUE
from .exists import CHECK_EXISTS
from .array_element import CHECK_ARRAY_ELEMENT
from .array_size import CHECK_ARRAY_SIZE
from .time_range import CHECK_TIME_RANGE
from .numeric_range import CHECK_NUMERIC_RANGE
from .one_of import CHECK_ONE_OF

__all__ = [
    "CHECK_VALUE",
    "CHECK_EXISTS",
    "CHECK_ARRAY_ELEMENT",
    "CHECK_ARRAY_SIZE",
    "CHECK_TIME_RANGE",
    "CHECK_NUMERIC_RANGE",
    "CHECK_ONE_OF",
]
