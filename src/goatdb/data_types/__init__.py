"""Field validators for entity types."""

from goatdb.data_types.base import DataType
from goatdb.data_types.boolean_type import BooleanType
from goatdb.data_types.datetime_type import DateTimeType
from goatdb.data_types.enum_type import EnumType
from goatdb.data_types.number_type import FloatType, IntegerType, NumberType
from goatdb.data_types.string_type import StringType

__all__ = [
    "BooleanType",
    "DataType",
    "DateTimeType",
    "EnumType",
    "FloatType",
    "IntegerType",
    "NumberType",
    "StringType",
]
