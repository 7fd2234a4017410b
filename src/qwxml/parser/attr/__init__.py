"""Built-in attribute types, associated with the default registry on import."""

from .boolean import Boolean
from .constructor import Constructor, Instance
from .image import Image
from .number import Number, NumberList, parse_float, parse_int

__all__ = [
    "Boolean",
    "Constructor",
    "Image",
    "Instance",
    "Number",
    "NumberList",
    "parse_float",
    "parse_int",
]
