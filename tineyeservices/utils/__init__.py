from .json_safe import dumps_field, to_jsonable

__all__ = ["dumps_field", "to_jsonable"]
