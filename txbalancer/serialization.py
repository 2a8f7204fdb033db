"""Conversion between library objects and plain Python data.

The ledger's binary wire format lives outside this library. Objects here only round trip through
"primitives" (ints, bytes, strings, lists and dicts), which is what a query layer hands over when it
builds UTxO snapshots.
"""

from __future__ import annotations

import typing
from copy import deepcopy
from dataclasses import Field, dataclass, fields
from functools import wraps
from inspect import isclass
from typing import Any, Dict, List, Type, TypeVar, Union, get_type_hints

from pprintpp import pformat

from txbalancer.exception import DeserializeException
from txbalancer.types import check_type

__all__ = [
    "Primitive",
    "Serializable",
    "ArraySerializable",
    "MapSerializable",
    "DictSerializable",
    "limit_primitive_type",
]

Primitive = Union[bytes, bytearray, str, int, bool, None, list, tuple, dict]
"""Plain data types an object can be reduced to."""

PRIMITIVE_TYPES = (bytes, bytearray, str, int, bool, type(None), list, tuple, dict)


def limit_primitive_type(*allowed_types):
    """
    A helper function to validate primitive type given to from_primitive class methods

    Not exposed to public by intention.
    """

    def decorator(func):
        @wraps(func)
        def wrapper(cls, value: Primitive):
            if not isinstance(value, allowed_types):
                allowed_types_str = [
                    allowed_type.__name__ for allowed_type in allowed_types
                ]
                raise DeserializeException(
                    f"{allowed_types_str} typed value is required for deserialization. Got {type(value)}: {value}"
                )
            return func(cls, value)

        return wrapper

    return decorator


Base = TypeVar("Base", bound="Serializable")


class Serializable:
    """
    Serializable standardizes how a class is reduced to plain Python data and restored from it.

    Subclasses implement either :meth:`to_primitive` or the simpler :meth:`to_shallow_primitive`, whose result
    may still contain other :class:`Serializable` objects, together with :meth:`from_primitive`.
    """

    def to_shallow_primitive(self) -> Union[Primitive, Serializable]:
        raise NotImplementedError(
            f"'to_shallow_primitive()' is not implemented by {self.__class__}."
        )

    def to_primitive(self) -> Primitive:
        """Convert the instance and its elements to primitives recursively.

        Returns:
            :const:`Primitive`: A plain python value.
        """

        def _dfs(value):
            if isinstance(value, Serializable):
                return _dfs(value.to_primitive())
            elif isinstance(value, dict):
                return {_dfs(k): _dfs(v) for k, v in value.items()}
            elif isinstance(value, (list, tuple)):
                return type(value)(_dfs(v) for v in value)
            return value

        return _dfs(self.to_shallow_primitive())

    def validate(self):
        """Validate the data stored in the current instance. Defaults to always pass.

        Raises:
            InvalidDataException: When the data is invalid.
        """
        pass

    def to_validated_primitive(self) -> Primitive:
        self.validate()
        return self.to_primitive()

    @classmethod
    def from_primitive(cls: Type[Base], value: Any) -> Base:
        """Turn a primitive back to its original class type.

        Raises:
            DeserializeException: When the object could not be restored from primitives.
        """
        raise NotImplementedError(
            f"'from_primitive()' is not implemented by {cls.__name__}."
        )

    def __repr__(self):
        return pformat(vars(self), indent=2)


def _restore_dataclass_field(f: Field, v: Primitive) -> Any:
    if "object_hook" in f.metadata:
        return f.metadata["object_hook"](v)
    return _restore_typed_primitive(f.type, v)


def _restore_typed_primitive(t: Any, v: Primitive) -> Any:
    """Try to restore a value back to its original type based on a type hint."""
    origin = typing.get_origin(t)
    if t is Any:
        return v
    elif isclass(t) and issubclass(t, Serializable):
        if isinstance(v, t):
            return v
        return t.from_primitive(v)
    elif isclass(t) and t in PRIMITIVE_TYPES:
        if not isinstance(v, t):
            raise DeserializeException(f"Expected type {t} but got {type(v)}")
        return v
    elif origin is list:
        (t_subtype,) = typing.get_args(t)
        if not isinstance(v, (list, tuple)):
            raise DeserializeException(f"Expected type list but got {type(v)}")
        return [_restore_typed_primitive(t_subtype, w) for w in v]
    elif origin is Union:
        t_args = typing.get_args(t)
        if v is None and type(None) in t_args:
            return None
        for arg in t_args:
            try:
                return _restore_typed_primitive(arg, v)
            except (DeserializeException, TypeError, ValueError, AssertionError):
                pass
        raise DeserializeException(
            f"Cannot deserialize object: \n{v}\n in any valid type from {t_args}."
        )
    raise DeserializeException(f"Cannot deserialize object: \n{v}\n to type {t}.")


ArrayBase = TypeVar("ArrayBase", bound="ArraySerializable")


@dataclass(repr=False)
class ArraySerializable(Serializable):
    """
    A base class that reduces its child `dataclass <https://docs.python.org/3/library/dataclasses.html>`_
    to a list, where the position of each item carries its meaning.

    Fields whose metadata has ``"optional": True`` are dropped from the list when they are None.

    Examples:

        >>> from dataclasses import dataclass, field
        >>> @dataclass
        ... class Test1(ArraySerializable):
        ...     a: str
        ...     b: str=field(default=None, metadata={"optional": True})
        >>> @dataclass
        ... class Test2(ArraySerializable):
        ...     c: str
        ...     test1: Test1
        >>> t = Test2(c="c", test1=Test1(a="a"))
        >>> t.to_primitive()
        ['c', ['a']]
    """

    def to_shallow_primitive(self) -> List[Any]:
        primitives = []
        for f in fields(self):
            val = getattr(self, f.name)
            if val is None and f.metadata.get("optional"):
                continue
            primitives.append(val)
        return primitives

    @classmethod
    @limit_primitive_type(list, tuple)
    def from_primitive(cls: Type[ArrayBase], values: Union[list, tuple]) -> ArrayBase:
        all_fields = [f for f in fields(cls) if f.init]
        type_hints = get_type_hints(cls)

        restored_vals = []
        for f, v in zip(all_fields, values):
            if not isclass(f.type):
                f.type = type_hints[f.name]
            restored_vals.append(_restore_dataclass_field(f, v))
        return cls(*restored_vals)

    def __repr__(self):
        return super().__repr__()


MapBase = TypeVar("MapBase", bound="MapSerializable")


@dataclass(repr=False)
class MapSerializable(Serializable):
    """
    A base class that reduces its child dataclass to a dict. The key of each field is taken from its
    ``"key"`` metadata when present, otherwise the field name is used. Optional fields that are None are dropped.
    """

    def to_shallow_primitive(self) -> Dict[Any, Any]:
        primitives: Dict[Any, Any] = {}
        for f in fields(self):
            key = f.metadata.get("key", f.name)
            val = getattr(self, f.name)
            if val is None and f.metadata.get("optional"):
                continue
            primitives[key] = val
        return primitives

    @classmethod
    @limit_primitive_type(dict)
    def from_primitive(cls: Type[MapBase], values: dict) -> MapBase:
        all_fields = {f.metadata.get("key", f.name): f for f in fields(cls) if f.init}
        type_hints = get_type_hints(cls)

        kwargs = {}
        for key, v in values.items():
            if key not in all_fields:
                raise DeserializeException(f"Unexpected map key {key}.")
            f = all_fields[key]
            if not isclass(f.type):
                f.type = type_hints[f.name]
            kwargs[f.name] = _restore_dataclass_field(f, v)
        return cls(**kwargs)

    def __repr__(self):
        return super().__repr__()


DictBase = TypeVar("DictBase", bound="DictSerializable")


class DictSerializable(Serializable):
    """A dictionary class where all keys share the same type and all values share the same type.

    Examples:

        >>> class Test(DictSerializable):
        ...     KEY_TYPE = str
        ...     VALUE_TYPE = int
        >>>
        >>> t = Test()
        >>> t["x"] = 1
        >>> Test.from_primitive(t.to_primitive()) == t
        True
        >>> t[1] = 2
        Traceback (most recent call last):
         ...
        typeguard.TypeCheckError: int is not an instance of str
    """

    KEY_TYPE: Any = Type[Any]
    VALUE_TYPE: Any = Type[Any]

    def __init__(self, *args, **kwargs):
        self.data: Dict[Any, Any] = {}
        for k, v in dict(*args, **kwargs).items():
            self[k] = v

    def __getattr__(self, item):
        if item == "data":
            raise AttributeError(item)
        return getattr(self.data, item)

    def __setitem__(self, key: Any, value: Any):
        check_type(key, self.KEY_TYPE)
        check_type(value, self.VALUE_TYPE)
        self.data[key] = value

    def __getitem__(self, key):
        return self.data[key]

    def __contains__(self, key):
        return key in self.data

    def __eq__(self, other):
        if isinstance(other, DictSerializable):
            return self.data == other.data
        else:
            return False

    def __len__(self):
        return len(self.data)

    def __iter__(self):
        return iter(self.data)

    def __delitem__(self, key):
        del self.data[key]

    def __repr__(self):
        return self.data.__repr__()

    def __copy__(self):
        return self.__class__(self.data)

    def __deepcopy__(self, memo):
        return self.__class__(deepcopy(self.data, memo))

    def validate(self):
        for key, value in self.data.items():
            if isinstance(key, Serializable):
                key.validate()
            if isinstance(value, Serializable):
                value.validate()

    def to_shallow_primitive(self) -> dict:
        return dict(self.data)

    @classmethod
    @limit_primitive_type(dict)
    def from_primitive(cls: Type[DictBase], value: dict) -> DictBase:
        restored = cls()
        for k, v in value.items():
            restored[_restore_typed_primitive(cls.KEY_TYPE, k)] = (
                _restore_typed_primitive(cls.VALUE_TYPE, v)
            )
        return restored

    def copy(self) -> DictSerializable:
        return self.__class__(self.data)
