"""
The untyped YAML value: a tagged union of null, booleans, integers, floats,
strings, sequences and mappings. Values parsed from text remember where they
came from (``mark``) and the scalar text they were read from (``raw``);
neither takes part in equality, ordering or hashing.
"""
import enum
import functools
import math
from collections import OrderedDict
from collections.abc import Mapping as AbcMapping, MutableMapping

from yamlmodel import exceptions


class ValueKind(enum.IntEnum):
    # the order is the rank used when comparing values of different kinds
    NULL = 0
    BOOL = 1
    INT = 2
    FLOAT = 3
    STRING = 4
    SEQUENCE = 5
    MAPPING = 6


SCALAR_KINDS = frozenset((ValueKind.NULL, ValueKind.BOOL, ValueKind.INT,
                          ValueKind.FLOAT, ValueKind.STRING))

KIND_NAMES = {
    ValueKind.NULL: 'null',
    ValueKind.BOOL: 'boolean',
    ValueKind.INT: 'integer',
    ValueKind.FLOAT: 'floating point',
    ValueKind.STRING: 'string',
    ValueKind.SEQUENCE: 'sequence',
    ValueKind.MAPPING: 'mapping',
}


@functools.total_ordering
class Value(object):
    __slots__ = ('kind', 'data', 'mark', 'raw', 'style')

    def __init__(self, kind, data=None, mark=None, raw=None, style=None):
        kind = ValueKind(kind)
        if kind is ValueKind.NULL:
            data = None
        elif kind is ValueKind.SEQUENCE:
            data = [Value.from_python(v) for v in (data or ())]
        elif kind is ValueKind.MAPPING and not isinstance(data, Mapping):
            data = Mapping(data or ())
        self.kind = kind
        self.data = data
        self.mark = mark
        self.raw = raw
        self.style = style

    @classmethod
    def from_python(cls, obj):
        """
        Builds a Value from plain Python data. Values are returned as-is.
        """
        if isinstance(obj, Value):
            return obj
        if obj is None:
            return cls(ValueKind.NULL)
        if isinstance(obj, bool):
            return cls(ValueKind.BOOL, obj)
        if isinstance(obj, int):
            return cls(ValueKind.INT, obj)
        if isinstance(obj, float):
            return cls(ValueKind.FLOAT, obj)
        if isinstance(obj, str):
            return cls(ValueKind.STRING, obj)
        if isinstance(obj, (bytes, bytearray)):
            return cls(ValueKind.SEQUENCE, list(obj))
        if isinstance(obj, AbcMapping):
            return cls(ValueKind.MAPPING, Mapping(obj.items()))
        if isinstance(obj, (list, tuple)):
            return cls(ValueKind.SEQUENCE, obj)
        msg = 'cannot build a YAML value from {!r}'
        raise TypeError(msg.format(type(obj).__name__))

    def to_python(self):
        """
        Converts to plain Python data. Unhashable mapping keys become tuples
        (sequences) or stay Values (mappings).
        """
        if self.kind is ValueKind.SEQUENCE:
            return [v.to_python() for v in self.data]
        if self.kind is ValueKind.MAPPING:
            return dict((k.to_key(), v.to_python())
                        for k, v in self.data.items())
        return self.data

    def to_key(self):
        if self.kind is ValueKind.SEQUENCE:
            return tuple(v.to_key() for v in self.data)
        if self.kind is ValueKind.MAPPING:
            return self
        return self.data

    def copy(self):
        """Returns a deep copy, keeping marks."""
        if self.kind is ValueKind.SEQUENCE:
            data = [v.copy() for v in self.data]
        elif self.kind is ValueKind.MAPPING:
            data = Mapping((k.copy(), v.copy()) for k, v in self.data.items())
        else:
            data = self.data
        return Value(self.kind, data, self.mark, self.raw, self.style)

    def serialize(self, serializer):
        kind = self.kind
        if kind is ValueKind.NULL:
            serializer.serialize_unit()
        elif kind is ValueKind.BOOL:
            serializer.serialize_bool(self.data)
        elif kind is ValueKind.INT:
            serializer.serialize_int(self.data, format=self.style)
        elif kind is ValueKind.FLOAT:
            serializer.serialize_float(self.data)
        elif kind is ValueKind.STRING:
            serializer.serialize_str(self.data, format=self.style)
        elif kind is ValueKind.SEQUENCE:
            serializer.start_sequence(len(self.data))
            for item in self.data:
                serializer.serialize_element(item)
            serializer.end_sequence()
        else:
            serializer.start_mapping(len(self.data))
            for key, value in self.data.items():
                serializer.serialize_key(key)
                serializer.serialize_value(value)
            serializer.end_mapping()

    # accessors

    def is_null(self):
        return self.kind is ValueKind.NULL

    def is_bool(self):
        return self.kind is ValueKind.BOOL

    def is_int(self):
        return self.kind is ValueKind.INT

    def is_float(self):
        return self.kind is ValueKind.FLOAT

    def is_number(self):
        return self.kind in (ValueKind.INT, ValueKind.FLOAT)

    def is_string(self):
        return self.kind is ValueKind.STRING

    def is_sequence(self):
        return self.kind is ValueKind.SEQUENCE

    def is_mapping(self):
        return self.kind is ValueKind.MAPPING

    def is_scalar(self):
        return self.kind in SCALAR_KINDS

    def as_bool(self):
        return self.data if self.kind is ValueKind.BOOL else None

    def as_int(self):
        return self.data if self.kind is ValueKind.INT else None

    def as_float(self):
        if self.kind is ValueKind.FLOAT:
            return self.data
        if self.kind is ValueKind.INT:
            return float(self.data)
        return None

    def as_str(self):
        return self.data if self.kind is ValueKind.STRING else None

    def as_sequence(self):
        return self.data if self.kind is ValueKind.SEQUENCE else None

    def as_mapping(self):
        return self.data if self.kind is ValueKind.MAPPING else None

    def get(self, index, default=None):
        """
        Looks up ``index`` in a sequence (by position) or mapping (by key).
        Returns ``default`` for anything missing, or for scalars.
        """
        if self.kind is ValueKind.SEQUENCE:
            if isinstance(index, int) and not isinstance(index, bool) \
                    and -len(self.data) <= index < len(self.data):
                return self.data[index]
            return default
        if self.kind is ValueKind.MAPPING:
            return self.data.get(index, default)
        return default

    def __getitem__(self, index):
        if self.kind not in (ValueKind.SEQUENCE, ValueKind.MAPPING):
            msg = '{} value is not subscriptable'
            raise TypeError(msg.format(KIND_NAMES[self.kind]))
        return self.data[index]

    def __len__(self):
        if self.kind not in (ValueKind.SEQUENCE, ValueKind.MAPPING):
            msg = '{} value has no len()'
            raise TypeError(msg.format(KIND_NAMES[self.kind]))
        return len(self.data)

    def __iter__(self):
        if self.kind not in (ValueKind.SEQUENCE, ValueKind.MAPPING):
            msg = '{} value is not iterable'
            raise TypeError(msg.format(KIND_NAMES[self.kind]))
        return iter(self.data)

    def __bool__(self):
        return True

    # comparison

    def sort_key(self):
        """
        A key giving the total order: kinds by rank, numbers numerically
        (NaN last, ties broken by kind), strings lexicographically, and
        sequences and mappings element by element.
        """
        kind = self.kind
        if kind is ValueKind.NULL:
            return (0,)
        if kind is ValueKind.BOOL:
            return (1, self.data)
        if kind in (ValueKind.INT, ValueKind.FLOAT):
            if kind is ValueKind.FLOAT and math.isnan(self.data):
                return (2, 1, 0, kind)
            return (2, 0, self.data, kind)
        if kind is ValueKind.STRING:
            return (4, self.data)
        if kind is ValueKind.SEQUENCE:
            return (5, tuple(v.sort_key() for v in self.data))
        return (6, tuple((k.sort_key(), v.sort_key())
                         for k, v in self.data.items()))

    def __eq__(self, other):
        if not isinstance(other, Value):
            return NotImplemented
        return self.sort_key() == other.sort_key()

    def __lt__(self, other):
        if not isinstance(other, Value):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    def __hash__(self):
        return hash(self.sort_key())

    def __repr__(self):
        if self.kind is ValueKind.NULL:
            return 'Value(NULL)'
        return 'Value({}, {!r})'.format(self.kind.name, self.data)


def _key(key):
    if isinstance(key, Value):
        return key
    return Value.from_python(key)


class Mapping(MutableMapping):
    """
    An insertion-ordered mapping of Value keys to Values. Plain Python keys
    and values are converted on the way in, so ``mapping['name']`` works.

    ``insert()`` (and construction) refuse a key that is already present;
    item assignment replaces the existing entry's value.
    """
    def __init__(self, items=()):
        self._map = OrderedDict()
        if isinstance(items, AbcMapping):
            items = items.items()
        for key, value in items:
            self.insert(key, value)

    def insert(self, key, value):
        key = _key(key)
        if key in self._map:
            existing = next(k for k in self._map if k == key)
            raise exceptions.DuplicateKey(_describe(key),
                                          mark=key.mark or existing.mark)
        self._map[key] = Value.from_python(value)

    def __getitem__(self, key):
        return self._map[_key(key)]

    def __setitem__(self, key, value):
        self._map[_key(key)] = Value.from_python(value)

    def __delitem__(self, key):
        del self._map[_key(key)]

    def __contains__(self, key):
        try:
            return _key(key) in self._map
        except TypeError:
            return False

    def __iter__(self):
        return iter(self._map)

    def __len__(self):
        return len(self._map)

    def __eq__(self, other):
        if not isinstance(other, Mapping):
            return NotImplemented
        return list(self._map.items()) == list(other._map.items())

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    __hash__ = None

    def __repr__(self):
        items = ', '.join('{!r}: {!r}'.format(k, v)
                          for k, v in self._map.items())
        return 'Mapping({{{}}})'.format(items)


def _describe(key):
    if key.kind is ValueKind.STRING:
        return '"{}"'.format(key.data)
    if key.is_scalar():
        return str(key.to_python())
    return 'of type {}'.format(KIND_NAMES[key.kind])
