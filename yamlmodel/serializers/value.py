"""
The untyped-value serializer. Serializes objects into ``Value`` trees and
deserializes targets from them; the YAML and Python serializers are built
on top of it.
"""
import decorator

from yamlmodel import exceptions
from yamlmodel import resolver
from yamlmodel.serializers import base
from yamlmodel.utils.path import ROOT
from yamlmodel.value import KIND_NAMES, Mapping, Value, ValueKind


def key_label(key):
    """Text used for a mapping key inside a path."""
    if key.kind is ValueKind.STRING:
        return key.data
    if key.is_scalar():
        return resolver.format_scalar(key)
    return '?'


class Frame(object):
    """
    A collection being built. A mapping frame holding a ``key`` is waiting
    for that key's value; one without a key expects a key next.
    """
    def __init__(self, kind, path):
        self.kind = kind
        self.path = path
        self.key = None
        if kind is ValueKind.SEQUENCE:
            self.items = []
        else:
            self.items = Mapping()

    def child_path(self):
        if self.kind is ValueKind.SEQUENCE:
            return self.path.index(len(self.items))
        if self.key is None:
            return self.path
        return self.path.key(key_label(self.key))

    def add(self, value):
        if self.kind is ValueKind.SEQUENCE:
            self.items.append(value)
        elif self.key is None:
            self.key = value
        else:
            key, self.key = self.key, None
            self.items.insert(key, value)

    def build(self):
        return Value(self.kind, self.items)


class Serializer(base.Serializer):
    """
    Builds a ``Value``. ``getvalue()`` returns the root of the tree.
    """
    def start_serialization(self):
        self.stack = []
        self.root = None

    def getvalue(self):
        return self.root

    @property
    def path(self):
        if not self.stack:
            return ROOT
        return self.stack[-1].child_path()

    def emit(self, value):
        if not self.stack:
            self.root = value
            return
        frame = self.stack[-1]
        try:
            frame.add(value)
        except exceptions.Error as err:
            raise err.locate(path=frame.path)

    def child(self, value, field):
        from yamlmodel import fields
        field = fields.AnyField() if field is None else fields.field_for(field)
        field.serialize(value, self)

    def push(self, kind):
        self.stack.append(Frame(kind, self.path))

    def pop(self):
        frame = self.stack.pop()
        if frame.key is not None:
            msg = 'mapping key {!r} has no value'.format(frame.key)
            raise exceptions.CustomError(msg, path=frame.path)
        self.emit(frame.build())

    # primitives

    def serialize_unit(self):
        self.emit(Value(ValueKind.NULL))

    def serialize_bool(self, value):
        self.emit(Value(ValueKind.BOOL, bool(value)))

    def serialize_int(self, value, format=None):
        self.emit(Value(ValueKind.INT, int(value), style=format))

    def serialize_float(self, value):
        self.emit(Value(ValueKind.FLOAT, float(value)))

    def serialize_str(self, value, format=None):
        self.emit(Value(ValueKind.STRING, value, style=format))

    def serialize_bytes(self, value):
        self.emit(Value(ValueKind.SEQUENCE, list(value)))

    # enums

    def serialize_unit_variant(self, enum_name, variant):
        self.emit(Value(ValueKind.STRING, variant))

    def serialize_newtype_variant(self, enum_name, variant, value, field):
        self.start_variant(variant)
        self.child(value, field)
        self.pop()

    def start_variant(self, variant):
        self.push(ValueKind.MAPPING)
        self.stack[-1].add(Value(ValueKind.STRING, variant))

    def start_tuple_variant(self, enum_name, variant, length):
        self.start_variant(variant)
        self.start_sequence(length)

    def start_struct_variant(self, enum_name, variant, length):
        self.start_variant(variant)
        self.start_struct(variant, length)

    def end_variant(self):
        self.pop()
        self.pop()

    # sequences and mappings

    def start_sequence(self, length=None):
        self.push(ValueKind.SEQUENCE)

    def serialize_element(self, value, field=None):
        self.child(value, field)

    def end_sequence(self):
        self.pop()

    def start_mapping(self, length=None):
        self.push(ValueKind.MAPPING)

    def serialize_key(self, key, field=None):
        self.child(key, field)

    def serialize_value(self, value, field=None):
        self.child(value, field)

    def end_mapping(self):
        self.pop()

    def start_struct(self, name, length):
        self.push(ValueKind.MAPPING)

    def serialize_field(self, key, value, field):
        self.emit(Value(ValueKind.STRING, key))
        self.child(value, field)

    def end_struct(self):
        self.pop()


@decorator.decorator
def located(method, self, *args, **kwargs):
    """
    Attaches this deserializer's position to errors that do not carry one
    from a deeper node.
    """
    try:
        return method(self, *args, **kwargs)
    except exceptions.Error as err:
        err.locate(self.mark, self.path, self.text)
        raise


class SeqAccess(object):
    """Iterates a sequence node as one deserializer per element."""
    def __init__(self, deserializer):
        self.deserializer = deserializer
        self.config = deserializer.config
        self.items = deserializer.value.data

    def __len__(self):
        return len(self.items)

    def __iter__(self):
        parent = self.deserializer
        for index, item in enumerate(self.items):
            yield parent.child(item, parent.path.index(index))


class MapAccess(object):
    """Iterates a mapping node as ``(key, value)`` deserializer pairs."""
    def __init__(self, deserializer):
        self.deserializer = deserializer
        self.config = deserializer.config
        self.items = deserializer.value.data

    def __len__(self):
        return len(self.items)

    def __iter__(self):
        parent = self.deserializer
        for key, value in self.items.items():
            yield (parent.child(key, parent.path),
                   parent.child(value, parent.path.key(key_label(key))))


class EnumAccess(object):
    """
    The variant named by an enum node. ``payload`` is the deserializer for
    the variant's data, or ``None`` for a bare scalar.
    """
    def __init__(self, deserializer, variant, payload=None):
        self.deserializer = deserializer
        self.config = deserializer.config
        self.variant = variant
        self.payload = payload

    def unit_variant(self):
        if self.payload is not None and not self.payload.value.is_null():
            found = KIND_NAMES[self.payload.value.kind]
            raise exceptions.StructureMismatch('unit variant', found,
                                               mark=self.payload.mark,
                                               path=self.payload.path)

    def _require_payload(self, expected):
        if self.payload is None:
            raise exceptions.StructureMismatch(expected, 'unit variant')
        return self.payload

    def newtype_variant(self, field):
        return field.deserialize(self._require_payload('newtype variant'))

    def tuple_variant(self, length, visitor):
        payload = self._require_payload('tuple variant')
        return payload.deserialize_tuple(length, visitor)

    def struct_variant(self, fields, visitor):
        payload = self._require_payload('struct variant')
        return payload.deserialize_struct(self.variant, fields, visitor)


class Deserializer(base.Deserializer):
    """
    Deserializes from a ``Value`` tree. Values parsed from text keep their
    marks, so errors point into the original document; values built in code
    report no position.
    """
    def __init__(self, value, config, path=ROOT):
        self.value = value
        self.config = config
        self.path = path
        self.schema = resolver.get_schema(config.SCHEMA)

    def child(self, value, path):
        return type(self)(value, self.config, path)

    @property
    def mark(self):
        return self.value.mark

    @property
    def text(self):
        """The scalar's text, as written where it was parsed from."""
        value = self.value
        if value.kind is ValueKind.NULL or not value.is_scalar():
            return None
        if value.raw is not None:
            return value.raw
        return resolver.format_scalar(value)

    @located
    def deserialize_any(self, visitor):
        value = self.value
        kind = value.kind
        if kind is ValueKind.NULL:
            return visitor.visit_unit()
        if kind is ValueKind.BOOL:
            return visitor.visit_bool(value.data)
        if kind is ValueKind.INT:
            return visitor.visit_int(value.data)
        if kind is ValueKind.FLOAT:
            return visitor.visit_float(value.data)
        if kind is ValueKind.STRING:
            return visitor.visit_str(value.data)
        if kind is ValueKind.SEQUENCE:
            return visitor.visit_seq(SeqAccess(self))
        return visitor.visit_map(MapAccess(self))

    @located
    def deserialize_int(self, visitor):
        value = self.value
        if value.kind is ValueKind.INT:
            return visitor.visit_int(value.data)
        if value.kind is ValueKind.FLOAT and value.raw is not None:
            # an integer too wide for the untyped tree
            number = self.schema.parse_int(value.raw)
            if number is not None:
                return visitor.visit_int(number)
        return self.deserialize_any(visitor)

    @located
    def deserialize_str(self, visitor):
        value = self.value
        if value.kind in (ValueKind.BOOL, ValueKind.INT, ValueKind.FLOAT):
            return visitor.visit_str(self.text)
        return self.deserialize_any(visitor)

    @located
    def deserialize_bytes(self, visitor):
        value = self.value
        if value.kind is ValueKind.SEQUENCE and all(
                item.kind is ValueKind.INT and 0 <= item.data <= 255
                for item in value.data):
            return visitor.visit_bytes(bytes(item.data for item in value.data))
        return self.deserialize_any(visitor)

    @located
    def deserialize_option(self, visitor):
        if self.value.is_null():
            return visitor.visit_none()
        return visitor.visit_some(self)

    @located
    def deserialize_tuple(self, length, visitor):
        value = self.value
        if value.kind is ValueKind.SEQUENCE and len(value.data) != length:
            msg = 'invalid length {}, expected a tuple of size {}'.format(
                len(value.data), length)
            if len(value.data) < length:
                raise exceptions.UnexpectedEof(msg)
            raise exceptions.StructureMismatch(message=msg)
        return self.deserialize_any(visitor)

    @located
    def deserialize_enum(self, name, variants, visitor):
        value = self.value
        if value.kind is ValueKind.MAPPING:
            if len(value.data) != 1:
                msg = ('expected a YAML map of size 1 while parsing variant '
                       '{} but was size {}').format(name, len(value.data))
                raise exceptions.StructureMismatch(message=msg)
            key, payload = next(iter(value.data.items()))
            tag = self.child(key, self.path)
            if not key.is_scalar() or key.is_null():
                raise exceptions.StructureMismatch(
                    'a variant name', KIND_NAMES[key.kind],
                    mark=key.mark, path=self.path)
            access = EnumAccess(self, tag.text,
                                self.child(payload, self.path.key(tag.text)))
        elif value.is_scalar() and not value.is_null():
            tag = self
            access = EnumAccess(self, self.text)
        else:
            expected = 'enum {}'.format(name)
            raise exceptions.StructureMismatch(expected,
                                               KIND_NAMES[value.kind])

        if access.variant not in variants:
            raise exceptions.UnknownVariant(access.variant, variants,
                                            mark=tag.mark, path=self.path)
        return visitor.visit_enum(access)

    def deserialize_ignored_any(self):
        pass

    def deserialize_untyped(self):
        return self.value.copy()


def serialize(obj, field=None, **options):
    """
    Serializes ``obj`` into a ``Value``.
    """
    return Serializer(**options).serialize(obj, field)


def deserialize(target, value, **options):
    """
    Deserializes ``target`` from ``value`` (a ``Value`` or plain Python data).
    A ``target`` of ``None`` gives native Python objects.
    """
    from yamlmodel import fields
    from yamlmodel.conf import get_config
    config = get_config(options)
    field = fields.AnyField() if target is None else fields.field_for(target)
    deserializer = Deserializer(Value.from_python(value), config)
    return field.deserialize(deserializer)
