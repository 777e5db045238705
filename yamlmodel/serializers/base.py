"""
Module for the abstract serializer/deserializer contract.

A ``Serializer`` is driven by the object being serialized: fields, models
and enums call one method per primitive and bracket composites with
``start_*``/``end_*`` pairs. A ``Deserializer`` is driven the other way
round: the target asks for the shape it wants (``deserialize_int``,
``deserialize_struct``, ...) and the deserializer answers by calling back
into a ``Visitor`` with what the document actually holds.
"""
from io import StringIO

from yamlmodel import exceptions
from yamlmodel.conf import get_config


class Serializer(object):
    """
    Abstract serializer base class.
    """
    def __init__(self, **options):
        self.config = get_config(options)

    def serialize(self, obj, field=None, stream=None):
        """
        Serialize ``obj`` using ``field`` (anything ``fields.field_for()``
        accepts). Without a field the object is serialized by its own type.
        """
        from yamlmodel import fields
        field = fields.AnyField() if field is None else fields.field_for(field)

        self.stream = stream if stream is not None else StringIO()
        self.start_serialization()
        field.serialize(obj, self)
        self.end_serialization()
        return self.getvalue()

    def start_serialization(self):
        """
        Called when serializing of the object starts.
        """
        raise NotImplementedError

    def end_serialization(self):
        """
        Called when serializing of the object ends.
        """
        pass

    def getvalue(self):
        """
        Return the fully serialized object (or None if the output stream is
        not seekable).
        """
        if callable(getattr(self.stream, 'getvalue', None)):
            return self.stream.getvalue()

    # primitives

    def serialize_unit(self):
        raise NotImplementedError

    def serialize_bool(self, value):
        raise NotImplementedError

    def serialize_int(self, value, format=None):
        raise NotImplementedError

    def serialize_float(self, value):
        raise NotImplementedError

    def serialize_str(self, value, format=None):
        raise NotImplementedError

    def serialize_bytes(self, value):
        raise NotImplementedError

    def serialize_none(self):
        self.serialize_unit()

    def serialize_some(self, value, field):
        field.serialize_value(value, self)

    # enums

    def serialize_unit_variant(self, enum_name, variant):
        raise NotImplementedError

    def serialize_newtype_variant(self, enum_name, variant, value, field):
        raise NotImplementedError

    def start_tuple_variant(self, enum_name, variant, length):
        raise NotImplementedError

    def start_struct_variant(self, enum_name, variant, length):
        raise NotImplementedError

    def end_variant(self):
        raise NotImplementedError

    # sequences and mappings

    def start_sequence(self, length=None):
        raise NotImplementedError

    def serialize_element(self, value, field=None):
        raise NotImplementedError

    def end_sequence(self):
        raise NotImplementedError

    def start_mapping(self, length=None):
        raise NotImplementedError

    def serialize_key(self, key, field=None):
        raise NotImplementedError

    def serialize_value(self, value, field=None):
        raise NotImplementedError

    def end_mapping(self):
        raise NotImplementedError

    def start_struct(self, name, length):
        raise NotImplementedError

    def serialize_field(self, key, value, field):
        raise NotImplementedError

    def skip_field(self, key):
        pass

    def end_struct(self):
        raise NotImplementedError


class Deserializer(object):
    """
    Abstract base deserializer class. Concrete deserializers expose the
    ``mark`` and ``path`` of the node they stand on and the per-call
    ``config``.
    """
    mark = None
    path = None
    config = None

    def deserialize_any(self, visitor):
        raise NotImplementedError

    def deserialize_bool(self, visitor):
        return self.deserialize_any(visitor)

    def deserialize_int(self, visitor):
        return self.deserialize_any(visitor)

    def deserialize_float(self, visitor):
        return self.deserialize_any(visitor)

    def deserialize_str(self, visitor):
        return self.deserialize_any(visitor)

    def deserialize_bytes(self, visitor):
        return self.deserialize_any(visitor)

    def deserialize_option(self, visitor):
        raise NotImplementedError

    def deserialize_unit(self, visitor):
        return self.deserialize_any(visitor)

    def deserialize_seq(self, visitor):
        return self.deserialize_any(visitor)

    def deserialize_tuple(self, length, visitor):
        return self.deserialize_any(visitor)

    def deserialize_map(self, visitor):
        return self.deserialize_any(visitor)

    def deserialize_struct(self, name, fields, visitor):
        return self.deserialize_any(visitor)

    def deserialize_enum(self, name, variants, visitor):
        raise NotImplementedError

    def deserialize_ignored_any(self):
        pass

    def deserialize_untyped(self):
        """Returns the node as an untyped ``Value``."""
        raise NotImplementedError


class Visitor(object):
    """
    Receives whatever the document holds. The defaults reject everything:
    a scalar offered to a scalar visitor is a ``TypeMismatch``, any other
    combination is a ``StructureMismatch``.

    ``shape`` is one of ``'scalar'``, ``'sequence'``, ``'mapping'`` or
    ``'enum'``; ``expecting`` finishes the sentence "expected ...".
    """
    expecting = 'a value'
    shape = 'scalar'

    def invalid(self, found, shape='scalar'):
        if shape == 'scalar' and self.shape == 'scalar':
            return exceptions.TypeMismatch(self.expecting, found)
        return exceptions.StructureMismatch(self.expecting, found)

    def visit_unit(self):
        raise self.invalid('null')

    def visit_bool(self, value):
        raise self.invalid('boolean')

    def visit_int(self, value):
        raise self.invalid('integer')

    def visit_float(self, value):
        raise self.invalid('floating point')

    def visit_str(self, value):
        raise self.invalid('string')

    def visit_bytes(self, value):
        raise self.invalid('byte sequence', 'sequence')

    def visit_none(self):
        raise self.invalid('null')

    def visit_some(self, deserializer):
        raise self.invalid('optional value')

    def visit_seq(self, seq):
        raise self.invalid('sequence', 'sequence')

    def visit_map(self, mapping):
        raise self.invalid('mapping', 'mapping')

    def visit_enum(self, access):
        raise self.invalid('enum', 'enum')
