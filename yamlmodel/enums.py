"""
Declarative enums. Each variant is unit, newtype, tuple or struct shaped::

    class Shape(Enum):
        empty = Variant()
        circle = Variant(float)
        point = Variant(int, int)
        rect = Variant(width=float, height=float)

Values are built by calling the variant: ``Shape.circle(2.0)``. A unit
variant is written as its bare name, any other variant as a single-key
mapping from its name to its payload.
"""
import copy
import enum
from bisect import bisect

from yamlmodel import exceptions
from yamlmodel import fields
from yamlmodel.models import DeclarativeMetaclass, concrete
from yamlmodel.serializers.base import Visitor


class VariantKind(enum.Enum):
    UNIT = 'unit'
    NEWTYPE = 'newtype'
    TUPLE = 'tuple'
    STRUCT = 'struct'


class Variant(object):
    """
    Declares one variant. Positional arguments are the payload of a newtype
    (one) or tuple (several) variant, keyword arguments the fields of a
    struct variant; each is anything ``fields.field_for()`` accepts.

    ``name`` (a string) overrides the name used in the document, and
    ``kind`` forces a kind, e.g. a one-element tuple variant.
    """
    creation_counter = 0

    def __init__(self, *targets, **named):
        name = named.pop('name', None)
        if name is not None and not isinstance(name, str):
            # a struct field called "name"
            named['name'], name = name, None
        kind = named.pop('kind', None)
        if kind is not None and not isinstance(kind, VariantKind):
            named['kind'], kind = kind, None

        if targets and named:
            msg = 'A variant takes either positional or keyword fields'
            raise exceptions.FieldError(msg)
        self.fields = [fields.field_for(t) for t in targets]
        for field_name, target in named.items():
            field = copy.copy(fields.field_for(target))
            field.name = field_name
            self.fields.append(field)

        if kind is None:
            if named:
                kind = VariantKind.STRUCT
            elif len(targets) == 1:
                kind = VariantKind.NEWTYPE
            elif targets:
                kind = VariantKind.TUPLE
            else:
                kind = VariantKind.UNIT
        if (kind is VariantKind.UNIT and self.fields) or \
                (kind is VariantKind.NEWTYPE and len(self.fields) != 1) or \
                (kind is VariantKind.STRUCT and targets):
            msg = 'Fields do not fit a {} variant'.format(kind.value)
            raise exceptions.FieldError(msg)

        self.kind = kind
        self.name = name
        self.attname = None
        self.enum = None

        self.creation_counter = Variant.creation_counter
        Variant.creation_counter += 1

    def contribute_to_class(self, cls, name):
        variant = self
        # a variant shared between enums is copied
        if variant.enum is not None:
            variant = copy.copy(variant)
        variant.attname = name
        if variant.name is None:
            variant.name = name
        variant.enum = cls
        cls._meta.add_variant(variant)
        setattr(cls, name, variant)

    def __lt__(self, other):
        return self.creation_counter < other.creation_counter

    def __call__(self, *args, **kwargs):
        return self.enum(self, *args, **kwargs)

    def __repr__(self):
        return '<Variant: {}>'.format(self.name)


class EnumOptions(object):
    """
    An options class for ``Enum``.
    """
    meta_opts = ('name',)

    def __init__(self, meta):
        self.meta = meta
        self.abstract = False
        self.local_variants = []
        self.name = None
        self.parents = []

    def contribute_to_class(self, cls, name):
        cls._meta = self
        self.name = cls.__name__
        if self.meta:
            for name in dir(self.meta):
                if name.startswith('_') or name not in self.meta_opts:
                    continue
                setattr(self, name, getattr(self.meta, name))
        self._declared_meta = self.meta
        del self.meta

    def add_variant(self, variant):
        position = bisect(self.local_variants, variant)
        self.local_variants.insert(position, variant)

    def add_parent(self, cls, parent):
        self.parents.append(parent)

    @property
    def variants(self):
        inherited = [v for p in self.parents for v in p._meta.variants]
        return tuple(inherited + self.local_variants)

    @property
    def names(self):
        return [v.name for v in self.variants]

    def get_variant(self, name):
        for variant in self.variants:
            if variant.name == name:
                return variant
        return None

    def describe(self):
        return ' | '.join(self.names)

    def _prepare(self, cls):
        names = self.names
        for name in names:
            if names.count(name) > 1:
                msg = 'Duplicate variant "{}" on enum {!r}'
                raise exceptions.FieldError(msg.format(name, cls))


class EnumVisitor(Visitor):
    shape = 'enum'

    def __init__(self, enum):
        self.enum = enum

    @property
    def expecting(self):
        return 'enum {}'.format(self.enum._meta.name)

    def visit_enum(self, access):
        variant = self.enum._meta.get_variant(access.variant)
        kind = variant.kind
        if kind is VariantKind.UNIT:
            access.unit_variant()
            return self.enum(variant)
        if kind is VariantKind.NEWTYPE:
            payload = access.newtype_variant(variant.fields[0])
            return self.enum(variant, payload)
        if kind is VariantKind.TUPLE:
            visitor = fields.TupleField(*variant.fields)
            values = access.tuple_variant(len(variant.fields), visitor)
            return self.enum(variant, *values)
        visitor = fields.StructVisitor(variant.name, variant.fields)
        values = access.struct_variant(visitor.keys, visitor)
        return self.enum(variant, **values)


class Enum(object, metaclass=DeclarativeMetaclass):
    """
    Base class for declarative enums. An instance holds one ``variant`` and
    its ``payload``: ``None`` for a unit variant, the value of a newtype
    variant, a tuple for a tuple variant or a dict of field name to value
    for a struct variant. Struct variant fields are also attributes.
    """
    __optclass__ = EnumOptions

    @concrete
    def __init__(self, variant, *args, **kwargs):
        if isinstance(variant, str):
            name, variant = variant, self._meta.get_variant(variant)
            if variant is None:
                raise exceptions.UnknownVariant(name, self._meta.names)
        if variant not in self._meta.variants:
            msg = '{!r} is not a variant of {}'
            raise TypeError(msg.format(variant, type(self).__name__))

        kind = variant.kind
        if kind is VariantKind.STRUCT:
            payload = self._struct_payload(variant, args, kwargs)
        elif kwargs:
            msg = '{} variant {} takes no keyword arguments'
            raise TypeError(msg.format(kind.value, variant.name))
        elif len(args) != len(variant.fields):
            msg = 'Variant {} takes {} argument(s), got {}'
            raise TypeError(msg.format(variant.name, len(variant.fields),
                                       len(args)))
        elif kind is VariantKind.UNIT:
            payload = None
        else:
            payload = tuple(field.clean(value)
                            for field, value in zip(variant.fields, args))
            if kind is VariantKind.NEWTYPE:
                payload = payload[0]

        self.variant = variant
        self.payload = payload

    def _struct_payload(self, variant, args, kwargs):
        if args:
            msg = 'Struct variant {} takes keyword arguments only'
            raise TypeError(msg.format(variant.name))
        payload = {}
        for field in variant.fields:
            if field.name in kwargs:
                value = kwargs.pop(field.name)
            elif field.has_default():
                value = field.default
            elif not field.required:
                value = None
            else:
                msg = "Variant {} is missing '{}'"
                raise TypeError(msg.format(variant.name, field.name))
            payload[field.name] = field.clean(value)
        if kwargs:
            msg = "'{0}' is an invalid keyword argument for this function"
            raise TypeError(msg.format(list(kwargs.keys())[0]))
        return payload

    def __getattr__(self, name):
        payload = self.__dict__.get('payload')
        if isinstance(payload, dict) and name in payload:
            return payload[name]
        msg = "'{}' object has no attribute '{}'"
        raise AttributeError(msg.format(type(self).__name__, name))

    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        return self.variant is other.variant and self.payload == other.payload

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    def __hash__(self):
        payload = self.payload
        if isinstance(payload, dict):
            payload = tuple(payload.items())
        try:
            return hash((type(self), self.variant.name, payload))
        except TypeError:
            return hash((type(self), self.variant.name))

    def __repr__(self):
        prefix = '{}.{}'.format(type(self).__name__, self.variant.attname)
        kind = self.variant.kind
        if kind is VariantKind.UNIT:
            return prefix
        if kind is VariantKind.NEWTYPE:
            return '{}({!r})'.format(prefix, self.payload)
        if kind is VariantKind.TUPLE:
            args = ', '.join(repr(v) for v in self.payload)
        else:
            args = ', '.join('{}={!r}'.format(k, v)
                             for k, v in self.payload.items())
        return '{}({})'.format(prefix, args)

    @concrete
    def serialize(self, serializer):
        """
        Writes this value: the bare variant name for a unit variant, a
        single-key mapping otherwise.
        """
        variant = self.variant
        enum_name = self._meta.name
        kind = variant.kind
        if kind is VariantKind.UNIT:
            serializer.serialize_unit_variant(enum_name, variant.name)
        elif kind is VariantKind.NEWTYPE:
            serializer.serialize_newtype_variant(enum_name, variant.name,
                                                 self.payload,
                                                 variant.fields[0])
        elif kind is VariantKind.TUPLE:
            serializer.start_tuple_variant(enum_name, variant.name,
                                           len(variant.fields))
            for field, value in zip(variant.fields, self.payload):
                serializer.serialize_element(value, field)
            serializer.end_variant()
        else:
            skip_none = serializer.config.SKIP_NONE
            serializer.start_struct_variant(enum_name, variant.name,
                                            len(variant.fields))
            for field in variant.fields:
                value = self.payload[field.name]
                if value is None and not field.required and skip_none:
                    serializer.skip_field(field.key)
                else:
                    serializer.serialize_field(field.key, value, field)
            serializer.end_variant()

    @classmethod
    @concrete
    def deserialize(cls, deserializer):
        """
        Reads a value from a bare variant name or a single-key mapping.
        """
        return deserializer.deserialize_enum(cls._meta.name, cls._meta.names,
                                             EnumVisitor(cls))
