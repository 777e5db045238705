import copy
import decimal
import re
from collections.abc import Mapping as AbcMapping
from datetime import datetime, date, time
from urllib.parse import urlparse

from yamlmodel import exceptions
from yamlmodel.exceptions import ValidationError, FieldError
from yamlmodel.serializers.base import Visitor
from yamlmodel.utils import NOT_PROVIDED, isodate
from yamlmodel.value import Value

SPECIAL_FLOATS = {
    'nan': float('nan'),
    '.nan': float('nan'),
    'inf': float('inf'),
    '+inf': float('inf'),
    '.inf': float('inf'),
    '+.inf': float('inf'),
    'infinity': float('inf'),
    '+infinity': float('inf'),
    '-inf': float('-inf'),
    '-.inf': float('-inf'),
    '-infinity': float('-inf'),
}


class Field(Visitor):
    """
    The base implementation of a field used by a Model, an enum variant or a
    standalone conversion.

    A field knows how to write its value to a serializer
    (``serialize_value``) and how to ask a deserializer for it
    (``deserialize_value``); it is also the ``Visitor`` that receives what
    the deserializer finds. Fields that are not ``required`` are optional:
    ``None`` is written as null and null reads back as ``None``.
    """
    creation_counter = 0
    default_error_messages = {
        'required': 'is required',
    }
    serializable = True
    nullable = False

    def __init__(self, name=None, key=None, default=NOT_PROVIDED,
                 required=True, serialize=True, format=None,
                 error_messages=None):

        self.model = None
        self.name = name
        self._key = key
        self._default = default
        self.required = required
        self.serializable = self.serializable and serialize
        self.format = format

        # update error_messages using default_error_messages from all parents
        messages = {}
        for c in reversed(type(self).__mro__):
            messages.update(getattr(c, 'default_error_messages', {}))
        messages.update(error_messages or {})
        self.error_messages = messages

        # store the creation index in the "creation_counter" of the field
        self.creation_counter = Field.creation_counter
        # increment the global counter
        Field.creation_counter += 1

    def contribute_to_class(self, cls, name):
        field = self
        # if this field has already been assigned to a model, assign a shallow
        # copy of it instead.
        if field.model:
            field = copy.copy(field)
        field.name = name
        field.model = cls
        cls._meta.add_field(field)

    @property
    def key(self):
        """The mapping key this field is stored under."""
        return self._key or self.name

    def has_default(self):
        """Returns a boolean of whether this field has a default value."""
        return self._default is not NOT_PROVIDED

    @property
    def default(self):
        """Returns the default value for the field."""
        if self.has_default():
            if callable(self._default):
                return self._default()
            return self._default
        return

    def __lt__(self, other):
        # This is needed because bisect does not take a comparison function.
        return self.creation_counter < other.creation_counter

    def to_python(self, value):
        """
        Coerces the data into a valid python value. Raises ValidationError if
        the value cannot be coerced.
        """
        return value

    def get_raw_value(self, model_instance):
        """
        Used during the model's clean_fields() method.
        """
        return getattr(model_instance, self.name)

    def validate(self, value, model_instance=None):
        """
        Validates a coerced value (ie, passed through to_python) and throws a
        ValidationError if invalid.
        """
        if self.required and value is None and not self.nullable:
            raise ValidationError('required', self)

    def clean(self, value, model_instance=None):
        """
        Validates the given value and returns its "cleaned" value as an
        appropriate Python object.

        Raises ValidationError for any errors.
        """
        value = self.to_python(value)
        self.validate(value, model_instance)
        return value

    def get_error_message(self, error_code, default='', **kwargs):
        msg = self.error_messages.get(error_code, default)
        kwargs['field'] = self
        msg = msg.format(**kwargs)
        if self.name is None:
            return 'value {}'.format(msg)
        return '"{name}" {err}'.format(name=self.name, err=msg)

    def serialize(self, value, serializer):
        """
        Writes ``value`` to ``serializer``.
        """
        try:
            value = self.to_python(value)
        except ValidationError as err:
            raise exceptions.CustomError(str(err), path=serializer.path,
                                         cause=err) from err
        if value is None:
            serializer.serialize_none()
        elif self.required:
            self.serialize_value(value, serializer)
        else:
            serializer.serialize_some(value, self)

    def serialize_value(self, value, serializer):
        raise NotImplementedError

    def deserialize(self, deserializer):
        """
        Reads this field's value from ``deserializer`` and cleans it.
        Validation failures are reported as ``CustomError`` at the node the
        value came from.
        """
        try:
            if self.required:
                value = self.deserialize_value(deserializer)
            else:
                value = deserializer.deserialize_option(self)
            return self.clean(value)
        except ValidationError as err:
            raise exceptions.CustomError(str(err), mark=deserializer.mark,
                                         path=deserializer.path,
                                         cause=err) from err

    def deserialize_value(self, deserializer):
        raise NotImplementedError

    def visit_none(self):
        return None

    def visit_some(self, deserializer):
        return self.deserialize_value(deserializer)


class BooleanField(Field):
    expecting = 'a boolean'

    def to_python(self, value):
        if value is None:
            return None
        return bool(value)

    def serialize_value(self, value, serializer):
        serializer.serialize_bool(value)

    def deserialize_value(self, deserializer):
        return deserializer.deserialize_bool(self)

    def visit_bool(self, value):
        return value


class IntegerField(Field):
    """
    An integer field. ``bits`` and ``signed`` give the range a value must
    fit; values outside it are rejected as the wrong type. ``bits=None``
    accepts any integer.

    ``format`` may be ``'hex'`` or ``'octal'`` to write non-negative values
    in that base.
    """
    default_error_messages = {
        'invalid_int': 'must be an integer',
        'min_value': 'must be at least {min_value}',
        'max_value': 'must be at most {max_value}',
    }

    def __init__(self, bits=64, signed=True, min_value=None, max_value=None,
                 **kwargs):
        self.bits = bits
        self.signed = signed
        self.min_value = min_value
        self.max_value = max_value
        super(IntegerField, self).__init__(**kwargs)

    @property
    def expecting(self):
        if self.bits is None:
            return 'an integer'
        return '{}{}'.format('i' if self.signed else 'u', self.bits)

    @property
    def bounds(self):
        if self.bits is None:
            return None, None
        if self.signed:
            return -2 ** (self.bits - 1), 2 ** (self.bits - 1) - 1
        return 0, 2 ** self.bits - 1

    def to_python(self, value):
        if value is None:
            return None
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        # whole floats are fine, anything else must parse as an integer
        if isinstance(value, float):
            if not value.is_integer():
                raise ValidationError('invalid_int', self)
            return int(value)
        try:
            return int(str(value))
        except ValueError:
            raise ValidationError('invalid_int', self)

    def validate(self, value, model_instance=None):
        super(IntegerField, self).validate(value, model_instance)
        if value is None:
            return
        if self.min_value is not None and value < self.min_value:
            raise ValidationError('min_value', self,
                                  min_value=self.min_value)
        if self.max_value is not None and value > self.max_value:
            raise ValidationError('max_value', self,
                                  max_value=self.max_value)

    def serialize_value(self, value, serializer):
        serializer.serialize_int(value, format=self.format)

    def deserialize_value(self, deserializer):
        return deserializer.deserialize_int(self)

    def visit_int(self, value):
        low, high = self.bounds
        if low is not None and not low <= value <= high:
            raise exceptions.TypeMismatch(self.expecting, 'integer')
        return value


class FloatField(Field):
    """
    A floating-point field. Integers are widened; the strings ``NaN``,
    ``inf``, ``-inf`` and their YAML spellings are accepted as well.
    """
    expecting = 'a float'
    default_error_messages = {
        'invalid_float': 'must be a floating-point number'
    }

    def to_python(self, value):
        if value is None:
            return None
        try:
            return float(value)
        except (TypeError, ValueError):
            raise ValidationError('invalid_float', self)

    def serialize_value(self, value, serializer):
        serializer.serialize_float(value)

    def deserialize_value(self, deserializer):
        return deserializer.deserialize_float(self)

    def visit_float(self, value):
        return value

    def visit_int(self, value):
        try:
            return float(value)
        except OverflowError:
            return float('-inf') if value < 0 else float('inf')

    def visit_str(self, value):
        try:
            return SPECIAL_FLOATS[value.lower()]
        except KeyError:
            return super(FloatField, self).visit_str(value)


class DecimalField(Field):
    """
    An exact decimal number, read from the scalar text as written. Decimals
    are written as strings so that no precision is lost to a float reader.
    """
    expecting = 'a decimal number'
    default_error_messages = {
        'invalid_decimal': 'must be a numeric value',
        'max_digits': 'must have no more than {max_digits} digits',
        'decimal_places': ('must have no more than {decimal_places} decimal '
                           'places'),
    }

    def __init__(self, max_digits=None, decimal_places=None, **kwargs):
        self.max_digits = max_digits
        self.decimal_places = decimal_places
        super(DecimalField, self).__init__(**kwargs)

    def to_python(self, value):
        if value is None:
            return None
        if type(value) == float:
            value = str(value)
        try:
            return decimal.Decimal(value)
        except (decimal.InvalidOperation, TypeError, ValueError):
            raise ValidationError('invalid_decimal', self)

    def validate(self, value, model_instance=None):
        super(DecimalField, self).validate(value, model_instance)
        if value is None or not value.is_finite():
            return
        digits = value.as_tuple().digits
        exponent = value.as_tuple().exponent
        places = max(-exponent, 0)
        if self.max_digits is not None and \
                max(len(digits), places) > self.max_digits:
            raise ValidationError('max_digits', self,
                                  max_digits=self.max_digits)
        if self.decimal_places is not None and places > self.decimal_places:
            raise ValidationError('decimal_places', self,
                                  decimal_places=self.decimal_places)

    def serialize_value(self, value, serializer):
        serializer.serialize_str(str(value))

    def deserialize_value(self, deserializer):
        return deserializer.deserialize_str(self)

    def visit_str(self, value):
        try:
            return decimal.Decimal(value.replace('_', ''))
        except decimal.InvalidOperation:
            return super(DecimalField, self).visit_str(value)


class CharField(Field):
    """
    A text field of arbitrary length. Scalars written without quotes are
    accepted as the text they were written as, so ``1.10`` reads as
    ``"1.10"``.

    ``format`` may be ``'block'`` to write multi-line text as a literal
    block, or ``'oneline'`` to always write a double-quoted string.
    """
    expecting = 'a string'

    def to_python(self, value):
        if value is None:
            return None
        return str(value)

    def serialize_value(self, value, serializer):
        serializer.serialize_str(value, format=self.format)

    def deserialize_value(self, deserializer):
        return deserializer.deserialize_str(self)

    def visit_str(self, value):
        return value


class SlugField(CharField):
    default_error_messages = {
        'invalid_slug': ('must contain only letters, numbers, underscores and '
                         'dashes')
    }

    def validate(self, value, model_instance=None):
        super(SlugField, self).validate(value, model_instance)
        if value is None:
            return
        slug_re = re.compile(r'^[-\w]+$')
        if not slug_re.match(value):
            raise ValidationError('invalid_slug', self)


class EmailField(CharField):
    default_error_messages = {
        'invalid_email': 'must be a valid e-mail address'
    }

    def validate(self, value, model_instance=None):
        super(EmailField, self).validate(value, model_instance)
        if value is None:
            return

        email_re = re.compile(
            r"(^[-!#$%&'*+/=?^_`{}|~0-9A-Z]+"
            r"(\.[-!#$%&'*+/=?^_`{}|~0-9A-Z]+)*"  # dot-atom
            r'|^"([\001-\010\013\014\016-\037!#-\[\]-\177]'
            r'|\\[\001-011\013\014\016-\177])*"'  # quoted-string
            r')@(?:[A-Z0-9](?:[A-Z0-9-]{0,61}'
            r'[A-Z0-9])?\.)+[A-Z]{2,6}\.?$',  # domain
            re.IGNORECASE)

        if not email_re.match(value):
            raise ValidationError('invalid_email', self)


class URLField(CharField):
    default_error_messages = {
        'invalid_url': 'must be a valid URL',
        'invalid_scheme': 'scheme must be one of {schemes}'
    }

    def __init__(self, **kwargs):
        """
        ``schemes`` is a list of URL schemes to which this field should be
        restricted. Raises validation error if url scheme is not in this list.
        Otherwise, any scheme is allowed.
        """
        self.schemes = kwargs.pop('schemes', None)
        super(URLField, self).__init__(**kwargs)

    def validate(self, value, model_instance=None):
        super(URLField, self).validate(value, model_instance)
        if value is None:
            return
        parsed = urlparse(value)
        if not all((parsed.scheme, parsed.hostname)):
            raise ValidationError('invalid_url', self)
        if self.schemes and parsed.scheme.lower() not in self.schemes:
            schemes = ', '.join(self.schemes)
            raise ValidationError('invalid_scheme', self, schemes=schemes)


class BytesField(Field):
    """
    Binary data, stored as a sequence of integers from 0 to 255. A
    ``!!binary`` scalar is read the same way.
    """
    expecting = 'a byte sequence'
    shape = 'sequence'
    default_error_messages = {
        'invalid_bytes': 'must be a byte sequence',
    }

    def __init__(self, **kwargs):
        self.octet = IntegerField(bits=8, signed=False)
        super(BytesField, self).__init__(**kwargs)

    def to_python(self, value):
        if value is None or isinstance(value, bytes):
            return value
        if isinstance(value, str):
            raise ValidationError('invalid_bytes', self)
        try:
            return bytes(value)
        except (TypeError, ValueError):
            raise ValidationError('invalid_bytes', self)

    def serialize_value(self, value, serializer):
        serializer.serialize_bytes(value)

    def deserialize_value(self, deserializer):
        return deserializer.deserialize_bytes(self)

    def visit_bytes(self, value):
        return value

    def visit_seq(self, seq):
        # only reached when some element is not an octet
        return bytes(self.octet.deserialize(item) for item in seq)


class DateField(Field):
    expecting = 'a date'
    default_error_messages = {
        'invalid_format': 'must be in the format of YYYY-MM-DD',
        'invalid': 'must be a valid date',
    }

    def to_python(self, value):
        if value is None:
            return value
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value

        if isinstance(value, str):
            try:
                return isodate.parse_iso_date(value)
            except isodate.InvalidFormat:
                raise ValidationError('invalid_format', self)
            except isodate.InvalidDate:
                raise ValidationError('invalid', self)
        raise ValidationError('invalid', self)

    def serialize_value(self, value, serializer):
        serializer.serialize_str(value.isoformat())

    def deserialize_value(self, deserializer):
        return deserializer.deserialize_str(self)

    def visit_str(self, value):
        return self.to_python(value)


class DateTimeField(DateField):
    expecting = 'a date/time'
    default_error_messages = {
        'invalid_format': 'must be in the format of YYYY-MM-DD HH:MM[:SS]',
        'invalid': 'must be a valid date/time'
    }

    def to_python(self, value):
        if value is None:
            return value
        if isinstance(value, datetime):
            return value
        if isinstance(value, date):
            return datetime(value.year, value.month, value.day)

        if isinstance(value, str):
            try:
                return isodate.parse_iso_datetime(value)
            except isodate.InvalidFormat:
                # we also accept a date-only string
                try:
                    parsed = isodate.parse_iso_date(value)
                except isodate.InvalidFormat:
                    raise ValidationError('invalid_format', self)
                except isodate.InvalidDate:
                    raise ValidationError('invalid', self)
                return datetime(parsed.year, parsed.month, parsed.day)
            except isodate.InvalidDate:
                raise ValidationError('invalid', self)
        raise ValidationError('invalid', self)


class TimeField(DateField):
    expecting = 'a time'
    default_error_messages = {
        'invalid_format': 'must be in the format of HH:MM[:SS]',
        'invalid': 'must be a valid time'
    }

    def to_python(self, value):
        if value is None:
            return value
        if isinstance(value, time):
            return value

        if isinstance(value, str):
            try:
                return isodate.parse_iso_time(value)
            except isodate.InvalidFormat:
                raise ValidationError('invalid_format', self)
            except isodate.InvalidDate:
                raise ValidationError('invalid', self)
        raise ValidationError('invalid', self)


class ListField(Field):
    """
    A list whose items are all converted with ``field``.
    """
    expecting = 'a sequence'
    shape = 'sequence'

    def __init__(self, field=None, **kwargs):
        self.field = AnyField() if field is None else field_for(field)
        super(ListField, self).__init__(**kwargs)

    def to_python(self, value):
        if value is None:
            return None
        return [self.field.to_python(item) for item in value]

    def validate(self, value, model_instance=None):
        super(ListField, self).validate(value, model_instance)
        for item in value or ():
            self.field.validate(item, model_instance)

    def serialize_value(self, value, serializer):
        serializer.start_sequence(len(value))
        for item in value:
            serializer.serialize_element(item, self.field)
        serializer.end_sequence()

    def deserialize_value(self, deserializer):
        return deserializer.deserialize_seq(self)

    def visit_seq(self, seq):
        return [self.field.deserialize(item) for item in seq]


class TupleField(Field):
    """
    A fixed-size tuple, one field per position. Without fields, a tuple of
    any length holding native values.
    """
    shape = 'sequence'

    def __init__(self, *fields, **kwargs):
        self.fields = [field_for(f) for f in fields]
        super(TupleField, self).__init__(**kwargs)

    @property
    def expecting(self):
        if not self.fields:
            return 'a tuple'
        return 'a tuple of size {}'.format(len(self.fields))

    def fields_for(self, length):
        if self.fields:
            return self.fields
        return [AnyField() for i in range(length)]

    def to_python(self, value):
        if value is None:
            return None
        return tuple(value)

    def serialize_value(self, value, serializer):
        if self.fields and len(value) != len(self.fields):
            msg = 'expected a tuple of size {}, got {}'.format(
                len(self.fields), len(value))
            raise exceptions.CustomError(msg, path=serializer.path)
        serializer.start_sequence(len(value))
        for field, item in zip(self.fields_for(len(value)), value):
            serializer.serialize_element(item, field)
        serializer.end_sequence()

    def deserialize_value(self, deserializer):
        if not self.fields:
            return deserializer.deserialize_seq(self)
        return deserializer.deserialize_tuple(len(self.fields), self)

    def visit_seq(self, seq):
        fields = self.fields_for(len(seq))
        return tuple(field.deserialize(item) for field, item in
                     zip(fields, seq))


def hashable(obj):
    """Makes a native mapping key hashable."""
    if isinstance(obj, list):
        return tuple(hashable(item) for item in obj)
    if isinstance(obj, dict):
        return Value.from_python(obj)
    return obj


class MapField(Field):
    """
    A dict. Keys are converted with ``key_field`` and values with
    ``value_field``; both default to native values.
    """
    expecting = 'a mapping'
    shape = 'mapping'

    def __init__(self, key_field=None, value_field=None, **kwargs):
        self.key_field = AnyField() if key_field is None else \
            field_for(key_field)
        self.value_field = AnyField() if value_field is None else \
            field_for(value_field)
        super(MapField, self).__init__(**kwargs)

    def to_python(self, value):
        if value is None:
            return None
        return dict(value)

    def serialize_value(self, value, serializer):
        serializer.start_mapping(len(value))
        for key, item in value.items():
            serializer.serialize_key(key, self.key_field)
            serializer.serialize_value(item, self.value_field)
        serializer.end_mapping()

    def deserialize_value(self, deserializer):
        return deserializer.deserialize_map(self)

    def visit_map(self, mapping):
        result = {}
        for key_de, value_de in mapping:
            key = hashable(self.key_field.deserialize(key_de))
            if key in result:
                raise exceptions.DuplicateKey(repr(key), mark=key_de.mark,
                                              path=key_de.path)
            result[key] = self.value_field.deserialize(value_de)
        return result


class ModelField(Field):
    """
    A nested model, stored as a mapping.
    """
    shape = 'mapping'

    def __init__(self, model, **kwargs):
        self.to_model = model
        super(ModelField, self).__init__(**kwargs)

    @property
    def expecting(self):
        return 'struct {}'.format(self.to_model._meta.name)

    def to_python(self, value):
        if isinstance(value, AbcMapping):
            return self.to_model(**value)
        return value

    def validate(self, value, model_instance=None):
        super(ModelField, self).validate(value, model_instance)
        if value is not None:
            value.full_clean()

    def serialize_value(self, value, serializer):
        value.serialize(serializer)

    def deserialize_value(self, deserializer):
        return self.to_model.deserialize(deserializer)


class EnumField(Field):
    """
    An enum value: a bare variant name for unit variants, a single-key
    mapping ``{variant: payload}`` otherwise.
    """
    shape = 'enum'

    def __init__(self, enum, **kwargs):
        self.enum = enum
        super(EnumField, self).__init__(**kwargs)

    @property
    def expecting(self):
        return 'enum {}'.format(self.enum._meta.name)

    def to_python(self, value):
        from yamlmodel import enums
        # a unit variant may be given without calling it
        if isinstance(value, enums.Variant) and \
                value.kind is enums.VariantKind.UNIT:
            return value()
        return value

    def serialize_value(self, value, serializer):
        value.serialize(serializer)

    def deserialize_value(self, deserializer):
        return self.enum.deserialize(deserializer)


class ValueField(Field):
    """
    An untyped ``Value``, kept exactly as the document holds it.
    """
    expecting = 'any YAML value'
    default_error_messages = {
        'invalid_value': 'cannot be represented in YAML',
    }

    def to_python(self, value):
        if value is None:
            return None
        try:
            return Value.from_python(value)
        except TypeError:
            raise ValidationError('invalid_value', self)

    def serialize_value(self, value, serializer):
        value.serialize(serializer)

    def deserialize_value(self, deserializer):
        return deserializer.deserialize_untyped()


class AnyField(Field):
    """
    Native python values: ``None``, booleans, numbers, strings, lists and
    dicts on the way in; those plus models, enums, ``Value``s, bytes,
    decimals and dates on the way out.
    """
    expecting = 'any value'
    nullable = True

    def serialize_value(self, value, serializer):
        if hasattr(value, 'serialize') and not isinstance(value, type):
            # models, enum values and Values
            value.serialize(serializer)
            return
        for python_type, field_class in NATIVE_FIELDS:
            if isinstance(value, python_type):
                field_class().serialize_value(value, serializer)
                return
        if isinstance(value, AbcMapping):
            MapField().serialize_value(value, serializer)
        elif isinstance(value, (list, tuple, set, frozenset)):
            ListField().serialize_value(value, serializer)
        else:
            msg = 'cannot serialize object of type {}'.format(
                type(value).__name__)
            raise exceptions.CustomError(msg, path=serializer.path)

    def deserialize_value(self, deserializer):
        return deserializer.deserialize_any(self)

    def visit_unit(self):
        return None

    def visit_bool(self, value):
        return value

    def visit_int(self, value):
        return value

    def visit_float(self, value):
        return value

    def visit_str(self, value):
        return value

    def visit_bytes(self, value):
        return value

    def visit_seq(self, seq):
        return [self.deserialize(item) for item in seq]

    def visit_map(self, mapping):
        return MapField().visit_map(mapping)


class UnitField(Field):
    """
    The unit value: null in the document, ``None`` in python.
    """
    expecting = 'unit'
    nullable = True

    def serialize_value(self, value, serializer):
        serializer.serialize_unit()

    def deserialize_value(self, deserializer):
        return deserializer.deserialize_unit(self)

    def visit_unit(self):
        return None


class FieldIdentifier(Visitor):
    expecting = 'a field identifier'

    def visit_str(self, value):
        return value


IDENTIFIER = FieldIdentifier()


class StructVisitor(Visitor):
    """
    Reads a mapping into a dict of field name to value for the given
    fields. Unknown keys are skipped unless ``deny_unknown_fields`` (or, when
    that is ``None``, the ``DENY_UNKNOWN_FIELDS`` option) says otherwise.
    """
    shape = 'mapping'

    def __init__(self, name, fields, deny_unknown_fields=None):
        self.name = name
        self.fields = [f for f in fields if f.serializable]
        self.deny_unknown_fields = deny_unknown_fields

    @property
    def expecting(self):
        return 'struct {}'.format(self.name)

    @property
    def keys(self):
        return [field.key for field in self.fields]

    def visit_map(self, mapping):
        deny = self.deny_unknown_fields
        if deny is None:
            deny = mapping.config.DENY_UNKNOWN_FIELDS
        fields_by_key = dict((field.key, field) for field in self.fields)

        values = {}
        for key_de, value_de in mapping:
            key = key_de.deserialize_str(IDENTIFIER)
            field = fields_by_key.get(key)
            if field is None:
                if deny:
                    raise exceptions.UnknownField(key, self.keys,
                                                  mark=key_de.mark,
                                                  path=key_de.path)
                value_de.deserialize_ignored_any()
                continue
            if field.name in values:
                raise exceptions.DuplicateKey('"{}"'.format(key),
                                              mark=key_de.mark,
                                              path=key_de.path)
            values[field.name] = field.deserialize(value_de)

        for field in self.fields:
            if field.name in values:
                continue
            if field.has_default():
                values[field.name] = field.default
            elif not field.required:
                values[field.name] = None
            else:
                raise exceptions.MissingField(field.key)
        return values


NATIVE_FIELDS = (
    (bool, BooleanField),
    (int, lambda: IntegerField(bits=None)),
    (float, FloatField),
    (str, CharField),
    ((bytes, bytearray), BytesField),
    (decimal.Decimal, DecimalField),
    (datetime, DateTimeField),
    (date, DateField),
    (time, TimeField),
)

TYPE_FIELDS = (
    (Value, ValueField),
    (list, ListField),
    (tuple, TupleField),
    (dict, MapField),
    (type(None), UnitField),
) + NATIVE_FIELDS


def field_for(target):
    """
    Returns the field that converts ``target``: a field (returned as-is),
    a ``Model`` or ``Enum`` subclass, or a python type. ``None`` and
    ``object`` mean native values.
    """
    from yamlmodel import enums, models
    if target is None or target is object:
        return AnyField()
    if isinstance(target, Field):
        return target
    if isinstance(target, type):
        if issubclass(target, models.Model):
            return ModelField(target)
        if issubclass(target, enums.Enum):
            return EnumField(target)
        for python_type, field_class in TYPE_FIELDS:
            if issubclass(target, python_type):
                return field_class()
    msg = 'Cannot convert {!r}: expected a field, a model, an enum or a type'
    raise FieldError(msg.format(target))
