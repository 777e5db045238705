"""
Maps YAML documents onto Python data: an untyped ``Value`` tree, declarative
``Model`` structs and ``Enum`` variants, or plain native objects.

    >>> import yamlmodel
    >>> yamlmodel.from_text('port: 8080')['port']
    Value(INT, 8080)
    >>> yamlmodel.to_text({'port': 8080})
    '---\\nport: 8080\\n'
"""
from yamlmodel.__info__ import (__version__, __author__, __email__,
                                __license__, __copyright__)
from yamlmodel import exceptions
from yamlmodel import fields
from yamlmodel.enums import Enum, Variant, VariantKind
from yamlmodel.models import Model
from yamlmodel.serializers import python as python_serializer
from yamlmodel.serializers import value as value_serializer
from yamlmodel.serializers import yaml as yaml_serializer
from yamlmodel.value import Mapping, Value, ValueKind

__all__ = [
    'Enum', 'Mapping', 'Model', 'Value', 'ValueKind', 'Variant',
    'VariantKind', 'exceptions', 'fields', 'from_python', 'from_reader',
    'from_text', 'from_value', 'to_python', 'to_text', 'to_value',
    'to_writer',
]


def to_text(obj, field=None, **options):
    """
    Returns ``obj`` as YAML text. ``field`` says how to write it (anything
    ``fields.field_for()`` accepts); by default the object's own type does.
    """
    return yaml_serializer.serialize(obj, field, **options)


def to_writer(obj, writer, field=None, **options):
    """
    Writes ``obj`` as YAML to the text stream ``writer``.
    """
    yaml_serializer.serialize(obj, field, stream=writer, **options)


def from_text(text, target=Value, **options):
    """
    Parses YAML ``text`` (a string or bytes) into ``target``: ``Value`` for
    the untyped tree, a model, an enum, a field or a python type.
    """
    return yaml_serializer.deserialize(target, text, **options)


def from_reader(reader, target=Value, **options):
    """
    Like ``from_text()``, reading the document from a file-like object.
    """
    return yaml_serializer.deserialize(target, reader, **options)


def to_value(obj, field=None, **options):
    """Returns ``obj`` as an untyped ``Value`` tree."""
    return value_serializer.serialize(obj, field, **options)


def from_value(value, target=None, **options):
    """
    Converts a ``Value`` (or plain python data) into ``target``. ``None``
    gives native python objects.
    """
    return value_serializer.deserialize(target, value, **options)


def to_python(obj, field=None, **options):
    """Returns ``obj`` as plain python data."""
    return python_serializer.serialize(obj, field, **options)


def from_python(data, target=None, **options):
    """Converts plain python data into ``target``."""
    return python_serializer.deserialize(target, data, **options)
