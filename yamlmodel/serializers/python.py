"""
A Python serializer. Handles serialization of objects to/from native python
data: dicts, lists, strings, numbers, booleans and ``None``.
"""
from yamlmodel.serializers import value as value_serializer
from yamlmodel.value import Value


class Serializer(value_serializer.Serializer):
    def getvalue(self):
        return self.root.to_python()


def serialize(obj, field=None, **options):
    """
    Serialize ``obj`` into native python data. Mapping keys that are
    sequences become tuples.
    """
    return Serializer(**options).serialize(obj, field)


def deserialize(target, data, **options):
    """
    Load native python data as ``target``.
    """
    return value_serializer.deserialize(target, Value.from_python(data),
                                        **options)
