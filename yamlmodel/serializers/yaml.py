"""
YAML serializer.

Requires PyYAML (https://pyyaml.org/), used through ``yamlmodel.loader`` and
``yamlmodel.emitter``.
"""
from yamlmodel import emitter
from yamlmodel import exceptions
from yamlmodel import loader
from yamlmodel.conf import get_config
from yamlmodel.serializers import base
from yamlmodel.serializers import value as value_serializer
from yamlmodel.utils.path import ROOT
from yamlmodel.value import KIND_NAMES


class Serializer(value_serializer.Serializer):
    """
    Convert an object to YAML.
    """
    def end_serialization(self):
        root = self.root
        if not self.config.MULTI_DOCUMENT:
            documents = [root]
        elif root.is_sequence():
            documents = root.data
        else:
            raise exceptions.StructureMismatch('a sequence of documents',
                                               KIND_NAMES[root.kind])
        emitter.emit(documents, self.stream, self.config)

    def getvalue(self):
        return base.Serializer.getvalue(self)


def serialize(obj, field=None, stream=None, **options):
    """
    Serialize ``obj`` as a YAML document. The text is returned, or written
    to ``stream`` when one is given.
    """
    text = Serializer(**options).serialize(obj, field, stream=stream)
    if stream is None:
        return text


def deserialize(target, data, **options):
    """
    Deserialize ``target`` from YAML ``data`` (text, bytes or a file-like
    object). With ``multi_document`` set, returns one result per document.
    """
    from yamlmodel import fields
    config = get_config(options)
    field = fields.field_for(target)
    parsed = loader.load(data, config)
    if not config.MULTI_DOCUMENT:
        return field.deserialize(value_serializer.Deserializer(parsed, config))
    return [field.deserialize(value_serializer.Deserializer(doc, config,
                                                            ROOT.index(i)))
            for i, doc in enumerate(parsed)]
