from importlib import import_module

from yamlmodel.conf import get_config
from yamlmodel.exceptions import UnsupportedFormat

BUILTIN_SERIALIZERS = {
    "yaml": "yamlmodel.serializers.yaml",
    "value": "yamlmodel.serializers.value",
    "python": "yamlmodel.serializers.python",
}


def get_serializer_module(config, format):
    serializer_modules = BUILTIN_SERIALIZERS.copy()
    serializer_modules.update(config.get('SERIALIZER_MODULES', {}))
    if format not in serializer_modules.keys():
        raise UnsupportedFormat("Invalid serializer format: {}".format(format))
    return import_module(serializer_modules[format])


def serialize(obj, format=None, field=None, **options):
    config = get_config(options)
    module = get_serializer_module(config, format or config.DEFAULT_FORMAT)
    return module.serialize(obj, field, config=config)


def deserialize(target, data, format=None, **options):
    config = get_config(options)
    module = get_serializer_module(config, format or config.DEFAULT_FORMAT)
    return module.deserialize(target, data, config=config)
