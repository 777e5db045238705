"""
Writing ``Value`` trees as YAML text.

Values become PyYAML nodes which ``yaml.serialize_all`` writes out. Whether
a scalar may be written plain is decided by ``QuotingResolver``: a string
only comes out unquoted when no known schema would read it back as anything
else.
"""
import logging

import yaml
from yaml.emitter import Emitter
from yaml.nodes import MappingNode, ScalarNode, SequenceNode
from yaml.resolver import BaseResolver
from yaml.serializer import Serializer

from yamlmodel import resolver
from yamlmodel.value import ValueKind

log = logging.getLogger(__name__)

# never equal to a node tag, so PyYAML quotes the scalar
QUOTED_TAG = '!quoted'

STRING_STYLES = {
    'oneline': '"',
    'block': '|',
}

# line breaks other than '\n' survive only as double-quoted escapes
LINE_SEPARATORS = '\r\x85\u2028\u2029'


class QuotingResolver(BaseResolver):
    def resolve(self, kind, value, implicit):
        if kind is ScalarNode:
            if implicit[0]:
                plain = resolver.plain_kind(value)
                if plain is None:
                    return QUOTED_TAG
                return resolver.KIND_TAGS[plain]
            return resolver.STR_TAG
        return super(QuotingResolver, self).resolve(kind, value, implicit)


class Dumper(Emitter, Serializer, QuotingResolver):
    def __init__(self, stream, canonical=None, indent=None, width=None,
                 allow_unicode=None, line_break=None, encoding=None,
                 explicit_start=None, explicit_end=None, version=None,
                 tags=None):
        Emitter.__init__(self, stream, canonical=canonical, indent=indent,
                         width=width, allow_unicode=allow_unicode,
                         line_break=line_break)
        Serializer.__init__(self, encoding=encoding,
                            explicit_start=explicit_start,
                            explicit_end=explicit_end, version=version,
                            tags=tags)
        QuotingResolver.__init__(self)

    def write_plain(self, text, split=True):
        super(Dumper, self).write_plain(text, split)
        # no directives are ever written, so a root scalar needs no "..."
        self.open_ended = False


def string_style(text, format=None):
    # plain, single-quoted and block scalars all fold these into '\n' or ' '
    if any(ch in LINE_SEPARATORS for ch in text):
        return '"'
    if format in STRING_STYLES:
        if format == 'block' and '\n' not in text:
            return None
        return STRING_STYLES[format]
    if '\n' in text.rstrip('\n') and text == text.strip(' '):
        return '|'
    return None


def to_node(value):
    kind = value.kind
    if kind is ValueKind.SEQUENCE:
        items = [to_node(item) for item in value.data]
        return SequenceNode(resolver.SEQ_TAG, items, flow_style=False)
    if kind is ValueKind.MAPPING:
        pairs = [(to_node(k), to_node(v)) for k, v in value.data.items()]
        return MappingNode(resolver.MAP_TAG, pairs, flow_style=False)
    if kind is ValueKind.STRING:
        return ScalarNode(resolver.STR_TAG, value.data,
                          style=string_style(value.data, value.style))
    return ScalarNode(resolver.KIND_TAGS[kind], resolver.format_scalar(value))


def emit(values, stream, config):
    """
    Writes each ``Value`` in ``values`` to ``stream`` as its own document.
    """
    nodes = [to_node(value) for value in values]
    yaml.serialize_all(nodes, stream, Dumper=Dumper,
                       explicit_start=config.EXPLICIT_START,
                       indent=config.INDENT, width=config.WIDTH,
                       allow_unicode=config.ALLOW_UNICODE)
    log.debug('Emitted %d YAML document(s)', len(nodes))
