"""
Reading YAML text into ``Value`` trees.

PyYAML does the scanning, parsing and composing. Scalars reach this module
as text: untagged plain scalars keep the non-specific tag ``?`` and are
resolved here against the configured schema, so PyYAML's own implicit
resolvers never decide a kind.
"""
import base64
import binascii
import logging

import yaml
from yaml.composer import Composer
from yaml.nodes import MappingNode, ScalarNode, SequenceNode
from yaml.parser import Parser
from yaml.reader import Reader, ReaderError
from yaml.resolver import BaseResolver
from yaml.scanner import Scanner

from yamlmodel import exceptions
from yamlmodel import resolver
from yamlmodel.utils import Mark
from yamlmodel.value import Mapping, Value, ValueKind

log = logging.getLogger(__name__)

TAG_EXPECTATIONS = {
    resolver.NULL_TAG: 'null',
    resolver.BOOL_TAG: 'a boolean',
    resolver.INT_TAG: 'an integer',
    resolver.FLOAT_TAG: 'a float',
}


class PlainResolver(BaseResolver):
    """
    Leaves plain scalars unresolved (``?``) and reads quoted ones as strings.
    """
    def resolve(self, kind, value, implicit):
        if kind is ScalarNode:
            return '?' if implicit[0] else resolver.STR_TAG
        return super(PlainResolver, self).resolve(kind, value, implicit)


class Loader(Reader, Scanner, Parser, Composer, PlainResolver):
    def __init__(self, stream):
        Reader.__init__(self, stream)
        Scanner.__init__(self)
        Parser.__init__(self)
        Composer.__init__(self)
        PlainResolver.__init__(self)


def _problem(err):
    msg = err.problem or str(err)
    if err.context:
        msg = '{} ({})'.format(msg, err.context)
    return msg


def compose(stream):
    """
    Returns the node trees for every document in ``stream`` together with
    the position where the stream ended.
    """
    loader = None
    try:
        # the reader decodes and checks the first chunk on construction
        loader = Loader(stream)
        documents = []
        while loader.check_node():
            documents.append(loader.get_node())
        end = Mark.from_yaml(loader.get_mark())
    except yaml.MarkedYAMLError as err:
        mark = Mark.from_yaml(err.problem_mark or err.context_mark)
        raise exceptions.ParseError(_problem(err), mark=mark,
                                    cause=err) from err
    except ReaderError as err:
        msg = 'invalid input at index {}: {}'.format(err.position, err.reason)
        raise exceptions.ParseError(msg, cause=err) from err
    except yaml.YAMLError as err:
        raise exceptions.ParseError(str(err), cause=err) from err
    finally:
        if loader is not None:
            loader.dispose()
    return documents, end


class ValueBuilder(object):
    """
    Turns composed nodes into ``Value`` trees. An alias is the very node
    object it refers to, so every occurrence is expanded into its own copy.
    """
    def __init__(self, config):
        self.schema = resolver.get_schema(config.SCHEMA)
        self.big_integers = config.BIG_INTEGERS
        self.max_nodes = config.MAX_NODES
        self.count = 0
        self.active = set()
        self.expanded = set()

    def build(self, node):
        mark = Mark.from_yaml(node.start_mark)
        self.count += 1
        if self.count > self.max_nodes:
            raise exceptions.ParseError('repetition limit exceeded',
                                        mark=mark)
        if isinstance(node, ScalarNode):
            return self.build_scalar(node, mark)

        if id(node) in self.active:
            raise exceptions.ParseError('recursive alias', mark=mark)
        if id(node) in self.expanded:
            log.debug('Expanding alias of the node at %s', mark)
        if node.tag not in (resolver.SEQ_TAG, resolver.MAP_TAG):
            log.debug('Ignoring tag %s on the node at %s', node.tag, mark)
        self.expanded.add(id(node))
        self.active.add(id(node))
        try:
            if isinstance(node, SequenceNode):
                items = [self.build(child) for child in node.value]
                return Value(ValueKind.SEQUENCE, items, mark=mark)
            elif isinstance(node, MappingNode):
                mapping = Mapping()
                for key_node, value_node in node.value:
                    key = self.build(key_node)
                    mapping.insert(key, self.build(value_node))
                return Value(ValueKind.MAPPING, mapping, mark=mark)
            raise exceptions.ParseError(
                'unexpected node {}'.format(type(node).__name__), mark=mark)
        finally:
            self.active.discard(id(node))

    def build_scalar(self, node, mark):
        text = node.value
        tag = node.tag
        if tag == '?':
            kind, data = resolver.resolve(text, self.schema, self.big_integers)
        elif tag == resolver.BINARY_TAG:
            return self.build_binary(text, mark)
        elif tag in TAG_EXPECTATIONS:
            resolved = resolver.resolve_tagged(tag, text, self.schema)
            if resolved is None:
                raise exceptions.TypeMismatch(TAG_EXPECTATIONS[tag], 'string',
                                              text=text, mark=mark)
            kind, data = resolved
        else:
            if tag != resolver.STR_TAG:
                log.debug('Ignoring tag %s on the node at %s', tag, mark)
            kind, data = ValueKind.STRING, text

        style = None
        if kind is ValueKind.INT:
            prefix = text.lstrip('+-')[:2]
            style = {'0x': 'hex', '0o': 'octal'}.get(prefix)
        return Value(kind, data, mark=mark, raw=text, style=style)

    def build_binary(self, text, mark):
        try:
            data = base64.decodebytes(text.encode('ascii'))
        except (binascii.Error, UnicodeEncodeError) as err:
            raise exceptions.ParseError('invalid !!binary data', mark=mark,
                                        cause=err) from err
        octets = [Value(ValueKind.INT, octet, mark=mark) for octet in data]
        return Value(ValueKind.SEQUENCE, octets, mark=mark)


def load(stream, config):
    """
    Parses ``stream`` (text, bytes or a file-like object) into a ``Value``,
    or into a list of ``Value``s when ``config.MULTI_DOCUMENT`` is set.
    """
    documents, end = compose(stream)
    builder = ValueBuilder(config)
    values = [builder.build(node) for node in documents]
    log.debug('Loaded %d YAML document(s), %d node(s)', len(values),
              builder.count)

    if config.MULTI_DOCUMENT:
        return values
    if not values:
        raise exceptions.UnexpectedEof(mark=end)
    if len(values) > 1:
        msg = 'expected a single YAML document but found {}'
        raise exceptions.StructureMismatch(message=msg.format(len(values)),
                                           mark=values[1].mark)
    return values[0]
