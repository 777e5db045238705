"""
Locations inside a YAML document: ``Mark`` is a line/column position in the
source text, ``Path`` is the chain of keys and indexes leading to a node.
"""
from collections import namedtuple


class Mark(namedtuple('Mark', ('line', 'column', 'index'))):
    """
    A 1-based line and column (and 0-based character index) in YAML text.
    """
    __slots__ = ()

    @classmethod
    def from_yaml(cls, mark):
        """Converts a PyYAML mark, which counts from zero."""
        if mark is None:
            return None
        return cls(mark.line + 1, mark.column + 1, mark.index)

    def __str__(self):
        return 'line {} column {}'.format(self.line, self.column)


class Path(object):
    """
    An immutable link in the chain from the document root to the node being
    converted. Renders as ``.`` for the root, ``servers[0].host`` otherwise.
    """
    __slots__ = ('parent', 'segment')

    def __init__(self, parent=None, segment=None):
        self.parent = parent
        self.segment = segment

    def key(self, key):
        return Path(self, str(key))

    def index(self, index):
        return Path(self, index)

    def __str__(self):
        segments = []
        path = self
        while path.parent is not None:
            segments.append(path.segment)
            path = path.parent
        if not segments:
            return '.'
        out = ''
        for segment in reversed(segments):
            if isinstance(segment, int):
                out += '[{}]'.format(segment)
            elif out:
                out += '.' + segment
            else:
                out = segment
        return out

    def __repr__(self):
        return '<Path: {}>'.format(self)


ROOT = Path()
