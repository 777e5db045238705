"""
Scalar resolution: deciding whether a plain YAML scalar is a null, a boolean,
an integer, a float or a string, and the reverse decision of whether a
string can be written without quotes.

The literal sets differ between YAML versions, so they live in ``Schema``
tables. Resolution always tries null, bool, int and float, in that order,
and falls back to string.
"""
import math
import re

from yamlmodel.value import ValueKind

NULL_TAG = 'tag:yaml.org,2002:null'
BOOL_TAG = 'tag:yaml.org,2002:bool'
INT_TAG = 'tag:yaml.org,2002:int'
FLOAT_TAG = 'tag:yaml.org,2002:float'
STR_TAG = 'tag:yaml.org,2002:str'
SEQ_TAG = 'tag:yaml.org,2002:seq'
MAP_TAG = 'tag:yaml.org,2002:map'
BINARY_TAG = 'tag:yaml.org,2002:binary'

KIND_TAGS = {
    ValueKind.NULL: NULL_TAG,
    ValueKind.BOOL: BOOL_TAG,
    ValueKind.INT: INT_TAG,
    ValueKind.FLOAT: FLOAT_TAG,
    ValueKind.STRING: STR_TAG,
}

I64_MIN = -2 ** 63
U64_MAX = 2 ** 64 - 1

INF_RE = re.compile(r'^([-+]?)\.(?:inf|Inf|INF)$')
NAN_RE = re.compile(r'^\.(?:nan|NaN|NAN)$')
TIMESTAMP_RE = re.compile(r'^[0-9]{4}-[0-9]{1,2}-[0-9]{1,2}')
# YAML 1.1 base 60 numbers, such as 1:20 or 12:30:00.5
SEXAGESIMAL_RE = re.compile(
    r'^[-+]?[0-9][0-9_]*(?::[0-5]?[0-9])+(?:\.[0-9_]*)?$')

# characters that may not start a plain scalar
INDICATORS = frozenset('-?:,[]{}#&*!|>\'"%@`')


class Schema(object):
    """
    A table of scalar literals. ``int_patterns`` is a sequence of
    ``(regex, base)`` pairs tried in order; the matched text is read with
    underscores and any ``0x``/``0o``/``0b`` prefix removed.
    """
    def __init__(self, name, true_literals, false_literals, null_literals,
                 int_patterns, float_patterns, special_floats=True):
        self.name = name
        self.true_literals = frozenset(true_literals)
        self.false_literals = frozenset(false_literals)
        self.null_literals = frozenset(null_literals)
        self.int_patterns = tuple((re.compile(p), base)
                                  for p, base in int_patterns)
        self.float_patterns = tuple(re.compile(p) for p in float_patterns)
        self.special_floats = special_floats

    def parse_null(self, text):
        return text in self.null_literals

    def parse_bool(self, text):
        if text in self.true_literals:
            return True
        if text in self.false_literals:
            return False
        return None

    def parse_int(self, text):
        for regexp, base in self.int_patterns:
            if regexp.match(text):
                digits = text.replace('_', '')
                sign = 1
                if digits[0] in '+-':
                    sign = -1 if digits[0] == '-' else 1
                    digits = digits[1:]
                if base != 10 and digits[1:2].isalpha():
                    digits = digits[2:]
                return sign * int(digits, base)
        return None

    def parse_float(self, text):
        if self.special_floats:
            match = INF_RE.match(text)
            if match:
                return float('-inf') if match.group(1) == '-' else float('inf')
            if NAN_RE.match(text):
                return float('nan')
        for regexp in self.float_patterns:
            if regexp.match(text):
                return float(text.replace('_', ''))
        return None

    def __repr__(self):
        return '<Schema: {}>'.format(self.name)


YAML11 = Schema(
    'yaml11',
    true_literals=('y', 'Y', 'yes', 'Yes', 'YES', 'true', 'True', 'TRUE',
                   'on', 'On', 'ON'),
    false_literals=('n', 'N', 'no', 'No', 'NO', 'false', 'False', 'FALSE',
                    'off', 'Off', 'OFF'),
    null_literals=('~', 'null', 'Null', 'NULL', ''),
    int_patterns=(
        (r'^[-+]?0b_*[0-1][0-1_]*$', 2),
        (r'^[-+]?0o_*[0-7][0-7_]*$', 8),
        (r'^[-+]?0x_*[0-9a-fA-F][0-9a-fA-F_]*$', 16),
        (r'^[-+]?0[0-7_]+$', 8),
        (r'^[-+]?(?:0|[1-9][0-9_]*)$', 10),
    ),
    float_patterns=(
        r'^[-+]?(?:[0-9][0-9_]*\.[0-9_]*|\.[0-9][0-9_]*)'
        r'(?:[eE][-+]?[0-9]+)?$',
        r'^[-+]?[0-9][0-9_]*[eE][-+]?[0-9]+$',
    ),
)

CORE = Schema(
    'core',
    true_literals=('true', 'True', 'TRUE'),
    false_literals=('false', 'False', 'FALSE'),
    null_literals=('~', 'null', 'Null', 'NULL', ''),
    int_patterns=(
        (r'^0o[0-7]+$', 8),
        (r'^0x[0-9a-fA-F]+$', 16),
        (r'^[-+]?[0-9]+$', 10),
    ),
    float_patterns=(
        r'^[-+]?(?:\.[0-9]+|[0-9]+(?:\.[0-9]*)?)(?:[eE][-+]?[0-9]+)?$',
    ),
)

JSON = Schema(
    'json',
    true_literals=('true',),
    false_literals=('false',),
    null_literals=('null',),
    int_patterns=(
        (r'^-?(?:0|[1-9][0-9]*)$', 10),
    ),
    float_patterns=(
        r'^-?(?:0|[1-9][0-9]*)(?:\.[0-9]*)?(?:[eE][-+]?[0-9]+)?$',
    ),
    special_floats=False,
)

SCHEMAS = {
    'yaml11': YAML11,
    'core': CORE,
    'json': JSON,
}


def get_schema(schema):
    if isinstance(schema, Schema):
        return schema
    try:
        return SCHEMAS[schema]
    except KeyError:
        from yamlmodel.exceptions import ConfigurationError
        msg = 'Unknown schema {!r}; expected one of {}'
        raise ConfigurationError(msg.format(schema, ', '.join(SCHEMAS)))


def _int_to_float(number):
    try:
        return float(number)
    except OverflowError:
        return float('-inf') if number < 0 else float('inf')


def resolve(text, schema=YAML11, big_integers='float'):
    """
    Resolves a plain scalar to ``(ValueKind, python_value)``.

    Integers outside the 64-bit range become floats unless ``big_integers``
    is ``'int'``.
    """
    if schema.parse_null(text):
        return ValueKind.NULL, None
    flag = schema.parse_bool(text)
    if flag is not None:
        return ValueKind.BOOL, flag
    number = schema.parse_int(text)
    if number is not None:
        if big_integers == 'float' and not I64_MIN <= number <= U64_MAX:
            return ValueKind.FLOAT, _int_to_float(number)
        return ValueKind.INT, number
    number = schema.parse_float(text)
    if number is not None:
        return ValueKind.FLOAT, number
    return ValueKind.STRING, text


def resolve_tagged(tag, text, schema=YAML11):
    """
    Reads a scalar carrying an explicit core tag. Returns ``None`` when the
    text does not fit the tag.
    """
    if tag == NULL_TAG:
        if text in ('', '~', 'null', 'Null', 'NULL'):
            return ValueKind.NULL, None
    elif tag == BOOL_TAG:
        for table in (schema, YAML11):
            flag = table.parse_bool(text)
            if flag is not None:
                return ValueKind.BOOL, flag
    elif tag == INT_TAG:
        for table in (schema, YAML11):
            number = table.parse_int(text)
            if number is not None:
                return ValueKind.INT, number
    elif tag == FLOAT_TAG:
        for table in (schema, YAML11):
            number = table.parse_float(text)
            if number is None:
                number = table.parse_int(text)
            if number is not None:
                return ValueKind.FLOAT, float(number)
    return None


def plain_kind(text):
    """
    Returns the kind the text would have as a plain scalar under the most
    eager of the known schemas, or ``None`` for strings that must be quoted.
    """
    schemas = tuple(SCHEMAS.values())
    if any(s.parse_null(text) for s in schemas):
        return ValueKind.NULL
    if any(s.parse_bool(text) is not None for s in schemas):
        return ValueKind.BOOL
    if any(s.parse_int(text) is not None for s in schemas):
        return ValueKind.INT
    if any(s.parse_float(text) is not None for s in schemas):
        return ValueKind.FLOAT
    if is_plain_safe(text):
        return ValueKind.STRING
    return None


def is_plain_safe(text):
    """
    True if a string can be written without quotes and read back as the same
    string by any of the known schemas. Errs towards quoting.
    """
    if not text or text != text.strip():
        return False
    if text[0] in INDICATORS or text in ('<<', '='):
        return False
    if ': ' in text or ' #' in text or text.endswith(':'):
        return False
    if any(ch < ' ' or ch in '\x7f\x85\u2028\u2029\ufeff' for ch in text):
        return False
    if TIMESTAMP_RE.match(text) or SEXAGESIMAL_RE.match(text):
        return False
    for schema in SCHEMAS.values():
        if resolve(text, schema)[0] is not ValueKind.STRING:
            return False
    return True


def format_float(value):
    """
    The shortest text that reads back as the same float, always with a
    decimal point so YAML 1.1 readers see a float.
    """
    if math.isnan(value):
        return '.nan'
    if math.isinf(value):
        return '.inf' if value > 0 else '-.inf'
    text = repr(value)
    if 'e' in text:
        mantissa, exponent = text.split('e')
        if '.' not in mantissa:
            mantissa += '.0'
        text = '{}e{}'.format(mantissa, exponent)
    return text


def format_int(value, style=None):
    if style == 'hex' and value >= 0:
        return '0x{:x}'.format(value)
    if style == 'octal' and value >= 0:
        return '0o{:o}'.format(value)
    return str(value)


def format_scalar(value):
    """Canonical text of a scalar Value."""
    kind = value.kind
    if kind is ValueKind.NULL:
        return 'null'
    if kind is ValueKind.BOOL:
        return 'true' if value.data else 'false'
    if kind is ValueKind.INT:
        return format_int(value.data, value.style)
    if kind is ValueKind.FLOAT:
        return format_float(value.data)
    return value.data
