import math
import unittest

from yamlmodel import resolver
from yamlmodel.value import Value, ValueKind


class ResolveTest(unittest.TestCase):
    def assertResolves(self, text, kind, data, schema=resolver.YAML11,
                       **kwargs):
        resolved = resolver.resolve(text, schema, **kwargs)
        self.assertEqual(resolved, (kind, data), text)
        if data is not None:
            self.assertIs(type(resolved[1]), type(data), text)

    def test_null(self):
        for text in ('~', 'null', 'Null', 'NULL', ''):
            self.assertResolves(text, ValueKind.NULL, None)
        self.assertResolves('~', ValueKind.STRING, '~', resolver.JSON)

    def test_yaml11_booleans(self):
        for text in ('y', 'yes', 'On', 'TRUE', 'true'):
            self.assertResolves(text, ValueKind.BOOL, True)
        for text in ('n', 'NO', 'off', 'False'):
            self.assertResolves(text, ValueKind.BOOL, False)

    def test_core_booleans(self):
        self.assertResolves('True', ValueKind.BOOL, True, resolver.CORE)
        self.assertResolves('yes', ValueKind.STRING, 'yes', resolver.CORE)
        self.assertResolves('off', ValueKind.STRING, 'off', resolver.CORE)
        self.assertResolves('True', ValueKind.STRING, 'True', resolver.JSON)

    def test_integers(self):
        self.assertResolves('42', ValueKind.INT, 42)
        self.assertResolves('-17', ValueKind.INT, -17)
        self.assertResolves('+3', ValueKind.INT, 3)
        self.assertResolves('0x1F', ValueKind.INT, 31)
        self.assertResolves('0o17', ValueKind.INT, 15)
        self.assertResolves('017', ValueKind.INT, 15)
        self.assertResolves('0b101', ValueKind.INT, 5)
        self.assertResolves('1_000', ValueKind.INT, 1000)
        self.assertResolves('017', ValueKind.INT, 17, resolver.CORE)
        self.assertResolves('0b101', ValueKind.STRING, '0b101', resolver.CORE)

    def test_prefixes_need_digits(self):
        for text in ('0x', '0x_', '0o', '0b', '+', '-', '.', '_'):
            kind, data = resolver.resolve(text)
            self.assertIs(kind, ValueKind.STRING, text)

    def test_floats(self):
        self.assertResolves('1.5', ValueKind.FLOAT, 1.5)
        self.assertResolves('1.', ValueKind.FLOAT, 1.0)
        self.assertResolves('.5', ValueKind.FLOAT, 0.5)
        self.assertResolves('1.5e3', ValueKind.FLOAT, 1500.0)
        self.assertResolves('6.02e+23', ValueKind.FLOAT, 6.02e23)
        self.assertResolves('1e3', ValueKind.FLOAT, 1000.0)
        self.assertResolves('.inf', ValueKind.FLOAT, float('inf'))
        self.assertResolves('-.Inf', ValueKind.FLOAT, float('-inf'))
        kind, data = resolver.resolve('.NaN')
        self.assertIs(kind, ValueKind.FLOAT)
        self.assertTrue(math.isnan(data))
        self.assertResolves('.inf', ValueKind.STRING, '.inf', resolver.JSON)

    def test_big_integers(self):
        self.assertResolves('18446744073709551615', ValueKind.INT,
                            2 ** 64 - 1)
        self.assertResolves('-9223372036854775808', ValueKind.INT, -2 ** 63)
        self.assertResolves('18446744073709551616', ValueKind.FLOAT,
                            float(2 ** 64))
        self.assertResolves('18446744073709551616', ValueKind.INT, 2 ** 64,
                            big_integers='int')
        self.assertResolves('1' + '0' * 400, ValueKind.FLOAT, float('inf'))

    def test_strings(self):
        for text in ('hello', 'hello world', '1.2.3', '12:30', '2001-12-14',
                     'nulls', 'yes!'):
            self.assertResolves(text, ValueKind.STRING, text)

    def test_tagged(self):
        self.assertEqual(resolver.resolve_tagged(resolver.INT_TAG, '0x10'),
                         (ValueKind.INT, 16))
        self.assertEqual(resolver.resolve_tagged(resolver.FLOAT_TAG, '3'),
                         (ValueKind.FLOAT, 3.0))
        self.assertEqual(resolver.resolve_tagged(resolver.BOOL_TAG, 'yes',
                                                 resolver.CORE),
                         (ValueKind.BOOL, True))
        self.assertIsNone(resolver.resolve_tagged(resolver.INT_TAG, 'ten'))
        self.assertIsNone(resolver.resolve_tagged(resolver.NULL_TAG, 'x'))

    def test_get_schema(self):
        from yamlmodel.exceptions import ConfigurationError
        self.assertIs(resolver.get_schema('core'), resolver.CORE)
        self.assertIs(resolver.get_schema(resolver.JSON), resolver.JSON)
        with self.assertRaises(ConfigurationError):
            resolver.get_schema('yaml13')


class QuotingTest(unittest.TestCase):
    def test_plain_safe(self):
        for text in ('hello', 'hello world', 'a-b', 'foo.bar', 'x1',
                     'caf\xe9'):
            self.assertTrue(resolver.is_plain_safe(text), text)

    def test_needs_quotes(self):
        for text in ('', ' x', 'x ', 'yes', 'No', 'on', 'y', 'null', '~',
                     '1', '1.0', '0x1f', '.inf', '- x', '-', '?', ': x',
                     'a: b', 'a #b', 'key:', '[x]', '{x}', '*x', '&x', '!x',
                     '|', '>', "'x", '"x', '%x', '@x', '`x', '#x',
                     '2001-12-14', '12:30', '1:20:30', 'a\tb', 'line\nbreak',
                     '<<', '='):
            self.assertFalse(resolver.is_plain_safe(text), repr(text))

    def test_plain_kind(self):
        self.assertIs(resolver.plain_kind('true'), ValueKind.BOOL)
        self.assertIs(resolver.plain_kind('y'), ValueKind.BOOL)
        self.assertIs(resolver.plain_kind('~'), ValueKind.NULL)
        self.assertIs(resolver.plain_kind('1e3'), ValueKind.FLOAT)
        self.assertIs(resolver.plain_kind('0b11'), ValueKind.INT)
        self.assertIs(resolver.plain_kind('plain'), ValueKind.STRING)
        self.assertIsNone(resolver.plain_kind('a: b'))


class FormatTest(unittest.TestCase):
    def test_format_float(self):
        self.assertEqual(resolver.format_float(1.0), '1.0')
        self.assertEqual(resolver.format_float(0.1), '0.1')
        self.assertEqual(resolver.format_float(-2.5), '-2.5')
        self.assertEqual(resolver.format_float(1e20), '1.0e+20')
        self.assertEqual(resolver.format_float(1.5e-07), '1.5e-07')
        self.assertEqual(resolver.format_float(float('nan')), '.nan')
        self.assertEqual(resolver.format_float(float('inf')), '.inf')
        self.assertEqual(resolver.format_float(float('-inf')), '-.inf')

    def test_formatted_floats_read_back(self):
        for number in (1.0, 0.1, 1e20, 1.5e-07, 123456789.125, 5e-324,
                       1.7976931348623157e308):
            text = resolver.format_float(number)
            for schema in resolver.SCHEMAS.values():
                self.assertEqual(resolver.resolve(text, schema),
                                 (ValueKind.FLOAT, number),
                                 (text, schema))

    def test_format_int(self):
        self.assertEqual(resolver.format_int(255), '255')
        self.assertEqual(resolver.format_int(255, 'hex'), '0xff')
        self.assertEqual(resolver.format_int(8, 'octal'), '0o10')
        self.assertEqual(resolver.format_int(-1, 'hex'), '-1')

    def test_format_scalar(self):
        self.assertEqual(resolver.format_scalar(Value(ValueKind.NULL)),
                         'null')
        self.assertEqual(resolver.format_scalar(Value(ValueKind.BOOL, True)),
                         'true')
        self.assertEqual(resolver.format_scalar(Value(ValueKind.STRING, 'x')),
                         'x')
