import io
import math

import yaml

from yamlmodel.value import Value, ValueKind

from . import YamlModelTestCase


class LoaderTest(YamlModelTestCase):
    def load(self, text, **options):
        return self.yamlmodel.from_text(text, **options)

    def test_self_describing_scalars(self):
        doc = self.load('a: 1\nb: 1.5\nc: true\nd: ~\ne: text\nf: "1"\n')
        kinds = [doc[k].kind for k in 'abcdef']
        self.assertEqual(kinds, [ValueKind.INT, ValueKind.FLOAT,
                                 ValueKind.BOOL, ValueKind.NULL,
                                 ValueKind.STRING, ValueKind.STRING])

    def test_null_spellings(self):
        for text in ('~', 'null', 'NULL', ''):
            self.assertTrue(self.load(text if text else '---\n').is_null())
        doc = self.load('a:\nb: ~')
        self.assertTrue(doc['a'].is_null())
        self.assertTrue(doc['b'].is_null())

    def test_quoted_scalars_are_strings(self):
        doc = self.load("['yes', \"42\", '~', '']")
        self.assertEqual(doc.to_python(), ['yes', '42', '~', ''])

    def test_block_scalars_are_strings(self):
        doc = self.load('text: |\n  true\n')
        self.assertEqual(doc['text'].as_str(), 'true\n')

    def test_schema_option(self):
        self.assertEqual(self.load('yes').as_bool(), True)
        self.assertEqual(self.load('yes', schema='core').as_str(), 'yes')
        self.assertEqual(self.load('010').as_int(), 8)
        self.assertEqual(self.load('010', schema='core').as_int(), 10)

    def test_big_integers_option(self):
        value = self.load('99999999999999999999')
        self.assertTrue(value.is_float())
        self.assertEqual(value.data, 1e20)
        value = self.load('99999999999999999999', big_integers='int')
        self.assertEqual(value.as_int(), 99999999999999999999)

    def test_special_floats(self):
        doc = self.load('[.inf, -.inf, .nan]')
        self.assertEqual(doc[0].data, float('inf'))
        self.assertEqual(doc[1].data, float('-inf'))
        self.assertTrue(math.isnan(doc[2].data))

    def test_marks(self):
        doc = self.load('name: web\nports:\n  - 80\n  - 443\n')
        self.assertEqual((doc.mark.line, doc.mark.column), (1, 1))
        self.assertEqual((doc['name'].mark.line, doc['name'].mark.column),
                         (1, 7))
        port = doc['ports'][1]
        self.assertEqual((port.mark.line, port.mark.column), (4, 5))

    def test_non_string_keys(self):
        doc = self.load('1: one\n[a, b]: seq\n? {k: v}\n: map\nnull: nil\n')
        self.assertEqual(doc[1].as_str(), 'one')
        self.assertEqual(doc[('a', 'b')].as_str(), 'seq')
        self.assertEqual(doc[{'k': 'v'}].as_str(), 'map')
        self.assertEqual(doc[None].as_str(), 'nil')

    def test_duplicate_keys(self):
        with self.assertRaises(self.exceptions.DuplicateKey) as ctx:
            self.load('a: 1\nb: 2\na: 3\n')
        self.assertEqual(ctx.exception.line, 3)
        self.assertEqual(str(ctx.exception),
                         'duplicate mapping key "a" at line 3 column 1')

    def test_duplicate_keys_compare_structurally(self):
        with self.assertRaises(self.exceptions.DuplicateKey):
            self.load('[1, 2]: a\n[1, 2]: b\n')
        with self.assertRaises(self.exceptions.DuplicateKey):
            self.load('0x10: a\n16: b\n')

    def test_aliases_are_copied(self):
        doc = self.load('base: &b {x: 1}\nother: *b\n')
        self.assertEqual(doc['base'], doc['other'])
        self.assertIsNot(doc['base'], doc['other'])
        doc['other'].data['x'] = 2
        self.assertEqual(doc['base']['x'].as_int(), 1)

    def test_recursive_alias(self):
        with self.assertRaises(self.exceptions.ParseError) as ctx:
            self.load('&a [1, *a]')
        self.assertEqual(ctx.exception.message, 'recursive alias')

    def test_repetition_limit(self):
        text = 'a: &x [1, 2]\nb: *x\n'
        self.assertEqual(len(self.load(text, max_nodes=9)), 2)
        with self.assertRaises(self.exceptions.ParseError) as ctx:
            self.load(text, max_nodes=8)
        self.assertEqual(ctx.exception.message, 'repetition limit exceeded')

    def test_explicit_tags(self):
        doc = self.load('[!!str 42, !!int "42", !!float 1, !!bool yes, '
                        '!!null "", !custom text]')
        self.assertEqual(doc[0], Value(ValueKind.STRING, '42'))
        self.assertEqual(doc[1], Value(ValueKind.INT, 42))
        self.assertEqual(doc[2], Value(ValueKind.FLOAT, 1.0))
        self.assertEqual(doc[3], Value(ValueKind.BOOL, True))
        self.assertTrue(doc[4].is_null())
        self.assertEqual(doc[5], Value(ValueKind.STRING, 'text'))

    def test_explicit_tag_mismatch(self):
        with self.assertRaises(self.exceptions.TypeMismatch) as ctx:
            self.load('port: !!int eighty')
        error = ctx.exception
        self.assertEqual(error.message,
                         'invalid type: string `eighty`, expected an integer')
        self.assertEqual((error.line, error.column), (1, 7))

    def test_binary(self):
        doc = self.load('!!binary AQL/')
        self.assertEqual(doc.to_python(), [1, 2, 255])
        with self.assertRaises(self.exceptions.ParseError):
            self.load('!!binary "not base64!"')

    def test_integer_style_is_kept(self):
        doc = self.load('[0x1f, 0o17, 31]')
        self.assertEqual([v.style for v in doc], ['hex', 'octal', None])
        self.assertEqual(doc[0], doc[2])

    def test_raw_text_is_kept(self):
        doc = self.load('1.10')
        self.assertEqual(doc.raw, '1.10')
        self.assertEqual(doc.data, 1.1)

    def test_syntax_error(self):
        with self.assertRaises(self.exceptions.ParseError) as ctx:
            self.load('a: [1, 2\nb: 3\n')
        error = ctx.exception
        self.assertIsNotNone(error.line)
        self.assertIsNotNone(error.cause)
        self.assertIs(error.__cause__, error.cause)
        self.assertIn('at line', str(error))

    def test_bad_indentation(self):
        with self.assertRaises(self.exceptions.ParseError) as ctx:
            self.load('a:\n  b: 1\n c: 2\n')
        self.assertEqual(ctx.exception.line, 3)

    def test_empty_document(self):
        with self.assertRaises(self.exceptions.UnexpectedEof) as ctx:
            self.load('# only a comment\n')
        self.assertEqual(ctx.exception.message, 'EOF while parsing a value')

    def test_multiple_documents(self):
        with self.assertRaises(self.exceptions.StructureMismatch) as ctx:
            self.load('--- 1\n--- 2\n')
        self.assertEqual(ctx.exception.message,
                         'expected a single YAML document but found 2')
        self.assertEqual(ctx.exception.line, 2)

    def test_multi_document_option(self):
        docs = self.load('--- 1\n--- [a]\n---\nk: v\n', multi_document=True)
        self.assertEqual([d.to_python() for d in docs], [1, ['a'], {'k': 'v'}])
        self.assertEqual(self.load('', multi_document=True), [])

    def test_from_reader(self):
        stream = io.StringIO('name: web\n')
        doc = self.yamlmodel.from_reader(stream)
        self.assertEqual(doc['name'].as_str(), 'web')
        stream = io.BytesIO(b'name: web\n')
        self.assertEqual(self.yamlmodel.from_reader(stream)['name'].as_str(),
                         'web')

    def test_bytes_input(self):
        self.assertEqual(self.yamlmodel.from_text(b'[1, 2]').to_python(),
                         [1, 2])

    def test_debug_logging(self):
        with self.assertLogs('yamlmodel.loader', 'DEBUG') as logs:
            self.load('a: &x [1]\nb: *x\n')
        self.assertIn('Expanding alias of the node at line 1',
                      logs.output[0])
        self.assertIn('Loaded 1 YAML document(s), 7 node(s)',
                      logs.output[-1])

    def test_undecodable_bytes(self):
        with self.assertRaises(self.exceptions.ParseError) as ctx:
            self.yamlmodel.from_text(b'a: \xff\xfe')
        self.assertIsInstance(ctx.exception.cause, yaml.reader.ReaderError)
        self.assertIs(ctx.exception.__cause__, ctx.exception.cause)

    def test_unprintable_characters(self):
        with self.assertRaises(self.exceptions.ParseError) as ctx:
            self.load('a: \x01')
        self.assertEqual(ctx.exception.message,
                         'invalid input at index 3: special characters are '
                         'not allowed')
        with self.assertRaises(self.exceptions.ParseError):
            self.yamlmodel.from_reader(io.StringIO('a: \x01'))

    def test_ignored_tags_are_logged(self):
        with self.assertLogs('yamlmodel.loader', 'DEBUG') as logs:
            doc = self.load('- !Foo bar\n- !Point {x: 1}\n')
        self.assertEqual(doc.to_python(), ['bar', {'x': 1}])
        ignored = [line for line in logs.output if 'Ignoring tag' in line]
        self.assertEqual(len(ignored), 2)
        self.assertIn('Ignoring tag !Foo on the node at line 1', ignored[0])
        self.assertIn('Ignoring tag !Point on the node at line 2', ignored[1])
