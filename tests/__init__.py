import unittest


class YamlModelTestCase(unittest.TestCase):
    """Gives each test the package modules it commonly needs"""

    def setUp(self):
        import yamlmodel
        from yamlmodel import exceptions
        from yamlmodel import fields
        from yamlmodel import utils

        self.yamlmodel = yamlmodel
        self.exceptions = exceptions
        self.fields = fields
        self.utils = utils

    def roundtrip(self, obj, target=None, **options):
        """Writes ``obj`` as YAML and reads it back as ``target``"""
        text = self.yamlmodel.to_text(obj, **options)
        return self.yamlmodel.from_text(text, target, **options)

    def assertLocated(self, error, line, column, path=None):
        self.assertEqual(error.line, line)
        self.assertEqual(error.column, column)
        if path is not None:
            self.assertEqual(error.path, path)
