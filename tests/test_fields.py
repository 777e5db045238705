from datetime import date, datetime, time
from decimal import Decimal

from dateutil import tz

from . import YamlModelTestCase
from . import models


class TestInstancesMixin(object):
    def setUp(self):
        super(TestInstancesMixin, self).setUp()

        self.person = models.Person(
            slug='john-doe',
            first_name='John',
            last_name='Doe',
            email='jdoe@example.com',
        )

        self.author = models.Author(
            email='jdoe@example.com',
            first_name='John',
            last_name='Doe',
        )


class FieldValidationTest(TestInstancesMixin, YamlModelTestCase):
    def test_validate_required(self):
        self.person.last_name = None
        with self.assertRaises(self.exceptions.ValidationError):
            self.person.full_clean()

    def test_validate_email(self):
        self.person.email = 'foo_at_example.com'
        with self.assertRaises(self.exceptions.ValidationError):
            self.person.full_clean()

    def test_validate_slug(self):
        self.person.slug = 'Foo Bar'
        with self.assertRaises(self.exceptions.ValidationError):
            self.person.full_clean()

    def test_validate_integer(self):
        self.person.age = 20.5
        with self.assertRaises(self.exceptions.ValidationError):
            self.person.full_clean()
        self.person.age = 'twenty-one'
        with self.assertRaises(self.exceptions.ValidationError):
            self.person.full_clean()

    def test_validate_float(self):
        self.person.tax_rate = '5%'
        with self.assertRaises(self.exceptions.ValidationError):
            self.person.full_clean()
        self.person.tax_rate = '1.2.3'
        with self.assertRaises(self.exceptions.ValidationError):
            self.person.full_clean()

    def test_validate_decimal(self):
        self.person.account_balance = 'one.two'
        with self.assertRaises(self.exceptions.ValidationError):
            self.person.full_clean()
        self.person.account_balance = '1.2.3'
        with self.assertRaises(self.exceptions.ValidationError):
            self.person.full_clean()

    def test_validate_decimal_digits(self):
        field = self.fields.DecimalField(max_digits=4, decimal_places=2)
        self.assertEqual(field.clean('12.34'), Decimal('12.34'))
        with self.assertRaises(self.exceptions.ValidationError):
            field.clean('123.45')
        with self.assertRaises(self.exceptions.ValidationError):
            field.clean('1.234')

    def test_validate_date(self):
        # valid iso-8601 date
        self.person.birth_date = '1978-12-07'
        self.person.full_clean()
        # not a valid iso-8601 date
        self.person.birth_date = '12/7/1978'
        with self.assertRaises(self.exceptions.ValidationError):
            self.person.full_clean()
        self.person.birth_date = '1978-02-30'
        with self.assertRaises(self.exceptions.ValidationError):
            self.person.full_clean()

    def test_validate_datetime(self):
        # not a valid iso-8601 datetime
        self.person.date_joined = '12/8/2012 4:53pm'
        with self.assertRaises(self.exceptions.ValidationError):
            self.person.full_clean()

    def test_validate_time(self):
        self.person.wake_up_call = '9am'
        with self.assertRaises(self.exceptions.ValidationError):
            self.person.full_clean()
        self.person.wake_up_call = '2012-08-10 09:00'
        with self.assertRaises(self.exceptions.ValidationError):
            self.person.full_clean()

    def test_validate_url(self):
        self.author.url = 'https://example.com/jdoe'
        self.author.full_clean()
        self.author.url = 'example.com'
        with self.assertRaises(self.exceptions.ValidationError):
            self.author.full_clean()
        self.author.url = 'ftp://example.com/jdoe'
        with self.assertRaises(self.exceptions.ValidationError) as ctx:
            self.author.full_clean()
        self.assertEqual(str(ctx.exception),
                         '"url" scheme must be one of http, https')

    def test_validate_range(self):
        limits = models.Limits(retries=-1)
        with self.assertRaises(self.exceptions.ValidationError) as ctx:
            limits.full_clean()
        self.assertEqual(str(ctx.exception), '"retries" must be at least 0')

    def test_error_messages(self):
        self.person.age = 'old'
        with self.assertRaises(self.exceptions.ValidationError) as ctx:
            self.person.full_clean()
        self.assertEqual(str(ctx.exception), '"age" must be an integer')
        with self.assertRaises(self.exceptions.ValidationError) as ctx:
            self.fields.IntegerField().clean('old')
        self.assertEqual(str(ctx.exception), 'value must be an integer')

    def test_custom_error_messages(self):
        field = self.fields.IntegerField(
            error_messages={'invalid_int': 'wants digits'})
        with self.assertRaises(self.exceptions.ValidationError) as ctx:
            field.clean('old')
        self.assertEqual(str(ctx.exception), 'value wants digits')


class FieldTypeCheckingTest(TestInstancesMixin, YamlModelTestCase):

    def assertTypesMatch(self, field, test_values, type):
        for value, eq_value in test_values.items():
            setattr(self.person, field, value)
            self.person.full_clean()
            text = self.yamlmodel.to_text(self.person)
            person = self.yamlmodel.from_text(text, models.Person)
            self.assertIsInstance(getattr(person, field), type)
            self.assertEqual(getattr(person, field), eq_value)

    def test_char(self):
        test_values = {
            'John': 'John',
            .007: '0.007',
            datetime(2012, 12, 12): '2012-12-12 00:00:00'
        }
        self.assertTypesMatch('first_name', test_values, str)

    def test_integer(self):
        test_values = {33: 33, '33': 33}
        self.assertTypesMatch('age', test_values, int)

    def test_float(self):
        test_values = {.825: .825, '0.825': .825}
        self.assertTypesMatch('tax_rate', test_values, float)

    def test_decimal(self):
        test_values = {
            '1.23': Decimal('1.23'),
            '12.300': Decimal('12.3'),
            1: Decimal('1.0')
        }
        self.assertTypesMatch('account_balance', test_values, Decimal)

    def test_boolean(self):
        test_values = {
            True: True,
            False: False,
            1: True,
            0: False,
        }
        self.assertTypesMatch('active', test_values, bool)

    def test_date(self):
        test_values = {
            '1978-12-7': date(1978, 12, 7),
            '1850-05-05': date(1850, 5, 5),
        }
        self.assertTypesMatch('birth_date', test_values, date)

    def test_datetime(self):
        utc = tz.tzutc()
        utc_offset = tz.tzoffset(None, -1 * 4 * 60 * 60)
        test_values = {
            '2012-05-30 14:32': datetime(2012, 5, 30, 14, 32),
            '1820-8-13 9:23:48Z': datetime(1820, 8, 13, 9, 23, 48, 0, utc),
            '2001-9-11 8:46:00-0400': datetime(2001, 9, 11, 8, 46, 0, 0,
                                               utc_offset),
            '2012-05-05 14:32:02.012345': datetime(2012, 5, 5, 14, 32, 2,
                                                   12345),
        }
        self.assertTypesMatch('date_joined', test_values, datetime)
        # test a normal date
        self.person.date_joined = '2012-01-01'
        self.person.full_clean()
        text = self.yamlmodel.to_text(self.person)
        person = self.yamlmodel.from_text(text, models.Person)
        self.assertEqual(type(person.date_joined), datetime)
        self.assertEqual(person.date_joined, datetime(2012, 1, 1, 0, 0))

    def test_time(self):
        utc = tz.tzutc()
        utc_offset = tz.tzoffset(None, -1 * 4 * 60 * 60)
        test_values = {
            '14:32': time(14, 32),
            '9:23:48Z': time(9, 23, 48, 0, utc),
            '8:46:00-0400': time(8, 46, 0, 0, utc_offset)
        }
        self.assertTypesMatch('wake_up_call', test_values, time)


class FieldSerializationTest(YamlModelTestCase):
    def test_field_for(self):
        fields = self.fields
        self.assertIsInstance(fields.field_for(int), fields.IntegerField)
        self.assertIsNone(fields.field_for(int).bits)
        self.assertIsInstance(fields.field_for(bool), fields.BooleanField)
        self.assertIsInstance(fields.field_for(models.Point),
                              fields.ModelField)
        self.assertIsInstance(fields.field_for(models.Shape),
                              fields.EnumField)
        self.assertIsInstance(fields.field_for(None), fields.AnyField)
        field = fields.CharField()
        self.assertIs(fields.field_for(field), field)
        with self.assertRaises(self.exceptions.FieldError):
            fields.field_for(object())
        with self.assertRaises(self.exceptions.FieldError):
            fields.field_for(set)

    def test_invalid_value_is_not_written(self):
        with self.assertRaises(self.exceptions.CustomError) as ctx:
            self.yamlmodel.to_text('abc', self.fields.IntegerField())
        self.assertEqual(str(ctx.exception), 'value must be an integer')
        self.assertIsInstance(ctx.exception.cause,
                              self.exceptions.ValidationError)

    def test_nested_invalid_value_path(self):
        point = models.Point(x=1, y='two')
        with self.assertRaises(self.exceptions.CustomError) as ctx:
            self.yamlmodel.to_text(point)
        self.assertEqual(str(ctx.exception), 'y: "y" must be an integer')

    def test_integer_format(self):
        field = self.fields.IntegerField(format='hex')
        self.assertEqual(self.yamlmodel.to_text(255, field), '--- 0xff\n')
        self.assertEqual(self.yamlmodel.from_text('0xff', field), 255)

    def test_string_formats(self):
        block = self.fields.CharField(format='block')
        self.assertEqual(self.yamlmodel.to_text('a\nb\n', block),
                         '--- |\n  a\n  b\n')
        oneline = self.fields.CharField(format='oneline')
        self.assertEqual(self.yamlmodel.to_text('a\nb', oneline),
                         '--- "a\\nb"\n')
        self.assertEqual(self.yamlmodel.to_text('a\x85b\n', block),
                         '--- "a\\Nb\\n"\n')
        self.assertEqual(self.yamlmodel.to_text('a\x85b'), '--- "a\\Nb"\n')

    def test_optional_field(self):
        field = self.fields.CharField(required=False)
        self.assertEqual(self.yamlmodel.to_text(None, field), '--- null\n')
        self.assertIsNone(self.yamlmodel.from_text('~', field))
        self.assertEqual(self.yamlmodel.from_text('x', field), 'x')

    def test_required_null(self):
        with self.assertRaises(self.exceptions.TypeMismatch):
            self.yamlmodel.from_text('~', self.fields.CharField())

    def test_tuple_length_on_write(self):
        pair = self.fields.TupleField(int, int)
        self.assertEqual(self.yamlmodel.to_text((1, 2), pair),
                         '---\n- 1\n- 2\n')
        with self.assertRaises(self.exceptions.CustomError):
            self.yamlmodel.to_text((1, 2, 3), pair)

    def test_decimal_is_written_as_text(self):
        text = self.yamlmodel.to_text(Decimal('1.10'))
        self.assertEqual(text, "--- '1.10'\n")
        self.assertEqual(self.yamlmodel.from_text(text, Decimal),
                         Decimal('1.10'))

    def test_value_field(self):
        field = self.fields.ValueField()
        value = self.yamlmodel.from_text('{a: [1, 2]}', field)
        self.assertIsInstance(value, self.yamlmodel.Value)
        self.assertEqual(value.to_python(), {'a': [1, 2]})
        self.assertEqual(self.yamlmodel.to_text(value, field),
                         '---\na:\n- 1\n- 2\n')
