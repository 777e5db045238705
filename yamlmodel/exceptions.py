class YamlModelError(Exception):
    """A base exception for other yamlmodel-related errors."""
    pass


class ConfigurationError(YamlModelError):
    """Raised during configuration errors"""
    pass


class UnsupportedFormat(YamlModelError):
    """
    Raised when an unsupported serialization format is requested.
    """
    pass


class FieldError(YamlModelError):
    """
    Raised when there is a configuration error with a ``Field``.
    """
    pass


class ValidationError(YamlModelError):
    """
    Raised when an invalid value is encountered
    """
    def __init__(self, msg_or_code, field=None, **kwargs):
        self.field = field
        self.msg_or_code = msg_or_code
        if self.field:
            msg = self.field.get_error_message(msg_or_code,
                                               default=msg_or_code,
                                               **kwargs)
        else:
            msg = msg_or_code
        super(ValidationError, self).__init__(msg)


class Error(YamlModelError):
    """
    Base class for every failure while converting between values and YAML.

    ``mark`` is the 1-based line/column of the offending node (``None`` when
    the node was built in code rather than parsed), ``path`` is where the node
    sits within the document and ``cause`` is the lower-level error this one
    wraps, if any.
    """
    def __init__(self, message=None, mark=None, path=None, cause=None):
        self._message = message
        self.mark = mark
        self.path = None if path is None else str(path)
        self.cause = cause
        super(Error, self).__init__(message)

    @property
    def message(self):
        return self.describe()

    def describe(self):
        return self._message

    @property
    def line(self):
        return self.mark.line if self.mark else None

    @property
    def column(self):
        return self.mark.column if self.mark else None

    def locate(self, mark=None, path=None, text=None):
        """
        Attaches position information the error does not have yet. The
        innermost location wins, so calling this on the way out of nested
        conversions never overwrites where the failure was detected.
        """
        if self.path is None:
            if self.mark is None:
                self.mark = mark
            if path is not None:
                self.path = str(path)
        return self

    def __str__(self):
        msg = self.message
        if self.mark is not None:
            msg = '{} at {}'.format(msg, self.mark)
        if self.path and self.path != '.':
            msg = '{}: {}'.format(self.path, msg)
        return msg


class ParseError(Error):
    """
    Raised when the text is not well-formed YAML.
    """
    pass


class TypeMismatch(Error):
    """
    Raised when a scalar's form does not fit the requested primitive.
    """
    def __init__(self, expected, found, text=None, **kwargs):
        self.expected = expected
        self.found = found
        self.text = text
        super(TypeMismatch, self).__init__(**kwargs)

    def describe(self):
        found = self.found
        if self.text is not None:
            found = '{} `{}`'.format(found, self.text)
        return 'invalid type: {}, expected {}'.format(found, self.expected)

    def locate(self, mark=None, path=None, text=None):
        if self.path is None and self.text is None:
            self.text = text
        return super(TypeMismatch, self).locate(mark, path)


class StructureMismatch(Error):
    """
    Raised when a scalar, sequence or mapping shows up where another shape
    was expected.
    """
    def __init__(self, expected=None, found=None, message=None, **kwargs):
        self.expected = expected
        self.found = found
        super(StructureMismatch, self).__init__(message, **kwargs)

    def describe(self):
        if self._message:
            return self._message
        return 'invalid type: {}, expected {}'.format(self.found,
                                                      self.expected)


class DuplicateKey(Error):
    """
    Raised when a mapping receives a key it already holds.
    """
    def __init__(self, key, **kwargs):
        self.key = key
        super(DuplicateKey, self).__init__(**kwargs)

    def describe(self):
        return 'duplicate mapping key {}'.format(self.key)


class MissingField(Error):
    def __init__(self, name, **kwargs):
        self.name = name
        super(MissingField, self).__init__(**kwargs)

    def describe(self):
        return 'missing field "{}"'.format(self.name)


class UnknownField(Error):
    def __init__(self, name, expected=(), **kwargs):
        self.name = name
        self.expected = tuple(expected)
        super(UnknownField, self).__init__(**kwargs)

    def describe(self):
        msg = 'unknown field "{}"'.format(self.name)
        if self.expected:
            expected = ', '.join('"{}"'.format(n) for n in self.expected)
            msg = '{}, expected one of {}'.format(msg, expected)
        return msg


class UnexpectedEof(Error):
    def describe(self):
        return self._message or 'EOF while parsing a value'


class UnknownVariant(Error):
    def __init__(self, variant, expected=(), **kwargs):
        self.variant = variant
        self.expected = tuple(expected)
        super(UnknownVariant, self).__init__(**kwargs)

    def describe(self):
        msg = 'unknown variant "{}"'.format(self.variant)
        if self.expected:
            expected = ', '.join('"{}"'.format(n) for n in self.expected)
            msg = '{}, expected one of {}'.format(msg, expected)
        return msg


class CustomError(Error):
    """
    Raised by fields and models to report their own validation failures.
    """
    pass
