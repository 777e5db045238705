from yamlmodel.exceptions import ConfigurationError

DEFAULTS = {
    'DEFAULT_FORMAT': 'yaml',
    'SERIALIZER_MODULES': {},
    'SCHEMA': 'yaml11',
    'BIG_INTEGERS': 'float',  # 'float' or 'int'
    'DENY_UNKNOWN_FIELDS': False,
    'SKIP_NONE': False,
    'MULTI_DOCUMENT': False,
    'EXPLICIT_START': True,
    'INDENT': 2,
    'WIDTH': 80,
    'ALLOW_UNICODE': True,
    'MAX_NODES': 1000000,
}


class Config(dict):
    def __init__(self, defaults=None):
        final_defaults = DEFAULTS.copy()
        final_defaults.update(defaults or {})
        super(Config, self).__init__(final_defaults)

    def __getattr__(self, name):
        try:
            return self[name]
        except KeyError:
            msg = "'{}' object has no attribute '{}'"
            raise AttributeError(msg.format(type(self).__name__, name))

    def __setattr__(self, name, value):
        self[name] = value

    def copy(self):
        return type(self)(self)

    def with_options(self, **options):
        """
        Returns a copy of this config with the given keyword options applied.
        Option names are case-insensitive (``skip_none=True`` sets
        ``SKIP_NONE``).
        """
        config = self.copy()
        for name, value in options.items():
            key = name.upper()
            if key not in DEFAULTS:
                msg = "'{}' is not a valid option".format(name)
                raise ConfigurationError(msg)
            config[key] = value
        if config.BIG_INTEGERS not in ('float', 'int'):
            msg = "BIG_INTEGERS must be 'float' or 'int', not {!r}"
            raise ConfigurationError(msg.format(config.BIG_INTEGERS))
        return config


defaults = Config(DEFAULTS)


def get_config(options):
    """
    Builds the per-call configuration. ``options`` may carry a ``config``
    entry holding a ready-made ``Config`` to start from.
    """
    base = options.pop('config', None) or defaults
    return base.with_options(**options)
