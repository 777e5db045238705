from bisect import bisect

import decorator

from yamlmodel import exceptions
from yamlmodel import fields


class ModelOptions(object):
    """
    An options class for ``Model``.
    """
    # attributes that can be overridden in a model's options ("Meta" class)
    meta_opts = ('abstract', 'name', 'deny_unknown_fields', 'skip_none')

    def __init__(self, meta):
        self.meta = meta
        self.abstract = False
        self.local_fields = []
        self.name = None
        self.parents = []
        # None defers to the per-call option of the same name
        self.deny_unknown_fields = None
        self.skip_none = None

    def contribute_to_class(self, cls, name):
        cls._meta = self

        # Default values for these options
        self.name = cls.__name__

        # Apply overrides from Meta
        if self.meta:
            # Ignore private attributes
            for name in dir(self.meta):
                if name.startswith('_') or name not in self.meta_opts:
                    continue
                setattr(self, name, getattr(self.meta, name))

        self._declared_meta = self.meta
        del self.meta

    def add_field(self, field):
        """ Insert a field into the fields list in correct order """
        # bisect calls field.__lt__ which uses field.creation_counter to
        # maintain the correct order
        position = bisect(self.local_fields, field)
        self.local_fields.insert(position, field)

        # invalidate the field cache
        if hasattr(self, '_field_cache'):
            del self._field_cache

    def add_parent(self, model, parent):
        model._check_parent_fields(parent)
        self.parents.append(parent)

    @property
    def fields(self):
        """
        Returns a list of field objects available for this model (including
        through parent models).

        Callers are not permitted to modify this list, since it's a reference
        to this instance (not a copy)
        """
        # get cached field names. if not cached, then fill the cache.
        if not hasattr(self, '_field_cache'):
            self._fill_fields_cache()
        return self._field_cache

    def get_field(self, name):
        for field in self.fields:
            if field.name == name:
                return field
        msg = "Field '{}' not found on model '{}'"
        raise exceptions.FieldError(msg.format(name, self.name))

    def _fill_fields_cache(self):
        """
        Caches all fields, including fields from parents.
        """
        cache = []
        local_names = [f.name for f in self.local_fields]
        for parent in self.parents:
            for field in parent._meta.fields:
                # skip if overridden locally
                if field.name in local_names:
                    continue
                cache.append(field)
        cache.extend(self.local_fields)
        self._field_cache = tuple(cache)

    def describe(self):
        return ', '.join(f.name for f in self.fields)

    def _prepare(self, model):
        keys = [f.key for f in self.fields]
        duplicates = sorted(set(k for k in keys if keys.count(k) > 1))
        if duplicates:
            msg = 'Duplicate key "{}" on model {!r}'
            raise exceptions.FieldError(msg.format(duplicates[0], model))


class DeclarativeMetaclass(type):
    """
    Builds the ``_meta`` options of declarative classes (models and enums)
    from their attributes and their optional ``Meta`` class.
    """
    def __new__(cls, name, bases, attrs):
        super_new = super(DeclarativeMetaclass, cls).__new__

        parents = [b for b in bases if isinstance(b, DeclarativeMetaclass)]
        parents.reverse()

        if not parents:
            # Don't do anything special for the base classes
            return super_new(cls, name, bases, attrs)

        # Create the new class, while leaving out the declared attributes
        # which will be added later
        module = attrs.pop('__module__')
        new_attrs = {'__module__': module}
        for special in ('__qualname__', '__classcell__'):
            if special in attrs:
                new_attrs[special] = attrs.pop(special)
        new_class = super_new(cls, name, bases, new_attrs)

        # grab the declared Meta
        meta = attrs.pop('Meta', None)

        # the options class is declared by the base class
        options_cls = new_class.__optclass__

        if meta is None:
            # if meta is not declared, use the closest parent's meta
            meta = next((p._meta._declared_meta for p in parents if
                        hasattr(p, '_meta') and p._meta._declared_meta), None)
            # don't inherit the abstract property
            if getattr(meta, 'abstract', False):
                meta = type('Meta', (meta,), {'abstract': False})

        opts = options_cls(meta)

        new_class.add_to_class('_meta', opts)

        # Add all attributes to the class
        for obj_name, obj in attrs.items():
            new_class.add_to_class(obj_name, obj)

        # Handle parents
        for parent in parents:
            if not hasattr(parent, '_meta'):
                # Ignore parents that have no _meta
                continue
            opts.add_parent(new_class, parent)

        new_class._prepare()

        return new_class

    def _check_parent_fields(cls, parent, child=None):
        """
        Checks a parent class's inheritance chain for field conflicts
        """
        if child is None:
            child = cls

        local_field_names = [f.name for f in child._meta.local_fields]
        # Check for duplicate field definitions in parent
        for field in parent._meta.local_fields:
            if field.name in local_field_names:
                msg = ('Duplicate field name "{0}" in {1!r} already exists in '
                       'parent model {2!r}')
                msg = msg.format(field.name, child.__name__, parent.__name__)
                raise exceptions.FieldError(msg)

        # check base's inheritance chain
        for p in parent._meta.parents:
            parent._check_parent_fields(p, child)

    def _prepare(cls):
        """
        Prepares the class once cls._meta has been populated.
        """
        opts = cls._meta
        opts._prepare(cls)

        # Give the class a docstring
        if cls.__doc__ is None:
            cls.__doc__ = "{}({})".format(cls.__name__, opts.describe())

    def add_to_class(cls, name, value):
        """
        If the given value defines a ``contribute_to_class`` method, that will
        be called. Otherwise, this is an alias to setattr.  This allows objects
        to have control over how they're added to a class during its creation.
        """
        if hasattr(value, 'contribute_to_class'):
            value.contribute_to_class(cls, name)
        else:
            setattr(cls, name, value)


@decorator.decorator
def concrete(func, self, *args, **kwargs):
    """
    Causes a method to require a non-abstract, declared subclass.
    """
    # decorator should work for classmethods as well as instance methods
    model = self
    if not isinstance(model, type):
        model = type(self)
    if not hasattr(model, '_meta'):
        msg = ("Cannot call {0.__name__}.{1.__name__}() because {0!r} "
               "declares nothing")
        raise exceptions.YamlModelError(msg.format(model, func))
    if model._meta.abstract:
        msg = "Cannot call {1.__name__}() on abstract class {0.__name__}"
        raise exceptions.YamlModelError(msg.format(model, func))
    return func(self, *args, **kwargs)


class ModelVisitor(fields.StructVisitor):
    """
    Reads a mapping into an instance of ``model``.
    """
    def __init__(self, model):
        self.model = model
        opts = model._meta
        super(ModelVisitor, self).__init__(opts.name, opts.fields,
                                           opts.deny_unknown_fields)

    def visit_map(self, mapping):
        values = super(ModelVisitor, self).visit_map(mapping)
        instance = self.model(**values)
        try:
            instance.clean()
        except exceptions.ValidationError as err:
            raise exceptions.CustomError(str(err), cause=err) from err
        return instance


class Model(object, metaclass=DeclarativeMetaclass):
    """
    A declarative struct. Fields are declared as class attributes; the model
    serializes as a mapping of field keys to values.
    """
    __optclass__ = ModelOptions

    @concrete
    def __init__(self, **kwargs):
        """
        Create an instance of a Model.

        Field name/value pairs may be provided as kwargs to set the initial
        value for those fields.
        """
        # To keep things simple, we only accept attribute values as kwargs
        # Check for fields in kwargs
        for field in self._meta.fields:
            # if a field value was given in kwargs, get its value, otherwise,
            # get the field's default value
            try:
                val = kwargs.pop(field.name)
            except KeyError:
                val = field.default
            setattr(self, field.name, val)

        # Handle any remaining keyword arguments
        if kwargs:
            # only set attrs for properties that already exist on the class
            for prop in list(kwargs.keys()):
                if isinstance(getattr(type(self), prop, None), property):
                    setattr(self, prop, kwargs.pop(prop))
            if kwargs:
                msg = "'{0}' is an invalid keyword argument for this function"
                raise TypeError(msg.format(list(kwargs.keys())[0]))

        super(Model, self).__init__()

    def __repr__(self):
        values = ', '.join('{}={!r}'.format(f.name, getattr(self, f.name))
                           for f in self._meta.fields)
        return '<{0}: {1}>'.format(self._meta.name, values)

    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        return all(getattr(self, f.name) == getattr(other, f.name)
                   for f in self._meta.fields)

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    __hash__ = None

    def clean(self):
        """
        Hook for doing any extra model-specific validation after fields have
        been cleaned. Also called after the model is deserialized.
        """
        pass

    def clean_fields(self):
        """
        Validates all fields on the model.
        """
        for field in self._meta.fields:
            raw_value = field.get_raw_value(self)
            setattr(self, field.name, field.clean(raw_value, self))

    def full_clean(self):
        """
        Calls clean_fields() and clean()
        """
        self.clean_fields()
        self.clean()

    @concrete
    def serialize(self, serializer):
        """
        Writes this instance to ``serializer`` as a struct.
        """
        opts = self._meta
        skip_none = opts.skip_none
        if skip_none is None:
            skip_none = serializer.config.SKIP_NONE
        model_fields = [f for f in opts.fields if f.serializable]

        serializer.start_struct(opts.name, len(model_fields))
        for field in model_fields:
            value = getattr(self, field.name)
            if value is None and not field.required and skip_none:
                serializer.skip_field(field.key)
            else:
                serializer.serialize_field(field.key, value, field)
        serializer.end_struct()

    @classmethod
    @concrete
    def deserialize(cls, deserializer):
        """
        Reads an instance from ``deserializer``, which must stand on a
        mapping.
        """
        visitor = ModelVisitor(cls)
        return deserializer.deserialize_struct(cls._meta.name, visitor.keys,
                                               visitor)
