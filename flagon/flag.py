import re
import logging

from boltons.iterutils import unique
from boltons.setutils import IndexedSet
from boltons.typeutils import make_sentinel

from flagon.errors import ConfigurationError, InvalidAlias, InvalidValidator
from flagon.utils import (ANY_TYPES,
                          normalize_flag_name,
                          normalize_type,
                          infer_type,
                          get_type_name,
                          get_value_type_name,
                          matches_type,
                          format_value,
                          format_nonexp_repr)


logger = logging.getLogger(__name__)

# where a Flag came from: explicitly declared, or found in the input
DECLARED = make_sentinel('DECLARED')
DISCOVERED = make_sentinel('DISCOVERED')

_UNSET = make_sentinel('_UNSET')

_PATTERN_TYPE = type(re.compile(''))

# schema keys are also accepted in their camelCase spelling
_CONFIG_KEY_ALIASES = {'allowMultipleValues': 'allow_multiple_values',
                       'strictTypes': 'strict_types'}

_CONFIG_KEYS = frozenset(['name', 'description', 'default', 'alias',
                          'aliases', 'required', 'type',
                          'allow_multiple_values', 'strict_types',
                          'options', 'validate', 'origin'])


def flatten_aliases(*aliases):
    """Flatten strings and (nested) lists, tuples and sets of strings into
    a list of canonical alias names. Empty strings are skipped, anything
    else raises :exc:`InvalidAlias`.
    """
    ret = []
    for alias in aliases:
        if isinstance(alias, (list, tuple, set, frozenset)):
            ret.extend(flatten_aliases(*alias))
        elif isinstance(alias, str):
            if alias.strip():
                ret.append(normalize_flag_name(alias))
        else:
            raise InvalidAlias.from_alias(alias)
    return unique(ret)


class ValidationResult(object):
    """The outcome of validating a Flag or a FlagRegistry. *valid* is
    True exactly when there are no *violations*, each of which is a
    human-readable message.
    """
    def __init__(self, violations=None):
        self.violations = list(violations or [])

    @property
    def valid(self):
        return not self.violations

    def __bool__(self):
        return self.valid

    def __repr__(self):
        cn = self.__class__.__name__
        return '<%s valid=%r violations=%r>' % (cn, self.valid, self.violations)


class Flag(object):
    """The Flag object represents all there is to know about a single
    option: how it's named, what it holds, and whether what it holds is
    acceptable.

    Args:
       name (str): The flag name. Leading dashes are stripped and the
          result is lowercased to form the canonical *name*. The
          original is kept as *input_name*.
       description (str): A summary of the flag's behavior.
       default: The value reported when the flag was never given a
          value. Defaults to ``None``.
       alias: A string, or a list/tuple/set of strings, of alternative
          names. Nested collections are flattened.
       aliases: Same as *alias*, both may be passed.
       required (bool): Whether an empty flag is a violation.
       type: One of "string", "number", "bigint", "boolean" or "any"
          (some synonyms like "integer" and "*" are accepted), or one
          of the builtin types ``str``, ``int``, ``float`` and
          ``bool``. Any other non-string is stored as-is. When
          omitted, the type is inferred from *default*, falling back to
          "string".
       allow_multiple_values (bool): When True, the flag collects every
          value it receives and *value* is always a list.
       strict_types (bool): Whether values are checked against *type*
          on validation. Usually controlled by the owning registry.
       options: The enumerated set of acceptable values, as an iterable
          or a comma-separated string.
       validate: A custom validator. Either a callable, called with the
          flag's value and expected to return a truthy result, or a
          compiled regular expression, searched for in the (string)
          value.
       origin: :data:`DECLARED` or :data:`DISCOVERED`. Flags declared
          by a schema are *recognized*, flags created because they
          appeared in the input are not.

    Raises :exc:`ConfigurationError` (or a subtype) for a missing
    name, an unsupported validator, or a non-string alias.
    """
    def __init__(self, name=None, description=None, default=None,
                 alias=None, aliases=None, required=False, type=None,
                 allow_multiple_values=False, strict_types=True,
                 options=None, validate=None, origin=DISCOVERED):
        if not name or not isinstance(name, str) or not name.strip():
            raise ConfigurationError('Flag name is required, not: %r' % (name,))
        self.input_name = name
        self.name = normalize_flag_name(name)
        self.description = description
        self.required = bool(required)
        self.origin = origin

        self._default = default
        self._value = _UNSET
        self._allow_multiple = bool(allow_multiple_values)
        self._aliases = IndexedSet()
        self._options = []

        if alias is not None:
            self.create_alias(alias)
        if aliases is not None:
            self.create_alias(aliases)

        self._type = infer_type(default) or 'string'
        self._type_declared = False
        if type is not None:
            self.type = type

        self.strict_types = strict_types
        self.options = options

        if validate is not None and not (isinstance(validate, _PATTERN_TYPE)
                                         or callable(validate)):
            raise InvalidValidator.from_flag(self.input_name, validate)
        self.validator = validate

    @classmethod
    def from_config(cls, cfg, **kw):
        """Build a Flag from a name string or a schema mapping. Extra
        keyword arguments override the mapping. Flag instances are
        returned unchanged.
        """
        if isinstance(cfg, Flag):
            return cfg
        if isinstance(cfg, str):
            cfg = {'name': cfg}
        try:
            cfg = dict(cfg)
        except (TypeError, ValueError):
            raise ConfigurationError('expected flag name or mapping of flag'
                                     ' configuration, not: %r' % (cfg,))
        cfg.update(kw)
        for camel, snake in _CONFIG_KEY_ALIASES.items():
            if camel in cfg:
                cfg[snake] = cfg.pop(camel)
        unexpected = sorted(set(cfg) - _CONFIG_KEYS)
        if unexpected:
            raise ConfigurationError('unexpected configuration for flag %r: %r'
                                     % (cfg.get('name'), unexpected))
        return cls(**cfg)

    @property
    def recognized(self):
        return self.origin is DECLARED

    @recognized.setter
    def recognized(self, val):
        self.origin = DECLARED if val else DISCOVERED

    @property
    def strict_types(self):
        return self._strict_types

    @strict_types.setter
    def strict_types(self, val):
        if not isinstance(val, bool):
            raise ConfigurationError('strict_types must be a boolean value, not: %r' % (val,))
        self._strict_types = val

    @property
    def type(self):
        return get_type_name(self._type)

    @type.setter
    def type(self, val):
        self._type = normalize_type(val)
        self._type_declared = True

    @property
    def default(self):
        return self._default

    @default.setter
    def default(self, val):
        self._default = val
        if not self._type_declared:
            self._type = infer_type(val) or self._type

    @property
    def value(self):
        if self._allow_multiple:
            if self._value is not _UNSET:
                return list(self._value)
            if self._default is None:
                return []
            if isinstance(self._default, (list, tuple)):
                return list(self._default)
            return [self._default]
        if self._value is _UNSET:
            return self._default
        return self._value

    @value.setter
    def value(self, val):
        if not self._allow_multiple:
            self._value = val
        elif isinstance(val, (list, tuple)):
            self._value = list(val)
        else:
            if self._value is _UNSET:
                self._value = []
            self._value.append(val)

    @property
    def bound(self):
        "True once the flag has received at least one value."
        return self._value is not _UNSET

    @property
    def options(self):
        return list(self._options)

    @options.setter
    def options(self, val):
        if val is None:
            val = []
        elif isinstance(val, str):
            val = [opt.strip() for opt in val.split(',')]
        self._options = unique(val)

    @property
    def aliases(self):
        return list(self._aliases)

    @property
    def multiple_values_allowed(self):
        return self._allow_multiple

    def has_alias(self, alias):
        return normalize_flag_name(alias) in self._aliases

    def create_alias(self, *aliases):
        """Add one or more aliases. Accepts strings and lists, tuples and
        sets of strings, flattening as needed. Leading dashes are
        stripped and aliases are case-insensitive.
        """
        self._aliases.update(flatten_aliases(*aliases))
        return

    def allow_multiple_values(self):
        if self._allow_multiple:
            return
        if self._value is not _UNSET:
            self._value = [self._value]
        if self._default is not None:
            self._default = [self._default]
        self._allow_multiple = True

    def prevent_multiple_values(self):
        if not self._allow_multiple:
            return
        if self._value is not _UNSET:
            self._value = self._value[-1] if self._value else _UNSET
        if isinstance(self._default, list):
            self._default = self._default[-1] if self._default else None
        self._allow_multiple = False

    def coerce(self, value):
        """Convert a tokenized value to this flag's declared type, where
        such a conversion exists. Only recognized flags are
        coerced. Numbers are parsed as ints, then floats; text that
        fails to parse is returned unchanged, leaving it to type
        validation.
        """
        if not self.recognized or not isinstance(value, str):
            return value
        if self._type == 'number':
            converters = (int, float)
        elif self._type == 'bigint':
            converters = (int,)
        else:
            return value
        for convert in converters:
            try:
                return convert(value)
            except ValueError:
                continue
        logger.debug('flag %r could not coerce %r to %s', self.name, value, self.type)
        return value

    def validate(self):
        """Check the flag's current state, returning a
        :class:`ValidationResult`. Checks run in order, stopping at the
        first that fails:

        1. required flags must have a value
        2. values must be among the options, if any are set
        3. values must match the type, if types are strict and the
           flag is recognized
        4. the custom validator, if any, must pass

        Values that were never set (and have no default) are only
        subject to the first check.
        """
        value = self.value
        multi = self._allow_multiple
        empty = (not value) if multi else (value is None)

        if empty:
            if self.required:
                return ValidationResult(['"%s" is required.' % self.name])
            return ValidationResult()

        if self._options:
            expected = ', '.join([format_value(opt) for opt in self._options])
            # options read from text compare in the flag's own type
            allowed = [self.coerce(opt) for opt in self._options]
            invalid = [v for v in value if v not in allowed] if multi else \
                      [value] if value not in allowed else []
            if invalid:
                return ValidationResult(['"%s" is invalid. Expected one of: %s'
                                         % (format_value(v), expected)
                                         for v in invalid])

        if self.strict_types and self.recognized and self._type not in ANY_TYPES:
            type_name = self.type
            if multi:
                invalid = [v for v in value if not matches_type(v, self._type)]
                if invalid:
                    return ValidationResult(['"%s" (%s) should be a %s, not %s.'
                                             % (self.name, format_value(v), type_name,
                                                get_value_type_name(v))
                                             for v in invalid])
            elif not matches_type(value, self._type):
                return ValidationResult(['"%s" should be a %s, not %s.'
                                         % (self.name, type_name, get_value_type_name(value))])

        if self.validator is not None and not self._run_validator(value):
            return ValidationResult(['"%s" is invalid (failed custom validation).'
                                     % format_value(value)])

        return ValidationResult()

    def _run_validator(self, value):
        validator = self.validator
        if not isinstance(validator, _PATTERN_TYPE):
            return bool(validator(value))
        values = value if self._allow_multiple else [value]
        for val in values:
            if not isinstance(val, str) or not validator.search(val):
                return False
        return True

    @property
    def valid(self):
        return self.validate().valid

    @property
    def violations(self):
        return self.validate().violations

    def __repr__(self):
        return format_nonexp_repr(self, ['name'], ['type', 'value', 'aliases'],
                                  opt_key=lambda v: v is None or v == [])
