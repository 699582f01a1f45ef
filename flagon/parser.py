import logging

from collections import OrderedDict

from boltons.iterutils import unique

from flagon.errors import ConfigurationError, DuplicateFlag, AliasConflict
from flagon.flag import Flag, ValidationResult, DECLARED, DISCOVERED, flatten_aliases
from flagon.host import ProcessHost
from flagon.tokenizer import tokenize
from flagon.utils import normalize_flag_name, format_nonexp_repr


logger = logging.getLogger(__name__)


class FlagData(dict):
    """The resolved view of a :class:`FlagRegistry`, as returned by
    :attr:`FlagRegistry.data`. A plain mapping of canonical flag name
    to value, with one extra attribute, *flag_source*, mapping each of
    those same keys back to the :class:`Flag` it came from.
    """
    def __init__(self, *a, **kw):
        super(FlagData, self).__init__(*a, **kw)
        self.flag_source = OrderedDict()


class FlagRegistry(object):
    """The FlagRegistry lies at the center of flagon. It owns every
    Flag, declared or discovered, drives the tokenizer, binds the
    tokens to Flags, and reports on what it ended up with.

    Args:
       argv: A command-line string or a list of strings, parsed
          immediately if given. Does not default to ``sys.argv``, see
          :func:`make_registry` for that.
       schema (dict): A mapping of flag names to flag configuration,
          passed to :meth:`configure` before parsing.
       host: Where :meth:`enforce_rules` reports invalid
          input. Defaults to a :class:`~flagon.host.ProcessHost`.

    A registry corresponds to a single parse. Calling :meth:`parse`
    again adds to the existing state.
    """
    def __init__(self, argv=None, schema=None, host=None):
        if schema is None and isinstance(argv, dict):
            argv, schema = None, argv
        self.host = host if host is not None else ProcessHost()
        self.args = []

        self._flag_map = OrderedDict()
        self._alias_map = OrderedDict()
        self._unknown_map = OrderedDict()
        self._allow_unrecognized = True
        self._enforce_types = True
        self._length = 0

        if schema:
            self.configure(schema)
        if argv:
            self.parse(argv)

    @property
    def length(self):
        "The number of flag/value pairs and bare arguments parsed so far."
        return self._length

    @property
    def enforces_types(self):
        return self._enforce_types

    @property
    def allows_unrecognized(self):
        return self._allow_unrecognized

    @property
    def flags(self):
        "Names of all flags, including unknown bucket entries, aliases excluded."
        return list(self._flag_map) + list(self._unknown_map)

    @property
    def recognized_flags(self):
        return [name for name, flag in self._flag_map.items() if flag.recognized]

    @property
    def unrecognized_flags(self):
        ret = [flag.name for flag in self._flag_map.values() if not flag.recognized]
        ret.extend([flag.name for flag in self._unknown_map.values()])
        return unique(ret)

    def _resolve_name(self, name):
        key = normalize_flag_name(name)
        return self._alias_map.get(key, key)

    def _flag_ref(self, name):
        flag = self._flag_map.get(self._resolve_name(name))
        if flag is None:
            flag = self.add_flag(name)
        return flag

    def _takes_value(self, name):
        flag = self._flag_map.get(self._resolve_name(name))
        return flag is None or flag.type != 'boolean'

    def get_flag(self, name):
        """Look up a Flag by name or alias, falling back to the unknown
        bucket. Returns None if there is no such flag.
        """
        flag = self._flag_map.get(self._resolve_name(name))
        if flag is None:
            flag = self._unknown_map.get(normalize_flag_name(name))
        return flag

    def exists(self, name):
        key = normalize_flag_name(name)
        return (key in self._flag_map
                or key in self._alias_map
                or key in self._unknown_map)

    __contains__ = exists

    def add_flag(self, cfg, origin=None):
        """Add a single Flag. *cfg* may be a Flag, a flag name, or a
        mapping of Flag constructor arguments (see
        :meth:`Flag.from_config`). *origin* overrides the Flag's own.

        Raises :exc:`DuplicateFlag` if a flag or alias already goes by
        the same name, and :exc:`AliasConflict` if one of the Flag's
        aliases is already taken. As with :meth:`alias`, a flag
        discovered under one of the aliases is merged into the new one.
        """
        flag = Flag.from_config(cfg)
        if origin is not None:
            flag.origin = origin

        name = flag.name
        if name in self._flag_map or name in self._alias_map:
            raise DuplicateFlag.from_name(name, existing=self.get_flag(name))
        aliases = [a for a in flag.aliases if a != name]
        for alias in aliases:
            self._check_alias(name, alias)

        flag.strict_types = self._enforce_types
        self._flag_map[name] = flag
        for alias in aliases:
            self._absorb(flag, alias)
            self._alias_map[alias] = name
        return flag

    def _check_alias(self, name, alias):
        owner = self._alias_map.get(alias)
        if owner is not None and owner != name:
            raise AliasConflict.from_alias(alias, owner)
        other = self._flag_map.get(alias)
        if other is None or alias == name:
            return
        # a flag discovered under what is now an alias is merged into
        # its canonical flag, but declared flags are never overtaken
        if other.recognized:
            raise AliasConflict.from_alias(alias, other.name)
        return

    def configure(self, schema):
        """Declare Flags in bulk from a mapping of flag name to
        configuration. Each configuration is a mapping of
        :class:`Flag` arguments (``None`` for all defaults), or a
        Flag. All configured flags are recognized.
        """
        for name, cfg in schema.items():
            if not isinstance(cfg, Flag):
                cfg = dict(cfg or {})
                cfg['name'] = name
            self.add_flag(cfg, origin=DECLARED)
        return

    def parse(self, input):
        """Tokenize *input*, a command-line string or a list of strings,
        and bind the results to Flags.

        Each flag/value pair is assigned to its canonical Flag,
        creating an unrecognized one as needed. Flags declared as
        booleans only take "true" or "false" for values, and values
        for recognized number flags are converted (see
        :meth:`Flag.coerce`).

        Each bare argument becomes a boolean flag set to True. If a
        flag or alias already goes by that name, the argument is kept
        in the unknown bucket instead, under a name suffixed with a
        number if need be.

        Parsing never raises on bad input. Check :attr:`valid` and
        :attr:`violations`, or call :meth:`enforce_rules`.
        """
        if not input:
            return
        tokens = tokenize(input, takes_value=self._takes_value)
        self.args.extend(tokens.tokens)
        self._length += tokens.length

        for name, value in tokens.iter_pairs():
            flag = self._flag_ref(name)
            flag.value = flag.coerce(value)

        for arg in tokens.args:
            if self.exists(arg):
                self._add_unknown(arg)
                continue
            flag = self.add_flag(Flag(arg, type='boolean', origin=DISCOVERED))
            flag.value = True
        return

    def _add_unknown(self, arg):
        base = key = normalize_flag_name(arg)
        count = 0
        while key in self._flag_map or key in self._unknown_map:
            count += 1
            key = '%s%s' % (base, count)
        flag = Flag(arg, type='boolean', strict_types=self._enforce_types)
        flag.value = True
        self._unknown_map[key] = flag
        logger.debug('argument %r collides with an existing flag, stored as unknown %r',
                     arg, key)
        return flag

    def require(self, *names):
        for name in names:
            flag = self._flag_ref(name)
            flag.required = True
            flag.recognized = True
        return

    def recognize(self, *names):
        for name in names:
            self._flag_ref(name).recognized = True
        return

    def alias(self, mapping):
        """Attach aliases after the fact, from a mapping of flag name to
        an alias or a collection of aliases.

        A flag that was already discovered under the alias name is
        merged into the aliased flag. Raises :exc:`AliasConflict` if
        the alias belongs to some other flag.
        """
        for name, aliases in mapping.items():
            canonical = self._resolve_name(name)
            aliases = [a for a in flatten_aliases(aliases) if a != canonical]
            for alias in aliases:
                self._check_alias(canonical, alias)

            flag = self._flag_ref(name)
            flag.create_alias(aliases)
            flag.recognized = True
            for alias in aliases:
                self._absorb(flag, alias)
                self._alias_map[alias] = flag.name
        return

    def _absorb(self, flag, alias):
        other = self._flag_map.pop(alias, None)
        if other is None:
            return
        if other.bound:
            flag.value = flag.coerce(other.value)
        logger.debug('merged discovered flag %r into %r', alias, flag.name)

    def defaults(self, mapping):
        for name, value in mapping.items():
            flag = self._flag_ref(name)
            flag.default = value
            flag.recognized = True
        return

    def set_options(self, name, *values):
        """Limit a flag to an enumerated set of values. Accepts the values
        as separate arguments or as a single list.
        """
        if not values:
            raise ConfigurationError('set_options() requires the flag name and'
                                     ' at least one value, not: %r' % (name,))
        if len(values) == 1 and isinstance(values[0], (list, tuple, set)):
            values = values[0]
        flag = self._flag_ref(name)
        flag.recognized = True
        flag.options = values
        return

    def describe(self, name, text):
        self._flag_ref(name).description = text.strip() if isinstance(text, str) else text

    def description(self, name):
        flag = self.get_flag(name)
        return flag.description if flag is not None else None

    def typeof(self, name):
        flag = self.get_flag(name)
        return flag.type if flag is not None else None

    def value(self, name):
        flag = self.get_flag(name)
        return flag.value if flag is not None else None

    def get_flag_aliases(self, name):
        flag = self.get_flag(name)
        return set(flag.aliases) if flag is not None else set()

    def allow_multiple_values(self, *names):
        for name in names:
            self._flag_ref(name).allow_multiple_values()
        return

    def prevent_multiple_values(self, *names):
        for name in names:
            self._flag_ref(name).prevent_multiple_values()
        return

    def disallow_unrecognized(self):
        self._allow_unrecognized = False

    def allow_unrecognized(self):
        self._allow_unrecognized = True

    def enforce_data_types(self):
        self._set_strict_types(True)

    def ignore_data_types(self):
        self._set_strict_types(False)

    def _set_strict_types(self, strict):
        self._enforce_types = strict
        for flag in self._flag_map.values():
            flag.strict_types = strict
        for flag in self._unknown_map.values():
            flag.strict_types = strict
        return

    def validate(self):
        """Check every flag, returning a :class:`ValidationResult`. When
        unrecognized flags are disallowed, every unrecognized flag and
        every unknown bucket entry is also a violation.

        Computed fresh on every call, there is nothing to invalidate.
        """
        violations = []
        for name, flag in self._flag_map.items():
            violations.extend(flag.validate().violations)
            if not self._allow_unrecognized and not flag.recognized:
                violations.append('"%s" is unrecognized.' % name)
        if not self._allow_unrecognized:
            for flag in self._unknown_map.values():
                violations.append('"%s" is unrecognized.' % flag.name)
        return ValidationResult(unique(violations))

    @property
    def valid(self):
        return self.validate().valid

    @property
    def violations(self):
        return self.validate().violations

    @property
    def data(self):
        ret = FlagData()
        for name, flag in self._flag_map.items():
            ret[name] = flag.value
            ret.flag_source[name] = flag
        for key, flag in self._unknown_map.items():
            data_key, count = key, 0
            # flags declared after the unknown entry may have taken its name
            while data_key in ret:
                count += 1
                data_key = '%s%s' % (key, count)
            ret[data_key] = True
            ret.flag_source[data_key] = flag
        return ret

    def enforce_rules(self):
        """Returns True when the registry is valid. Otherwise, the
        violations are handed to the host, which by default prints them
        and exits the process.
        """
        res = self.validate()
        if res.valid:
            return True
        logger.debug('enforcing rules, found %d violations', len(res.violations))
        self.host.terminate(res.violations)
        return False

    def __repr__(self):
        return format_nonexp_repr(self, ['flags'], ['length'])


def make_registry(schema=None, argv=None, host=None):
    """Create a :class:`FlagRegistry` for the current process. When
    *argv* is None, arguments come from the *host*, by default
    ``sys.argv[1:]``.

    A ``main()`` that accepts an ``argv=None`` parameter and passes it
    through keeps the program usable without subprocessing.
    """
    if host is None:
        host = ProcessHost()
    if argv is None:
        argv = host.get_argv()
    return FlagRegistry(argv, schema=schema, host=host)
