
class FlagonException(Exception):
    """The basest base exception flagon has. Rarely directly instantiated
    if ever, but useful for catching.
    """
    pass


class ConfigurationError(FlagonException, ValueError):
    """Raised when a flag schema is malformed. These reflect programming
    errors in the declaration of flags, never bad user input, and are
    always raised at declaration time.

    Many subtypes have a ``from_*()`` classmethod that creates an
    exception message from the values available at declaration.
    """
    pass


class DuplicateFlag(ConfigurationError):
    """
    Raised when a flag is declared twice under the same canonical name.
    """
    @classmethod
    def from_name(cls, name, existing=None):
        msg = '"%s" flag already exists.' % name
        if existing is not None and existing.name != name:
            msg += ' (already owned by the "%s" flag)' % existing.name
        return cls(msg)


class AliasConflict(ConfigurationError):
    """Raised when an alias is bound to a flag, but the alias is already
    associated with a different flag.
    """
    @classmethod
    def from_alias(cls, alias, owner_name):
        return cls('The "%s" alias is already associated to the "%s" flag.'
                   % (alias, owner_name))


class InvalidValidator(ConfigurationError):
    """Raised when a flag's custom validator is neither a callable nor a
    compiled regular expression.
    """
    @classmethod
    def from_flag(cls, flag_name, validator):
        return cls('The "validate" configuration attribute for %s is invalid.'
                   ' Only compiled patterns and callables are supported'
                   ' (received %s)' % (flag_name, type(validator).__name__))


class InvalidAlias(ConfigurationError):
    """
    Raised when an alias is not a string (or a collection of strings).
    """
    @classmethod
    def from_alias(cls, alias):
        return cls('Cannot create an alias for a %s element.'
                   ' Please specify a string instead.' % type(alias).__name__)


class InvalidFlags(FlagonException):
    """Raised by non-process hosts when rules are enforced against
    invalid input. The individual messages are available as
    *violations*.
    """
    def __init__(self, violations, msg=None):
        self.violations = list(violations)
        if msg is None:
            msg = 'InvalidFlags: Process exited with error.'
        super(InvalidFlags, self).__init__(msg)


class CommandLineError(FlagonException, SystemExit):
    def __init__(self, msg, code=1):
        SystemExit.__init__(self, msg)
        self.code = code
