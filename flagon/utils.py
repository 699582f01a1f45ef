import re

from boltons.iterutils import unique


BOOL_LITERALS = {'true': True, 'false': False}

ANY_TYPES = ('any', '*')

# string aliases accepted by the Flag.type setter
TYPE_ALIASES = {'number': 'number',
                'integer': 'number',
                'int': 'number',
                'float': 'number',
                'double': 'number',
                'bigint': 'bigint',
                'boolean': 'boolean',
                'bool': 'boolean',
                'any': 'any',
                '*': 'any'}

# builtin types accepted by the Flag.type setter
PY_TYPE_NAMES = {bool: 'boolean',
                 int: 'number',
                 float: 'number',
                 str: 'string'}

_ESCAPED_QUOTE_RE = re.compile(r'\\(["\'])')


def normalize_flag_name(flag):
    """Canonicalize a flag name: surrounding whitespace and leading
    dashes are removed, and the result is lowercased.

    Names made up of nothing but dashes (e.g., a bare ``--``) are kept
    as-is, so that every input token has a non-empty name.
    """
    stripped = flag.strip()
    ret = stripped.lstrip('-').lower()
    return ret or stripped


def strip_dashes(name):
    return name.strip().lstrip('-')


def parse_bool_literal(text):
    """Return True/False for case-insensitive "true"/"false" text, and
    None for anything else (including non-strings).
    """
    if not isinstance(text, str):
        return None
    return BOOL_LITERALS.get(text.strip().lower())


def unescape_quotes(text):
    return _ESCAPED_QUOTE_RE.sub(r'\1', text)


def normalize_type(value):
    """Normalize a type declaration. Strings and the basic builtin types
    map onto one of "string", "number", "bigint", "boolean" or "any".
    Other objects (usually classes) are returned unchanged.
    """
    if isinstance(value, str):
        return TYPE_ALIASES.get(value.strip().lower(), 'string')
    try:
        return PY_TYPE_NAMES[value]
    except (KeyError, TypeError):
        return value


def infer_type(default):
    "Infer a flag type from its default value, or None if there's no hint."
    if isinstance(default, (list, tuple, set)):
        default = list(default)
        if not default:
            return None
        default = default[0]
    if default is None:
        return None
    return PY_TYPE_NAMES.get(type(default), 'string')


def get_type_name(type_):
    "The display name of a (normalized) flag type."
    if isinstance(type_, str):
        return type_
    return getattr(type_, '__name__', repr(type_)).lower()


def get_value_type_name(value):
    "Kind of like JavaScript's typeof, used in violation messages."
    if isinstance(value, bool):
        return 'boolean'
    if isinstance(value, (int, float)):
        return 'number'
    if isinstance(value, str):
        return 'string'
    if isinstance(value, (list, tuple)):
        return 'array'
    if value is None:
        return 'null'
    return type(value).__name__.lower()


def matches_type(value, type_):
    """Check a single value against a normalized flag type. Booleans are
    never considered numbers.
    """
    if type_ in ANY_TYPES:
        return True
    if type_ == 'boolean':
        return isinstance(value, bool)
    if type_ == 'number':
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if type_ == 'bigint':
        return isinstance(value, int) and not isinstance(value, bool)
    if type_ == 'string':
        return isinstance(value, str)
    if isinstance(type_, type):
        return isinstance(value, type_)
    return get_value_type_name(value) == get_type_name(type_)


def format_value(value):
    "Render a value the way violation messages display it."
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if value is None:
        return 'null'
    if isinstance(value, (list, tuple)):
        return ','.join([format_value(v) for v in value])
    return str(value)


def format_nonexp_repr(obj, req_names=None, opt_names=None, opt_key=None):
    """Format a non-expression-style repr

    Some object reprs look like object instantiation, e.g., App(r=[], mw=[]).

    This makes sense for smaller, lower-level objects whose state
    roundtrips. But a lot of objects contain values that don't
    roundtrip, like types and functions.

    For those objects, there is the non-expression style repr, which
    mimic's Python's default style to make a repr like this:

    <Flag name='port' type='number'>
    """
    cn = obj.__class__.__name__
    req_names = req_names or []
    opt_names = opt_names or []
    all_names = unique(req_names + opt_names)

    if opt_key is None:
        opt_key = lambda v: v is None
    assert callable(opt_key)

    items = [(name, getattr(obj, name, None)) for name in all_names]
    labels = ['%s=%r' % (name, val) for name, val in items
              if not (name in opt_names and opt_key(val))]
    if not labels:
        labels = ['id=%s' % id(obj)]
    ret = '<%s %s>' % (cn, ' '.join(labels))
    return ret
