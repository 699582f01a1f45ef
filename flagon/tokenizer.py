"""Splitting of raw command-line input into flag/value pairs and bare
arguments.

Two input forms are supported. A single string is lexed with a small
quote-aware grammar (no globs, pipes or redirection). A list of strings
is assumed to be split already, and is used as-is, without any quote
stripping. Either way, the resulting lexemes are walked the same way:
a flag pairs with the lexeme after it, unless that lexeme starts with
a dash (quoted text in a string never counts as dashed).

The one wrinkle is booleans. A flag that can only hold a boolean
consumes the following lexeme only when it reads "true" or "false",
otherwise a command line like ``--verbose index.js`` would swallow the
filename.
"""
import re
import logging

from boltons.dictutils import OrderedMultiDict as OMD

from flagon.utils import parse_bool_literal, strip_dashes, unescape_quotes


logger = logging.getLogger(__name__)


_LEXEME_RE = re.compile(r'''
    "(?P<double>(?:\\.|[^"\\])*)"
  | '(?P<single>(?:\\.|[^'\\])*)'
  | (?P<word>[^\s"'][^\s]*)
''', re.VERBOSE)


def is_flag_token(text):
    """A flag token is one or more dashes followed by at least one
    other character. A lone ``-`` or ``--`` is a conventional bare
    argument.
    """
    return len(text) > 1 and text[0] == '-' and bool(text.strip('-'))


def _always_takes_value(name):
    return True


def _lex(text):
    ret = []
    for match in _LEXEME_RE.finditer(text):
        double, single, word = match.group('double', 'single', 'word')
        if word is not None:
            ret.append((word, False))
        elif double is not None:
            ret.append((unescape_quotes(double), True))
        else:
            ret.append((unescape_quotes(single), True))
    return ret


def split_line(text):
    """Split a command-line string into lexeme texts. Quotes are
    removed, escaped quotes within them are unescaped, and whitespace
    inside quotes is preserved::

      >>> split_line('-c "my connection" --name \\'Jill Doe\\'')
      ['-c', 'my connection', '--name', 'Jill Doe']

    Quotes only delimit text at the start of a lexeme, so ``it's``
    stays one word. Unbalanced opening quotes are skipped rather than
    rejected.
    """
    return [text for text, _ in _lex(text)]


class TokenStream(object):
    """The result of :func:`tokenize`.

    Args:
       pairs (OrderedMultiDict): Dash-stripped flag names (case
          preserved) mapped to their values. A name occurs once per
          appearance in the input, use :meth:`iter_pairs` to walk them
          in input order.
       args (list): Bare arguments, in input order.
       tokens (list): The lexeme texts the pairs and arguments were
          drawn from.
    """
    def __init__(self, pairs, args, tokens):
        self.pairs = pairs
        self.args = list(args)
        self.tokens = list(tokens)

    def iter_pairs(self):
        return self.pairs.iteritems(multi=True)

    @property
    def length(self):
        "Number of (flag, value) pairs plus number of bare arguments."
        return len(self.pairs.items(multi=True)) + len(self.args)

    def __repr__(self):
        cn = self.__class__.__name__
        return ('<%s pairs=%r args=%r>'
                % (cn, self.pairs.items(multi=True), self.args))


def tokenize(input, takes_value=None):
    """Turn a string or a list of strings into a :class:`TokenStream`.

    Args:
       input: A command-line string, or a sequence of already-split
          strings.
       takes_value (callable): Called with a dash-stripped flag name,
          should return False when the flag can only hold a
          boolean. Such flags only consume a following "true" or
          "false". Defaults to every flag taking a value.

    Values reading "true" or "false" (in any case) become booleans. A
    flag without a value is True. Tokenizing never fails.
    """
    if takes_value is None:
        takes_value = _always_takes_value

    if isinstance(input, str):
        lexemes = _lex(input)
    else:
        lexemes = [(str(item), False) for item in input]

    pairs = OMD()
    args = []
    count, i = len(lexemes), 0
    while i < count:
        text, quoted = lexemes[i]
        i += 1
        if quoted or not is_flag_token(text):
            if text.strip():
                args.append(text)
            continue

        name = strip_dashes(text)
        value = True
        if i < count:
            next_text, next_quoted = lexemes[i]
            if next_quoted or not next_text.startswith('-'):
                literal = parse_bool_literal(next_text)
                if literal is not None:
                    value = literal
                    i += 1
                elif takes_value(name):
                    value = next_text
                    i += 1
        pairs.add(name, value)

    ret = TokenStream(pairs, args, [text for text, _ in lexemes])
    logger.debug('tokenized %d lexemes into %r', count, ret)
    return ret
