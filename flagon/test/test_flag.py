import re

import pytest

from flagon import (Flag,
                    DECLARED,
                    DISCOVERED,
                    ConfigurationError,
                    InvalidAlias,
                    InvalidValidator)


def _declared(*a, **kw):
    kw.setdefault('origin', DECLARED)
    return Flag(*a, **kw)


def test_flag_names():
    flag = Flag('--Port')
    assert flag.name == 'port'
    assert flag.input_name == '--Port'
    assert flag.origin is DISCOVERED
    assert not flag.recognized

    flag.recognized = True
    assert flag.origin is DECLARED
    assert repr(flag).startswith("<Flag name='port'")

    for bad_name in (None, '', '   ', 5):
        with pytest.raises(ConfigurationError, match='Flag name is required'):
            Flag(bad_name)


@pytest.mark.parametrize(
    "type_, expected",
    [('integer', 'number'),
     ('Float', 'number'),
     ('double', 'number'),
     ('number', 'number'),
     ('bigint', 'bigint'),
     ('boolean', 'boolean'),
     ('*', 'any'),
     ('any', 'any'),
     ('whatever', 'string'),
     (bool, 'boolean'),
     (int, 'number'),
     (str, 'string')]
)
def test_flag_type_normalization(type_, expected):
    assert Flag('f', type=type_).type == expected


def test_flag_type_custom_class():
    class Version(object):
        pass

    flag = _declared('version', type=Version)
    assert flag.type == 'version'

    flag.value = Version()
    assert flag.valid
    flag.value = '1.0'
    assert flag.violations == ['"version" should be a version, not string.']


def test_flag_type_inference():
    assert Flag('f').type == 'string'
    assert Flag('f', default=8787).type == 'number'
    assert Flag('f', default=True).type == 'boolean'
    assert Flag('f', default=False).type == 'boolean'
    assert Flag('f', default='./').type == 'string'
    assert Flag('f', default=[1, 2]).type == 'number'
    assert Flag('f', default=8787, type='string').type == 'string'


def test_flag_single_value():
    flag = Flag('name', default='anon')
    assert flag.value == 'anon'
    assert not flag.bound

    flag.value = 'Jill'
    flag.value = 'Jack'
    assert flag.value == 'Jack'
    assert flag.bound

    flag.value = False
    assert flag.value is False  # falsy values don't fall back to the default


@pytest.mark.parametrize("default", [None, 'a.js', ['a.js']])
def test_flag_multi_value_always_list(default):
    flag = Flag('file', default=default, allow_multiple_values=True)
    expected = [] if default is None else ['a.js']
    assert flag.value == expected

    flag.value = 'b.js'
    assert flag.value == ['b.js']

    flag.value = 'c.js'
    assert flag.value == ['b.js', 'c.js']

    flag.value = ['x.js']
    assert flag.value == ['x.js']


def test_flag_toggle_multiple_values():
    flag = Flag('file', default='a.js')
    flag.value = 'b.js'

    flag.allow_multiple_values()
    assert flag.multiple_values_allowed
    assert flag.value == ['b.js']
    assert flag.default == ['a.js']

    flag.value = 'c.js'
    flag.prevent_multiple_values()
    assert not flag.multiple_values_allowed
    assert flag.value == 'c.js'
    assert flag.default == 'a.js'

    # no-ops when already in the requested mode
    flag.prevent_multiple_values()
    assert flag.value == 'c.js'


def test_flag_aliases():
    flag = Flag('runtime', alias='-RT', aliases=['r', ('run', set(['--R']))])
    assert flag.aliases == ['rt', 'r', 'run']
    assert flag.has_alias('--rt')
    assert flag.has_alias('RUN')
    assert not flag.has_alias('runtime')

    flag.create_alias('x', '')
    assert flag.aliases == ['rt', 'r', 'run', 'x']

    with pytest.raises(InvalidAlias, match='Cannot create an alias for a int'):
        Flag('bad', alias=['ok', 3])


def test_flag_validator_types():
    Flag('ok', validate=lambda v: True)
    Flag('ok', validate=re.compile('^a'))

    with pytest.raises(InvalidValidator, match='Only compiled patterns and callables'):
        Flag('bad', validate='^a')


def test_flag_options():
    flag = _declared('runtime', options=['node', 'browser', 'deno'])
    assert flag.options == ['node', 'browser', 'deno']
    assert flag.valid  # unset and not required

    flag.value = 'go'
    assert not flag.valid
    assert flag.violations == ['"go" is invalid. Expected one of: node, browser, deno']

    flag.value = 'deno'
    assert flag.valid
    assert flag.violations == []

    flag.options = 'a, b,c'
    assert flag.options == ['a', 'b', 'c']


def test_flag_number_options_from_text():
    flag = _declared('port', type='number', options='80,443')
    flag.value = flag.coerce('443')
    assert flag.valid

    flag.value = 8080
    assert flag.violations == ['"8080" is invalid. Expected one of: 80, 443']


def test_flag_options_multi():
    flag = _declared('target', options='x,y', allow_multiple_values=True)
    flag.value = 'x'
    flag.value = 'z'
    flag.value = 'w'
    assert flag.violations == ['"z" is invalid. Expected one of: x, y',
                               '"w" is invalid. Expected one of: x, y']


def test_flag_required():
    flag = _declared('port', required=True)
    res = flag.validate()
    assert not res
    assert res.violations == ['"port" is required.']

    flag.value = 'x'
    assert flag.validate().valid

    multi = _declared('file', required=True, allow_multiple_values=True)
    assert multi.violations == ['"file" is required.']
    multi.value = 'a.js'
    assert multi.valid

    with_default = _declared('port', required=True, default=8787)
    assert with_default.valid


def test_flag_strict_types():
    flag = _declared('port', type='number')
    flag.value = 'abc'
    assert flag.violations == ['"port" should be a number, not string.']

    flag.strict_types = False
    assert flag.valid

    with pytest.raises(ConfigurationError):
        flag.strict_types = 'yes'

    # discovered flags aren't type checked
    discovered = Flag('port', type='number')
    discovered.value = 'abc'
    assert discovered.valid

    anything = _declared('anything', type='*')
    anything.value = object()
    assert anything.valid

    flag = _declared('port', type='number')
    flag.value = True
    assert flag.violations == ['"port" should be a number, not boolean.']


def test_flag_strict_types_multi():
    flag = _declared('n', type='number', allow_multiple_values=True)
    flag.value = 1
    flag.value = 'two'
    flag.value = 3.0
    assert flag.violations == ['"n" (two) should be a number, not string.']


def test_flag_validation_order():
    # required comes first, then options, then types, then validators
    flag = _declared('level', type='number', options=[1, 2],
                     validate=lambda v: False)
    flag.value = 'high'
    assert flag.violations == ['"high" is invalid. Expected one of: 1, 2']

    flag.options = None
    assert flag.violations == ['"level" should be a number, not string.']

    flag.value = 2
    assert flag.violations == ['"2" is invalid (failed custom validation).']


def test_flag_custom_validators():
    flag = _declared('value', validate=lambda v: v == 'ok')
    assert flag.valid  # unset values aren't validated
    flag.value = 'ok'
    assert flag.valid
    flag.value = 'notok'
    assert flag.violations == ['"notok" is invalid (failed custom validation).']

    pattern = _declared('pass', validate=re.compile('^a.*c$', re.I))
    pattern.value = 'ABBBBC'
    assert pattern.valid
    pattern.value = 'abbbbd'
    assert not pattern.valid

    # patterns only match strings
    pattern.strict_types = False
    pattern.value = True
    assert pattern.violations == ['"true" is invalid (failed custom validation).']

    multi = _declared('files', validate=re.compile(r'\.js$'), allow_multiple_values=True)
    multi.value = 'a.js'
    assert multi.valid
    multi.value = 'b.py'
    assert multi.violations == ['"a.js,b.py" is invalid (failed custom validation).']


def test_flag_coerce():
    port = _declared('port', type='number')
    assert port.coerce('8787') == 8787
    assert port.coerce('1.5') == 1.5
    assert port.coerce('abc') == 'abc'
    assert port.coerce(True) is True

    big = _declared('big', type='bigint')
    assert big.coerce('123456789012345678901234567890') == 123456789012345678901234567890
    assert big.coerce('1.5') == '1.5'

    assert _declared('name').coerce('8787') == '8787'
    assert Flag('port', type='number').coerce('8787') == '8787'  # discovered


def test_flag_from_config():
    flag = Flag.from_config({'name': 'test', 'alias': 't',
                             'allowMultipleValues': True,
                             'strictTypes': False,
                             'description': 'test of multiples.'})
    assert flag.multiple_values_allowed
    assert not flag.strict_types
    assert flag.aliases == ['t']
    assert flag.description == 'test of multiples.'

    assert Flag.from_config('verbose').name == 'verbose'
    assert Flag.from_config(flag) is flag

    with pytest.raises(ConfigurationError, match='unexpected configuration'):
        Flag.from_config({'name': 'test', 'colour': 'blue'})
    with pytest.raises(ConfigurationError, match='expected flag name or mapping'):
        Flag.from_config(5)
