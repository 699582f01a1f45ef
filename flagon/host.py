"""Hosts connect a FlagRegistry to its execution environment: they
supply the live argument vector, and decide what happens when
:meth:`~flagon.FlagRegistry.enforce_rules` finds invalid input.

The registry itself never touches ``sys``.
"""
import sys

from flagon.errors import CommandLineError, InvalidFlags


INVALID_FLAGS_MSG = 'InvalidFlags: Process exited with error.'


def default_print_error(msg):
    return sys.stderr.write(msg + '\n')


def format_violations(violations, header=INVALID_FLAGS_MSG):
    "Render violations as a header followed by a bulleted list."
    return '\n * '.join([header] + list(violations))


class ProcessHost(object):
    """The host for running as a command-line process. Arguments come
    from ``sys.argv`` and invalid input exits the process, by way of a
    :exc:`CommandLineError`, with status code 1.

    Args:
       print_error (callable): Called with the formatted violations
          before exiting. Defaults to writing to stderr. Pass False to
          stay silent.
       code (int): The exit code. Defaults to 1.
    """
    def __init__(self, print_error=None, code=1):
        if print_error is None or print_error is True:
            print_error = default_print_error
        elif print_error and not callable(print_error):
            raise TypeError('expected callable for print_error, not %r'
                            % print_error)
        self.print_error = print_error
        self.code = code

    def get_argv(self):
        # the first argument is the command itself
        return list(sys.argv[1:])

    def terminate(self, violations):
        msg = format_violations(violations)
        if self.print_error:
            self.print_error(msg)
        raise CommandLineError(msg, code=self.code)


class EmbeddedHost(object):
    """The host for library use, tests and other settings where exiting
    the process is unwelcome. There is no argument vector, and invalid
    input raises :exc:`InvalidFlags`.
    """
    def __init__(self, argv=None):
        self.argv = list(argv or [])

    def get_argv(self):
        return list(self.argv)

    def terminate(self, violations):
        raise InvalidFlags(violations, format_violations(violations))
