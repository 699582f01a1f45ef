import sys

from flagon import make_registry


SCHEMA = {'port': {'alias': 'p',
                   'type': 'number',
                   'default': 8787,
                   'description': 'Port to serve on.'},
          'reload': {'alias': 'r',
                     'type': 'boolean',
                     'description': 'Automatically reload when files change.'},
          'environment': {'alias': 'env',
                          'options': ['development', 'staging', 'production'],
                          'default': 'development'},
          'header': {'alias': 'hdr',
                     'allowMultipleValues': True,
                     'description': 'Extra "Name=Value" headers to send.'}}


def serve(port, reload, environment, header):
    print('serving %s on port %s' % (environment, port))
    if reload:
        print('reloading on change')
    for hdr in header:
        print('  with header %s' % hdr)
    return 0


def main(argv=None):
    flags = make_registry(SCHEMA, argv=argv)
    flags.disallow_unrecognized()
    flags.enforce_rules()  # exits with a list of violations on bad input

    data = flags.data
    return serve(data['port'], data['reload'], data['environment'], data['header'])


if __name__ == '__main__':
    sys.exit(main())
