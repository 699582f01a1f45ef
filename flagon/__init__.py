from flagon.flag import (Flag,
                         ValidationResult,
                         DECLARED,
                         DISCOVERED)

from flagon.errors import (FlagonException,
                           ConfigurationError,
                           DuplicateFlag,
                           AliasConflict,
                           InvalidValidator,
                           InvalidAlias,
                           InvalidFlags,
                           CommandLineError)

from flagon.tokenizer import tokenize, split_line, TokenStream
from flagon.parser import FlagRegistry, FlagData, make_registry
from flagon.host import ProcessHost, EmbeddedHost
