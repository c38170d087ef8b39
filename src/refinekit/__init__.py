"""refinekit — enums, refined types, and ordered maps keyed by validated values.

Layering (leaves first): result/errors -> codec -> guards -> enums/refined -> maps.
The core depends only on the stdlib and pydantic; logging is configured by
the application through :mod:`refinekit.config.logging`.
"""

from refinekit.codec import Decoder, Encoder
from refinekit.enums import Enum
from refinekit.errors import DecodeError, RefinekitError, UnwrapError
from refinekit.maps import KeyDict, StringKeyDict, TrieDict
from refinekit.refined import Opaque, Refined
from refinekit.result import Err, Ok, Result

__all__ = [
    "DecodeError",
    "Decoder",
    "Encoder",
    "Enum",
    "Err",
    "KeyDict",
    "Ok",
    "Opaque",
    "Refined",
    "RefinekitError",
    "Result",
    "StringKeyDict",
    "TrieDict",
    "UnwrapError",
]
