"""
isort:skip_file
"""

from .streamlines import readline as readline
from .streamlines import readline_forwards as readline_forwards
from .streamlines import readline_backwards as readline_backwards
from .streamlines import readline_around as readline_around
from .streamlines import readline_around_forwards as readline_around_forwards
from .streamlines import readline_around_backwards as readline_around_backwards

from .splitter import LineRecord as LineRecord
from .splitter import TaggedLineRecord as TaggedLineRecord
from .splitter import LineSplitter as LineSplitter
from .splitter import readline_from_stream as readline_from_stream
from .splitter import readline_from_blob_forwards as readline_from_blob_forwards
from .splitter import readline_from_blob_backwards as readline_from_blob_backwards

from .cancellation import CancellationToken as CancellationToken
from .window import LineWindow as LineWindow

from .validation import ValidationError as ValidationError
from .validation import UnsupportedInputKind as UnsupportedInputKind
from .validation import InvalidRange as InvalidRange

from .cli import cli as cli
