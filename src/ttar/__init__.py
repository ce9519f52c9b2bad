from .records import Record, RecordKind
from .encoder import create_archive
from .decoder import (
    Decoder, RecordHandler, Lister, Extractor, RecordCollector,
    list_archive, extract_archive, read_records,
)
from .operations import Operation
from .exceptions import (
    TtarError, UsageError, InputNotFoundError, UnsupportedContentError, MalformedArchiveError,
)

__all__ = [
    "Record", "RecordKind", "create_archive",
    "Decoder", "RecordHandler", "Lister", "Extractor", "RecordCollector",
    "list_archive", "extract_archive", "read_records",
    "Operation",
    "TtarError", "UsageError", "InputNotFoundError", "UnsupportedContentError",
    "MalformedArchiveError",
]
