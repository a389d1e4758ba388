# Converter utilities
from .logging import log, logWarning, logError, logDebug, init_logging, close_logging, print_summary, get_counts
from .hashing import city_hash_path, path_to_utf16
from .binary import (
    ByteOrder,
    read_exact,
    read_struct,
    read_u32,
    read_u64,
    write_struct,
    write_u32,
    write_u64,
    write_i64,
    align_up,
)
