# fundclient/protocol/types.py
# Fixed-width wire types. Everything is big-endian (network order).
FIELD_TO_STRUCT: dict[str, str] = {
    "bool": "?",
    "int32": "i",
    "int64": "q",
    "float64": "d",
}

# Variable-width / derived wire types handled explicitly by the codec.
TEXT = "text"    # u16 length + modified UTF-8
DATE = "date"    # int64 epoch-ms, 00:00 UTC of the day

MAX_TEXT_BYTES = 0xFFFF
