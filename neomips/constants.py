"""Project wide constants and option defaults."""

# Registros de propósito general
REGISTER_COUNT = 32

# Immediates are stored as 32-bit two's complement words
WORD_SIZE_BITS = 32
HALF_SIZE_BITS = 16
BYTE_SIZE_BITS = 8

# Maximum hexadecimal digits in an immediate (0x + 1..8 digits)
MAX_HEX_DIGITS = 8

# Include nesting and macro expansion share this bound
MAX_PREPROCESS_DEPTH = 16

SOURCE_ENCODING = "utf-8"

# Defaults for the command line options (interpreter options are parsed
# and carried but not consumed by the front end)
DEFAULT_MAX_FREQ = 0xFFFFFFFF
DEFAULT_MAX_MEMORY = 0xFFFFFFFF
DEFAULT_MEM_CHUNK_SIZE = 0xFFFF

COMMENT_CHAR = "#"
