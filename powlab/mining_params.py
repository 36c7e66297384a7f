"""This module gathers mining parameters"""
# number of leading '0' hex characters a hash needs, difficulty is clamped to this range
MIN_DIFFICULTY = 1
MAX_DIFFICULTY = 6
DEFAULT_DIFFICULTY = 1

# attempts per scheduling slice before the mining loop yields to the event loop
BATCH_SIZE = 50

# hashrate is sampled whenever at least this many milliseconds passed since the last sample
RATE_WINDOW_MS = 1000
# number of past samples kept for the average speed
RATE_HISTORY_SIZE = 60

# header is assembled as prev_hash|data|nonce
HEADER_SEPARATOR = "|"

# digest name as understood by hashlib.new, applied twice
HASH_ALGORITHM = "sha256"
