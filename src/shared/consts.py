from enum import Enum

# Length of the buffered series, in milliseconds.
RETENTION_MS = 3_600_000

# Device hashrates are reported in GH/s; the series stores H/s.
HASHRATE_SCALE = 1_000_000_000.0

# Compression factor applied upstream by the relative history encoding.
HISTORY_COMPRESSION_FACTOR = 100.0

LIVE_POLL_INTERVAL_SECONDS = 5.0


class EnumEnvironment(str, Enum):
    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"


class EnumLogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class EnumStorageBackend(str, Enum):
    FILE = "file"
    MONGO = "mongo"
