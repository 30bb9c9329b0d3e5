"""Application constants."""

USER_AGENT = "spaceops/0.3 (+booking-import; contact: configured-email)"
COMMANDS = (
    "preview",
    "parse",
    "commit",
    "analyse-location",
)
EXIT_SUCCESS = 0
EXIT_PARTIAL = 10
EXIT_HARD_FAIL = 20
DEFAULT_PREVIEW_LIMIT = 10
JSON_LOG_FIELDS = (
    "timestamp",
    "run_id",
    "stage",
    "platform",
    "source",
    "event",
    "status",
    "rows_in",
    "rows_out",
    "score",
    "rank",
    "error_code",
    "message",
)
