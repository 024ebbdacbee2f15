# Shared constants for the NEM12 to SQL pipeline

CSV_EXTENSION = ".csv"
SQL_EXTENSION = ".sql"
SUMMARY_SUFFIX = ".summary.json"
BYTES_PER_MB = 1024 * 1024
DEFAULT_ENCODING = "utf-8-sig"
