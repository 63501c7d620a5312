# --- START OF FILE config.py ---

# --- Path Configuration ---
# Destination root written into the copy script when none is given on the command line
DEFAULT_TARGET_PATH = "C:\\Tavole"
DEFAULT_SOURCE_PATH = ""

# --- DB Sheet Layout (0-based column indices) ---
DB_DESCRIPTION_COL = 0
DB_CODE_COL = 1
DB_CONFIG_COL = 2
DB_REVISION_COL = 3
# Payload columns E..I, copied into the BOM on a full match
DB_PAYLOAD_COLS = [4, 5, 6, 7, 8]
# Rows shorter than this cannot carry a key
DB_MIN_ROW_LENGTH = 4

# --- BOM Sheet Layout (0-based column indices) ---
BOM_CODE_COL = 4
BOM_CONFIG_COL = 5
BOM_REVISION_COL = 6
# Targets H..L for DB_PAYLOAD_COLS (same order)
BOM_PAYLOAD_COLS = [7, 8, 9, 10, 11]
BOM_STATUS_COL = 12
BOM_NOTE_COL = 13
# Extension family -> "found" flag column
BOM_FILE_FLAG_COLS = {
    "PDF": 14,
    "DWG": 15,
    "STEP": 16,
}
BOM_DESCRIPTION_COL = 17
# Rows are widened up to Q (or R with the description column)
BOM_MIN_COLUMNS = 17

# --- Header Labels written on row 0 of the BOM ---
HEADER_LABELS = {
    BOM_STATUS_COL: "Stato DB",
    BOM_NOTE_COL: "Note",
    BOM_FILE_FLAG_COLS["PDF"]: "File PDF",
    BOM_FILE_FLAG_COLS["DWG"]: "File DWG",
    BOM_FILE_FLAG_COLS["STEP"]: "File STEP",
}
DESCRIPTION_HEADER_LABEL = "Descrizione"

# --- Status / Note / Flag values ---
STATUS_OK = "OK"
STATUS_MISSING = "needs addition to DB"
NOTE_VERIFY_REVISION = "verify revision"
FLAG_FOUND = "SI"
FLAG_NOT_FOUND = "NO"

# --- File Search Configuration ---
ALLOWED_EXTENSIONS = ["PDF", "DWG", "STP", "STEP"]
# Family -> extensions tried in order (first hit wins). Family name is also the target subfolder.
EXTENSION_FAMILIES = {
    "PDF": ["PDF"],
    "DWG": ["DWG"],
    "STEP": ["STP", "STEP"],
}
# Drawings often carry a suffix after the revision (e.g. " DISTINTA"), so they are prefix-matched
PREFIX_MATCH_EXTENSIONS = ["DWG"]
ILLEGAL_FILENAME_CHARS_PATTERN = r'[<>:"/\\|?*]'
PADDED_REVISION_WIDTH = 2
# Keys of the per-family counters in the stats dictionary
FAMILY_STATS_KEYS = {
    "PDF": "pdf",
    "DWG": "dwg",
    "STEP": "stp",
}

# --- Output Configuration ---
RESULT_SHEET_NAME = "Risultato"
EXPORT_COLUMN_LIMIT = 12
PROCESSED_FILE_PREFIX = "PROCESSED_"
MISSING_FILE_PREFIX = "DA_AGGIUNGERE_"
SCRIPT_FILE_PREFIX = "COPIA_FILE_"
SCRIPT_FILE_EXTENSION = ".bat"
SCRIPT_LINE_ENDING = "\r\n"
SCRIPT_ENCODING = "utf-8"
# Suffixes stripped from the processed workbook name to build the script name
SCRIPT_NAME_STRIP_SUFFIXES = [".xlsx", ".xls"]
# Outputs are written under this prefix first, then renamed
TEMP_FILE_PREFIX = "~tmp_"

# --- Feature Flags ---
# Export only columns A..L with a styled header and auto-filter
EXPORT_ONLY_12_COLS = False
# Add a "Descrizione" column (R) filled from the DB description on a match
INCLUDE_DESCRIPTION_COLUMN = False

# --- END OF FILE config.py ---
