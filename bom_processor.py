# --- START OF FILE bom_processor.py ---

import logging
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

import config as cfg
import copy_script
from file_matcher import FileMatcher, build_file_inventory, derive_base_name, normalize

# Full key -> originating DB row, plus the set of partial keys
DbIndex = Tuple[Dict[str, List[Any]], Set[str]]
ProcessedResult = Dict[str, Any]

# Row states of the reconciliation
STATE_UNKEYED = "UNKEYED"
STATE_MATCHED = "MATCHED"
STATE_MISSING_KNOWN_PARTIAL = "MISSING_KNOWN_PARTIAL"
STATE_MISSING_UNKNOWN = "MISSING_UNKNOWN"


class ProcessingError(Exception):
    """Custom exception for reconciliation errors."""
    pass


class InputValidationError(ProcessingError):
    """The inputs of a run are empty or inconsistent."""
    pass


def full_key(code: Any, configuration: Any, revision: Any) -> str:
    return f"{normalize(code)}|{normalize(configuration)}|{normalize(revision)}"


def partial_key(code: Any, configuration: Any) -> str:
    return f"{normalize(code)}|{normalize(configuration)}"


def _cell(row: List[Any], index: int) -> Any:
    return row[index] if index < len(row) else None


def _widen_row(row: Optional[List[Any]], min_columns: int) -> List[Any]:
    widened = list(row) if row else []
    if len(widened) < min_columns:
        widened.extend([None] * (min_columns - len(widened)))
    return widened


def build_db_index(db_rows: List[List[Any]]) -> DbIndex:
    """
    Indexes the DB sheet by full key (code|config|rev) and partial key (code|config).

    Row 0 is the header and is ignored, as are rows too short to hold a key and
    rows with a blank code. A repeated full key replaces the earlier row.
    """
    prefix = "[build_db_index]"
    db_map: Dict[str, List[Any]] = {}
    db_partial_keys: Set[str] = set()
    duplicates = 0

    for row_index, row in enumerate(db_rows[1:], start=1):
        if not row or len(row) < cfg.DB_MIN_ROW_LENGTH:
            continue
        code = row[cfg.DB_CODE_COL]
        if not normalize(code):
            continue

        key = full_key(code, row[cfg.DB_CONFIG_COL], row[cfg.DB_REVISION_COL])
        if key in db_map:
            duplicates += 1
            logging.debug(f"{prefix} Duplicate key '{key}' at DB row {row_index + 1} replaces the earlier row.")
        db_map[key] = row
        db_partial_keys.add(partial_key(code, row[cfg.DB_CONFIG_COL]))

    if duplicates:
        logging.warning(f"{prefix} {duplicates} duplicate key(s) in DB; the last occurrence was kept.")
    logging.info(f"{prefix} Indexed {len(db_map)} DB record(s), {len(db_partial_keys)} code/config pair(s).")
    return db_map, db_partial_keys


def classify_row(bom_row: List[Any], db_index: DbIndex) -> Tuple[str, Optional[List[Any]]]:
    """
    Resolves the state of one BOM row against the DB index.

    Returns:
        (state, matched DB row or None)
    """
    db_map, db_partial_keys = db_index
    code = bom_row[cfg.BOM_CODE_COL]
    if not normalize(code):
        return STATE_UNKEYED, None

    configuration = bom_row[cfg.BOM_CONFIG_COL]
    db_row = db_map.get(full_key(code, configuration, bom_row[cfg.BOM_REVISION_COL]))
    if db_row is not None:
        return STATE_MATCHED, db_row
    if partial_key(code, configuration) in db_partial_keys:
        return STATE_MISSING_KNOWN_PARTIAL, None
    return STATE_MISSING_UNKNOWN, None


def _relabel_header(header: List[Any], include_description: bool):
    for col_index, label in cfg.HEADER_LABELS.items():
        header[col_index] = label
    if include_description:
        header[cfg.BOM_DESCRIPTION_COL] = cfg.DESCRIPTION_HEADER_LABEL


def _validate_inputs(db_rows, bom_rows, source_files, source_path):
    if not db_rows:
        raise InputValidationError("The DB file is empty or invalid.")
    if not bom_rows:
        raise InputValidationError("The BOM file is empty or invalid.")
    if source_files is not None and not (source_path or "").strip():
        raise InputValidationError(
            "A source path is required to generate the copy script (e.g. Z:\\Drawings)."
        )


def process_bom(
    db_rows: List[List[Any]],
    bom_rows: List[List[Any]],
    source_files: Optional[Iterable[str]] = None,
    source_path: str = cfg.DEFAULT_SOURCE_PATH,
    target_path: str = cfg.DEFAULT_TARGET_PATH,
    bom_file_name: str = "BOM.xlsx",
    include_description: bool = cfg.INCLUDE_DESCRIPTION_COLUMN
) -> ProcessedResult:
    """
    Reconciles the BOM against the DB and looks up the design files of every line.

    Each BOM row with a code is stamped with:
      - DB payload (cols H..L) and status 'OK' on a full code/config/rev match;
      - status 'needs addition to DB' otherwise, with note 'verify revision'
        when the code/config pair exists under another revision;
      - 'SI'/'NO' per extension family (PDF, DWG, STEP), searched in source_files.
    Rows with a blank code are left as they are.

    Args:
        db_rows: DB sheet rows, header first.
        bom_rows: BOM sheet rows, header first. Not modified.
        source_files: Flat list of file names available in the source folder, or None.
        source_path: Source folder as it must appear in the copy script.
        target_path: Target root folder for the copy script.
        bom_file_name: Original BOM file name, used to name the result.
        include_description: Also fill the 'Descrizione' column from the DB.

    Returns:
        Dict with 'data' (annotated rows), 'file_name', 'stats' and 'copy_script'.

    Raises:
        InputValidationError: If either sheet is empty, or a listing is given without a source path.
    """
    prefix = "[process_bom]"
    _validate_inputs(db_rows, bom_rows, source_files, source_path)
    logging.info(f"{prefix} Starting reconciliation of '{bom_file_name}' ({len(bom_rows) - 1} data row(s)).")

    db_index = build_db_index(db_rows)
    inventory = build_file_inventory(source_files or [])
    matcher = FileMatcher(inventory, source_path, target_path)

    min_columns = cfg.BOM_MIN_COLUMNS
    if include_description:
        min_columns = max(min_columns, cfg.BOM_DESCRIPTION_COL + 1)

    new_bom_data = [_widen_row(row, min_columns) for row in bom_rows]
    _relabel_header(new_bom_data[0], include_description)

    counts = {STATE_MATCHED: 0, STATE_MISSING_KNOWN_PARTIAL: 0, STATE_MISSING_UNKNOWN: 0, STATE_UNKEYED: 0}

    for row_index, row in enumerate(new_bom_data[1:], start=1):
        state, db_row = classify_row(row, db_index)
        counts[state] += 1
        if state == STATE_UNKEYED:
            continue

        if state == STATE_MATCHED:
            for db_col, bom_col in zip(cfg.DB_PAYLOAD_COLS, cfg.BOM_PAYLOAD_COLS):
                row[bom_col] = _cell(db_row, db_col)
            if include_description:
                row[cfg.BOM_DESCRIPTION_COL] = _cell(db_row, cfg.DB_DESCRIPTION_COL)
            row[cfg.BOM_STATUS_COL] = cfg.STATUS_OK
            row[cfg.BOM_NOTE_COL] = ''
        else:
            row[cfg.BOM_STATUS_COL] = cfg.STATUS_MISSING
            row[cfg.BOM_NOTE_COL] = cfg.NOTE_VERIFY_REVISION if state == STATE_MISSING_KNOWN_PARTIAL else ''
        logging.debug(f"{prefix} BOM row {row_index + 1}: {state}")

        base_name = derive_base_name(row[cfg.BOM_CODE_COL], row[cfg.BOM_CONFIG_COL], row[cfg.BOM_REVISION_COL])
        if not base_name:
            continue
        raw_revision = row[cfg.BOM_REVISION_COL]
        for family, flag_col in cfg.BOM_FILE_FLAG_COLS.items():
            found = matcher.match_family(base_name, raw_revision, family)
            row[flag_col] = cfg.FLAG_FOUND if found else cfg.FLAG_NOT_FOUND

    missing = counts[STATE_MISSING_KNOWN_PARTIAL] + counts[STATE_MISSING_UNKNOWN]
    stats = {
        'total_rows': counts[STATE_MATCHED] + missing,
        'matches': counts[STATE_MATCHED],
        'missing': missing,
        'revision_mismatch': counts[STATE_MISSING_KNOWN_PARTIAL],
        'skipped_rows': counts[STATE_UNKEYED],
        'files_found': matcher.files_found,
        'files_found_details': matcher.files_found_details,
    }
    logging.info(
        f"{prefix} Done. Rows: {stats['total_rows']}, matches: {stats['matches']}, missing: {stats['missing']} "
        f"(revision mismatch: {stats['revision_mismatch']}), skipped: {stats['skipped_rows']}, "
        f"files found: {stats['files_found']} {stats['files_found_details']}."
    )

    return {
        'data': new_bom_data,
        'file_name': f"{cfg.PROCESSED_FILE_PREFIX}{bom_file_name}",
        'stats': stats,
        'copy_script': copy_script.render_copy_script(matcher.copy_commands, source_path, target_path),
    }


def extract_missing_records(data: List[List[Any]]) -> List[List[Any]]:
    """Header plus the rows whose status asks for a DB addition."""
    if not data:
        return []
    missing_rows = [row for row in data[1:] if _cell(row, cfg.BOM_STATUS_COL) == cfg.STATUS_MISSING]
    logging.info(f"[extract_missing_records] {len(missing_rows)} row(s) need addition to DB.")
    return [data[0]] + missing_rows

# --- END OF FILE bom_processor.py ---
