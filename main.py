# --- START OF FILE main.py ---

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import config as cfg
import bom_processor
import copy_script
from excel_handler import ExcelHandler, ExcelParseError, ExcelReadError, ExcelWriteError, write_rows
from file_matcher import list_source_files


def configure_logging(verbose: bool = False):
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format='%(asctime)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s')
    else:
        logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')


def _load_rows(file_path: str):
    handler = ExcelHandler(file_path)
    try:
        return handler.load_rows()
    finally:
        handler.close()


def write_outputs(
    result: Dict[str, Any],
    output_dir: Path,
    with_copy_script: bool,
    export_only_12_cols: bool = cfg.EXPORT_ONLY_12_COLS
) -> Dict[str, Optional[str]]:
    """
    Saves the annotated BOM, the missing-records extract and the copy script.

    The extract is skipped when no row is missing; the script is skipped when
    no source listing was used. Every file is first written under a temporary
    name and only moved into place once all of them were written, so a failed
    write leaves existing outputs untouched.

    Returns:
        Paths written, keyed 'processed', 'missing' and 'script' (None when skipped).
    """
    column_limit = cfg.EXPORT_COLUMN_LIMIT if export_only_12_cols else None
    written: Dict[str, Optional[str]] = {'processed': None, 'missing': None, 'script': None}
    # kind -> (temporary path, final path)
    pending: Dict[str, Tuple[Path, Path]] = {}

    def _temp_path(final_path: Path) -> Path:
        return final_path.with_name(f"{cfg.TEMP_FILE_PREFIX}{final_path.name}")

    try:
        processed_path = output_dir / result['file_name']
        pending['processed'] = (_temp_path(processed_path), processed_path)
        write_rows(result['data'], str(pending['processed'][0]), cfg.RESULT_SHEET_NAME,
                   column_limit=column_limit, style_header=export_only_12_cols)

        missing_rows = bom_processor.extract_missing_records(result['data'])
        if len(missing_rows) > 1:
            clean_name = result['file_name'].replace(cfg.PROCESSED_FILE_PREFIX, "", 1)
            missing_path = output_dir / f"{cfg.MISSING_FILE_PREFIX}{clean_name}"
            pending['missing'] = (_temp_path(missing_path), missing_path)
            write_rows(missing_rows, str(pending['missing'][0]), cfg.RESULT_SHEET_NAME,
                       column_limit=column_limit, style_header=export_only_12_cols)
        else:
            logging.info("No missing records; extract not written.")

        if with_copy_script:
            script_path = output_dir / copy_script.script_file_name(result['file_name'])
            pending['script'] = (_temp_path(script_path), script_path)
            copy_script.write_copy_script(result['copy_script'], str(pending['script'][0]))
    except (ExcelWriteError, OSError):
        for temp_path, _ in pending.values():
            if temp_path.exists():
                temp_path.unlink()
        logging.error("Writing the outputs failed; existing output files were left unchanged.")
        raise

    for kind, (temp_path, final_path) in pending.items():
        os.replace(temp_path, final_path)
        written[kind] = str(final_path)
    return written


def run_reconciliation(
    db_path: str,
    bom_path: str,
    source_dir: Optional[str] = None,
    source_path: Optional[str] = None,
    target_path: str = cfg.DEFAULT_TARGET_PATH,
    output_dir_override: Optional[str] = None,
    export_only_12_cols: bool = cfg.EXPORT_ONLY_12_COLS,
    include_description: bool = cfg.INCLUDE_DESCRIPTION_COLUMN
) -> Dict[str, Any]:
    """
    Reads both workbooks, reconciles them and writes the outputs.

    Nothing is written unless the whole reconciliation succeeds.

    Returns:
        The processed result of bom_processor.process_bom plus an 'outputs' entry.

    Raises:
        ExcelReadError, ExcelParseError, ExcelWriteError, bom_processor.ProcessingError, FileNotFoundError
    """
    logging.info("--- Starting BOM Reconciliation ---")

    db_rows = _load_rows(db_path)
    bom_rows = _load_rows(bom_path)

    source_files = None
    if source_dir:
        source_files = list_source_files(source_dir)
        if source_path is None:
            source_path = source_dir
            logging.info(f"No source path given, using the listed directory: {source_path}")

    result = bom_processor.process_bom(
        db_rows,
        bom_rows,
        source_files=source_files,
        source_path=source_path or cfg.DEFAULT_SOURCE_PATH,
        target_path=target_path,
        bom_file_name=os.path.basename(bom_path),
        include_description=include_description,
    )

    output_dir = Path(output_dir_override).resolve() if output_dir_override else Path(os.getcwd())
    output_dir.mkdir(parents=True, exist_ok=True)
    logging.info(f"Using output directory: {output_dir}")

    result['outputs'] = write_outputs(result, output_dir, source_files is not None, export_only_12_cols)
    logging.info("--- BOM Reconciliation Finished Successfully ---")
    return result


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Reconcile a BOM workbook against the master DB workbook and build a copy script for the drawing files.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument("--db", required=True, help="Path to the master DB Excel file.")
    parser.add_argument("--bom", required=True, help="Path to the BOM Excel file to reconcile.")
    parser.add_argument("--source-dir", default=None,
                        help="Folder holding the PDF/DWG/STEP files (listed non-recursively).")
    parser.add_argument("--source-path", default=None,
                        help="Source folder as written in the copy script (e.g. Z:\\Disegni). Defaults to --source-dir.")
    parser.add_argument("--target-path", default=cfg.DEFAULT_TARGET_PATH,
                        help="Target root folder written in the copy script.")
    parser.add_argument("--output-dir", default=None,
                        help="Directory for the output files. Defaults to the current working directory.")
    parser.add_argument("--export-only-12-cols", action="store_true", default=cfg.EXPORT_ONLY_12_COLS,
                        help="Export only columns A..L with a styled header and auto-filter.")
    parser.add_argument("--with-description", action="store_true", default=cfg.INCLUDE_DESCRIPTION_COLUMN,
                        help="Add the 'Descrizione' column filled from the DB.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable DEBUG logging.")
    args = parser.parse_args(argv)

    configure_logging(args.verbose)

    try:
        result = run_reconciliation(
            args.db,
            args.bom,
            source_dir=args.source_dir,
            source_path=args.source_path,
            target_path=args.target_path,
            output_dir_override=args.output_dir,
            export_only_12_cols=args.export_only_12_cols,
            include_description=args.with_description,
        )
    except (ExcelReadError, ExcelParseError) as e:
        logging.error(f"Input file error: {e}")
        return 1
    except bom_processor.ProcessingError as e:
        logging.error(f"Processing halted: {e}")
        return 1
    except FileNotFoundError as e:
        logging.error(f"Source folder error: {e}")
        return 1
    except (ExcelWriteError, OSError) as e:
        logging.error(f"Output error: {e}")
        return 1

    stats = result['stats']
    details = stats['files_found_details']
    logging.info(f"Rows: {stats['total_rows']} | OK: {stats['matches']} | Missing: {stats['missing']} "
                 f"| Verify revision: {stats['revision_mismatch']}")
    logging.info(f"Files found: {stats['files_found']} (PDF {details['pdf']}, DWG {details['dwg']}, STEP {details['stp']})")
    for kind, path in result['outputs'].items():
        if path:
            logging.info(f"Output ({kind}): {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

# --- END OF FILE main.py ---
