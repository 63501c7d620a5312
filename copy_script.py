# --- START OF FILE copy_script.py ---
# Renders the Windows batch script that copies the located drawing/model files
# into <target>\PDF, <target>\DWG and <target>\STEP.

import logging
from typing import Iterable, List

import config as cfg


def build_copy_command(source_path: str, target_path: str, subfolder: str, real_name: str) -> str:
    """One guarded copy: skipped silently if the source file is gone."""
    source_file = f"{source_path}\\{real_name}"
    return f'if exist "{source_file}" copy "{source_file}" "{target_path}\\{subfolder}\\{real_name}" > nul'


def render_copy_script(
    copy_commands: Iterable[str],
    source_path: str,
    target_path: str,
    subfolders: Iterable[str] = tuple(cfg.EXTENSION_FAMILIES)
) -> str:
    """
    Builds the full script text.

    Args:
        copy_commands: Commands from build_copy_command, already de-duplicated, in output order.
        source_path: Folder the files are copied from (for the echo line).
        target_path: Root folder created by the script.
        subfolders: One sub-folder per extension family.

    Returns:
        The script text, CRLF separated, without a trailing newline.
    """
    lines: List[str] = [
        '@echo off',
        'chcp 65001 > nul',
        f'echo Copying files from "{source_path}" to "{target_path}"...',
        f'if not exist "{target_path}" mkdir "{target_path}"',
    ]
    for subfolder in subfolders:
        lines.append(f'if not exist "{target_path}\\{subfolder}" mkdir "{target_path}\\{subfolder}"')
    lines.append('')

    commands = list(copy_commands)
    lines.extend(commands)

    lines.append('')
    lines.append('echo Operation completed.')
    lines.append('pause')
    logging.debug(f"Rendered copy script with {len(commands)} copy command(s)")
    return cfg.SCRIPT_LINE_ENDING.join(lines)


def script_file_name(processed_file_name: str) -> str:
    """'PROCESSED_BOM.xlsx' -> 'COPIA_FILE_BOM.bat'"""
    clean_name = processed_file_name.replace(cfg.PROCESSED_FILE_PREFIX, "", 1)
    for suffix in cfg.SCRIPT_NAME_STRIP_SUFFIXES:
        clean_name = clean_name.replace(suffix, "", 1)
    return f"{cfg.SCRIPT_FILE_PREFIX}{clean_name}{cfg.SCRIPT_FILE_EXTENSION}"


def write_copy_script(script_text: str, output_path: str) -> str:
    """Writes the script as UTF-8, keeping its CRLF line endings untouched."""
    with open(output_path, 'w', encoding=cfg.SCRIPT_ENCODING, newline='') as f:
        f.write(script_text)
    logging.info(f"Saved copy script to '{output_path}'")
    return output_path

# --- END OF FILE copy_script.py ---
