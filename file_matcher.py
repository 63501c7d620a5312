# --- START OF FILE file_matcher.py ---

import logging
import os
import re
from typing import Any, Dict, Iterable, List, Set, Tuple

import config as cfg
import copy_script

_ILLEGAL_CHARS_RE = re.compile(cfg.ILLEGAL_FILENAME_CHARS_PATTERN)
_SINGLE_DIGIT_RE = re.compile(r"^\d$")

# Exact-name map (UPPERCASE name -> real name) and ordered list of real DWG names
FileInventory = Tuple[Dict[str, str], List[str]]


def cell_text(value: Any) -> str:
    """Stringifies a cell value; integral floats lose their '.0' (1.0 -> '1')."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def normalize(value: Any) -> str:
    """Canonical comparison form of a cell: trimmed, uppercase, '' for empty."""
    return cell_text(value).strip().upper()


def list_source_files(directory: str) -> List[str]:
    """
    Lists the names of the regular files directly inside a directory.

    Sub-directories are not entered. Names are returned sorted so that the
    inventory (and therefore the DWG scan order) is stable between runs.
    """
    if not os.path.isdir(directory):
        logging.error(f"Source directory not found: {directory}")
        raise FileNotFoundError(f"The directory '{directory}' was not found.")
    with os.scandir(directory) as entries:
        names = sorted(entry.name for entry in entries if entry.is_file())
    logging.info(f"Listed {len(names)} file(s) in '{directory}'")
    return names


def build_file_inventory(file_names: Iterable[str]) -> FileInventory:
    """
    Indexes candidate file names by their uppercase form.

    Only names whose suffix after the last dot is one of cfg.ALLOWED_EXTENSIONS
    (case-insensitive) are kept. DWG names are also collected, in encounter
    order, for prefix searching.
    """
    prefix = "[build_file_inventory]"
    available_files: Dict[str, str] = {}
    dwg_files: List[str] = []
    ignored = 0

    for name in file_names:
        if not name:
            continue
        name_upper = name.upper()
        dot_index = name_upper.rfind('.')
        if dot_index == -1:
            ignored += 1
            continue
        extension = name_upper[dot_index + 1:]
        if extension not in cfg.ALLOWED_EXTENSIONS:
            ignored += 1
            continue
        # Keep the real name to preserve case in the copy command
        available_files[name_upper] = name
        if extension in cfg.PREFIX_MATCH_EXTENSIONS:
            dwg_files.append(name)

    logging.info(f"{prefix} Indexed {len(available_files)} file(s) ({len(dwg_files)} DWG). Ignored {ignored}.")
    return available_files, dwg_files


def _join_base_name(raw_code: str, raw_config: str, raw_revision: str) -> str:
    if normalize(raw_code) == normalize(raw_config):
        base_name = f"{raw_code}{raw_revision}"
    else:
        base_name = f"{raw_code}_{raw_config}{raw_revision}"
    return _ILLEGAL_CHARS_RE.sub("", base_name)


def derive_base_name(code: Any, configuration: Any, revision: Any) -> str:
    """
    Builds the file name stem searched for a BOM line.

    Code equal to configuration (case-insensitive) gives CODE+REV
    (e.g. 'BA102262A'); otherwise CODE_CONFIG+REV (e.g. 'BA001218_RP000005-01A').
    Characters not allowed in Windows file names are removed.

    Returns:
        The stem, or '' when the code is blank.
    """
    raw_code = cell_text(code).strip()
    if not raw_code:
        return ""
    return _join_base_name(raw_code, cell_text(configuration).strip(), cell_text(revision).strip())


def pad_revision_base_name(base_name: str, raw_revision: Any) -> str:
    """
    Swaps a single-digit trailing revision for its zero-padded form
    ('...-1' -> '...-01'). Returns '' when padding does not apply.
    """
    revision = cell_text(raw_revision).strip()
    if not _SINGLE_DIGIT_RE.match(revision) or not base_name.endswith(revision):
        return ""
    return base_name[:-len(revision)] + revision.zfill(cfg.PADDED_REVISION_WIDTH)


class FileMatcher:
    """
    Resolves base names against a file inventory and collects what it finds.

    Every resolved file is counted once (by real name) globally and per
    extension family, and yields one copy command. Commands keep the order in
    which they were first produced.
    """
    def __init__(self, inventory: FileInventory, source_path: str, target_path: str):
        self.available_files, self.dwg_files = inventory
        self.source_path = source_path
        self.target_path = target_path
        self._found_files: Set[str] = set()
        self._found_by_family: Dict[str, Set[str]] = {family: set() for family in cfg.EXTENSION_FAMILIES}
        self._copy_commands: Dict[str, None] = {}

    def _search(self, base_name: str, extension: str) -> List[str]:
        if not base_name:
            return []
        if extension in cfg.PREFIX_MATCH_EXTENSIONS:
            base_upper = base_name.upper()
            return [name for name in self.dwg_files if name.upper().startswith(base_upper)]
        real_name = self.available_files.get(f"{base_name}.{extension}".upper())
        return [real_name] if real_name else []

    def match(self, base_name: str, raw_revision: Any, extension: str) -> List[str]:
        """
        Finds the real file names for a base name and one extension.

        DWG is prefix-matched, everything else must match exactly
        (case-insensitive). With no hit and a single-digit revision the search
        is repeated with the revision padded to two digits.
        """
        extension = extension.upper()
        found = self._search(base_name, extension)
        if not found:
            padded_base_name = pad_revision_base_name(base_name, raw_revision)
            if padded_base_name:
                found = self._search(padded_base_name, extension)
                if found:
                    logging.debug(f"Matched '{padded_base_name}.{extension}' through revision padding")
        return found

    def match_family(self, base_name: str, raw_revision: Any, family: str) -> List[str]:
        """
        Tries each extension of a family in order and records the first hit.

        Returns:
            The real file names found (empty if none).
        """
        for extension in cfg.EXTENSION_FAMILIES[family]:
            found = self.match(base_name, raw_revision, extension)
            if found:
                for real_name in found:
                    self._record(real_name, family)
                return found
        return []

    def _record(self, real_name: str, family: str):
        self._found_files.add(real_name)
        self._found_by_family[family].add(real_name)
        command = copy_script.build_copy_command(self.source_path, self.target_path, family, real_name)
        if command not in self._copy_commands:
            self._copy_commands[command] = None

    @property
    def files_found(self) -> int:
        return len(self._found_files)

    @property
    def files_found_details(self) -> Dict[str, int]:
        return {cfg.FAMILY_STATS_KEYS[family]: len(names) for family, names in self._found_by_family.items()}

    @property
    def copy_commands(self) -> List[str]:
        return list(self._copy_commands)

# --- END OF FILE file_matcher.py ---
