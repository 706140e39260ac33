import os
from dataclasses import dataclass
from typing import Optional, Tuple

DEFAULT_EXTENSIONS: Tuple[str, ...] = (".txt", ".a3da")
EXTENSIONS_ENV_VAR = "DOTLINE_EXTENSIONS"


def parse_extensions(text: str) -> Tuple[str, ...]:
    """Parses a comma-separated extension list, adding missing leading dots."""
    extensions = []
    for item in text.split(","):
        item = item.strip()
        if not item:
            continue
        extensions.append(item if item.startswith(".") else f".{item}")
    return tuple(extensions)


def resolve_extensions(cli_value: Optional[str] = None) -> Tuple[str, ...]:
    """Picks the document extensions from the CLI, the environment, or the default."""
    raw = cli_value or os.environ.get(EXTENSIONS_ENV_VAR)
    if raw:
        parsed = parse_extensions(raw)
        if parsed:
            return parsed
    return DEFAULT_EXTENSIONS


@dataclass
class MergeOptions:
    """A data class to hold all settings for a directory merge run.

    Attributes:
        input_dir: The directory whose documents are copied or merged.
        output_dir: The directory receiving the results.
        no_overwrite: If True, documents that already exist in the output
            directory are left untouched.
        quiet: If True, suppresses all informational output.
        dry_run: If True, reports what would happen without writing files.
        debug: If True, prints extra diagnostics (and, in dry-run mode, the
            merged documents) to stderr.
        extensions: File extensions treated as dotline documents.
    """
    input_dir: str
    output_dir: str
    no_overwrite: bool = False
    quiet: bool = False
    dry_run: bool = False
    debug: bool = False
    extensions: Tuple[str, ...] = DEFAULT_EXTENSIONS

    def is_document(self, file_name: str) -> bool:
        return file_name.lower().endswith(tuple(ext.lower() for ext in self.extensions))
