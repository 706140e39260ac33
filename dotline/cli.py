import argparse
import os
import shutil
import sys
from typing import List, Tuple

from tqdm import tqdm

from . import __version__
from . import color_console as cc
from .exceptions import DotlineError
from .merge import merge_documents
from .options import EXTENSIONS_ENV_VAR, MergeOptions, resolve_extensions


def _collect_documents(options: MergeOptions) -> List[Tuple[str, str]]:
    """Lists `(input_path, output_path)` pairs for every document under the input directory."""
    pairs = []
    for root, dirs, files in os.walk(options.input_dir):
        dirs.sort()
        relative_path = os.path.relpath(root, options.input_dir)
        output_root = os.path.normpath(os.path.join(options.output_dir, relative_path))
        for file in sorted(files):
            if options.is_document(file):
                pairs.append((os.path.join(root, file), os.path.join(output_root, file)))
    return pairs


def merge_file(input_path: str, output_path: str, options: MergeOptions) -> None:
    """Merges the document at `input_path` into the existing one at `output_path`.

    The input document takes precedence: its values are kept, and values
    only the existing output defines are added.
    """
    with open(input_path, 'r', encoding='utf-8') as f:
        input_content = f.read()
    with open(output_path, 'r', encoding='utf-8') as f:
        output_content = f.read()

    merged = merge_documents(input_content, output_content)
    cc.print_debug(f"'{output_path}': {merged.count(chr(10))} line(s) after merge", options.debug)

    if options.dry_run:
        if options.debug:
            cc.print_document(merged, f"Merged {output_path}", quiet=options.quiet)
        return
    with open(output_path, 'w', encoding='utf-8') as f:
        f.write(merged)


def process_directories(options: MergeOptions) -> int:
    """Walks through the input directory and copies or merges its documents.

    This function recursively scans `options.input_dir`. For each document
    (a file with one of `options.extensions`) it either copies it to the
    corresponding location in `options.output_dir` or, if a file already
    exists at the destination, merges the two with `merge_documents`.

    Args:
        options: The settings for this run.

    Returns:
        The number of documents that could not be processed.
    """
    failures = 0
    documents = _collect_documents(options)
    cc.print_debug(f"Found {len(documents)} document(s) in '{options.input_dir}'", options.debug)

    with tqdm(total=len(documents), desc="Processing", unit="file", disable=options.quiet) as pbar:
        for input_path, output_path in documents:
            output_root = os.path.dirname(output_path)
            if not os.path.exists(output_root):
                cc.print_info(f"Creating directory '{output_root}'", quiet=options.quiet)
                if not options.dry_run:
                    os.makedirs(output_root)

            if os.path.exists(output_path):
                if options.no_overwrite:
                    cc.print_warning(f"Skipping existing file '{output_path}'", quiet=options.quiet)
                    pbar.update(1)
                    continue

                cc.print_info(f"Merging '{input_path}' into '{output_path}'...", quiet=options.quiet)
                try:
                    merge_file(input_path, output_path, options)
                except (DotlineError, OSError) as e:
                    failures += 1
                    cc.print_error(f"Error merging file {input_path}: {e}")
            else:
                cc.print_info(f"Copying '{input_path}' to '{output_path}'...", quiet=options.quiet)
                if not options.dry_run:
                    try:
                        shutil.copy2(input_path, output_path)
                    except OSError as e:
                        failures += 1
                        cc.print_error(f"Error copying file {input_path}: {e}")
            pbar.update(1)

    return failures


def main():
    """Defines the command-line interface and executes the main logic.

    Sets up `argparse` to handle the input and output directories along with
    the options controlling the run (`--no-overwrite`, `--quiet`,
    `--dry-run`, `--debug`, `--extensions`), validates the input directory
    and calls `process_directories`. Exits with status 1 if the input
    directory is missing or any document failed.
    """
    parser = argparse.ArgumentParser(description="Recursively copy and merge dotline documents.")
    parser.add_argument("input_dir", help="The input directory.")
    parser.add_argument("output_dir", help="The output directory.")
    parser.add_argument("-n", "--no-overwrite", action="store_true", help="Do not merge into existing files in the output directory.")
    parser.add_argument("-q", "--quiet", action="store_true", help="Suppress informational messages.")
    parser.add_argument("--dry-run", action="store_true", help="Show what would be done without actually modifying files.")
    parser.add_argument("--debug", action="store_true", help="Print diagnostics to stderr (and merged documents in dry-run mode).")
    parser.add_argument("--extensions", default=None, help=f"Comma-separated document extensions (env: {EXTENSIONS_ENV_VAR}; default: .txt,.a3da).")
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    args = parser.parse_args()

    if not os.path.isdir(args.input_dir):
        cc.print_error(f"Error: Input directory not found at '{args.input_dir}'")
        sys.exit(1)

    options = MergeOptions(
        input_dir=args.input_dir,
        output_dir=args.output_dir,
        no_overwrite=args.no_overwrite,
        quiet=args.quiet,
        dry_run=args.dry_run,
        debug=args.debug,
        extensions=resolve_extensions(args.extensions),
    )

    try:
        failures = process_directories(options)
    except OSError as e:
        cc.print_error(f"\n---FATAL ERROR---\n{e}\n-------------------\n")
        sys.exit(1)

    if failures:
        cc.print_error(f"\nProcessing finished with {failures} error(s).")
        sys.exit(1)
    cc.print_success("\nProcessing complete.", quiet=options.quiet)


if __name__ == "__main__":
    main()
