#!/usr/bin/env python3
"""
Cleanup script for MapReduce reducer outputs.
Removes output_<index>.txt artifacts (and leftover temporary files from
interrupted writes) from an output directory.
"""

import re
import sys
import argparse
from pathlib import Path

from threadmr.client.monitoring import format_size
from threadmr.common.config import PipelineConfig

OUTPUT_NAME = re.compile(r"^output_\d+\.txt$")
TEMP_NAME = re.compile(r"^\.tmp-.*\.txt$")


def find_output_files(directory: Path) -> list:
    """Reducer artifacts and temporary files in directory, sorted by name"""
    if not directory.is_dir():
        return []
    return sorted(item for item in directory.iterdir()
                  if item.is_file() and (OUTPUT_NAME.match(item.name) or TEMP_NAME.match(item.name)))


def cleanup_directory(directory: Path, dry_run: bool = False):
    """
    Remove reducer artifacts from a directory.

    Args:
        directory: Path to the directory to clean
        dry_run: If True, only show what would be deleted without actually deleting

    Returns:
        tuple: (files_deleted, bytes_freed)
    """
    if not directory.exists():
        print(f"  ⚠️  Directory does not exist: {directory}")
        return 0, 0

    files_deleted = 0
    bytes_freed = 0

    for item in find_output_files(directory):
        file_size = item.stat().st_size
        if dry_run:
            print(f"    Would delete: {item.name} ({file_size} bytes)")
        else:
            try:
                item.unlink()
            except OSError as e:
                print(f"    ❌ Error deleting {item.name}: {e}")
                continue
        files_deleted += 1
        bytes_freed += file_size

    return files_deleted, bytes_freed


def main(argv=None):
    """Main cleanup function."""
    parser = argparse.ArgumentParser(
        description="Clean up MapReduce output files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                    # Clean $THREADMR_OUTPUT_DIR (or .)
  %(prog)s results/           # Clean a specific directory
  %(prog)s --dry-run          # Show what would be deleted without deleting
        """
    )
    parser.add_argument(
        'directory',
        nargs='?',
        help='Output directory (default: $THREADMR_OUTPUT_DIR or .)'
    )
    parser.add_argument(
        '--dry-run', '-n',
        action='store_true',
        help='Show what would be deleted without actually deleting'
    )

    args = parser.parse_args(argv)
    directory = Path(args.directory or PipelineConfig.from_env().output_dir)

    print("=" * 70)
    print("MapReduce Output Cleanup")
    print("=" * 70)

    if args.dry_run:
        print("🔍 DRY RUN MODE - No files will be deleted")

    print(f"\n📁 Cleaning: {directory}")
    files, bytes_freed = cleanup_directory(directory, dry_run=args.dry_run)

    print("\n" + "=" * 70)
    if args.dry_run:
        print(f"DRY RUN: Would delete {files} files ({format_size(bytes_freed)})")
    else:
        print(f"✓ Cleanup complete: {files} files deleted ({format_size(bytes_freed)})")
    print("=" * 70)
    return 0


if __name__ == "__main__":
    sys.exit(main())
