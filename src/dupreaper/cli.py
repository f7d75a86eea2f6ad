#!/usr/bin/env python3
"""
dupreaper CLI — remove files from "delete" folders that already exist in "keep" folders.
Files are compared by size first and by full-content digest second; delete folders are
also deduplicated against themselves, always leaving one copy of every content.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import logging
import os
import sys
import time
from pathlib import Path
from typing import Any, Dict, List, Optional, NoReturn

from dupreaper.aliases import (
    STRATEGY_ALIASES, STRATEGY_CHOICES, STRATEGY_HELP_TEXT,
    PRUNE_ALIASES, PRUNE_CHOICES, PRUNE_HELP_TEXT,
    ALGORITHM_CHOICES, EPILOG_TEXT
)
from dupreaper.commands import DeduplicationCommand
from dupreaper.config import load_config_file
from dupreaper.core.errors import FatalScanError
from dupreaper.core.models import DeduplicationParams, DeduplicationReport, PruneScope, ResolutionStrategy
from dupreaper.services.file_service import FileService
from dupreaper.utils.convert_utils import ConvertUtils

LOG_FORMAT = "%(levelname)-8s | %(name)-25s | %(message)s"

# Values used when neither the command line nor the config file sets an option
DEFAULTS: Dict[str, Any] = {
    "keep": [],
    "delete": [],
    "prune": "none",
    "prune_roots": False,
    "extensions": [],
    "excluded_dirs": [],
    "min_size": "0",
    "max_size": None,
    "strategy": "bucket",
    "algorithm": "sha512",
    "workers": None,
    "trash": False,
    "skip_symlinks": False,
}


class CLIApplication:
    """Main CLI application controller."""

    def __init__(self):
        self.start_time: float = time.time()
        self.verbose: bool = False
        self.quiet: bool = False

        # Fix encoding for Windows consoles to prevent UnicodeEncodeError
        for stream in (sys.stdout, sys.stderr):
            if hasattr(stream, "reconfigure"):
                stream.reconfigure(encoding='utf-8')

    @staticmethod
    def parse_args(args=None) -> argparse.Namespace:
        """Parse command-line arguments. Unset options stay None so config values can fill them."""
        parser = argparse.ArgumentParser(
            prog="dupreaper",
            description="dupreaper — Delete redundant copies of files you already keep",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )

        # Root sets
        parser.add_argument(
            "--keep", "-k",
            nargs="+",
            default=None,
            metavar='DIR',
            help="Directories whose files are never deleted (reference copies)"
        )
        parser.add_argument(
            "--delete", "-d",
            nargs="+",
            default=None,
            metavar='DIR',
            help="Directories scanned for redundant copies to delete"
        )
        parser.add_argument(
            "--config", "-c",
            default=None,
            metavar='FILE',
            help="TOML file with default settings (command-line options win)"
        )

        # Filtering options
        parser.add_argument(
            "--extensions", "-x",
            nargs="+",
            default=None,
            metavar='',
            help="File extensions (space separated) to include (e.g., .jpg .png)"
        )
        parser.add_argument(
            "--excluded-dirs", '-e',
            nargs="+",
            default=None,
            metavar='',
            dest="excluded_dirs",
            help="Excluded/ignored directories (space separated)"
        )
        parser.add_argument(
            "--min-size", "-m",
            default=None,
            metavar='',
            dest="min_size",
            help="Minimum file size (e.g., 500KB, 1MB). Default: 0"
        )
        parser.add_argument(
            "--max-size", "-M",
            default=None,
            metavar='',
            dest="max_size",
            help="Maximum file size (e.g., 10MB, 1GB). Default: no limit"
        )
        parser.add_argument(
            "--skip-symlinks",
            action="store_true",
            default=None,
            dest="skip_symlinks",
            help="Ignore symbolic links instead of following them"
        )

        # Resolution options
        parser.add_argument(
            "--strategy",
            choices=STRATEGY_CHOICES,
            default=None,
            help=STRATEGY_HELP_TEXT
        )
        parser.add_argument(
            "--algorithm",
            choices=ALGORITHM_CHOICES,
            default=None,
            help="Content digest algorithm. Default: sha512"
        )
        parser.add_argument(
            "--workers", "-j",
            type=int,
            default=None,
            metavar='N',
            help="Worker threads for metadata reads and hashing. Default: CPU count + 4 (max 32)"
        )

        # Actions
        parser.add_argument(
            "--prune",
            choices=PRUNE_CHOICES,
            default=None,
            help=PRUNE_HELP_TEXT
        )
        parser.add_argument(
            "--prune-roots",
            action="store_true",
            default=None,
            dest="prune_roots",
            help="Allow --prune to remove a root directory itself once it is empty"
        )
        parser.add_argument(
            "--trash",
            action="store_true",
            default=None,
            help="Move redundant files to the system trash instead of deleting them"
        )
        parser.add_argument(
            "--dry-run", "-n",
            action="store_true",
            dest="dry_run",
            help="Only show which files would be deleted"
        )
        parser.add_argument(
            "--force",
            action="store_true",
            help="Skip confirmation prompt (for automation/scripts)"
        )

        # Output options
        parser.add_argument(
            "--quiet", "-q",
            action="store_true",
            help="Suppress non-essential output"
        )
        parser.add_argument(
            "--verbose", "-v",
            action="store_true",
            help="Show detailed statistics and per-file diagnostics"
        )

        return parser.parse_args(args)

    def configure_logging(self) -> None:
        """Route diagnostics to stderr; -v shows every hash, -q only errors."""
        logging.basicConfig(level=logging.WARNING, format=LOG_FORMAT)
        if self.verbose:
            level = logging.DEBUG
        elif self.quiet:
            level = logging.ERROR
        else:
            level = logging.WARNING
        logging.getLogger("dupreaper").setLevel(level)

    def merge_settings(self, args: argparse.Namespace) -> Dict[str, Any]:
        """Combine built-in defaults, config file values and command-line options."""
        settings = dict(DEFAULTS)
        if args.config:
            try:
                settings.update(load_config_file(args.config))
            except ValueError as e:
                self.error_exit(str(e))

        for key in DEFAULTS:
            value = getattr(args, key, None)
            if value is not None:
                settings[key] = value
        return settings

    def validate_settings(self, settings: Dict[str, Any], args: argparse.Namespace) -> None:
        """Validate merged settings before execution."""
        if not settings["delete"]:
            self.error_exit("At least one delete directory is required (--delete DIR)")

        # Prevent interactive confirmation in non-TTY environments
        if not args.force and not args.dry_run:
            if not sys.stdin.isatty() or not sys.stdout.isatty():
                self.error_exit(
                    "Cannot request interactive confirmation in non-interactive session.\n"
                    "Use --force to proceed without confirmation, or --dry-run to preview."
                )

        for label in ("keep", "delete"):
            for directory in settings[label]:
                path = Path(directory).expanduser()
                if not path.exists():
                    self.error_exit(f"{label.capitalize()} directory not found: {directory}")

        for excl_dir in settings["excluded_dirs"]:
            excl_path = Path(excl_dir).expanduser()
            if not excl_path.exists():
                self.warning(f"Excluded directory not found: {excl_dir}")
            elif not excl_path.is_dir():
                self.warning(f"Excluded path is not a directory: {excl_dir}")

        if settings["strategy"] not in STRATEGY_ALIASES:
            self.error_exit(
                f"Invalid strategy: '{settings['strategy']}'.\n"
                f"Valid options: {', '.join(STRATEGY_CHOICES)}"
            )
        if settings["prune"] not in PRUNE_ALIASES:
            self.error_exit(
                f"Invalid prune scope: '{settings['prune']}'.\n"
                f"Valid options: {', '.join(PRUNE_CHOICES)}"
            )
        if settings["algorithm"] not in ALGORITHM_CHOICES:
            self.error_exit(
                f"Invalid algorithm: '{settings['algorithm']}'.\n"
                f"Valid options: {', '.join(ALGORITHM_CHOICES)}"
            )

    def create_params(self, settings: Dict[str, Any]) -> DeduplicationParams:
        """Create DeduplicationParams from merged settings."""
        try:
            min_size_bytes = ConvertUtils.human_to_bytes(settings["min_size"])
            max_size_bytes = (
                ConvertUtils.human_to_bytes(settings["max_size"]) if settings["max_size"] else None
            )

            return DeduplicationParams(
                keep_dirs=tuple(settings["keep"]),
                delete_dirs=tuple(settings["delete"]),
                prune_scope=PRUNE_ALIASES.get(settings["prune"], PruneScope.NONE),
                prune_roots=bool(settings["prune_roots"]),
                extensions=tuple(settings["extensions"]),
                excluded_dirs=tuple(settings["excluded_dirs"]),
                min_size_bytes=min_size_bytes,
                max_size_bytes=max_size_bytes,
                skip_symlinks=bool(settings["skip_symlinks"]),
                strategy=STRATEGY_ALIASES.get(settings["strategy"], ResolutionStrategy.BUCKET),
                algorithm=settings["algorithm"],
                workers=settings["workers"],
            )
        except ValueError as e:
            self.error_exit(f"Parameter error: {e}")

    def output_plan(self, report: DeduplicationReport) -> None:
        """Print every file the run would delete."""
        if self.quiet:
            return

        plan = report.plan
        if not plan:
            print("No redundant files found.")
            return

        print(f"\nFound {len(plan)} redundant file(s) ({ConvertUtils.bytes_to_human(plan.total_bytes)})")
        print("-" * 60)
        for path in plan.paths:
            print(f"   [DEL]  {path}")
            print(f"          Size: {ConvertUtils.bytes_to_human(plan.entries[path])}")
        print("=" * 60)

        if report.hash_failures:
            print(f"⚠️  {len(report.hash_failures)} file(s) could not be read and were left alone")

    def confirm(self, report: DeduplicationReport, trash: bool) -> bool:
        """Ask before deleting. Returns False if the user declines."""
        # Safety check: confirm we're still in interactive mode
        if not sys.stdin.isatty() or not sys.stdout.isatty():
            self.error_exit(
                "Lost interactive terminal during operation. "
                "Use --force to proceed in non-interactive environments."
            )
        verb = "move" if trash else "permanently delete"
        target = " to trash" if trash else ""
        response = input(f"Are you sure you want to {verb} {len(report.plan)} files{target}? [y/N]: ")
        if response.strip().lower() not in ("y", "yes"):
            print("Deletion cancelled by user.")
            return False
        return True

    def output_summary(self, report: DeduplicationReport, trash: bool) -> None:
        """Report what was deleted, what failed and which directories were pruned."""
        if report.failed_deletions:
            print(
                f"\n⚠️  Partial success: {len(report.deleted)}/{len(report.plan)} files "
                f"{'moved to trash' if trash else 'deleted'}.",
                file=sys.stderr
            )
            print(f"Failed to delete {len(report.failed_deletions)} file(s):", file=sys.stderr)
            for path, error in report.failed_deletions[:5]:  # Show first 5 errors
                print(f"  • {path}: {error}", file=sys.stderr)
            if len(report.failed_deletions) > 5:
                print(f"  ...and {len(report.failed_deletions) - 5} more files", file=sys.stderr)
        elif report.deleted and not self.quiet:
            print(
                f"✅ Successfully {'moved' if trash else 'deleted'} {len(report.deleted)} files"
                f"{' to trash' if trash else ''}."
            )

        if not self.quiet:
            if report.deleted:
                print(f"Total space freed: {ConvertUtils.bytes_to_human(report.bytes_freed)}")
            if report.pruned_dirs:
                print(f"Removed {len(report.pruned_dirs)} empty directories.")

        if self.verbose:
            print()
            print(report.stats.print_summary())

    def warning(self, message: str) -> None:
        """Print a warning message to stderr."""
        if not self.quiet:
            print(f"⚠️  {message}", file=sys.stderr)

    @staticmethod
    def error_exit(message: str, code: int = 1) -> NoReturn:
        """Print error and exit."""
        print(f"❌ Error: {message}", file=sys.stderr)
        sys.exit(code)

    def run(self, argv: Optional[List[str]] = None) -> int:
        """Main entry point. Returns the process exit status."""
        args = self.parse_args(argv)
        self.verbose = args.verbose
        self.quiet = args.quiet
        self.configure_logging()

        settings = self.merge_settings(args)
        self.validate_settings(settings, args)
        params = self.create_params(settings)

        trash = bool(settings["trash"])
        delete_action = FileService.move_to_trash if trash else FileService.remove_file
        command = DeduplicationCommand(delete_action=delete_action)

        if not self.quiet:
            print(f"Keep directories:   {', '.join(params.keep_dirs) or '(none)'}")
            print(f"Delete directories: {', '.join(params.delete_dirs)}")

        try:
            report = command.find(params)
        except FatalScanError as e:
            self.error_exit(str(e))

        self.output_plan(report)

        if args.dry_run:
            if not self.quiet and report.plan:
                print("Dry run: no files were deleted.")
            return 0

        if report.plan and not args.force:
            if not self.confirm(report, trash):
                return 0
        elif report.plan and not self.quiet:
            print("⚠️  WARNING: --force flag skips confirmation. Proceeding with deletion...")

        report = command.apply(params, report)
        self.output_summary(report, trash)

        elapsed = time.time() - self.start_time
        if self.verbose:
            print(f"\n✅ Completed in {elapsed:.2f} seconds")

        return 2 if report.has_failures else 0


def main() -> None:
    """Application entry point."""
    app = CLIApplication()
    try:
        sys.exit(app.run())
    except KeyboardInterrupt:
        print("\n⚠️  Operation cancelled by user (Ctrl+C)")
        sys.exit(130)
    except Exception as e:
        if os.environ.get("DEBUG"):
            raise
        print(f"❌ Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
