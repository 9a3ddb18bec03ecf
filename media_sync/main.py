#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Main CLI entry point for the media sync tool.
"""

import argparse
import logging
import os
import sys
from pathlib import Path

from .catalog.http_client import HttpCatalogClient
from .commands.upload import UploadCommand
from .config import DEFAULT_DEVICE_ID, DEFAULT_TIMEOUT_SECONDS, DEFAULT_WORKERS, ENV_API_KEY, ENV_DEVICE_ID, ENV_SERVER
from .errors import MediaSyncError, RunCancelled
from .jsonio import enable_json_logging, error, success
from .reconcile.options import UploadOptions
from .utils.time import DateRange


def setup_logging(verbose: bool):
    """Configure logging for the CLI tool."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)]
    )
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.debug("Verbose logging enabled (DEBUG level).")


def _bool(value: str) -> bool:
    v = value.strip().lower()
    if v in ("1", "true", "yes", "on"):
        return True
    if v in ("0", "false", "no", "off"):
        return False
    raise argparse.ArgumentTypeError(f"expected true or false, got {value!r}")


def _date_range(value: str) -> DateRange:
    try:
        return DateRange.parse(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e))


def _ext_list(value: str):
    return [v for v in value.split(",") if v.strip()]


def create_parser():
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        description="Media Sync - upload a local photo library to a remote catalog without duplicates",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""Examples:
  # Preview what would be uploaded
  %(prog)s --server http://photos:2283 --key XXXX upload --dry-run ~/Pictures

  # Upload, one album per folder, 8 workers
  %(prog)s upload --create-album-folder --workers 8 ~/Pictures

  # Only 2023, machine readable summary
  %(prog)s --json upload --date 2023 ~/Pictures
        """
    )

    # Global options
    parser.add_argument("--server", default=os.getenv(ENV_SERVER),
                        help=f"Catalog server URL (default: ${ENV_SERVER})")
    parser.add_argument("--key", default=os.getenv(ENV_API_KEY),
                        help=f"API key (default: ${ENV_API_KEY})")
    parser.add_argument("--device-id", default=os.getenv(ENV_DEVICE_ID, DEFAULT_DEVICE_ID),
                        help="Device id sent with uploads")
    parser.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT_SECONDS,
                        help=f"HTTP timeout in seconds (default: {DEFAULT_TIMEOUT_SECONDS})")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Enable verbose (DEBUG) output")
    parser.add_argument("--json", action="store_true",
                        help="Output results as JSON instead of human-readable text")

    subparsers = parser.add_subparsers(dest="command", required=True, help="Available commands")
    _add_upload_parser(subparsers)
    return parser


def _add_upload_parser(subparsers):
    """Add upload command parser."""
    p = subparsers.add_parser("upload", help="Upload folders to the server")
    p.add_argument("paths", nargs="+", help="Folders to upload")
    p.add_argument("--dry-run", action="store_true",
                   help="Display actions but don't touch source or destination")
    p.add_argument("--date", type=_date_range, default=DateRange(),
                   help="Capture date range: YYYY, YYYY-MM, YYYY-MM-DD or start,end")
    p.add_argument("--album", default="",
                   help="All assets will be added to this album")
    p.add_argument("--create-album-folder", action="store_true",
                   help="Create albums for assets based on the parent folder")
    p.add_argument("--create-albums", type=_bool, default=True,
                   help="Create albums like there were in the source (default: true)")
    p.add_argument("--partner-album", default="",
                   help="Assets from partner will be added to this album")
    p.add_argument("--keep-partner", type=_bool, default=True,
                   help="Import also partner's items (default: true)")
    p.add_argument("--keep-trashed", action="store_true",
                   help="Import trashed assets")
    p.add_argument("--keep-untitled-albums", action="store_true",
                   help="Keep untitled albums and import their content")
    p.add_argument("--use-album-folder-as-name", action="store_true",
                   help="Use folder name and ignore albums' title")
    p.add_argument("--from-album", default="",
                   help="Import only from this album")
    p.add_argument("--create-stacks", type=_bool, default=True,
                   help="Stack jpg/raw or bursts (default: true)")
    p.add_argument("--delete", action="store_true",
                   help="Delete local files once they are on the server")
    p.add_argument("--workers", type=int, default=DEFAULT_WORKERS,
                   help=f"Number of parallel workers (default: {DEFAULT_WORKERS})")
    p.add_argument("--select-types", type=_ext_list, default=[],
                   help="Comma separated list of extensions to upload")
    p.add_argument("--exclude-types", type=_ext_list, default=[],
                   help="Comma separated list of extensions to skip")
    p.add_argument("--no-progress", action="store_true",
                   help="Hide the progress bar")


def options_from_args(args) -> UploadOptions:
    return UploadOptions(
        dry_run=args.dry_run,
        delete_local=args.delete,
        create_albums=args.create_albums,
        create_album_after_folder=args.create_album_folder,
        import_into_album=args.album,
        partner_album=args.partner_album,
        keep_partner=args.keep_partner,
        keep_trashed=args.keep_trashed,
        keep_untitled=args.keep_untitled_albums,
        use_folder_as_album_name=args.use_album_folder_as_name,
        import_from_album=args.from_album,
        create_stacks=args.create_stacks,
        workers=args.workers,
        date_range=args.date,
        select_types=set(args.select_types),
        exclude_types=set(args.exclude_types),
        show_progress=not (args.no_progress or args.json),
    )


def main(argv=None):
    """Main CLI entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.json:
        enable_json_logging()
    else:
        setup_logging(args.verbose)

    logging.debug("Parsed arguments: %s", args)

    if not args.server or not args.key:
        message = f"server URL and API key are required (--server/--key or ${ENV_SERVER}/${ENV_API_KEY})"
        if args.json:
            return error(args.command, message, code=2)
        logging.error(message)
        return 2

    command = None
    try:
        if args.command == "upload":
            options = options_from_args(args)
            client = HttpCatalogClient(args.server, args.key, device_id=args.device_id, timeout=args.timeout)
            command = UploadCommand(client, options, quiet=args.json)
            report = command.execute([Path(p) for p in args.paths])
            if args.json:
                return success(args.command, report.to_dict(), meta={"options": options.to_dict()})
            return 0

    except (KeyboardInterrupt, RunCancelled):
        if command is not None:
            command.cancel()
        if args.json:
            return error(args.command, "Operation interrupted by user", code=130)
        logging.warning("Operation interrupted by user.")
        return 130
    except MediaSyncError as e:
        if args.json:
            debug_info = {"exception_type": type(e).__name__} if args.verbose else None
            partial = command.report if command is not None else None
            return error(args.command, str(e), debug=debug_info, data=partial, code=1)
        logging.error("Error occurred: %s", e, exc_info=args.verbose)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
