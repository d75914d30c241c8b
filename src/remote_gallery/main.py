"""Main module for the remote gallery CLI."""

import sys
import json
import argparse
from typing import Callable, Dict, List, Optional

from . import __version__
from .core import (
    FolderEntry,
    GalleryConfig,
    GalleryError,
    filter_folders,
    get_logger,
    setup_logger,
)
from .core.destinations import ConsoleDestinationChooser, FixedDestinationChooser
from .core.factories import GalleryServiceFactory, GalleryServices
from .core.image_utils import file_name_from_url, suggest_folder_name, suggest_one_name
from .core.protocols import DestinationChooser

DEFAULT_PACKAGE_NAME = "photo_package.zip"


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with one sub-command per operation."""
    parser = argparse.ArgumentParser(
        prog="remote-gallery",
        description="Browse, archive and delete photos on a camera's HTTP file server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # List capture folders
  remote-gallery --base-url http://192.168.4.1:8000 folders

  # Download a whole folder with metadata sidecars
  remote-gallery zip-folder http://192.168.4.1:8000/09_October_2025_16-10/ -o flight.zip

  # Delete two folders on the device
  remote-gallery delete-folders http://192.168.4.1:8000/01/ http://192.168.4.1:8000/02/
        """,
    )
    parser.add_argument("--base-url", default=None, help="Device listing URL (env GALLERY_BASE_URL)")
    parser.add_argument("--timeout", type=float, default=None, help="Request timeout in seconds")
    parser.add_argument(
        "--on-image-error",
        choices=["abort", "skip"],
        default=None,
        help="What an archive does when one photo fails (default: abort)",
    )
    parser.add_argument("--log-file", default=None, help="Mirror log output to this file")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    folders_parser = subparsers.add_parser("folders", help="List capture folders")
    folders_parser.add_argument("--query", default="", help="Only folders whose name contains this")
    folders_parser.add_argument("--json", action="store_true", help="Print JSON")

    images_parser = subparsers.add_parser("images", help="List photos of a folder")
    images_parser.add_argument("folder_url")
    images_parser.add_argument("--json", action="store_true", help="Print JSON")

    def add_destination(sub: argparse.ArgumentParser) -> None:
        sub.add_argument("-o", "--output", default=None, help="Destination file")
        sub.add_argument("--dir", default=".", help="Directory for the suggested file name")
        sub.add_argument("--no-prompt", action="store_true", help="Accept the suggested file name")

    zip_one = subparsers.add_parser("zip-one", help="Archive one photo with its metadata")
    zip_one.add_argument("image_url")
    add_destination(zip_one)

    zip_folder = subparsers.add_parser("zip-folder", help="Archive every photo of a folder")
    zip_folder.add_argument("folder_url")
    add_destination(zip_folder)

    zip_folders = subparsers.add_parser("zip-folders", help="Archive several folders into one file")
    zip_folders.add_argument("folder_urls", nargs="+")
    add_destination(zip_folders)

    zip_photos = subparsers.add_parser("zip-photos", help="Archive a selection of photos")
    zip_photos.add_argument("photo_urls", nargs="+")
    zip_photos.add_argument("--prefix", default="", help="Folder inside the archive")
    add_destination(zip_photos)

    export = subparsers.add_parser("export-folders", help="Archive each folder into its own file")
    export.add_argument("folder_urls", nargs="+")
    export.add_argument("--dir", default=".", help="Directory for the archives")
    export.add_argument("--no-prompt", action="store_true", help="Accept the suggested file names")

    save_image = subparsers.add_parser("save-image", help="Download one photo as is")
    save_image.add_argument("image_url")
    add_destination(save_image)

    for name, help_text in (
        ("delete-folders", "Delete folders on the device"),
        ("delete-images", "Delete photos on the device"),
    ):
        delete_parser = subparsers.add_parser(name, help=help_text)
        delete_parser.add_argument("urls", nargs="+")
        delete_parser.add_argument(
            "-H", "--header", action="append", default=[], help="Extra header as 'Name: value'"
        )

    subparsers.add_parser("version", help="Show version information")
    return parser


def make_chooser(args: argparse.Namespace) -> DestinationChooser:
    if args.no_prompt:
        return FixedDestinationChooser(args.dir)
    return ConsoleDestinationChooser(args.dir)


def resolve_destination(args: argparse.Namespace, suggested_name: str) -> Optional[str]:
    """Explicit ``--output`` wins, otherwise the chooser is asked."""
    if args.output:
        return args.output
    return make_chooser(args).choose(suggested_name)


def parse_headers(raw_headers: List[str]) -> Dict[str, str]:
    headers: Dict[str, str] = {}
    for raw in raw_headers:
        name, sep, value = raw.partition(":")
        if not sep or not name.strip():
            raise GalleryError(f"Invalid header {raw!r}, expected 'Name: value'")
        headers[name.strip()] = value.strip()
    return headers


def _folder_from_url(url: str) -> FolderEntry:
    return FolderEntry(name=file_name_from_url(url) or "folder", url=url)


def cmd_folders(services: GalleryServices, args: argparse.Namespace) -> int:
    folders = services.listing.list_folders(services.config.base_url)
    folders = filter_folders(folders, args.query)
    if args.json:
        print(json.dumps([f.model_dump() for f in folders], indent=2))
    else:
        for folder in folders:
            print(f"{folder.name}\t{folder.url}")
    return 0


def cmd_images(services: GalleryServices, args: argparse.Namespace) -> int:
    images = services.listing.list_images(args.folder_url)
    if args.json:
        print(json.dumps([i.model_dump() for i in images], indent=2))
    else:
        for image in images:
            print(f"{image.name}\t{image.url}")
    return 0


def _report_archive(result) -> int:
    if result is None:
        print("Cancelled")
        return 0
    print(f"Saved: {result.zip_path} ({result.count} photos)")
    for skipped in result.skipped:
        print(f"Skipped: {skipped.url} ({skipped.error})")
    return 0


def cmd_zip_one(services: GalleryServices, args: argparse.Namespace) -> int:
    destination = resolve_destination(args, suggest_one_name(args.image_url))
    return _report_archive(services.archive.assemble_one(args.image_url, destination))


def cmd_zip_folder(services: GalleryServices, args: argparse.Namespace) -> int:
    destination = resolve_destination(args, suggest_folder_name(args.folder_url))
    return _report_archive(services.archive.assemble_folder(args.folder_url, destination))


def cmd_zip_folders(services: GalleryServices, args: argparse.Namespace) -> int:
    folders = [_folder_from_url(url) for url in args.folder_urls]
    destination = resolve_destination(args, DEFAULT_PACKAGE_NAME)
    return _report_archive(services.archive.assemble_multi_folder(folders, destination))


def cmd_zip_photos(services: GalleryServices, args: argparse.Namespace) -> int:
    destination = resolve_destination(args, DEFAULT_PACKAGE_NAME)
    result = services.archive.assemble_photos(args.photo_urls, destination, prefix=args.prefix)
    return _report_archive(result)


def cmd_export_folders(services: GalleryServices, args: argparse.Namespace) -> int:
    folders = [_folder_from_url(url) for url in args.folder_urls]
    report = services.archive.export_folders(folders, make_chooser(args))
    succeeded = [r for r in report.results if r.ok]
    print(f"Downloaded: {len(succeeded)}/{len(report.results)}")
    for result in report.results:
        if result.ok:
            print(f"  {result.url} -> {result.zip_path} ({result.count} photos)")
        else:
            print(f"  {result.url} failed ({result.note or 'error'})")
    return 0 if report.ok else 1


def cmd_save_image(services: GalleryServices, args: argparse.Namespace) -> int:
    destination = resolve_destination(args, file_name_from_url(args.image_url) or "photo")
    target = services.archive.save_image(args.image_url, destination)
    print(f"Saved: {target}" if target else "Cancelled")
    return 0


def cmd_delete(services: GalleryServices, args: argparse.Namespace) -> int:
    headers = parse_headers(args.header)
    if args.command == "delete-folders":
        result = services.bulk.delete_folders(args.urls, headers)
    else:
        result = services.bulk.delete_images(args.urls, headers)

    if result.ok:
        print(f"Deleted {len(result.results)} target(s)")
        return 0
    failed = ", ".join(f"{r.url} ({r.status or r.error})" for r in result.failed)
    print(f"Not all targets were deleted: {failed}")
    return 1


COMMANDS: Dict[str, Callable[[GalleryServices, argparse.Namespace], int]] = {
    "folders": cmd_folders,
    "images": cmd_images,
    "zip-one": cmd_zip_one,
    "zip-folder": cmd_zip_folder,
    "zip-folders": cmd_zip_folders,
    "zip-photos": cmd_zip_photos,
    "export-folders": cmd_export_folders,
    "save-image": cmd_save_image,
    "delete-folders": cmd_delete,
    "delete-images": cmd_delete,
}


def main(argv: Optional[List[str]] = None) -> None:
    """
    Entry point for the remote gallery command-line interface.

    Parses arguments, builds the configuration and services, and dispatches
    to the handler of the chosen sub-command. Gallery errors are logged and
    turn into exit code 1.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "version":
        print("Remote Gallery CLI")
        print(f"Version {__version__}")
        sys.exit(0)
        return

    handler = COMMANDS.get(args.command)
    if handler is None:
        parser.print_help()
        sys.exit(1)
        return

    logger = setup_logger(
        "remote-gallery", level="DEBUG" if args.debug else None, log_file=args.log_file
    )

    try:
        config = GalleryConfig.from_env(
            base_url=args.base_url,
            request_timeout=args.timeout,
            on_image_error=args.on_image_error,
            debug=args.debug or None,
        )
        services = GalleryServiceFactory.create_services(config)
        exit_code = handler(services, args)
    except KeyboardInterrupt:
        logger.warning("Interrupted by user.")
        exit_code = 130
    except GalleryError as e:
        get_logger("remote-gallery").error(f"{args.command} failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        exit_code = 1

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
