"""Service implementations for browsing, archiving and deleting remote photos."""

import tempfile
import threading
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from .archive import ArchiveBuilder
from .error_handling import BatchOperationContextManager
from .exceptions import (
    EmptyFolderError,
    EmptyInputError,
    ExtractionError,
    GalleryError,
    NoTargetsError,
    OperationCancelledError,
    RemoteFetchError,
)
from .http_client import RemoteFetchClient
from .image_utils import (
    file_name_from_url,
    read_exif_record,
    sanitize_path_component,
)
from .listing import normalize_base_url, parse_folders, parse_images
from .metadata import build_flight_metadata, format_sidecar
from .models import (
    ArchiveResult,
    BulkOperationResult,
    FlightMetadata,
    FolderEntry,
    FolderExportReport,
    FolderExportResult,
    ImageEntry,
    SkippedImage,
    TargetResult,
)
from .observability import LogContext, logged_operation
from .protocols import DestinationChooser, Headers, LoggerProtocol, MetadataReaderProtocol

Destination = Optional[Union[str, Path]]
FolderLike = Union[FolderEntry, Mapping[str, Any]]


def _check_cancelled(cancel_event: Optional[threading.Event]) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise OperationCancelledError("Operation cancelled")


class RemoteListingService:
    """Lists folders and images of the device's directory index."""

    def __init__(self, fetch_client: RemoteFetchClient, logger: LoggerProtocol):
        self._fetch_client = fetch_client
        self._logger = logger

    def list_folders(self, base_url: str) -> List[FolderEntry]:
        url = normalize_base_url(base_url)
        self._logger.debug(f"Listing folders at {url}")
        folders = parse_folders(self._fetch_client.get_text(url), url)
        self._logger.info(f"Found {len(folders)} folders at {url}")
        return folders

    def list_images(self, folder_url: str) -> List[ImageEntry]:
        url = normalize_base_url(folder_url)
        self._logger.debug(f"Listing images at {url}")
        images = parse_images(self._fetch_client.get_text(url), url)
        self._logger.info(f"Found {len(images)} images at {url}")
        return images


class MetadataExtractorService:
    """Reads capture metadata from an image already stored on disk."""

    def __init__(self, reader: Optional[MetadataReaderProtocol] = None):
        self._reader = reader or read_exif_record

    def extract(self, path: Union[str, Path]) -> FlightMetadata:
        try:
            record = self._reader(str(path))
        except ExtractionError:
            raise
        except Exception as e:  # noqa: BLE001
            raise ExtractionError(f"Cannot read metadata from {Path(path).name}: {e}") from e
        return build_flight_metadata(record)


class ArchiveAssemblerService:
    """
    Builds ZIP archives of remote photos with a metadata sidecar per photo.

    Photos are fetched and processed one at a time. With the default
    ``abort`` policy the first failure ends the call and nothing is written;
    with ``skip`` failed photos are reported in ``ArchiveResult.skipped``.
    A ``None`` destination means the user cancelled the save dialog and the
    call does nothing.
    """

    def __init__(
        self,
        fetch_client: RemoteFetchClient,
        listing_service: RemoteListingService,
        metadata_extractor: MetadataExtractorService,
        logger: LoggerProtocol,
        on_image_error: str = "abort",
    ):
        self._fetch_client = fetch_client
        self._listing_service = listing_service
        self._metadata_extractor = metadata_extractor
        self._logger = logger
        self._on_image_error = on_image_error

    def assemble_one(
        self,
        image_url: str,
        destination: Destination,
        cancel_event: Optional[threading.Event] = None,
    ) -> Optional[ArchiveResult]:
        """Archive a single photo and its sidecar."""
        if destination is None:
            self._logger.info("Save cancelled, nothing to do")
            return None
        return self._build([(image_url, "")], destination, "assemble_one", cancel_event)

    def assemble_folder(
        self,
        folder_url: str,
        destination: Destination,
        cancel_event: Optional[threading.Event] = None,
    ) -> Optional[ArchiveResult]:
        """Archive every photo of one folder."""
        if destination is None:
            self._logger.info("Save cancelled, nothing to do")
            return None

        images = self._listing_service.list_images(folder_url)
        if not images:
            raise EmptyFolderError(folder_url)

        jobs = [(image.url, "") for image in images]
        return self._build(jobs, destination, "assemble_folder", cancel_event)

    def assemble_multi_folder(
        self,
        folders: Sequence[FolderLike],
        destination: Destination,
        cancel_event: Optional[threading.Event] = None,
    ) -> Optional[ArchiveResult]:
        """Archive the photos of several folders, grouped by folder name."""
        entries = [f if isinstance(f, FolderEntry) else FolderEntry(**f) for f in folders or []]
        if not entries:
            raise EmptyInputError("No folders selected")
        if destination is None:
            self._logger.info("Save cancelled, nothing to do")
            return None

        jobs: List[Tuple[str, str]] = []
        for folder in entries:
            _check_cancelled(cancel_event)
            prefix = sanitize_path_component(folder.name)
            images = self._listing_service.list_images(folder.url)
            if not images:
                self._logger.warning(f"Folder {folder.name} holds no images, skipping")
                continue
            jobs.extend((image.url, prefix) for image in images)

        if not jobs:
            raise EmptyFolderError()
        return self._build(jobs, destination, "assemble_multi_folder", cancel_event)

    def assemble_photos(
        self,
        photo_urls: Sequence[str],
        destination: Destination,
        prefix: str = "",
        cancel_event: Optional[threading.Event] = None,
    ) -> Optional[ArchiveResult]:
        """Archive an explicit selection of photos under one shared prefix."""
        if not photo_urls:
            raise EmptyInputError()
        if destination is None:
            self._logger.info("Save cancelled, nothing to do")
            return None

        jobs = [(url, prefix) for url in photo_urls]
        return self._build(jobs, destination, "assemble_photos", cancel_event)

    def save_image(self, image_url: str, destination: Destination) -> Optional[Path]:
        """Download one photo as is, without metadata."""
        if destination is None:
            self._logger.info("Save cancelled, nothing to do")
            return None
        data = self._fetch_client.get_bytes(image_url)
        target = Path(destination)
        target.write_bytes(data)
        self._logger.info(f"Saved {image_url} to {target}")
        return target

    def export_folders(
        self,
        folders: Sequence[FolderLike],
        chooser: DestinationChooser,
        cancel_event: Optional[threading.Event] = None,
    ) -> FolderExportReport:
        """
        Archive each folder into its own file.

        The chooser is asked for a destination per folder; a folder whose
        destination is cancelled or whose archive fails is reported and the
        next folder is processed.
        """
        entries = [f if isinstance(f, FolderEntry) else FolderEntry(**f) for f in folders or []]
        if not entries:
            raise EmptyInputError("No folders selected")

        results: List[FolderExportResult] = []
        with BatchOperationContextManager(f"Export of {len(entries)} folder(s)") as batch:
            for folder in entries:
                _check_cancelled(cancel_event)
                suggested = f"{sanitize_path_component(folder.name or 'folder')}.zip"
                zip_path = chooser.choose(suggested)
                if not zip_path:
                    results.append(FolderExportResult(url=folder.url, ok=False, note="skipped by user"))
                    continue
                try:
                    archive = self.assemble_folder(folder.url, zip_path, cancel_event)
                except OperationCancelledError:
                    raise
                except GalleryError as e:
                    batch.add_error(str(e), folder.url)
                    results.append(FolderExportResult(url=folder.url, ok=False, note=str(e)))
                    continue
                results.append(
                    FolderExportResult(
                        url=folder.url, ok=True, zip_path=archive.zip_path, count=archive.count
                    )
                )

        if batch.has_errors:
            self._logger.warning(
                f"{len(batch.failed_items)} folder(s) could not be exported",
                failed=", ".join(batch.failed_items),
            )
        return FolderExportReport.from_results(results)

    def _build(
        self,
        jobs: Sequence[Tuple[str, str]],
        destination: Union[str, Path],
        operation: str,
        cancel_event: Optional[threading.Event],
    ) -> ArchiveResult:
        builder = ArchiveBuilder()
        skipped: List[SkippedImage] = []
        first_error: Optional[GalleryError] = None
        count = 0

        with logged_operation(
            operation,
            self._logger,
            component="archive_assembler",
            images=len(jobs),
            destination=str(destination),
        ) as context:
            with tempfile.TemporaryDirectory(prefix="remote-gallery-") as scratch_dir:
                for url, prefix in jobs:
                    _check_cancelled(cancel_event)
                    try:
                        self._process_image(builder, url, prefix, Path(scratch_dir), context)
                    except GalleryError as e:
                        if self._on_image_error != "skip":
                            raise
                        self._logger.warning(f"Skipping {url}: {e}", context)
                        skipped.append(SkippedImage(url=url, error=str(e)))
                        first_error = first_error or e
                        continue
                    count += 1

            if count == 0 and first_error is not None:
                raise first_error

            target = builder.write(destination)
            self._logger.info("Archive written", context, count=count, skipped=len(skipped))

        return ArchiveResult(
            zip_path=str(target), count=count, entries=builder.names, skipped=skipped
        )

    def _process_image(
        self,
        builder: ArchiveBuilder,
        url: str,
        prefix: str,
        scratch_dir: Path,
        context: LogContext,
    ) -> None:
        file_name = file_name_from_url(url)
        image_context = context.with_metadata(file=file_name)

        self._logger.debug("Downloading image", image_context.with_operation("download_image"))
        image_bytes = self._fetch_client.get_bytes(url)

        scratch_file = scratch_dir / (sanitize_path_component(file_name) or "image")
        scratch_file.write_bytes(image_bytes)

        self._logger.debug("Extracting metadata", image_context.with_operation("extract_metadata"))
        metadata = self._metadata_extractor.extract(scratch_file)

        builder.add_image(file_name, image_bytes, format_sidecar(file_name, metadata), prefix)


class BulkOperationService:
    """Runs a remote operation against many targets, isolating each failure."""

    def __init__(self, fetch_client: RemoteFetchClient, logger: LoggerProtocol):
        self._fetch_client = fetch_client
        self._logger = logger

    def delete_targets(
        self,
        urls: Iterable[str],
        headers: Optional[Headers] = None,
        force_trailing_slash: bool = True,
        cancel_event: Optional[threading.Event] = None,
    ) -> BulkOperationResult:
        """
        DELETE every URL in ``urls``.

        Args:
            urls: Remote targets, processed in order
            headers: Extra request headers
            force_trailing_slash: Append "/" to each target (folders)
            cancel_event: When set, remaining targets are reported as cancelled

        Returns:
            Per-target results; ``ok`` only when every target succeeded
        """
        if not isinstance(urls, (list, tuple)) or not urls:
            raise NoTargetsError()

        results: List[TargetResult] = []
        with logged_operation(
            "delete_targets", self._logger, component="bulk", targets=len(urls)
        ) as context, BatchOperationContextManager(f"Delete of {len(urls)} target(s)") as batch:
            for raw in urls:
                url = str(raw)
                target = normalize_base_url(url) if force_trailing_slash else url

                if cancel_event is not None and cancel_event.is_set():
                    results.append(TargetResult(url=target, ok=False, error="Operation cancelled"))
                    batch.add_error("Operation cancelled", target)
                    continue

                try:
                    response = self._fetch_client.delete(
                        url, headers, force_trailing_slash=force_trailing_slash
                    )
                except RemoteFetchError as e:
                    results.append(
                        TargetResult(url=target, ok=False, status=e.status, body=e.body)
                    )
                    batch.add_error(f"HTTP {e.status}", target)
                    continue
                except Exception as e:  # noqa: BLE001
                    results.append(TargetResult(url=url, ok=False, error=str(e)))
                    batch.add_error(str(e), url)
                    continue

                self._logger.debug(f"Deleted {target}", context)
                results.append(TargetResult(url=target, ok=True, status=response.status_code))

        if batch.has_errors:
            self._logger.warning(
                f"{len(batch.failed_items)} of {len(urls)} target(s) not deleted",
                context,
                failed=", ".join(batch.failed_items),
            )
        return BulkOperationResult.from_results(results)

    def delete_folders(
        self,
        urls: Iterable[str],
        headers: Optional[Headers] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> BulkOperationResult:
        return self.delete_targets(urls, headers, True, cancel_event)

    def delete_images(
        self,
        urls: Iterable[str],
        headers: Optional[Headers] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> BulkOperationResult:
        return self.delete_targets(urls, headers, False, cancel_event)
