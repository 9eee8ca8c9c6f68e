"""
Batch input handling and aggregation orchestration.

This module abstracts where the workbooks come from (Streamlit uploads, a
folder on disk) from the logic used to aggregate them. Each file is
processed independently on a worker thread; the results are then merged
sequentially in input order.
"""

import logging
import os
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Protocol

from src.bom_summary import constants as C
from src.bom_summary.errors import NoSupportedFilesError
from src.bom_summary.manager import merge_file_results
from src.bom_summary.parser import process_single_file
from src.bom_summary.types import BomConfig, ProcessedData, SingleFileResult

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str], None]


class UploadedFileLike(Protocol):
    """Anything with a name and byte contents (e.g. a Streamlit upload)."""

    name: str

    def getvalue(self) -> bytes: ...


@dataclass(frozen=True)
class InputFile:
    """An in-memory input file."""

    name: str
    content: bytes

    def getvalue(self) -> bytes:
        return self.content


def _no_progress(message: str) -> None:
    pass


def filter_supported_files(files: Iterable[UploadedFileLike]) -> list[UploadedFileLike]:
    """Keeps files ending in .xlsx or .xlsm (case-sensitive), in order."""
    return [f for f in files if f.name.endswith(C.SUPPORTED_EXTENSIONS)]


def process_excel_files(
    files: Iterable[UploadedFileLike],
    on_progress: ProgressCallback | None = None,
    config: BomConfig | None = None,
    max_workers: int | None = None,
) -> ProcessedData:
    """
    Aggregates a batch of BOM workbooks into one ProcessedData.

    Args:
        files: The batch. Unsupported extensions are ignored.
        on_progress: Called with a status line before each file is queued
            and once more before merging.
        config: Extraction and tiering settings.
        max_workers: Thread pool size (defaults to the batch size, capped
            at the CPU count).

    Returns:
        The merged aggregate.

    Raises:
        NoSupportedFilesError: If no .xlsx/.xlsm files are in the batch.
        NoBomDataError: If no part rows were found in any file.
    """
    config = config or BomConfig()
    report = on_progress or _no_progress

    excel_files = filter_supported_files(files)
    if not excel_files:
        raise NoSupportedFilesError(
            "No .xlsx or .xlsm files were found in the selected folder."
        )

    total = len(excel_files)
    workers = max_workers or min(total, os.cpu_count() or 1)

    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = []
        for index, f in enumerate(excel_files):
            report(f"Processing file {index + 1} of {total}: {f.name}")
            futures.append(
                executor.submit(process_single_file, f.name, f.getvalue(), config)
            )
        results: list[SingleFileResult] = [future.result() for future in futures]

    failed = [r for r in results if r["error"]]
    if failed:
        logger.warning(f"{len(failed)} of {total} files could not be read")

    report("Merging results...")
    return merge_file_results(results, config)


def load_folder(folder: str) -> list[InputFile]:
    """
    Reads every regular file in a folder (non-recursive) into memory.

    Files are returned sorted by name; filtering by extension is left to
    `process_excel_files`.
    """
    files = []
    for name in sorted(os.listdir(folder)):
        path = os.path.join(folder, name)
        if not os.path.isfile(path):
            continue
        with open(path, "rb") as fh:
            files.append(InputFile(name=name, content=fh.read()))
    return files
