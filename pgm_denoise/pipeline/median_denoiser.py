"""
Median Denoiser Pipeline
Reads every .pgm file of a folder, applies the 3x3 median filter and writes
'<stem>_modified.pgm' into the output folder, one file at a time.
"""

import os
import logging
from pathlib import Path
from typing import Callable, TypeVar, Union
from dotenv import load_dotenv

from ..models.batch_report import BatchReport
from ..models.errors import BatchStepError, PgmError
from ..services.image_service import ImageService
from ..services.median_filter_service import MedianFilterService

# Load environment variables
load_dotenv()

OUTPUT_SUFFIX = os.getenv("PGM_OUTPUT_SUFFIX", "_modified")
CONFIRMATION = "Filtro de mediana aplicado e salvo em {}"

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _run_step(step: str, source: Path, action: Callable[..., T], *args) -> T:
    try:
        return action(*args)
    except PgmError as err:
        raise BatchStepError(source, step, err) from err


def denoise_file(
    source: Union[str, Path],
    output_dir: Union[str, Path],
    *,
    image_service: ImageService,
    filter_service: MedianFilterService,
    suffix: str = OUTPUT_SUFFIX,
) -> str:
    """
    Read -> filter -> write a single file.

    Returns:
        str: The output path, as printed.

    Raises:
        BatchStepError: naming the file and the failing step ('read', 'filter' or 'write').
    """
    source = Path(source)
    img = _run_step("read", source, image_service.load, source)
    filtered = _run_step("filter", source, filter_service.apply, img)

    output_path = image_service.output_path(output_dir, source, suffix)
    _run_step("write", source, image_service.save, filtered, output_path)

    print(CONFIRMATION.format(output_path))
    return output_path


def denoise_directory(
    input_dir: Union[str, Path],
    output_dir: Union[str, Path],
    *,
    image_service: ImageService = ImageService(),
    filter_service: MedianFilterService = MedianFilterService(),
    suffix: str = OUTPUT_SUFFIX,
    stop_on_error: bool = True,
) -> BatchReport:
    """
    Apply the median filter to every .pgm regular file directly inside input_dir.

    Files are handled in directory listing order. By default the first failing
    file aborts the whole batch (the BatchStepError propagates). With
    stop_on_error=False the failure is logged, recorded in the report and the
    remaining files are still processed.

    Args:
        input_dir: Folder to scan (not recursive).
        output_dir: Created with parents if missing.
        image_service: Service for PGM I/O.
        filter_service: Service applying the median filter.
        suffix: Appended to each output file stem.
        stop_on_error: Abort on the first failing file.

    Returns:
        BatchReport: Written paths and, in continue mode, the failures.
    """
    image_service.prepare_output_dir(output_dir)
    report = BatchReport()

    for source in image_service.stream_gallery(input_dir):
        try:
            output_path = denoise_file(source, output_dir, image_service=image_service,
                                       filter_service=filter_service, suffix=suffix)
        except BatchStepError as err:
            if stop_on_error:
                raise
            logger.error(f"Skipping {source.name}: {err}")
            report.failures.append((source, err))
            continue
        report.written.append(Path(output_path))

    logger.info(f"Processed {len(report.written)} file(s) from {input_dir}, {len(report.failures)} failure(s)")
    return report
