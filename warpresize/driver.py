import logging
import math
import os

from pathlib import Path
from typing import Iterator

from warpresize.errors import DirectoryError
from warpresize.models.image import FileTask, create_file_task
from warpresize.rendering.resampler import compute_target_dimensions, resize_image
from warpresize.utils.image import decode_image, encode_png

logger = logging.getLogger(__name__)

DEFAULT_SCALE_FACTOR = 0.3

def iter_file_tasks(indir: Path, outdir: Path) -> Iterator[FileTask]:
    """
    Yield a task for every regular file directly inside `indir`.

    Symlinks are followed: a link to a file is converted, a link to a
    directory is skipped. Directories are skipped silently; other entries
    that are not regular files (FIFOs, sockets, device nodes, dangling links)
    are skipped with a notice. Order is whatever the filesystem yields.
    """
    try:
        with os.scandir(indir) as entries:
            for entry in entries:
                try:
                    is_dir = entry.is_dir()
                    is_file = not is_dir and entry.is_file()
                except OSError as exc:
                    raise DirectoryError(f"could not classify entry: {exc}", Path(entry.path)) from exc

                if is_dir:
                    logger.debug(f"Skipping directory {entry.path}")
                    continue

                if not is_file:
                    logger.info(f"Skipping {entry.path}: not a regular file")
                    continue

                yield create_file_task(Path(entry.path), outdir)
    except OSError as exc:
        raise DirectoryError(f"could not enumerate directory: {exc}", indir) from exc

def process_file(task: FileTask, factor: float):
    logger.info(f"Converting {task.input_path} => {task.output_path}")

    src = decode_image(task.input_path)
    dims = compute_target_dimensions(src.width, src.height, factor)
    resized = resize_image(src, dims)

    encode_png(resized.buffer, resized.width, resized.height, src.color_model, task.output_path)

def convert_directory(indir: Path, outdir: Path, factor: float = DEFAULT_SCALE_FACTOR) -> int:
    """
    Resize every file in `indir` into `outdir`, stopping at the first error.

    Returns the number of files converted. Outputs written before an error
    are left in place.
    """
    if not math.isfinite(factor) or factor <= 0.0:
        raise ValueError(f"scale factor must be a positive finite number, got {factor}")

    if not outdir.is_dir():
        raise DirectoryError("output directory does not exist", outdir)

    n_converted = 0
    for task in iter_file_tasks(indir, outdir):
        process_file(task, factor)
        n_converted += 1

    logger.debug(f"Converted {n_converted} files from {indir} into {outdir}")
    return n_converted
