from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence
import logging
import math
import sys
import tyro

from warpresize.driver import DEFAULT_SCALE_FACTOR, convert_directory
from warpresize.errors import ResizeError

logger = logging.getLogger("warpresize")

@dataclass
class ResizeConfig:
    """ Resize every image in a directory and write the results as PNGs. """

    indir: Path
    """Directory containing the source images."""

    outdir: Path
    """Existing directory that receives the resized PNGs, under the same file names."""

    factor: float = DEFAULT_SCALE_FACTOR
    """Uniform scale multiplier applied to width and height."""

    verbose: bool = False
    """Log decode, resample and encode details."""

def setup_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        stream=sys.stderr,
    )

def run(config: ResizeConfig) -> int:
    """ Run a batch conversion and return the process exit status. """
    if not math.isfinite(config.factor) or config.factor <= 0.0:
        logger.error(f"--factor must be a positive number, got {config.factor}")
        return 2

    try:
        convert_directory(config.indir, config.outdir, config.factor)
    except ResizeError as e:
        logger.error(str(e))
        return 1

    return 0

def main(args: Optional[Sequence[str]] = None):
    config = tyro.cli(ResizeConfig, args=args)
    setup_logging(config.verbose)
    sys.exit(run(config))
