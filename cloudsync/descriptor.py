"""Descriptor file loading."""
import json
import logging
from pathlib import Path

from .exceptions import DescriptorParseError
from .models import Descriptor
from .protocols import IFilesystem

logger = logging.getLogger(__name__)


async def parse_descriptor(fs: IFilesystem, file: Path, root: Path) -> Descriptor:
    """
    Read and parse a descriptor file governing root.

    Raises:
        FilesystemError: file could not be read
        DescriptorParseError: file is not valid JSON
        ConfigurationError: settings are incomplete or mistyped
    """
    text = await fs.read_text(file)
    try:
        settings = json.loads(text)
    except json.JSONDecodeError as e:
        raise DescriptorParseError(file, e) from e

    descriptor = Descriptor.from_settings(root, settings)
    logger.debug(
        f"Loaded descriptor {file}: container={descriptor.container!r} "
        f"prefix={descriptor.prefix!r} public={descriptor.public}"
    )
    return descriptor
