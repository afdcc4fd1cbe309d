"""Index of a screenshot directory keyed by (key, width)."""

from __future__ import annotations

import logging
from pathlib import Path

from visreg.errors import InvalidImageNameError
from visreg.models.comparison import ComparisonKey

logger = logging.getLogger(__name__)


class ImageSet:
    """Screenshots named ``<key>__<width>.<ext>`` in a single directory."""

    def __init__(self, root: Path, extension: str = "png", entries: dict[ComparisonKey, Path] | None = None):
        self.root = root
        self.extension = extension
        self.entries: dict[ComparisonKey, Path] = entries or {}

    @classmethod
    def scan(cls, root: str | Path, extension: str = "png") -> "ImageSet":
        """Index every image in ``root``.

        Files with another extension and dotfiles are ignored. An image file
        whose name does not parse raises InvalidImageNameError. A missing
        directory yields an empty set.
        """
        root = Path(root)
        image_set = cls(root, extension)
        if not root.is_dir():
            logger.debug("Image directory %s does not exist", root)
            return image_set

        suffix = f".{extension}".lower()
        for path in sorted(root.iterdir()):
            if not path.is_file() or path.name.startswith("."):
                continue
            if path.suffix.lower() != suffix:
                logger.debug("Ignoring non-%s file %s", extension, path.name)
                continue
            ck = ComparisonKey.parse(path.name, extension)
            if ck in image_set:
                raise InvalidImageNameError(
                    path.name, f"duplicates {image_set.entries[ck].name}"
                )
            image_set.entries[ck] = path

        logger.debug("Indexed %d images in %s", len(image_set), root)
        return image_set

    @property
    def exists(self) -> bool:
        return self.root.is_dir()

    def keys(self) -> list[str]:
        """Distinct logical keys, in lexical order."""
        return sorted({ck.key for ck in self.entries})

    def get(self, ck: ComparisonKey) -> Path | None:
        return self.entries.get(ck)

    def path_for(self, ck: ComparisonKey) -> Path:
        """Conventional location of ``ck`` in this set, whether or not it exists."""
        return self.entries.get(ck) or self.root / ck.filename(self.extension)

    def __contains__(self, ck: ComparisonKey) -> bool:
        return ck in self.entries

    def __len__(self) -> int:
        return len(self.entries)
