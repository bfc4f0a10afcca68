# sharebox/storage/file_manager.py

"""Reads and writes catalog files: exports, imports and images."""

import base64
import json
import logging
import mimetypes
from datetime import datetime
from pathlib import Path

from sharebox.config.settings import Settings

logger = logging.getLogger("sharebox.storage")


class FileManager:
    """Handles export artifacts and file-based inputs on disk."""

    def __init__(self, exports_dir: Path | None = None) -> None:
        self.exports_dir: Path = exports_dir or Settings.EXPORTS_DIR
        self.exports_dir.mkdir(parents=True, exist_ok=True)
        logger.debug(
            "FileManager initialised, exports_dir=%s", self.exports_dir
        )

    @staticmethod
    def export_filename(when: datetime | None = None) -> str:
        """Return ``beusharebox-export-<YYYY-MM-DD>.json`` for *when*."""
        day = (when or datetime.now()).strftime("%Y-%m-%d")
        return f"{Settings.EXPORT_FILE_PREFIX}-{day}.json"

    def save_export(
        self,
        data: dict[str, object],
        when: datetime | None = None,
    ) -> Path:
        """Write an export document and return its path.

        A second export on the same day overwrites the first.
        """
        filepath = self.exports_dir / self.export_filename(when)
        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2)

        products = data.get("products")
        logger.info(
            "Exported %d products to %s",
            len(products) if isinstance(products, list) else 0,
            filepath,
        )
        return filepath

    @staticmethod
    def read_text(filepath: Path) -> str:
        """Read an import file as UTF-8 text."""
        with open(filepath, encoding="utf-8") as f:
            return f.read()

    @staticmethod
    def read_image_data_uri(filepath: Path) -> str:
        """Encode an image file as a ``data:`` URI.

        Raises ``ValueError`` when the file is not recognised as an image.
        """
        mime, _ = mimetypes.guess_type(filepath.name)
        if mime is None or not mime.startswith("image/"):
            raise ValueError(f"Not an image file: {filepath.name}")
        payload = base64.b64encode(filepath.read_bytes()).decode("ascii")
        logger.debug(
            "Encoded image %s (%s, %d chars)", filepath, mime, len(payload)
        )
        return f"data:{mime};base64,{payload}"
