from pathlib import Path
from typing import Iterator, Union

from ..models.image import Image
from ..repositories.pgm_repository import PgmRepository


class ImageService:
    """I/O helpers.  No filtering logic."""
    def __init__(self):
        self.pgm_repository = PgmRepository()

    def load(self, path: Union[str, Path]) -> Image:
        """Load a single P2 file from disk into an Image object."""
        return self.pgm_repository.load(path)

    def stream_gallery(self, folder: Union[str, Path]) -> Iterator[Path]:
        """
        Yield the .pgm file paths of a folder lazily; each file is loaded by the caller.
        """
        return self.pgm_repository.iter_dir(folder)

    def prepare_output_dir(self, folder: Union[str, Path]) -> Path:
        return self.pgm_repository.ensure_dir(folder)

    def save(self, image: Image, path: Union[str, Path] = None) -> Path:
        """
        Business-level method to save the image, to *path* or to image.path.
        """
        return self.pgm_repository.save(image, path)

    @staticmethod
    def output_path(output_dir: Union[str, Path], source: Path, suffix: str = "_modified") -> str:
        """
        '<output_dir>/<stem><suffix>.pgm', joined as text so the printed path
        keeps the directory exactly as configured (e.g. './src/filtered_images/...').
        """
        return f"{output_dir}/{source.stem}{suffix}.pgm"
