"""Mirror pair: a remote folder and the local directory mirroring it."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from ..config import Config


@dataclass
class MirrorPair:
    """Defines the sync boundary of a mirror run.

    Examples:
        >>> pair = MirrorPair(local="/srv/mirror/Docs", remote="/Docs/")
        >>> pair.remote
        'Docs'
    """

    local: Path
    """Local directory receiving the mirror"""

    remote: str
    """Remote folder relative to the drive root ("" for the whole drive)"""

    diff_list: Optional[Path] = None
    """Optional file listing the downloaded paths of the run"""

    def __post_init__(self) -> None:
        """Normalize paths."""
        local: Union[str, Path] = self.local
        if isinstance(local, str):
            self.local = Path(local)
        self.remote = self.remote.strip("/")
        diff_list: Union[str, Path, None] = self.diff_list
        if isinstance(diff_list, str):
            self.diff_list = Path(diff_list)

    @classmethod
    def from_config(
        cls,
        config: Config,
        out_path: Optional[Path] = None,
        parent_folder: Optional[str] = None,
        diff_list: Optional[Path] = None,
    ) -> "MirrorPair":
        """Build a pair from OUT_PATH / PARENT_FOLDER / DIFF_LIST.

        Explicit arguments (e.g. command line options) take precedence over
        the configured values. The local directory is
        ``OUT_PATH/PARENT_FOLDER``.

        Raises:
            ValueError: If no output path is given or configured
        """
        out_path = out_path or config.out_path
        if out_path is None:
            raise ValueError(
                "Output path not configured. Use --out-path or set OUT_PATH."
            )
        if parent_folder is None:
            parent_folder = config.parent_folder
        parent_folder = parent_folder.strip("/")
        return cls(
            local=out_path / parent_folder,
            remote=parent_folder,
            diff_list=diff_list or config.diff_list,
        )
