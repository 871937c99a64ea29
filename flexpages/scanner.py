"""Component discovery by directory listing."""

from __future__ import annotations

from pathlib import Path
from typing import List


def list_component_dirs(folder: Path) -> List[str]:
    """Return the names of the immediate subdirectories of ``folder``.

    Hidden directories are skipped and the result is sorted so generated
    output does not depend on filesystem ordering. Raises ``FileNotFoundError``
    when ``folder`` does not exist.
    """
    return sorted(
        entry.name
        for entry in Path(folder).iterdir()
        if entry.is_dir() and not entry.name.startswith(".")
    )
