from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Tuple

from .errors import BatchStepError


@dataclass
class BatchReport:
    """
    Data object describing one directory run.
    Only has failures when the run was told to keep going after an error.
    """
    written: List[Path] = field(default_factory=list)
    failures: List[Tuple[Path, BatchStepError]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures
