"""Builder configuration."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass
class BuilderConfig:
    """Configuration applied to every statement built by one builder.

    Attributes:
        conflict_target: Column list used in ``ON CONFLICT (...) DO NOTHING``
            for INSERT statements.  ``None`` omits the clause entirely.
        log_values: If ``True``, bound parameter values are included in the
            debug log lines emitted when a statement is built or executed.
            Off by default because values often carry user data.
    """

    conflict_target: str | None = "id"
    log_values: bool = False
