from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from .commands import CommandBuilder, validate_label_name
from .config import P4Config
from .errors import ValidationError
from .logging import get_logger
from .process import ProcessExecutor, run_checked


def render_label_spec(label: str, views: Iterable[str], description: str) -> str:
    """Build the form fed to ``p4 label -i``."""
    view_lines = "".join(f"\t{view}\n" for view in views)
    return (
        f"Label:\t{label}\n\n"
        f"Description:\n\t{description}\n\n"
        "Options:\tunlocked\n\n"
        f"View:\n{view_lines}"
    )


class LabelManager:
    """Create a label for the configured view and sync it to the workspace."""

    def __init__(
        self,
        config: P4Config,
        executor: ProcessExecutor,
        commands: CommandBuilder | None = None,
    ) -> None:
        self.config = config
        self.executor = executor
        self.commands = commands or CommandBuilder(config)
        self.logger = get_logger()

    def label_source_control(self, label: str, timestamp: datetime | None = None) -> None:
        if not self.config.apply_label:
            return
        if label.isascii() and label.isdigit():
            # p4 reads an all-digit name as a change number, not a label
            raise ValidationError(f"numeric-only labels are rejected: {label!r}")
        validate_label_name(label)

        spec_process = self.commands.create_label_spec_command()
        spec_process.standard_input = render_label_spec(
            label, self.config.views, self.config.label_description
        )
        sync_process = self.commands.create_label_sync_command(label)

        with self.logger.timed_operation(
            "label",
            label=label,
            timestamp=timestamp.isoformat() if timestamp else None,
        ):
            run_checked(self.executor, spec_process)
            run_checked(self.executor, sync_process)


__all__ = ["LabelManager", "render_label_spec"]
