"""Upload App Store metadata with `fastlane deliver`."""

import logging
from typing import Callable, List, Optional, Sequence

from ..models.variants import UploadParameters
from ..utils.process import run_command

logger = logging.getLogger(__name__)

DEFAULT_DELIVER_COMMAND = ("bundle", "exec", "fastlane", "deliver")


class DeliverClient:
    """Runs `deliver` with one `--option value` pair per upload parameter."""

    def __init__(
        self,
        cwd: Optional[str] = None,
        runner: Callable = run_command,
        command: Sequence[str] = DEFAULT_DELIVER_COMMAND,
    ):
        self.cwd = cwd
        self.runner = runner
        self.command = list(command)

    def build_command(self, params: UploadParameters) -> List[str]:
        """Turn the parameters into a deliver command line."""
        command = list(self.command)
        for key, value in params.to_dict().items():
            if isinstance(value, bool):
                value = "true" if value else "false"
            command.extend([f"--{key}", str(value)])
        return command

    def upload(self, params: UploadParameters) -> None:
        """
        Upload the metadata described by params.

        Raises:
            CommandError: If deliver fails
        """
        logger.info("Uploading metadata for %s (version %s)", params.app_identifier, params.app_version)
        self.runner(self.build_command(params), cwd=self.cwd)
