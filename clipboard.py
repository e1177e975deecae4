import logging
import subprocess

logger = logging.getLogger("tsvgrid.clipboard")

DEFAULT_COMMAND = ["wl-copy"]


class ClipboardWriter:
    def __init__(self, command=None):
        self.command = list(command) if command else list(DEFAULT_COMMAND)

    def write_text(self, text: str) -> bool:
        try:
            subprocess.run(self.command, input=text, text=True, check=True)
        except (OSError, subprocess.CalledProcessError) as exc:
            logger.warning("Clipboard command %s failed: %s", self.command, exc)
            return False
        return True
