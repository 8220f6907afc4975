import logging
import shutil
import subprocess

from .errors import CommandError

log = logging.getLogger(__name__)


def is_available(name: str) -> bool:
    return shutil.which(name) is not None


class CommandRunner:
    """Runs external programs and returns their combined output."""

    def run(self, name: str, *args: str) -> str:
        log.debug("running %s %s", name, " ".join(args))
        try:
            result = subprocess.run(
                [name, *args],
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
            )
        except OSError as e:
            raise CommandError(name, "", str(e)) from e
        if result.returncode != 0:
            raise CommandError(name, result.stdout or "", f"exit status {result.returncode}")
        return result.stdout or ""
