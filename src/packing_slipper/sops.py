"""Decrypt sops-encrypted files in memory.

Wraps the `sops` command line tool; the decrypted document is returned from
stdout and never written to disk.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from packing_slipper.errors import SecretsDecryptionError

logger = logging.getLogger(__name__)


class SopsDecryptor:
    """Run `sops --decrypt` for a single file."""

    def __init__(self, binary: str = "sops", *, timeout: float | None = 30.0) -> None:
        self._binary = binary
        self._timeout = timeout

    def build_command(self, path: Path, input_type: str) -> list[str]:
        return [
            self._binary,
            "--decrypt",
            "--input-type",
            input_type,
            "--output-type",
            input_type,
            str(path),
        ]

    def decrypt_file(self, path: Path, input_type: str = "yaml") -> bytes:
        if not path.is_file():
            raise SecretsDecryptionError(
                f"failed to decrypt secrets file: {path} does not exist", path=path
            )

        cmd = self.build_command(path, input_type)
        logger.debug("Decrypting secrets", extra={"path": str(path), "binary": self._binary})

        try:
            proc = subprocess.run(
                cmd,
                capture_output=True,
                check=False,
                timeout=self._timeout,
            )
        except FileNotFoundError as exc:
            raise SecretsDecryptionError(
                f"failed to decrypt secrets file: sops executable {self._binary!r} not found",
                path=path,
            ) from exc
        except subprocess.TimeoutExpired as exc:
            raise SecretsDecryptionError(
                f"failed to decrypt secrets file: sops timed out after {self._timeout}s",
                path=path,
            ) from exc

        if proc.returncode != 0:
            stderr = proc.stderr.decode("utf-8", errors="replace").strip()
            raise SecretsDecryptionError(
                f"failed to decrypt secrets file: sops exited with {proc.returncode}: {stderr}",
                path=path,
                stderr=stderr,
            )

        return proc.stdout
