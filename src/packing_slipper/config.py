"""Configuration for packing-slipper.

Three sources feed a run:
- environment variables and a local `.env` file (`PackingSlipSettings`)
- the plaintext label configuration YAML (`LabelConfig`)
- the sops-encrypted secrets YAML (`Secrets`), decrypted in memory only

File paths default to `~/.config/packingslipper/` unless given on the command line.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from packing_slipper.errors import ConfigError
from packing_slipper.sops import SopsDecryptor

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "configuration.yaml"
SECRETS_FILENAME = "secrets.enc.yaml"
DEFAULT_SHOPIFY_API_VERSION = "2024-04"


def _default_config_dir() -> Path:
    return Path.home() / ".config" / "packingslipper"


class PackingSlipSettings(BaseSettings):
    """Runtime settings read from the environment.

    Environment variables:
    - LOG_LEVEL                            (optional)
    - PACKINGSLIPPER_SHOPIFY_API_VERSION   (optional)
    - PACKINGSLIPPER_REQUEST_TIMEOUT       (optional)
    - PACKINGSLIPPER_SOPS_BINARY           (optional)
    - PACKINGSLIPPER_CONFIG_DIR            (optional)

    Notes:
        Tests can point at a specific env file via
        `PackingSlipSettings(_env_file=path_to_env)`.
    """

    log_level: str = Field(
        default="WARNING",
        validation_alias="LOG_LEVEL",
        description="Root logging level (--verbose lowers it to INFO)",
    )
    shopify_api_version: str = Field(
        default=DEFAULT_SHOPIFY_API_VERSION,
        validation_alias="PACKINGSLIPPER_SHOPIFY_API_VERSION",
        description="Shopify Admin REST API version segment",
    )
    request_timeout: float = Field(
        default=10.0,
        gt=0,
        validation_alias="PACKINGSLIPPER_REQUEST_TIMEOUT",
        description="Seconds before the order request is abandoned",
    )
    sops_binary: str = Field(
        default="sops",
        validation_alias="PACKINGSLIPPER_SOPS_BINARY",
        description="sops executable used to decrypt the secrets file",
    )
    config_dir: Path = Field(
        default_factory=_default_config_dir,
        validation_alias="PACKINGSLIPPER_CONFIG_DIR",
        description="Directory holding the default configuration and secrets files",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
    )

    @property
    def default_config_path(self) -> Path:
        return self.config_dir.expanduser() / CONFIG_FILENAME

    @property
    def default_secrets_path(self) -> Path:
        return self.config_dir.expanduser() / SECRETS_FILENAME


class _FileModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class LogoConfig(_FileModel):
    filename: Path
    vertical_space: int = Field(default=0, alias="vertical-space")


class TextConfig(_FileModel):
    salutation: str = ""
    signature: str = ""
    vertical_space: int = Field(default=0, alias="vertical-space")


class FontsConfig(_FileModel):
    """Optional TrueType faces; the built-in Helvetica pair is used when unset."""

    regular: Path | None = None
    bold: Path | None = None


class LabelConfig(_FileModel):
    logo: LogoConfig
    text: TextConfig = Field(default_factory=TextConfig)
    fonts: FontsConfig = Field(default_factory=FontsConfig)


class ApiSecrets(_FileModel):
    token: str = Field(min_length=1)
    shop: str = Field(min_length=1)


class Secrets(_FileModel):
    api: ApiSecrets


@dataclass(frozen=True, slots=True)
class AllConfig:
    """Everything a run needs from disk."""

    config: LabelConfig
    secrets: Secrets


def _parse_yaml(data: bytes | str, *, path: Path, kind: str) -> dict[str, Any]:
    try:
        loaded = yaml.safe_load(data)
    except yaml.YAMLError as exc:
        if kind != "secrets":
            raise ConfigError(f"failed to parse {kind} file: {exc}", path=path) from exc
        # The YAML error renders a snippet of the decrypted source; report position only.
        problem = getattr(exc, "problem", None) or "invalid YAML"
        mark = getattr(exc, "problem_mark", None)
        where = f" at line {mark.line + 1}, column {mark.column + 1}" if mark is not None else ""
        raise ConfigError(f"failed to parse {kind} file: {problem}{where}", path=path) from None

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"failed to parse {kind} file: expected a mapping", path=path)
    return loaded


def load_label_config(path: Path) -> LabelConfig:
    """Read and validate the plaintext label configuration."""

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"failed to read config file: {exc}", path=path) from exc

    data = _parse_yaml(raw, path=path, kind="config")
    try:
        config = LabelConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"failed to parse config file: {exc}", path=path) from exc

    logger.debug("Loaded label configuration", extra={"path": str(path)})
    return config


def load_secrets(path: Path, decryptor: SopsDecryptor) -> Secrets:
    """Decrypt and validate the secrets file. The plaintext is never written out."""

    plaintext = decryptor.decrypt_file(path, input_type="yaml")
    data = _parse_yaml(plaintext, path=path, kind="secrets")
    try:
        secrets = Secrets.model_validate(data)
    except ValidationError as exc:
        # Don't echo the input back; it holds the decrypted token.
        fields = ", ".join(".".join(str(p) for p in err["loc"]) for err in exc.errors())
        raise ConfigError(
            f"failed to parse secrets file: invalid or missing fields: {fields}", path=path
        ) from None

    logger.debug("Loaded secrets", extra={"path": str(path)})
    return secrets


def load_config(config_path: Path, secrets_path: Path, decryptor: SopsDecryptor) -> AllConfig:
    """Load the label configuration and the decrypted secrets."""

    return AllConfig(
        config=load_label_config(config_path),
        secrets=load_secrets(secrets_path, decryptor),
    )
