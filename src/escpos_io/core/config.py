"""Configuration management for escpos-io.

Handles configuration loading with the following precedence (highest to lowest):
1. Environment variables
2. CLI arguments
3. Config file
4. Default values
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from escpos_io.core.logging import get_logger
from escpos_io.core.text import DEFAULT_CODEPAGE
from escpos_io.device.status import OverlapPolicy
from escpos_io.transport import NetworkTarget, SerialTarget, Target

logger = get_logger()

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "escpos-io" / "config.yaml"

# Environment variable names
ENV_DEVICE_PATH = "ESCPOS_DEVICE_PATH"
ENV_BAUD_RATE = "ESCPOS_BAUD_RATE"
ENV_HOST = "ESCPOS_HOST"
ENV_PORT = "ESCPOS_PORT"
ENV_CODEPAGE = "ESCPOS_CODEPAGE"
ENV_STATUS_OVERLAP = "ESCPOS_STATUS_OVERLAP"
ENV_TRAFFIC_LOG_FILE = "ESCPOS_TRAFFIC_LOG_FILE"
ENV_CONFIG_FILE = "ESCPOS_IO_CONFIG"


@dataclass
class DeviceConfig:
    """Connection settings. Exactly one of path or host must be set."""

    path: str | None = None
    baud_rate: int = 9600
    bytesize: int = 8
    parity: str = "N"
    stopbits: float = 1
    host: str | None = None
    port: int = 9100
    codepage: str = DEFAULT_CODEPAGE
    status_overlap: OverlapPolicy = OverlapPolicy.REJECT


@dataclass
class PrinterConfig:
    """Receipt printer settings."""

    line_width: int = 40


@dataclass
class DisplayConfig:
    """Customer display settings."""

    brightness: int | None = None


@dataclass
class Config:
    """Main configuration container."""

    device: DeviceConfig = field(default_factory=DeviceConfig)
    printer: PrinterConfig = field(default_factory=PrinterConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    traffic_log_file: str | None = None

    @classmethod
    def load(
        cls,
        config_file: Path | str | None = None,
        cli_args: dict[str, Any] | None = None,
        skip_device_validation: bool = False,
    ) -> "Config":
        """Load configuration from all sources with proper precedence.

        Args:
            config_file: Path to configuration file. If None, uses default or env var.
            cli_args: Dictionary of CLI arguments.
            skip_device_validation: If True, don't require a device path or host.

        Returns:
            Loaded and merged configuration.

        Raises:
            ValueError: If the device settings are missing or contradictory
                (unless skip_device_validation is True).
        """
        config = cls()

        if config_file is None:
            config_file = os.environ.get(ENV_CONFIG_FILE, str(DEFAULT_CONFIG_PATH))

        config_path = Path(config_file).expanduser()

        if config_path.exists():
            config = cls._load_from_file(config_path)

        if cli_args:
            config = cls._apply_cli_args(config, cli_args)

        # Environment variables have the highest precedence
        config = cls._apply_env_vars(config)

        if not skip_device_validation:
            config._validate()

        return config

    @staticmethod
    def _get(data: dict[str, Any], key: str) -> Any:
        """Look up a hyphenated key, accepting the underscore spelling too."""
        if key in data:
            return data[key]
        return data.get(key.replace("-", "_"))

    @classmethod
    def _load_from_file(cls, path: Path) -> "Config":
        """Load configuration from YAML file.

        Args:
            path: Path to the YAML config file.

        Returns:
            Configuration loaded from file.
        """
        config = cls()

        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (yaml.YAMLError, OSError) as e:
            logger.warning(f"Failed to load config file {path}: {e}")
            return config

        device_data = data.get("device") or {}
        value = cls._get(device_data, "path")
        if value is not None:
            config.device.path = str(value)
        value = cls._get(device_data, "baud-rate")
        if value is not None:
            config.device.baud_rate = int(value)
        value = cls._get(device_data, "bytesize")
        if value is not None:
            config.device.bytesize = int(value)
        value = cls._get(device_data, "parity")
        if value is not None:
            config.device.parity = str(value)
        value = cls._get(device_data, "stopbits")
        if value is not None:
            config.device.stopbits = float(value)
        value = cls._get(device_data, "host")
        if value is not None:
            config.device.host = str(value)
        value = cls._get(device_data, "port")
        if value is not None:
            config.device.port = int(value)
        value = cls._get(device_data, "codepage")
        if value is not None:
            config.device.codepage = str(value)
        value = cls._get(device_data, "status-overlap")
        if value is not None:
            config.device.status_overlap = OverlapPolicy(str(value))

        printer_data = data.get("printer") or {}
        value = cls._get(printer_data, "line-width")
        if value is not None:
            config.printer.line_width = int(value)

        display_data = data.get("display") or {}
        value = cls._get(display_data, "brightness")
        if value is not None:
            config.display.brightness = int(value)

        value = cls._get(data, "traffic-log-file")
        if value is not None:
            config.traffic_log_file = str(value)

        return config

    @classmethod
    def _apply_cli_args(cls, config: "Config", cli_args: dict[str, Any]) -> "Config":
        """Apply CLI arguments to configuration.

        Args:
            config: Existing configuration to modify.
            cli_args: Dictionary of CLI arguments.

        Returns:
            Modified configuration.
        """
        if cli_args.get("dev_path") is not None:
            config.device.path = str(cli_args["dev_path"])

        if cli_args.get("baud_rate") is not None:
            config.device.baud_rate = int(cli_args["baud_rate"])

        if cli_args.get("host") is not None:
            config.device.host = str(cli_args["host"])

        if cli_args.get("port") is not None:
            config.device.port = int(cli_args["port"])

        if cli_args.get("codepage") is not None:
            config.device.codepage = str(cli_args["codepage"])

        if cli_args.get("status_overlap") is not None:
            config.device.status_overlap = OverlapPolicy(cli_args["status_overlap"])

        if cli_args.get("traffic_log_file") is not None:
            config.traffic_log_file = str(cli_args["traffic_log_file"])

        return config

    @classmethod
    def _apply_env_vars(cls, config: "Config") -> "Config":
        """Apply environment variables to configuration.

        Args:
            config: Existing configuration to modify.

        Returns:
            Modified configuration.
        """
        if ENV_DEVICE_PATH in os.environ:
            config.device.path = os.environ[ENV_DEVICE_PATH]

        if ENV_BAUD_RATE in os.environ:
            config.device.baud_rate = int(os.environ[ENV_BAUD_RATE])

        if ENV_HOST in os.environ:
            config.device.host = os.environ[ENV_HOST]

        if ENV_PORT in os.environ:
            config.device.port = int(os.environ[ENV_PORT])

        if ENV_CODEPAGE in os.environ:
            config.device.codepage = os.environ[ENV_CODEPAGE]

        if ENV_STATUS_OVERLAP in os.environ:
            config.device.status_overlap = OverlapPolicy(os.environ[ENV_STATUS_OVERLAP].lower())

        if ENV_TRAFFIC_LOG_FILE in os.environ:
            config.traffic_log_file = os.environ[ENV_TRAFFIC_LOG_FILE]

        return config

    def _validate(self) -> None:
        """Validate required configuration values.

        Raises:
            ValueError: If required configuration is missing or invalid.
        """
        path_set = bool(self.device.path and self.device.path.strip())
        host_set = bool(self.device.host and self.device.host.strip())

        if path_set and host_set:
            raise ValueError(
                "Both a serial device path and a network host are set; use only one"
            )

        if not path_set and not host_set:
            raise ValueError(
                "Either a serial device path or a network host is required. Provide one via:\n"
                "  Serial device path:\n"
                f"    - Environment variable: {ENV_DEVICE_PATH}\n"
                "    - CLI argument: --dev\n"
                "    - Config file: device.path\n"
                "  OR network host:\n"
                f"    - Environment variable: {ENV_HOST}\n"
                "    - CLI argument: --host or -H\n"
                "    - Config file: device.host"
            )

    def target(self) -> Target:
        """Build the device target described by this configuration."""
        self._validate()
        if self.device.path:
            return SerialTarget(
                path=self.device.path,
                baud_rate=self.device.baud_rate,
                bytesize=self.device.bytesize,
                parity=self.device.parity,
                stopbits=self.device.stopbits,
            )
        return NetworkTarget(host=str(self.device.host), port=self.device.port)

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary.

        Returns:
            Dictionary representation of configuration.
        """
        result: dict[str, Any] = {
            "device": {
                "path": self.device.path,
                "baud_rate": self.device.baud_rate,
                "host": self.device.host,
                "port": self.device.port,
                "codepage": self.device.codepage,
                "status_overlap": self.device.status_overlap.value,
            },
            "printer": {
                "line_width": self.printer.line_width,
            },
        }
        if self.display.brightness is not None:
            result["display"] = {"brightness": self.display.brightness}
        if self.traffic_log_file is not None:
            result["traffic_log_file"] = self.traffic_log_file
        return result

    def save(self, path: Path | str | None = None) -> None:
        """Save configuration to YAML file.

        Args:
            path: Path to save to. If None, uses default config path.
        """
        if path is None:
            path = DEFAULT_CONFIG_PATH

        save_path = Path(path).expanduser()
        save_path.parent.mkdir(parents=True, exist_ok=True)

        # Convert to YAML-friendly format with hyphenated keys
        device_data: dict[str, Any] = {
            "baud-rate": self.device.baud_rate,
            "bytesize": self.device.bytesize,
            "parity": self.device.parity,
            "stopbits": self.device.stopbits,
            "port": self.device.port,
            "codepage": self.device.codepage,
            "status-overlap": self.device.status_overlap.value,
        }

        if self.device.path is not None:
            device_data["path"] = self.device.path

        if self.device.host is not None:
            device_data["host"] = self.device.host

        data: dict[str, Any] = {
            "device": device_data,
            "printer": {"line-width": self.printer.line_width},
        }

        if self.display.brightness is not None:
            data["display"] = {"brightness": self.display.brightness}

        if self.traffic_log_file is not None:
            data["traffic-log-file"] = self.traffic_log_file

        with open(save_path, "w", encoding="utf-8") as f:
            yaml.safe_dump(data, f, default_flow_style=False)
