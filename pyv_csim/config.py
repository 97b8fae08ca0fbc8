from __future__ import annotations
from dataclasses import dataclass, fields
import yaml
from pathlib import Path

from .errors import ConfigurationError
from .runtime.address import ADDRESS_WIDTH_BITS
from .utils.logging import get_logger

logger = get_logger(__name__)

# Every set and line is a live object, so cap the total line count.
MAX_CACHE_LINES = 1 << 22


@dataclass
class CsimConfig:
    """Cache simulator configuration.

    Geometry follows the usual (s, E, b) notation: 2^s sets, E lines per set
    and 2^b bytes per block. Zero means "not supplied".
    """
    # Cache geometry
    s: int = 0
    E: int = 0
    b: int = 0

    # Input trace
    trace: str = ""

    # Echo each record with its outcomes
    verbose: bool = False

    # Config file
    config_file: str = ""

    # Outputs
    results_file: str = ".csim_results"
    report_dir: str = ""

    @property
    def num_sets(self) -> int:
        return 1 << self.s

    @property
    def block_size(self) -> int:
        return 1 << self.b

    def validate(self):
        """Raises ConfigurationError unless the config can drive a full run."""
        for name in ("s", "E", "b"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigurationError(f"-{name} must be an integer, got {value!r}.")
            if value <= 0:
                raise ConfigurationError(f"Missing or non-positive required argument -{name}.")
        if self.s + self.b > ADDRESS_WIDTH_BITS:
            raise ConfigurationError(
                f"s + b = {self.s + self.b} exceeds the {ADDRESS_WIDTH_BITS}-bit address width."
            )
        if self.num_sets * self.E > MAX_CACHE_LINES:
            raise ConfigurationError(
                f"2^{self.s} sets x {self.E} lines exceeds the {MAX_CACHE_LINES}-line simulation limit."
            )
        if not self.trace:
            raise ConfigurationError("Missing required argument -t <tracefile>.")
        if not isinstance(self.trace, str):
            raise ConfigurationError(f"Trace path must be a string, got {self.trace!r}.")

    def update_from_yaml(self, yaml_path: str):
        """Updates config fields from a YAML file."""
        try:
            with open(yaml_path, 'r') as f:
                yaml_config = yaml.safe_load(f) or {}
        except OSError as e:
            raise ConfigurationError(f"Config file {yaml_path} cannot be read: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Config file {yaml_path} is not valid YAML: {e}") from e
        if not isinstance(yaml_config, dict):
            raise ConfigurationError(f"Config file {yaml_path} must contain a mapping.")
        field_names = {f.name for f in fields(self)}
        for key, value in yaml_config.items():
            if key in field_names:
                setattr(self, key, value)
            else:
                logger.warning(f"Ignoring unknown config key '{key}' in {yaml_path}")

    @classmethod
    def from_args(cls, args) -> CsimConfig:
        """Factory method to create a CsimConfig from parsed argparse arguments."""
        config = cls()

        # 1. Load from YAML config file if provided
        if getattr(args, 'config', None):
            config.config_file = args.config
            if not Path(config.config_file).exists():
                raise ConfigurationError(f"Config file {config.config_file} not found.")
            config.update_from_yaml(config.config_file)

        # 2. Override with command-line arguments
        field_names = {f.name for f in fields(config)}
        arg_dict = vars(args)
        for key, value in arg_dict.items():
            if value is not None and key in field_names:
                setattr(config, key, value)

        return config
