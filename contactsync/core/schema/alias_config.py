"""
Header alias configuration management.

Loads additional source header spellings from YAML so operators can teach
the normalizer new spreadsheet layouts without a code change.
"""

from pathlib import Path

import yaml

from .aliases import merge_aliases
from .fields import CANONICAL_FIELDS


class AliasConfigLoader:
    """
    Loads extra header aliases from a YAML configuration file.

    Expected YAML format:
    ```yaml
    aliases:
      EmailID:
        - "Email"
        - "E-mail Address"
      DirectNumber:
        - "Direct Phone"
    ```
    """

    def __init__(self, config_path: str | Path):
        """
        Initialize the alias config loader.

        Args:
            config_path: Path to the YAML configuration file
        """
        self.config_path = Path(config_path)
        if not self.config_path.exists():
            raise FileNotFoundError(f"Alias configuration file not found: {config_path}")

    def load_extra_aliases(self) -> dict[str, list[str]]:
        """
        Parse the ``aliases`` section.

        Returns:
            Mapping of canonical field name to extra spellings

        Raises:
            ValueError: If the YAML is malformed or names unknown fields
        """
        with open(self.config_path) as f:
            config = yaml.safe_load(f)

        if not config or "aliases" not in config:
            raise ValueError("Configuration file must contain 'aliases' section")

        section = config["aliases"] or {}
        if not isinstance(section, dict):
            raise ValueError("'aliases' must be a mapping of field name to spellings")

        extra: dict[str, list[str]] = {}
        for field_name, spellings in section.items():
            if field_name not in CANONICAL_FIELDS:
                raise ValueError(f"Unknown canonical field in alias config: '{field_name}'")
            if not isinstance(spellings, list):
                raise ValueError(f"Aliases for field '{field_name}' must be a list")
            extra[field_name] = [str(s).strip() for s in spellings if str(s).strip()]

        return extra

    def load_aliases(self) -> dict[str, tuple[str, ...]]:
        """Built-in spellings followed by the configured ones."""
        return merge_aliases(self.load_extra_aliases())
