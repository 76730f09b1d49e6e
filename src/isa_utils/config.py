"""
ISA Utils - Configuration
=========================

Assembler settings with defaults and environment overrides.
Configuration can come from:
- Default values (defined here)
- Environment variables
- Command-line flags (applied by the CLI on top of the above)

Output Formats
--------------
| Name | Suffix | Content                                        |
|------|--------|------------------------------------------------|
| hex  | .hex   | one 8-digit uppercase hex word per line        |
| bin  | .bits  | one 32-digit binary word per line              |
| text | .txt   | resolved assembly, one instruction per line    |
| raw  | .bin   | big-endian bytes, 4 per word                   |
"""

from dataclasses import dataclass
import os


# Output format name -> default file suffix
OUTPUT_FORMATS: dict[str, str] = {
    "hex": ".hex",
    "bin": ".bits",
    "text": ".txt",
    "raw": ".bin",
}

_TRUE_VALUES = ("1", "true", "yes", "on")


def _env_flag(value: str) -> bool:
    return value.strip().lower() in _TRUE_VALUES


@dataclass
class AssemblerConfig:
    """
    Configuration for an assembly run.

    Attributes:
        strict_lexing: Raise on unrecognized characters (default: False)
        output_format: One of OUTPUT_FORMATS (default: "hex")
        emit_listing: Write a listing file next to the output (default: False)
    """

    strict_lexing: bool = False
    output_format: str = "hex"
    emit_listing: bool = False

    def __post_init__(self):
        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError(
                f"invalid output format {self.output_format!r}; "
                f"expected one of {', '.join(OUTPUT_FORMATS)}"
            )

    @property
    def output_suffix(self) -> str:
        """Default file suffix for the configured output format."""
        return OUTPUT_FORMATS[self.output_format]

    @classmethod
    def from_env(cls) -> "AssemblerConfig":
        """
        Create AssemblerConfig from environment variables.

        Environment variables (all optional):
            ISA_UTILS_STRICT: Strict lexing (1/true/yes/on)
            ISA_UTILS_FORMAT: Output format (hex, bin, text, raw)
            ISA_UTILS_LISTING: Emit a listing file (1/true/yes/on)

        Returns:
            AssemblerConfig with values from environment variables

        Raises:
            ValueError: If ISA_UTILS_FORMAT names an unknown format
        """
        config = cls()

        if strict := os.environ.get("ISA_UTILS_STRICT"):
            config.strict_lexing = _env_flag(strict)

        if output_format := os.environ.get("ISA_UTILS_FORMAT"):
            output_format = output_format.strip().lower()
            if output_format not in OUTPUT_FORMATS:
                raise ValueError(
                    f"invalid ISA_UTILS_FORMAT {output_format!r}; "
                    f"expected one of {', '.join(OUTPUT_FORMATS)}"
                )
            config.output_format = output_format

        if listing := os.environ.get("ISA_UTILS_LISTING"):
            config.emit_listing = _env_flag(listing)

        return config
