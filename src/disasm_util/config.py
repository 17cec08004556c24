"""
Disasm-Util Configuration
=========================

Runtime settings for the objdump driver and the renderer. Configuration
can come from:
- Default values (defined here)
- Environment variables (DisasmConfig.from_env)
- Command-line options, which the CLI applies on top
"""

from dataclasses import dataclass
import os


@dataclass
class DisasmConfig:
    """
    Settings for a disasm-util run.

    Attributes:
        objdump_executable: objdump program name or path (default: "objdump")
        indent_width: Spaces per indentation level in the output (default: 4)
        timeout: Seconds to wait for objdump before giving up (default: 60)
    """

    objdump_executable: str = "objdump"
    indent_width: int = 4
    timeout: float = 60.0

    @classmethod
    def from_env(cls) -> "DisasmConfig":
        """
        Create DisasmConfig from environment variables.

        Environment variables (all optional):
            DISASM_UTIL_OBJDUMP: objdump executable
            DISASM_UTIL_INDENT: Indent width (positive integer)
            DISASM_UTIL_TIMEOUT: objdump timeout in seconds

        Returns:
            DisasmConfig with values from environment variables
        """
        config = cls()

        if executable := os.environ.get("DISASM_UTIL_OBJDUMP"):
            config.objdump_executable = executable

        if indent := os.environ.get("DISASM_UTIL_INDENT"):
            try:
                if int(indent) > 0:
                    config.indent_width = int(indent)
            except ValueError:
                pass  # Ignore invalid values

        if timeout := os.environ.get("DISASM_UTIL_TIMEOUT"):
            try:
                if float(timeout) > 0:
                    config.timeout = float(timeout)
            except ValueError:
                pass

        return config
