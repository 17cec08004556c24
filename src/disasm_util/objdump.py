"""
Objdump Driver
==============

Runs GNU objdump on an object file with the one flag combination the
listing parser understands:

    objdump -d --no-addresses --no-show-raw-insn <OBJ-FILE>

and hands the captured output to the parser. Any output on stderr is
treated as a failure, since objdump reports unreadable or unrecognized
files there while still exiting with status 0 in some cases.
"""

import logging
import shutil
import subprocess
from pathlib import Path
from typing import Optional, Union

from disasm_util.config import DisasmConfig
from disasm_util.errors import ObjdumpError, ObjdumpNotFoundError
from disasm_util.listing import Dialect, Listing, parse_listing

logger = logging.getLogger(__name__)

OBJDUMP_FLAGS = ("-d", "--no-addresses", "--no-show-raw-insn")


def resolve_objdump(executable: str) -> str:
    """
    Locate the objdump executable.

    Args:
        executable: Program name (searched on PATH) or path

    Returns:
        Full path of the executable

    Raises:
        ObjdumpNotFoundError: If it cannot be found
    """
    resolved = shutil.which(executable)
    if resolved is None:
        raise ObjdumpNotFoundError(executable)
    return resolved


def build_command(obj_file: Union[str, Path], executable: str) -> list[str]:
    return [executable, *OBJDUMP_FLAGS, str(obj_file)]


def run_objdump(
    obj_file: Union[str, Path],
    config: Optional[DisasmConfig] = None,
) -> str:
    """
    Disassemble an object file and return objdump's text output.

    Args:
        obj_file: Object file to disassemble
        config: Driver settings (default: DisasmConfig())

    Returns:
        The captured standard output

    Raises:
        ObjdumpNotFoundError: If the executable cannot be found
        ObjdumpError: If objdump fails, times out, or writes to stderr
    """
    config = config or DisasmConfig()
    executable = resolve_objdump(config.objdump_executable)
    cmd = build_command(obj_file, executable)
    logger.debug(f"Running: {' '.join(cmd)}")

    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=config.timeout,
        )
    except subprocess.TimeoutExpired:
        raise ObjdumpError(
            f"objdump timed out after {config.timeout:g} seconds",
            command=cmd,
        )
    except FileNotFoundError:
        raise ObjdumpNotFoundError(config.objdump_executable)

    if result.returncode != 0:
        raise ObjdumpError(
            f"objdump failed with exit status {result.returncode}",
            command=cmd,
            stderr=result.stderr,
            return_code=result.returncode,
        )

    if result.stderr:
        raise ObjdumpError(
            "objdump reported errors",
            command=cmd,
            stderr=result.stderr,
            return_code=result.returncode,
        )

    logger.debug(f"objdump produced {len(result.stdout)} characters of output")
    return result.stdout


def disassemble_file(
    obj_file: Union[str, Path],
    config: Optional[DisasmConfig] = None,
) -> Listing:
    """Run objdump on `obj_file` and parse its output into a Listing."""
    output = run_objdump(obj_file, config)
    return parse_listing(output, dialect=Dialect.OBJDUMP, source=str(obj_file))
