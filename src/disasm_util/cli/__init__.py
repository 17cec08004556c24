"""
Disasm-Util Command-Line Interface
==================================

- **disasm-util**: sorted objdump listing tool

Implemented as a Click-based CLI application.
"""

__all__ = ["disasm_util"]
