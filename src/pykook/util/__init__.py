"""
Utility helpers for pykook.

- **logger.py**: Centralized logging configuration with colored console output
  through prompt_toolkit, rotating per-session log files, and `setup_process_logging` for host
  programs that want uncaught exceptions logged.

- **page_iterator.py**: Contract for iterating remote collections page by page.
"""
