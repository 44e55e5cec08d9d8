# telemetry.py
import logging
import os
import sys
import warnings

APP_LOGGER = "lexbaux"

# pdfminer logs one line per malformed object; leases exported from Word are full of them
NOISY_LOGGERS = [
    "pdfminer", "pdfminer.six", "pdfminer.pdfinterp", "pdfminer.pdfpage", "pdfminer.psparser",
    "pdfplumber",
    "multipart", "python_multipart", "python_multipart.multipart",
    "httpx", "urllib3",
    "uvicorn.access",
]


def go_quiet(default_level: str = "INFO") -> logging.Logger:
    """
    Configure process-wide logging once:
      - root logger at LEXBAUX_LOG_LEVEL (default INFO)
      - PDF stack and multipart parser silenced
      - the "lexbaux" logger writes to stdout
    Safe to call more than once (handlers are not duplicated).
    """
    os.environ.setdefault("PYTHONUTF8", "1")
    os.environ.setdefault("PYTHONIOENCODING", "utf-8")

    # --- Ensure stdout uses UTF-8 on Windows (accents in findings) ---
    if sys.platform.startswith("win"):
        try:
            sys.stdout.reconfigure(encoding="utf-8")
            sys.stderr.reconfigure(encoding="utf-8")
        except (AttributeError, OSError):
            pass

    lvl_name = os.getenv("LEXBAUX_LOG_LEVEL", default_level).upper()
    lvl = getattr(logging, lvl_name, logging.INFO)
    logging.basicConfig(
        level=lvl,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    for name in NOISY_LOGGERS:
        lg = logging.getLogger(name)
        lg.setLevel(logging.ERROR)
        lg.propagate = False

    # pdfminer emits UserWarnings for broken fonts; route them to logging
    logging.captureWarnings(True)
    warnings.filterwarnings("ignore", module="pdfminer")

    app_logger = logging.getLogger(APP_LOGGER)
    app_logger.setLevel(lvl)
    app_logger.propagate = False
    if not app_logger.handlers:
        h = logging.StreamHandler(sys.stdout)
        h.setLevel(lvl)
        h.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
        app_logger.addHandler(h)
    return app_logger
