import os
import sys
import shlex
import logging

# Config
if getattr(sys, 'frozen', False):
    # Running as compiled exe
    ASSET_DIR = sys._MEIPASS
    DATA_DIR = os.path.dirname(sys.executable)
else:
    ASSET_DIR = os.path.dirname(os.path.abspath(__file__))
    DATA_DIR = os.environ.get("QBANK_DATA_DIR", ASSET_DIR)

UPLOAD_DIR = os.path.join(DATA_DIR, "uploads")
OUTPUT_DIR = os.path.join(DATA_DIR, "output")

# External converter for legacy (MathType / Equation Editor) OLE blobs.
# The blob's temp file path is appended to this command line.
EQUATION_COMMAND = shlex.split(os.environ.get("QBANK_EQUATION_COMMAND", ""))
EQUATION_TIMEOUT = float(os.environ.get("QBANK_EQUATION_TIMEOUT", "30"))

LOG_LEVEL = os.environ.get("QBANK_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = None):
    logging.basicConfig(level=level or LOG_LEVEL, format=LOG_FORMAT)


def ensure_dirs():
    for d in (UPLOAD_DIR, OUTPUT_DIR):
        if not os.path.exists(d):
            os.makedirs(d)
