import sys
import os
from dotenv import load_dotenv

def get_base_path():
    """Get absolute path to resource, works for dev and for PyInstaller"""
    if getattr(sys, 'frozen', False):
        return sys._MEIPASS
    else:
        return os.path.dirname(os.path.abspath(__file__))

def get_app_data_path():
    """Get writable path for logs and config"""
    if getattr(sys, 'frozen', False):
        path = os.path.join(os.path.expanduser("~"), "Library", "Application Support", "Nova")
    else:
        path = os.path.dirname(os.path.abspath(__file__))

    if not os.path.exists(path):
        os.makedirs(path, exist_ok=True)
    return path

load_dotenv()

# ─────────────────────── Ollama Config ──────────────────────────────────────
# Base URL only; the client appends /api/generate and /api/tags itself.
OLLAMA_BASE_URL = os.getenv("OLLAMA_BASE_URL", "http://localhost:11434")
OLLAMA_MODEL = os.getenv("OLLAMA_MODEL", "llama3.2:latest")

# Upper bound for one generate request, in seconds.
OLLAMA_TIMEOUT = int(os.getenv("OLLAMA_TIMEOUT", "60"))

# ─────────────────────── OS Automation ──────────────────────────────────────
# Where installed .app bundles are enumerated from
APPLICATIONS_DIR = os.getenv("APPLICATIONS_DIR", "/Applications")

# Per-process limit for open / osascript invocations
COMMAND_TIMEOUT = int(os.getenv("COMMAND_TIMEOUT", "30"))

# Longest wait honoured for a model-supplied action delay, in seconds
MAX_ACTION_DELAY = float(os.getenv("MAX_ACTION_DELAY", "10"))

# ─────────────────────── Logging ────────────────────────────────────────────
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# ─────────────────────── Paths ──────────────────────────────────────────────
BASE_DIR = get_base_path()
DATA_DIR = get_app_data_path()
LOGS_DIR = os.path.join(DATA_DIR, "logs")

if not os.path.exists(LOGS_DIR):
    os.makedirs(LOGS_DIR, exist_ok=True)
