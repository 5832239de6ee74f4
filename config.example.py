# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
See src/ambitask/config.py for parsing rules and defaults.

This file exists to make the repo self-documenting even without opening config.py.
"""

ENV_VARS = {
    # App / logging
    "AMBITASK_APP_NAME": "App display name (default: ambitask).",
    "AMBITASK_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    "AMBITASK_DATA_DIR": "Local data directory for logs and the default store (default: .local/ambitask).",
    # Server
    "AMBITASK_STORE_URL": (
        "Store connection string: sqlite:///relative.sqlite3, sqlite:////abs/path.sqlite3 or a plain path "
        "(default: sqlite:///<data_dir>/tasks.sqlite3). DATABASE_URL is used when this is unset."
    ),
    "AMBITASK_HOST": "Listen address for ambitask-server (default: 127.0.0.1).",
    "AMBITASK_PORT": "Listen port (default: PORT, then 5000).",
    "AMBITASK_CORS_ORIGINS": "Comma/space separated allowed origins (default: *).",
    # Console client
    "AMBITASK_API_URL": "Base URL of the Task API (default: http://127.0.0.1:<port>).",
    "AMBITASK_API_TIMEOUT_SECONDS": "Per-request timeout (default: 10).",
    "AMBITASK_WATCH_INTERVAL_SECONDS": "Due-task watcher period (default: 1).",
    "AMBITASK_NOTIFY_DISPLAY_SECONDS": "How long the inline 'is due' banner stays (default: 5).",
    "AMBITASK_SOUND": "Ring the terminal bell on due tasks (true/false, default: true).",
}
