import os
from dotenv import load_dotenv

load_dotenv()


def _int_env(key, default):
    value = os.getenv(key)
    return int(value) if value else default


class Config:
    DATA_DIR = os.path.join(os.getcwd(), "data")
    MEDICINE_DATA_URL = os.getenv("MEDICINE_DATA_URL")
    MEDICINE_DATA_PATH = os.getenv(
        "MEDICINE_DATA_PATH", os.path.join(DATA_DIR, "processed_medicine_data.json")
    )
    REMINDER_STORE_PATH = os.getenv(
        "REMINDER_STORE_PATH", os.path.join(DATA_DIR, "medicine_reminders.json")
    )
    FLASK_SECRET_KEY = os.getenv("FLASK_SECRET_KEY", "medifind_secret_key")

    REMINDER_POLL_SECONDS = _int_env("REMINDER_POLL_SECONDS", 10)
    NOTIFICATION_TIMEOUT_SECONDS = _int_env("NOTIFICATION_TIMEOUT_SECONDS", 5)
    SEARCH_DEBOUNCE_MS = _int_env("SEARCH_DEBOUNCE_MS", 300)
    SEARCH_RESULT_LIMIT = _int_env("SEARCH_RESULT_LIMIT", 50)
    SUGGESTION_LIMIT = _int_env("SUGGESTION_LIMIT", 10)
    SEARCH_SESSION_LIMIT = _int_env("SEARCH_SESSION_LIMIT", 200)
    SEARCH_SESSION_IDLE_SECONDS = _int_env("SEARCH_SESSION_IDLE_SECONDS", 600)
    HTTP_TIMEOUT_SECONDS = _int_env("HTTP_TIMEOUT_SECONDS", 8)

    @staticmethod
    def validate():
        """Validate timer and limit settings."""
        for key in (
            "REMINDER_POLL_SECONDS",
            "NOTIFICATION_TIMEOUT_SECONDS",
            "SEARCH_DEBOUNCE_MS",
            "SEARCH_RESULT_LIMIT",
            "SUGGESTION_LIMIT",
            "SEARCH_SESSION_LIMIT",
            "SEARCH_SESSION_IDLE_SECONDS",
            "HTTP_TIMEOUT_SECONDS",
        ):
            if getattr(Config, key) <= 0:
                raise ValueError(f"{key} must be a positive integer")
        if not Config.MEDICINE_DATA_URL and not Config.MEDICINE_DATA_PATH:
            print("Warning: no medicine data source configured.")
