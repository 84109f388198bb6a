import json
import threading
from typing import Dict, List, Optional

import requests

from utils.config import Config
from utils.models import Medicine
from utils.utils import setup_logger

logger = setup_logger(__name__)

LOAD_ERROR_MESSAGE = "Failed to load medicines. Please try again later."


class DataLoadError(Exception):
    """Raised when the medicine dataset cannot be fetched or parsed."""

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail
        self.user_message = LOAD_ERROR_MESSAGE


class MedicineCatalog:
    """
    Read-only medicine dataset loaded from a URL or a local JSON file.
    A successful load is cached; a failed one is not, so the next view
    fetches again.
    """

    def __init__(self, url: Optional[str] = None, path: Optional[str] = None, timeout: Optional[int] = None):
        self.url = url if url is not None else Config.MEDICINE_DATA_URL
        self.path = path if path is not None else Config.MEDICINE_DATA_PATH
        self.timeout = timeout or Config.HTTP_TIMEOUT_SECONDS
        self._medicines: Optional[List[Medicine]] = None
        self._by_id: Dict[int, Medicine] = {}
        self._lock = threading.Lock()

    @property
    def loaded(self) -> bool:
        return self._medicines is not None

    def load(self) -> List[Medicine]:
        with self._lock:
            if self._medicines is None:
                raw = self._fetch_from_url() if self.url else self._read_from_file()
                self._medicines = self._parse(raw)
                self._by_id = {m.id: m for m in self._medicines}
                logger.info(f"Loaded {len(self._medicines)} medicines")
            return self._medicines

    def get(self, medicine_id: int) -> Optional[Medicine]:
        self.load()
        return self._by_id.get(medicine_id)

    def _fetch_from_url(self):
        try:
            response = requests.get(self.url, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"Failed to load medicine data: {e}")
            raise DataLoadError(f"Network error: {e}") from e

        if not response.ok:
            logger.error(f"Failed to load medicine data: HTTP {response.status_code}")
            raise DataLoadError(f"HTTP error! status: {response.status_code}")

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Failed to parse medicine data: {e}")
            raise DataLoadError(f"Invalid JSON: {e}") from e

    def _read_from_file(self):
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to load medicine data from {self.path}: {e}")
            raise DataLoadError(str(e)) from e

    def _parse(self, raw) -> List[Medicine]:
        if not isinstance(raw, list):
            logger.error("Medicine data is not a JSON array")
            raise DataLoadError("Medicine data is not a JSON array")

        medicines = []
        for item in raw:
            if not isinstance(item, dict):
                logger.warning(f"Skipping malformed medicine record: {item!r}")
                continue
            try:
                medicines.append(Medicine.from_dict(item))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping medicine record without a valid id: {e}")
        return medicines
