"""Firebase Realtime Database store for user fallback records."""

import asyncio
import time
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

import firebase_admin
from firebase_admin import credentials, db as firebase_db

from fallback_webhook.config import Settings, settings as default_settings
from fallback_webhook.exceptions import ConfigurationError, StoreReadError, StoreWriteError
from fallback_webhook.models.fallback import UserFallbackRecord
from fallback_webhook.storage.base import FallbackStore
from fallback_webhook.utils.logging import get_logger, log_store_operation

logger = get_logger(__name__)

SYSTEM_STATUS_PATH = "system_status"


def initialize_firebase(config: Optional[Settings] = None) -> firebase_admin.App:
    """Initialize the default Firebase app from service account settings."""
    config = config or default_settings

    missing = config.missing_firebase_settings()
    if missing:
        for name in missing:
            logger.error("Missing required environment variable", variable=name)
        raise ConfigurationError(
            f"Missing required environment variables: {', '.join(missing)}"
        )

    try:
        return firebase_admin.get_app()
    except ValueError:
        pass

    logger.info(
        "Attempting to connect to Firebase",
        project_id=config.FIREBASE_PROJECT_ID,
        client_email=config.FIREBASE_CLIENT_EMAIL,
        database_url=config.FIREBASE_DATABASE_URL,
    )

    try:
        cred = credentials.Certificate(config.firebase_service_account())
        return firebase_admin.initialize_app(
            cred,
            {"databaseURL": config.FIREBASE_DATABASE_URL}
        )
    except (ValueError, IOError) as e:
        logger.error("Firebase initialization error", error=str(e))
        raise ConfigurationError(f"Firebase initialization failed: {e}") from e


class FirebaseFallbackStore(FallbackStore):
    """Fallback records kept under ``<users_path>/<userId>``.

    The Admin SDK is blocking, so every call runs on a small thread pool.
    """

    backend_name = "firebase"

    def __init__(
        self,
        app: Optional[firebase_admin.App] = None,
        users_path: Optional[str] = None,
        max_workers: int = 4
    ):
        self.app = app
        self.users_path = (users_path or default_settings.FIREBASE_USERS_PATH).strip("/")
        self.executor = ThreadPoolExecutor(max_workers=max_workers)

    def _reference(self, path: str):
        return firebase_db.reference(path, app=self.app)

    def _user_path(self, key: str) -> str:
        return f"{self.users_path}/{key}"

    async def _run(self, func, *args):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self.executor, func, *args)

    async def get(self, key: str) -> Optional[UserFallbackRecord]:
        path = self._user_path(key)
        started = time.perf_counter()

        def _read():
            return self._reference(path).get()

        try:
            raw = await self._run(_read)
        except Exception as e:
            log_store_operation(
                logger, self.backend_name, "read", path, False,
                _elapsed_ms(started), error=str(e)
            )
            raise StoreReadError(f"Failed to read {path}: {e}") from e

        log_store_operation(
            logger, self.backend_name, "read", path, True, _elapsed_ms(started),
            found=raw is not None
        )
        return self.parse_record(key, raw)

    async def update(self, key: str, fields: Mapping[str, Any]) -> None:
        path = self._user_path(key)
        payload = dict(fields)
        started = time.perf_counter()

        def _write():
            self._reference(path).update(payload)

        try:
            await self._run(_write)
        except Exception as e:
            log_store_operation(
                logger, self.backend_name, "update", path, False,
                _elapsed_ms(started), error=str(e)
            )
            raise StoreWriteError(f"Failed to update {path}: {e}") from e

        log_store_operation(
            logger, self.backend_name, "update", path, True, _elapsed_ms(started)
        )

    async def check_connection(self) -> Dict[str, Any]:
        """Write then read ``system_status`` to confirm connectivity."""
        status = {"write": False, "read": False}
        marker = {
            "last_connection": datetime.now(timezone.utc).isoformat(),
            "status": "online",
        }

        def _write():
            self._reference(SYSTEM_STATUS_PATH).set(marker)

        def _read():
            return self._reference(SYSTEM_STATUS_PATH).get()

        try:
            await self._run(_write)
            status["write"] = True
            logger.info("Firebase write test successful")
        except Exception as e:
            logger.error("Firebase write test failed", error=str(e))

        try:
            await self._run(_read)
            status["read"] = True
            logger.info("Firebase read test successful")
        except Exception as e:
            logger.error("Firebase read test failed", error=str(e))

        return status

    def close(self) -> None:
        self.executor.shutdown(wait=False)


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)
