"""
NutriTrack Backend — Document Store Bootstrap
==============================================

What:  Builds and disposes the Firestore AsyncClient used by the whole app.
Why:   One place owns credentials and client lifecycle. The client is an
       explicit object handed to the document-access layer, never a
       process-global Firebase app, so tests can inject a fake.
How:   `create_store_client()` is called from the FastAPI lifespan; the
       returned client lives on `app.state` until `close_store_client()`
       runs at shutdown.

Credential resolution:
    1. FIREBASE_CREDENTIALS_PATH points at an existing key file
       → service-account credentials, project taken from the key unless
         GOOGLE_CLOUD_PROJECT overrides it
    2. Otherwise → Application Default Credentials. With
       FIRESTORE_EMULATOR_HOST set, the SDK talks to the local emulator.

Concurrency:
    The AsyncClient is safe to share between concurrent requests; each call
    is an independent gRPC round trip and nothing here adds locking.
"""

import inspect
import logging
from pathlib import Path
from typing import Optional

from google.auth.exceptions import GoogleAuthError
from google.cloud import firestore
from google.oauth2 import service_account

from nutritrack.config import Settings, settings
from nutritrack.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def create_store_client(config: Optional[Settings] = None) -> firestore.AsyncClient:
    """
    Create a Firestore AsyncClient from application settings.

    Raises:
        ConfigurationError: the key file exists but cannot be loaded, or the
            SDK cannot resolve credentials/project.
    """
    config = config or settings
    key_path = (
        Path(config.firebase_credentials_path)
        if config.firebase_credentials_path
        else None
    )

    try:
        if key_path is not None and key_path.is_file():
            credentials = service_account.Credentials.from_service_account_file(
                str(key_path)
            )
            project = config.google_cloud_project or credentials.project_id
            logger.info(
                "Connecting to Firestore project %s (database=%s) with key file %s",
                project,
                config.firestore_database,
                key_path,
            )
            return firestore.AsyncClient(
                project=project,
                credentials=credentials,
                database=config.firestore_database,
            )

        logger.info(
            "No key file at %s; using application default credentials "
            "(project=%s, database=%s)",
            key_path,
            config.google_cloud_project,
            config.firestore_database,
        )
        return firestore.AsyncClient(
            project=config.google_cloud_project,
            database=config.firestore_database,
        )
    except (GoogleAuthError, ValueError, OSError) as e:
        raise ConfigurationError(
            message=f"Could not create the Firestore client: {e}",
            context={
                "credentials_path": str(key_path) if key_path else None,
                "project": config.google_cloud_project,
            },
        ) from e


async def close_store_client(client) -> None:
    """
    What:  Releases the client's gRPC channel.
    When:  Called during application shutdown (lifespan handler).
    """
    close = getattr(client, "close", None)
    if close is None:
        return
    result = close()
    if inspect.isawaitable(result):
        await result
