import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from fleet_browser.config.model import GlobalConfig
from fleet_browser.core.view_registry import ViewRegistry
from fleet_browser.services.dataset_service import DatasetManager
from fleet_browser.services.export_service import ExportService
from fleet_browser.services.identity import IdentityProvider, Session, TokenVerifier
from fleet_browser.services.record_service import RecordService

logger = logging.getLogger(__name__)


@dataclass
class AppConfig:
    config_root: Path
    global_config: GlobalConfig
    datasets: DatasetManager

    registry: Optional[ViewRegistry] = None
    record_service: Optional[RecordService] = None
    export_service: Optional[ExportService] = None
    token_verifier: Optional[TokenVerifier] = None

    def identity(self, session_data: Optional[Dict[str, Any]]) -> IdentityProvider:
        """
        Identity for one browser session, rebuilt from its session store.

        The stored session is the browser's claim only: it counts when its
        ID token verifies to the same uid, otherwise the user is read-only.
        """
        session = Session.from_dict(session_data)
        if session is not None:
            verified_uid = self.token_verifier.verify(session.id_token) if self.token_verifier else None
            if verified_uid != session.uid:
                logger.warning("Unverified session treated as signed out", extra={"uid": session.uid})
                session = None
        return IdentityProvider(self.global_config.api_key, session=session)

    def validate(self) -> None:
        """Ensure all required services are attached before the app starts."""
        if self.registry is None:
            raise RuntimeError("AppConfig.registry must be initialized.")
        if self.record_service is None:
            raise RuntimeError("AppConfig.record_service must be initialized.")
        if self.export_service is None:
            raise RuntimeError("AppConfig.export_service must be initialized.")
        if self.token_verifier is None:
            raise RuntimeError("AppConfig.token_verifier must be initialized.")
