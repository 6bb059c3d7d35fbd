"""Console email backend: logs instead of sending."""

import logging
from typing import Any, Dict, List, Optional

from ..monitoring.prometheus_metrics import prometheus_metrics

logger = logging.getLogger(__name__)


class ConsoleEmailService:
    """Email backend used in development and tests."""

    provider_name = "console"

    def __init__(self) -> None:
        self.outbox: List[Dict[str, Any]] = []

    def send_email(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        text_content: Optional[str] = None,
    ) -> Dict[str, Any]:
        message = {"to": to_email, "subject": subject, "html": html_content, "text": text_content}
        self.outbox.append(message)
        logger.info(f"[console email] to={to_email} subject={subject!r}")
        prometheus_metrics.inc_email(self.provider_name, "sent")
        return {"id": f"console-{len(self.outbox)}"}
