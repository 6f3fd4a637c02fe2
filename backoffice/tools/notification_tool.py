import logging
from typing import Any, Dict, List, Optional

from backoffice.models.factor import FACTOR_STATUS_DISPLAY_NAMES, Factor, FactorStatus

logger = logging.getLogger(__name__)

class NotificationTool:
    """
    Tells a factor's creator and customer that its status moved.
    The panel inbox is the only channel; delivery is logged.
    """
    CHANNELS = ("panel",)

    def build_payload(self, factor: Factor, previous: FactorStatus, target: FactorStatus) -> Dict[str, Any]:
        return {
            "factorId": factor.id,
            "factorName": factor.name or factor.id,
            "previousStatus": previous.value,
            "status": target.value,
            "statusLabel": FACTOR_STATUS_DISPLAY_NAMES[target],
        }

    async def notify_status_change(
        self,
        factor: Factor,
        previous: FactorStatus,
        target: FactorStatus,
        channels: Optional[List[str]] = None
    ) -> List[Dict[str, Any]]:
        """Returns one delivered payload per (recipient, channel)."""
        recipients = [u for u in (factor.creator_user_id, factor.customer_user_id) if u]
        payload = self.build_payload(factor, previous, target)

        delivered = []
        for channel in channels or ["panel"]:
            if channel not in self.CHANNELS:
                logger.warning(f"Unknown notification channel {channel}, skipping")
                continue
            for user in recipients:
                await self._send_panel(user, payload)
                delivered.append({"userId": user, "channel": channel, **payload})
        return delivered

    async def _send_panel(self, user: str, payload: Dict[str, Any]):
        logger.info(
            f"[PANEL] To {user} | Factor {payload['factorName']}: "
            f"{payload['previousStatus']} -> {payload['status']} ({payload['statusLabel']})"
        )

notification_tool = NotificationTool()
