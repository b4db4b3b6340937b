"""
noor/features/entitlements/service.py

Premium access gate.

Handles:
- Subscription status lookup through a pluggable provider (the billing SDK
  lives outside this package)
- Debug paywall bypass
- can_access_challenge: free challenges are always open, premium ones need
  an active entitlement
"""

import logging
from typing import Optional, Protocol

from noor.core.config import Settings, settings as default_settings
from noor.models.challenge import Challenge

logger = logging.getLogger(__name__)


class SubscriptionStatusProvider(Protocol):
    """Answers whether the user currently holds the pro entitlement."""

    def has_active_entitlement(self) -> bool:
        ...


class StaticSubscriptionStatus:
    """Provider with a fixed answer, for tests and offline use."""

    def __init__(self, active: bool = False):
        self.active = active

    def has_active_entitlement(self) -> bool:
        return self.active


class EntitlementService:
    def __init__(self, provider: SubscriptionStatusProvider, *, bypass_paywall: bool = False):
        self._provider = provider
        self._bypass_paywall = bypass_paywall

    @classmethod
    def from_settings(
        cls, provider: SubscriptionStatusProvider, settings_obj: Optional[Settings] = None
    ) -> "EntitlementService":
        cfg = settings_obj or default_settings
        return cls(provider, bypass_paywall=cfg.PAYWALL_BYPASS)

    @property
    def is_pro(self) -> bool:
        if self._bypass_paywall:
            return True
        try:
            return bool(self._provider.has_active_entitlement())
        except Exception:
            # Status lookups go to an external SDK; treat any failure as not subscribed.
            logger.warning("[entitlement] status check failed", exc_info=True)
            return False

    def can_access_challenge(self, challenge: Challenge) -> bool:
        if challenge.is_free:
            return True
        allowed = self.is_pro
        if not allowed:
            logger.info(
                "[entitlement] DISALLOWED",
                extra={"challenge_id": challenge.id, "reason": "premium challenge without entitlement"},
            )
        return allowed
