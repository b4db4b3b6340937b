"""
Wiring for the streak core.

Builds the explicitly owned objects an app needs: one store, one clock,
one tracker and the gated challenge service around it.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from noor.core.clock import Clock, SystemClock
from noor.core.config import Settings, settings as default_settings, validate_config
from noor.core.errors import ConfigError, StorageError
from noor.core.logging import configure_logging
from noor.features.challenges.service import ChallengeService
from noor.features.entitlements.service import (
    EntitlementService,
    StaticSubscriptionStatus,
    SubscriptionStatusProvider,
)
from noor.features.storage.provider import InMemoryStore, KeyValueStore
from noor.features.storage.service import create_store
from noor.features.streaks.service import StreakTracker

logger = logging.getLogger(__name__)


@dataclass
class NoorCore:
    settings: Settings
    store: KeyValueStore
    clock: Clock
    tracker: StreakTracker
    entitlements: EntitlementService
    challenges: ChallengeService


def create_clock(settings_obj: Optional[Settings] = None) -> Clock:
    cfg = settings_obj or default_settings
    try:
        tz = cfg.tzinfo()
    except ConfigError:
        logger.warning("[clock] falling back to device timezone", extra={"timezone": cfg.TIMEZONE})
        tz = None
    return SystemClock(tz)


def _create_store_or_memory(cfg: Settings) -> KeyValueStore:
    try:
        return create_store(cfg)
    except StorageError as exc:
        # State lives in memory for this process; completions still work.
        logger.warning(
            "[storage] falling back to in-memory store",
            extra={"backend": cfg.STATE_BACKEND, "error_code": exc.code, "error": exc.message},
        )
        return InMemoryStore()


def create_core(
    settings_obj: Optional[Settings] = None,
    *,
    store: Optional[KeyValueStore] = None,
    clock: Optional[Clock] = None,
    subscription: Optional[SubscriptionStatusProvider] = None,
    configure_logs: bool = True,
) -> NoorCore:
    """Validate config, then load the tracker and apply lapse correction."""
    cfg = settings_obj or default_settings
    if configure_logs:
        configure_logging(cfg.ENV, cfg.LOG_LEVEL)
    validate_config(settings_obj=cfg)

    if store is None:
        store = _create_store_or_memory(cfg)
    clock = clock or create_clock(cfg)
    tracker = StreakTracker(store, clock)
    entitlements = EntitlementService.from_settings(subscription or StaticSubscriptionStatus(False), cfg)

    return NoorCore(
        settings=cfg,
        store=store,
        clock=clock,
        tracker=tracker,
        entitlements=entitlements,
        challenges=ChallengeService(tracker, entitlements, clock),
    )
