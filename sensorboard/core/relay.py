# -*- coding: utf-8 -*-
# sensorboard/core/relay.py - relay mode (AUTO/MANUAL) and status (ON/OFF) control
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from sensorboard.core.models import RecordFormatError, RelayMode, RelayState, RelayStatus
from sensorboard.core.upstream import UpstreamClient, UpstreamError

logger = logging.getLogger(__name__)


class RelayController:
    """Local copy of the upstream relay plus the transitions allowed on it.

    The local state only ever changes to what the upstream reports. A failed
    write is followed by a re-read instead of a local rollback.
    """

    def __init__(self, upstream: UpstreamClient):
        self.upstream = upstream
        self.state: Optional[RelayState] = None
        self.busy = False
        self.error: Optional[str] = None

    @property
    def mode(self) -> Optional[RelayMode]:
        return self.state.mode if self.state else None

    @property
    def status(self) -> Optional[RelayStatus]:
        return self.state.reported_status if self.state else None

    async def refresh(self, clear_error: bool = True) -> Optional[RelayState]:
        """Re-read relay state from the upstream; keeps the last state on failure."""
        try:
            state = RelayState.from_payload(await self.upstream.get_relay())
        except (UpstreamError, RecordFormatError) as exc:
            logger.warning("Error fetching relay status: %s", exc)
            self.error = str(exc)
            return self.state
        self.state = state
        if clear_error:
            self.error = None
        return state

    async def set_mode(self, mode: RelayMode | str) -> bool:
        target = RelayMode.parse(mode)
        return await self._update({"mode": target.value})

    async def set_status(self, status: RelayStatus | str) -> bool:
        if self.mode is not RelayMode.MANUAL:
            logger.debug("Relay status change ignored in mode %s", self.mode)
            return False
        target = RelayStatus.parse(status)
        return await self._update({"reported_status": target.value})

    async def toggle_mode(self) -> bool:
        if self.state is None:
            logger.debug("Relay mode toggle ignored: state unknown")
            return False
        return await self.set_mode(self.state.mode.toggled())

    async def toggle_status(self) -> bool:
        # only reachable in MANUAL mode
        if self.state is None or self.state.mode is not RelayMode.MANUAL:
            logger.debug("Relay status toggle ignored in mode %s", self.mode)
            return False
        return await self.set_status(self.state.reported_status.toggled())

    async def _update(self, changes: Dict[str, Any]) -> bool:
        if self.busy:
            logger.debug("Relay update %s ignored: another update in flight", changes)
            return False
        self.busy = True
        self.error = None
        try:
            state = RelayState.from_payload(await self.upstream.update_relay(changes))
        except (UpstreamError, RecordFormatError) as exc:
            logger.warning("Error updating relay %s: %s", changes, exc)
            self.error = str(exc)
            await self.refresh(clear_error=False)
            return False
        finally:
            self.busy = False
        prev = self.state
        self.state = state
        logger.info(
            "Relay updated: mode %s -> %s, status %s -> %s",
            prev.mode.value if prev else None,
            state.mode.value,
            prev.reported_status.value if prev else None,
            state.reported_status.value,
        )
        return True

    def export(self) -> Optional[Dict[str, Any]]:
        return self.state.to_dict() if self.state else None


__all__ = ["RelayController"]
