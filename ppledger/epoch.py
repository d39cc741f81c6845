"""Epoch bookkeeping and slot timing."""

from __future__ import annotations

import time
from dataclasses import dataclass, field, replace

from ppledger.module import Module


def _now() -> int:
    return int(time.time())


@dataclass
class EpochInfo:
    """Slot and time boundaries of an epoch, its nonce and its slot leaders."""

    number: int = 0
    start_time: int = 0
    end_time: int = 0
    start_slot: int = 0
    end_slot: int = 0
    nonce: str = ""
    slot_leaders: dict[int, str] = field(default_factory=dict)


class EpochManager(Module):
    """Tracks epochs, their slot ranges and slot leader assignments."""

    def __init__(self, slots_per_epoch: int = 21600, slot_duration: int = 1) -> None:
        super().__init__("consensus.epoch_manager")
        self._slots_per_epoch = slots_per_epoch
        self._slot_duration = slot_duration
        self._genesis_time = _now()
        self._epochs: dict[int, EpochInfo] = {}
        self._cached_current_epoch = 0
        self._last_update_time = 0
        self.log.info(
            f"Epoch manager initialized: {slots_per_epoch} slots per epoch, "
            f"{slot_duration}s slot duration"
        )

    def _build_info(self, epoch_number: int, nonce: str = "") -> EpochInfo:
        start_slot = epoch_number * self._slots_per_epoch
        end_slot = start_slot + self._slots_per_epoch - 1
        return EpochInfo(
            number=epoch_number,
            start_time=self.slot_start_time(start_slot),
            end_time=self.slot_end_time(end_slot),
            start_slot=start_slot,
            end_slot=end_slot,
            nonce=nonce,
        )

    def initialize_epoch(self, epoch_number: int, nonce: str) -> None:
        """Record ``epoch_number`` with ``nonce``, replacing any earlier record."""
        info = self._build_info(epoch_number, nonce)
        self._epochs[epoch_number] = info
        self.log.info(
            f"Initialized epoch {epoch_number} "
            f"[slots {info.start_slot}-{info.end_slot}]"
        )

    def finalize_epoch(self, epoch_number: int, block_hashes: list[str]) -> None:
        if epoch_number not in self._epochs:
            self.log.warning(f"Cannot finalize uninitialized epoch {epoch_number}")
            return
        self.log.info(
            f"Finalized epoch {epoch_number} with {len(block_hashes)} blocks"
        )

    def get_epoch_info(self, epoch_number: int) -> EpochInfo:
        """Return a copy of the recorded epoch, or its computed boundaries if unknown."""
        info = self._epochs.get(epoch_number)
        if info is None:
            return self._build_info(epoch_number)
        return replace(info, slot_leaders=dict(info.slot_leaders))

    def current_epoch_info(self) -> EpochInfo:
        return self.get_epoch_info(self.current_epoch())

    def current_epoch(self) -> int:
        """Return the current epoch; recomputed at most once per second."""
        now = _now()
        if now == self._last_update_time:
            return self._cached_current_epoch
        self._cached_current_epoch = self.epoch_from_slot(self.current_slot())
        self._last_update_time = now
        return self._cached_current_epoch

    def is_epoch_initialized(self, epoch_number: int) -> bool:
        return epoch_number in self._epochs

    def set_slot_leader(self, epoch_number: int, slot: int, leader: str) -> None:
        info = self._epochs.get(epoch_number)
        if info is None:
            self.log.warning(
                f"Cannot set slot leader for uninitialized epoch {epoch_number}"
            )
            return
        info.slot_leaders[slot] = leader

    def get_slot_leader(self, epoch_number: int, slot: int) -> str:
        """Return the leader assigned to ``slot``, or an empty string."""
        info = self._epochs.get(epoch_number)
        if info is None:
            return ""
        return info.slot_leaders.get(slot, "")

    @property
    def genesis_time(self) -> int:
        return self._genesis_time

    @genesis_time.setter
    def genesis_time(self, timestamp: int) -> None:
        self._genesis_time = timestamp
        self.log.info(f"Genesis time set to {timestamp}")

    @property
    def slots_per_epoch(self) -> int:
        return self._slots_per_epoch

    @slots_per_epoch.setter
    def slots_per_epoch(self, slots: int) -> None:
        self._slots_per_epoch = slots
        self.log.info(f"Slots per epoch updated to {slots}")

    @property
    def slot_duration(self) -> int:
        return self._slot_duration

    @slot_duration.setter
    def slot_duration(self, duration: int) -> None:
        self._slot_duration = duration
        self.log.info(f"Slot duration updated to {duration}s")

    def current_slot(self) -> int:
        now = _now()
        if now < self._genesis_time:
            return 0
        return (now - self._genesis_time) // self._slot_duration

    def epoch_from_slot(self, slot: int) -> int:
        return slot // self._slots_per_epoch

    def slot_in_epoch(self, slot: int) -> int:
        return slot % self._slots_per_epoch

    def slot_start_time(self, slot: int) -> int:
        return self._genesis_time + slot * self._slot_duration

    def slot_end_time(self, slot: int) -> int:
        return self.slot_start_time(slot) + self._slot_duration


class SlotTimer(Module):
    """Slot arithmetic relative to a given genesis time."""

    def __init__(self, slot_duration: int = 1) -> None:
        super().__init__("consensus.slot_timer")
        self._slot_duration = slot_duration
        self.log.info(f"Slot timer initialized with duration: {slot_duration}s")

    def current_slot(self, genesis_time: int) -> int:
        now = self.current_time()
        if now < genesis_time:
            return 0
        return (now - genesis_time) // self._slot_duration

    def slot_start_time(self, slot: int, genesis_time: int) -> int:
        return genesis_time + slot * self._slot_duration

    def slot_end_time(self, slot: int, genesis_time: int) -> int:
        return self.slot_start_time(slot, genesis_time) + self._slot_duration

    def is_time_in_slot(self, timestamp: int, slot: int, genesis_time: int) -> bool:
        """Return whether ``timestamp`` lies in ``[slot start, slot end)``."""
        start = self.slot_start_time(slot, genesis_time)
        end = self.slot_end_time(slot, genesis_time)
        return start <= timestamp < end

    def time_until_next_slot(self, genesis_time: int) -> int:
        now = self.current_time()
        next_slot = self.current_slot(genesis_time) + 1
        return self.slot_start_time(next_slot, genesis_time) - now

    def time_until_slot(self, slot: int, genesis_time: int) -> int:
        """Seconds until ``slot`` starts; negative once it has started."""
        return self.slot_start_time(slot, genesis_time) - self.current_time()

    def current_time(self) -> int:
        """Current Unix time in whole seconds."""
        return _now()

    @property
    def slot_duration(self) -> int:
        return self._slot_duration

    @slot_duration.setter
    def slot_duration(self, duration: int) -> None:
        self._slot_duration = duration
        self.log.info(f"Slot duration updated to {duration}s")