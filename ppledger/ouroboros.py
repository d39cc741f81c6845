"""Slot-based proof-of-stake consensus with stake-weighted leader selection."""

from __future__ import annotations

import time
from dataclasses import dataclass

from ppledger.errors import LedgerError
from ppledger.interfaces import Block, BlockChain
from ppledger.module import Module

_MASK64 = (1 << 64) - 1
_HASH_SEED = 0x123456789ABCDEF0
_HASH_PRIME = 0x100000001B3


@dataclass(frozen=True)
class StakeholderInfo:
    """A stakeholder identifier and its stake."""

    id: str
    stake: int


def _now() -> int:
    return int(time.time())


class Ouroboros(Module):
    """Consensus state: stakeholders, slot timing and validation rules."""

    def __init__(self, slot_duration: int = 1, slots_per_epoch: int = 21600) -> None:
        super().__init__("consensus")
        self._stakeholders: dict[str, int] = {}
        self._slot_duration = slot_duration
        self._slots_per_epoch = slots_per_epoch
        self._genesis_time = _now()
        self.log.info(
            f"Ouroboros consensus initialized with slot duration: {slot_duration}s, "
            f"slots per epoch: {slots_per_epoch}"
        )

    # Stakeholder management

    def register_stakeholder(self, stakeholder_id: str, stake: int) -> None:
        """Register or replace a stakeholder; a zero stake is refused."""
        if stake == 0:
            self.log.warning(
                f"Cannot register stakeholder '{stakeholder_id}' with zero stake"
            )
            return
        self._stakeholders[stakeholder_id] = stake
        self.log.info(f"Registered stakeholder '{stakeholder_id}' with stake: {stake}")

    def update_stake(self, stakeholder_id: str, new_stake: int) -> None:
        """Change the stake of a known stakeholder; unknown ids are ignored."""
        old_stake = self._stakeholders.get(stakeholder_id)
        if old_stake is None:
            self.log.warning(
                f"Cannot update stake for unknown stakeholder: {stakeholder_id}"
            )
            return
        self._stakeholders[stakeholder_id] = new_stake
        self.log.info(
            f"Updated stake for '{stakeholder_id}' from {old_stake} to {new_stake}"
        )

    def remove_stakeholder(self, stakeholder_id: str) -> bool:
        """Remove a stakeholder; return False if it was not registered."""
        if stakeholder_id not in self._stakeholders:
            self.log.warning(f"Cannot remove unknown stakeholder: {stakeholder_id}")
            return False
        del self._stakeholders[stakeholder_id]
        self.log.info(f"Removed stakeholder: {stakeholder_id}")
        return True

    # Slots and epochs

    def current_slot(self) -> int:
        now = _now()
        if now < self._genesis_time:
            return 0
        return (now - self._genesis_time) // self._slot_duration

    def current_epoch(self) -> int:
        return self.current_slot() // self._slots_per_epoch

    def slot_in_epoch(self, slot: int) -> int:
        return slot % self._slots_per_epoch

    def slot_start_time(self, slot: int) -> int:
        return self._genesis_time + slot * self._slot_duration

    # Leader selection

    def get_slot_leader(self, slot: int) -> str:
        """Return the leader of ``slot``; raises if no stakeholders are registered."""
        if not self._stakeholders:
            raise LedgerError("No stakeholders registered", 1)
        return self._select_slot_leader(slot, slot // self._slots_per_epoch)

    def is_slot_leader(self, slot: int, stakeholder_id: str) -> bool:
        try:
            return self.get_slot_leader(slot) == stakeholder_id
        except LedgerError:
            return False

    def _select_slot_leader(self, slot: int, epoch: int) -> str:
        total = self.total_stake()
        if total == 0:
            return ""
        digest = self._hash_slot_and_epoch(slot, epoch)
        position = int.from_bytes(digest[:8].encode("ascii"), "big") % total
        ordered = sorted(self._stakeholders.items())
        cumulative = 0
        for stakeholder_id, stake in ordered:
            cumulative += stake
            if position < cumulative:
                return stakeholder_id
        return ordered[0][0]

    @staticmethod
    def _hash_slot_and_epoch(slot: int, epoch: int) -> str:
        value = _HASH_SEED
        for byte in f"slot:{slot}:epoch:{epoch}".encode("utf-8"):
            value ^= byte
            value = (value * _HASH_PRIME) & _MASK64
        return f"{value:016x}"

    # Validation

    def validate_block(self, block: Block, chain: BlockChain) -> bool:
        """Check ``block`` against the rules and ``chain``; raises on the first failure."""
        slot = block.slot
        if block.slot_leader != self._select_slot_leader(
            slot, slot // self._slots_per_epoch
        ):
            raise LedgerError(f"Invalid slot leader for block at slot {slot}", 2)

        start = self.slot_start_time(slot)
        if not start <= block.timestamp < start + self._slot_duration:
            raise LedgerError("Block timestamp outside valid slot range", 3)

        if len(chain) > 0:
            latest = chain.latest_block()
            if latest is not None:
                if block.previous_hash != latest.hash:
                    raise LedgerError("Block previous hash does not match chain", 4)
                if block.index != latest.index + 1:
                    raise LedgerError("Block index mismatch", 5)

        if block.calculate_hash() != block.hash:
            raise LedgerError("Block hash validation failed", 6)
        return True

    def should_switch_chain(
        self, current_chain: BlockChain, candidate_chain: BlockChain
    ) -> bool:
        """Prefer a longer candidate; raises if it is too sparse."""
        candidate_size = len(candidate_chain)
        if candidate_size <= len(current_chain):
            return False
        latest = candidate_chain.latest_block()
        if latest is not None and not self._chain_density_ok(
            candidate_chain, 0, latest.slot
        ):
            raise LedgerError("Candidate chain density too low", 7)
        return True

    @staticmethod
    def _chain_density_ok(chain: BlockChain, from_slot: int, to_slot: int) -> bool:
        if to_slot <= from_slot:
            return True
        return len(chain) / (to_slot - from_slot + 1) >= 0.5

    # Configuration

    @property
    def slot_duration(self) -> int:
        return self._slot_duration

    @slot_duration.setter
    def slot_duration(self, seconds: int) -> None:
        self._slot_duration = seconds
        self.log.info(f"Slot duration updated to {seconds} seconds")

    @property
    def slots_per_epoch(self) -> int:
        return self._slots_per_epoch

    @slots_per_epoch.setter
    def slots_per_epoch(self, slots: int) -> None:
        self._slots_per_epoch = slots
        self.log.info(f"Slots per epoch updated to {slots}")

    @property
    def genesis_time(self) -> int:
        return self._genesis_time

    @genesis_time.setter
    def genesis_time(self, timestamp: int) -> None:
        self._genesis_time = timestamp
        self.log.info(f"Genesis time set to {timestamp}")

    # Utilities

    def total_stake(self) -> int:
        return sum(self._stakeholders.values())

    def stakeholder_count(self) -> int:
        return len(self._stakeholders)

    def stakeholders(self) -> list[StakeholderInfo]:
        """Return all stakeholders ordered by id."""
        return [
            StakeholderInfo(stakeholder_id, stake)
            for stakeholder_id, stake in sorted(self._stakeholders.items())
        ]