"""Abstract block and blockchain types used by the consensus layer."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class Block(ABC):
    """A block in the chain.

    Concrete blocks decide how their hash is computed. The slot fields
    place the block in the slot schedule.
    """

    index: int = 0
    timestamp: int = 0
    data: str = ""
    previous_hash: str = ""
    hash: str = ""
    nonce: int = 0
    slot: int = 0
    slot_leader: str = ""

    @abstractmethod
    def calculate_hash(self) -> str:
        """Compute the hash of this block from its contents."""


class BlockChain(ABC):
    """An ordered sequence of blocks."""

    @abstractmethod
    def add_block(self, block: Block) -> bool:
        """Append ``block``; return whether it was accepted."""

    @abstractmethod
    def latest_block(self) -> Block | None:
        """Return the last block, or None for an empty chain."""

    @abstractmethod
    def get_block(self, index: int) -> Block | None:
        """Return the block at ``index``, or None if there is none."""

    @abstractmethod
    def __len__(self) -> int:
        """Return the number of blocks in the chain."""

    @abstractmethod
    def is_valid(self) -> bool:
        """Return whether the whole chain is consistent."""

    @abstractmethod
    def validate_block(self, block: Block) -> bool:
        """Return whether ``block`` could be appended to the chain."""

    @abstractmethod
    def get_blocks(self, from_index: int, to_index: int) -> list[Block]:
        """Return the blocks with indices in the given range."""

    @abstractmethod
    def last_block_hash(self) -> str:
        """Return the hash of the last block."""