"""Simplified verifiable random function and epoch nonce generation."""

from __future__ import annotations

from dataclasses import dataclass

from ppledger.errors import LedgerError
from ppledger.module import Module

_MASK64 = (1 << 64) - 1
_UINT64_MAX = _MASK64
_FNV64_OFFSET = 0xCBF29CE484222325
_FNV64_PRIME = 0x100000001B3
_FNV32_OFFSET = 0x811C9DC5
_FNV32_PRIME = 0x01000193
_GENESIS_NONCE = "genesis_nonce_0x0000000000000000"
_COMBINED_HASH_LENGTH = 32
_HEX_DIGITS = 16


def _char_value(byte: int) -> int:
    """Widen a byte as a signed char would be widened to 64 bits."""
    return byte if byte < 0x80 else (byte - 0x100) & _MASK64


def _fnv1a(text: str, offset: int, prime: int) -> int:
    value = offset
    for byte in text.encode("utf-8"):
        value ^= _char_value(byte)
        value = (value * prime) & _MASK64
    return value


@dataclass(frozen=True)
class VRFOutput:
    """The output value of a VRF evaluation and its proof."""

    value: str
    proof: str


class VRF(Module):
    """Deterministic stand-in for a verifiable random function."""

    def __init__(self) -> None:
        super().__init__("consensus.vrf")
        self.log.info("VRF module initialized")

    def evaluate(self, seed: str, slot: int, private_key: str) -> VRFOutput:
        """Produce the output and proof for ``seed`` and ``slot`` under ``private_key``."""
        if not private_key:
            raise LedgerError("Private key cannot be empty", 1)
        value = self._hash_input(seed, slot, private_key)
        return VRFOutput(value, f"proof:{value}:slot:{slot}")

    def verify(
        self, output: str, proof: str, seed: str, slot: int, public_key: str
    ) -> bool:
        """Check that ``proof`` has the expected shape for ``slot``."""
        if not public_key:
            raise LedgerError("Public key cannot be empty", 2)
        return proof.startswith("proof:") and str(slot) in proof

    def check_leadership(
        self,
        vrf_output: str,
        stake: int,
        total_stake: int,
        difficulty: float = 0.05,
    ) -> bool:
        """Return whether ``vrf_output`` falls below the stake-weighted threshold."""
        if total_stake == 0 or stake == 0:
            return False
        output_number = self._output_to_number(vrf_output)
        stake_ratio = stake / total_stake
        scaled = float(_UINT64_MAX) * stake_ratio * difficulty
        threshold = min(max(int(scaled), 0), _UINT64_MAX)
        return output_number < threshold

    @staticmethod
    def _hash_input(seed: str, slot: int, key: str) -> str:
        value = _fnv1a(f"{seed}:{slot}:{key}", _FNV64_OFFSET, _FNV64_PRIME)
        return f"{value:016x}"

    @staticmethod
    def _output_to_number(output: str) -> int:
        result = 0
        for char in output[:_HEX_DIGITS]:
            digit = int(char, 16) if char in "0123456789abcdefABCDEF" else 0
            result = ((result << 4) | digit) & _MASK64
        return result


class EpochNonce(Module):
    """Derives per-epoch randomness from the previous nonce and block hashes."""

    def __init__(self) -> None:
        super().__init__("consensus.epoch_nonce")
        self.log.info("Epoch nonce module initialized")

    def generate(
        self, epoch_number: int, previous_nonce: str, block_hashes: list[str]
    ) -> str:
        """Return the nonce of ``epoch_number``."""
        text = f"epoch:{epoch_number}:prev:{previous_nonce}"
        if block_hashes:
            text += f":blocks:{self._combine_hashes(block_hashes)}"
        value = _fnv1a(text, _FNV32_OFFSET, _FNV32_PRIME)
        return f"nonce_{value:016x}"

    def genesis_nonce(self) -> str:
        """Return the fixed nonce of epoch 0."""
        return _GENESIS_NONCE

    @staticmethod
    def _combine_hashes(hashes: list[str]) -> str:
        return "".join(hashes)[:_COMBINED_HASH_LENGTH]