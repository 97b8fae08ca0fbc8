from __future__ import annotations
from ..errors import ConfigurationError

# Width of a trace address (Valgrind records 64-bit virtual addresses).
ADDRESS_WIDTH_BITS = 64


def decode_address(address: int, set_bits: int, block_bits: int) -> tuple[int, int]:
    """Splits an address into (set_index, tag).

    The low `block_bits` are the block offset, the next `set_bits` select the
    set, and everything above them is the tag.
    """
    tag = address >> (set_bits + block_bits)
    set_index = (address >> block_bits) & ((1 << set_bits) - 1)
    return set_index, tag


class AddressDecoder:
    """Maps an address to a (set_index, tag) pair for a fixed geometry."""

    def __init__(self, set_bits: int, block_bits: int, address_width: int = ADDRESS_WIDTH_BITS):
        if set_bits < 0 or block_bits < 0:
            raise ConfigurationError("Set and block bit counts must be non-negative.")
        if set_bits + block_bits > address_width:
            raise ConfigurationError(
                f"s + b = {set_bits + block_bits} exceeds the {address_width}-bit address width."
            )
        self.set_bits = set_bits
        self.block_bits = block_bits
        self.address_width = address_width

    def decode(self, address: int) -> tuple[int, int]:
        """Returns (set_index, tag) for `address`."""
        return decode_address(address, self.set_bits, self.block_bits)

    def block_address(self, set_index: int, tag: int) -> int:
        """Reconstructs the block start address from tag and set index."""
        return (tag << (self.set_bits + self.block_bits)) | (set_index << self.block_bits)
