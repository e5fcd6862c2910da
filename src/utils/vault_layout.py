"""
Binary layout of the vault program's ``Vault`` account.

Accounts are Borsh encoded: little-endian scalars, fixed-size arrays, no
padding, fields in declaration order, prefixed by the 8-byte Anchor
discriminator. Accounts are allocated larger than their content, so bytes
past the end of the layout are ignored.
"""
import logging
import struct
from dataclasses import dataclass
from functools import cached_property
from typing import Dict, NamedTuple, Optional, Tuple

import base58
from pydantic import ValidationError

from core.constants import MAX_STRATEGY, PUBKEY_LENGTH, VAULT_DISCRIMINATOR
from core.errors import DecodeError
from schemas.vault_state import LockedProfitTracker, VaultState

logger = logging.getLogger(__name__)

PUBKEY = f"{PUBKEY_LENGTH}s"
TRACKER = "locked_profit_tracker"


class LayoutField(NamedTuple):
    name: str
    fmt: str
    count: int = 1
    group: Optional[str] = None

    @property
    def is_pubkey(self) -> bool:
        return self.fmt == PUBKEY


@dataclass(frozen=True)
class VaultLayout:
    name: str
    version: int
    discriminator: bytes
    fields: Tuple[LayoutField, ...]

    @cached_property
    def struct(self) -> struct.Struct:
        fmt = "<" + f"{len(self.discriminator)}s"
        for field in self.fields:
            fmt += field.fmt * field.count
        return struct.Struct(fmt)

    @property
    def size(self) -> int:
        return self.struct.size

    def offset_of(self, name: str) -> int:
        offset = len(self.discriminator)
        for field in self.fields:
            if field.name == name:
                return offset
            offset += struct.calcsize("<" + field.fmt) * field.count
        raise KeyError(name)


VAULT_LAYOUT_V1 = VaultLayout(
    name="Vault",
    version=1,
    discriminator=VAULT_DISCRIMINATOR,
    fields=(
        LayoutField("enabled", "B"),
        LayoutField("vault_bump", "B"),
        LayoutField("token_vault_bump", "B"),
        LayoutField("total_amount", "Q"),
        LayoutField("token_vault", PUBKEY),
        LayoutField("fee_vault", PUBKEY),
        LayoutField("token_mint", PUBKEY),
        LayoutField("lp_mint", PUBKEY),
        LayoutField("strategies", PUBKEY, count=MAX_STRATEGY),
        LayoutField("base", PUBKEY),
        LayoutField("admin", PUBKEY),
        LayoutField("operator", PUBKEY),
        LayoutField("last_updated_locked_profit", "Q", group=TRACKER),
        LayoutField("last_report", "Q", group=TRACKER),
        LayoutField("locked_profit_degradation", "Q", group=TRACKER),
    ),
)


def vault_layout_size(layout: VaultLayout = VAULT_LAYOUT_V1) -> int:
    return layout.size


def _to_pubkey(raw: bytes) -> str:
    return base58.b58encode(raw).decode("ascii")


def _from_pubkey(key: str) -> bytes:
    return base58.b58decode(key)


def decode_vault_state(data: bytes, layout: VaultLayout = VAULT_LAYOUT_V1) -> VaultState:
    """
    Decode raw vault account bytes into a ``VaultState``.

    Raises ``DecodeError`` when the buffer is too short, does not start with
    the layout discriminator, or holds field values the model rejects.
    """
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise DecodeError(f"Expected account bytes, got {type(data).__name__}")

    data = bytes(data)
    if len(data) < layout.size:
        raise DecodeError(
            f"{layout.name} v{layout.version} account needs {layout.size} bytes, got {len(data)}"
        )

    values = layout.struct.unpack_from(data, 0)
    if values[0] != layout.discriminator:
        raise DecodeError(
            f"Discriminator {values[0].hex()} does not match {layout.name} "
            f"({layout.discriminator.hex()})"
        )

    decoded: Dict[str, object] = {}
    groups: Dict[str, Dict[str, object]] = {}
    index = 1
    for field in layout.fields:
        raw = values[index : index + field.count]
        index += field.count
        if field.is_pubkey:
            raw = tuple(_to_pubkey(v) for v in raw)
        value = raw if field.count > 1 else raw[0]
        if field.group:
            groups.setdefault(field.group, {})[field.name] = value
        else:
            decoded[field.name] = value

    try:
        state = VaultState(
            **decoded,
            locked_profit_tracker=LockedProfitTracker(**groups[TRACKER]),
        )
    except ValidationError as e:
        raise DecodeError(f"Invalid {layout.name} account: {e}") from e

    logger.debug(
        "Decoded %s v%s: total_amount=%s lp_mint=%s",
        layout.name,
        layout.version,
        state.total_amount,
        state.lp_mint,
    )
    return state


def encode_vault_state(state: VaultState, layout: VaultLayout = VAULT_LAYOUT_V1) -> bytes:
    """Encode a ``VaultState`` back into account bytes (no trailing space)."""
    source = state.model_dump()
    tracker = source.pop(TRACKER)

    values = [layout.discriminator]
    for field in layout.fields:
        value = tracker[field.name] if field.group else source[field.name]
        items = tuple(value) if field.count > 1 else (value,)
        if field.is_pubkey:
            items = tuple(_from_pubkey(v) for v in items)
        values.extend(items)
    return layout.struct.pack(*values)
