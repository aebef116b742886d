from dataclasses import dataclass
from typing import Union

from borsh_construct import CStruct, U8
from solders.pubkey import Pubkey

from .errors import FieldTooLong, ValidationError

CREATE_DISCRIMINANT = 0
NAME_LEN = 32
SYMBOL_LEN = 10
URI_LEN = 200
PUBKEY_LEN = 32
PAD_BYTE = b" "

FIELD_WIDTHS = {"name": NAME_LEN, "symbol": SYMBOL_LEN, "uri": URI_LEN}

CreateLayout = CStruct(
    "instruction" / U8,
    "name" / U8[NAME_LEN],
    "symbol" / U8[SYMBOL_LEN],
    "uri" / U8[URI_LEN],
    "creator" / U8[PUBKEY_LEN],
)
CREATE_DATA_LEN = 1 + NAME_LEN + SYMBOL_LEN + URI_LEN + PUBKEY_LEN


@dataclass(frozen=True)
class CreateInstructionArgs:
    name: str
    symbol: str
    uri: str
    creator: Pubkey
    instruction: int = CREATE_DISCRIMINANT


def _as_bytes(value: Union[str, bytes]) -> bytes:
    return value.encode("utf-8") if isinstance(value, str) else bytes(value)


def check_width(field: str, value: Union[str, bytes]) -> bytes:
    """Return the UTF-8 bytes of ``value``; FieldTooLong if they overflow the slot."""
    width = FIELD_WIDTHS[field]
    raw = _as_bytes(value)
    if len(raw) > width:
        raise FieldTooLong(field, width, len(raw))
    return raw


def pad_field(field: str, value: Union[str, bytes], pad: bytes = PAD_BYTE) -> bytes:
    return check_width(field, value).ljust(FIELD_WIDTHS[field], pad)


def encode(args: CreateInstructionArgs, pad: bytes = PAD_BYTE) -> bytes:
    if len(pad) != 1:
        raise ValueError("pad must be a single byte")
    # All widths are checked before anything is built.
    name = pad_field("name", args.name, pad)
    symbol = pad_field("symbol", args.symbol, pad)
    uri = pad_field("uri", args.uri, pad)
    return CreateLayout.build(
        {
            "instruction": args.instruction,
            "name": list(name),
            "symbol": list(symbol),
            "uri": list(uri),
            "creator": list(bytes(args.creator)),
        }
    )


def decode(data: bytes, pad: bytes = PAD_BYTE) -> CreateInstructionArgs:
    if len(data) != CREATE_DATA_LEN:
        raise ValidationError(f"create instruction data must be {CREATE_DATA_LEN} bytes, got {len(data)}")
    parsed = CreateLayout.parse(data)
    return CreateInstructionArgs(
        instruction=parsed.instruction,
        name=bytes(parsed.name).rstrip(pad).decode("utf-8"),
        symbol=bytes(parsed.symbol).rstrip(pad).decode("utf-8"),
        uri=bytes(parsed.uri).rstrip(pad).decode("utf-8"),
        creator=Pubkey.from_bytes(bytes(parsed.creator)),
    )
