"""Content fingerprints for duplicate detection."""

from datetime import date
from decimal import Decimal

FNV_OFFSET_BASIS = 0x811C9DC5
FNV_PRIME = 0x01000193


def fnv1a_32(text: str) -> str:
    """Hash text with 32-bit FNV-1a over UTF-16 code units.

    Returns:
        8 lowercase hex digits
    """
    data = text.encode("utf-16-le")
    hash_value = FNV_OFFSET_BASIS
    for index in range(0, len(data), 2):
        hash_value ^= data[index] | (data[index + 1] << 8)
        hash_value = (hash_value * FNV_PRIME) & 0xFFFFFFFF
    return f"{hash_value:08x}"


def normalize_description_key(description: str) -> str:
    """Lowercase a description and collapse its whitespace."""
    return " ".join(description.lower().split())


def build_fingerprint(
    txn_date: date, txn_type: str, amount: Decimal, description: str
) -> str:
    """Build the dedupe fingerprint of a transaction.

    ``txn_type`` is the stored type value ("EXPENSE" or "INCOME"). Two
    transactions with the same date, type, amount and description (ignoring
    case and whitespace) always share a fingerprint.
    """
    source = "|".join(
        [
            txn_date.isoformat(),
            txn_type,
            f"{amount:.2f}",
            normalize_description_key(description),
        ]
    )
    return fnv1a_32(source)
