"""Purchase payload normalizers."""

from .base import NormalizerChain, NormalizerKind, PayloadNormalizer, parse_quantity
from .embed import ChatEmbedParser, EmbedFieldListParser, EmbedLabelBlockParser
from .invoice import StructuredInvoiceParser


def embed_chain(custom_field_name: str) -> NormalizerChain:
    """Normalizers for forwarded Discord embeds"""
    return NormalizerChain(
        [
            EmbedFieldListParser(custom_field_name),
            EmbedLabelBlockParser(custom_field_name),
        ]
    )


__all__ = [
    "ChatEmbedParser",
    "EmbedFieldListParser",
    "EmbedLabelBlockParser",
    "NormalizerChain",
    "NormalizerKind",
    "PayloadNormalizer",
    "StructuredInvoiceParser",
    "embed_chain",
    "parse_quantity",
]
