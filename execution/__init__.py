"""
execution package

Transaction submission for the fixture minter.
"""
from .transaction_sender import (
    BULK_MINT_OPTIONS,
    PROVISIONING_OPTIONS,
    SendOptions,
    TransactionRejectedError,
    TransactionSendError,
    TransactionSender,
)

__all__ = [
    'BULK_MINT_OPTIONS',
    'PROVISIONING_OPTIONS',
    'SendOptions',
    'TransactionRejectedError',
    'TransactionSendError',
    'TransactionSender',
]
