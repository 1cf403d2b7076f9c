"""Utility modules for FederalTalks IQ."""

from federaltalks.utils.security import (
    verify_password,
    get_password_hash,
    create_session_token,
    decode_session_token,
)
from federaltalks.utils.column_types import GUID, StringList, JSONDict

__all__ = [
    "verify_password",
    "get_password_hash",
    "create_session_token",
    "decode_session_token",
    "GUID",
    "StringList",
    "JSONDict",
]
