"""
At-rest encryption of picks.

Picks are stored Fernet-encrypted so that nobody reading the database can see
a choice before the round is revealed. Fernet tokens carry a random IV, so
encrypting the same choice twice yields different ciphertexts.
"""

import logging

from cryptography.fernet import Fernet, InvalidToken
from flask import current_app

from bolao.errors import DecodeError
from bolao.utils.outcome import Outcome

logger = logging.getLogger(__name__)


def get_cipher(key=None):
    """Fernet cipher for the configured PICKS_ENCRYPTION_KEY"""
    if key is None:
        key = current_app.config["PICKS_ENCRYPTION_KEY"]
    if isinstance(key, str):
        key = key.encode()
    return Fernet(key)


def encode_pick(outcome, key=None):
    """Encrypt an outcome for storage, returning an ASCII token"""
    outcome = Outcome(outcome)
    return get_cipher(key).encrypt(outcome.value.encode()).decode("ascii")


def decode_pick(encoded, key=None):
    """Decrypt a stored pick.

    Raises:
        DecodeError: token is corrupt, was made with another or a malformed
            key, or does not hold one of the three choices
    """
    if not encoded:
        raise DecodeError("empty pick token")
    if isinstance(encoded, str):
        encoded = encoded.encode("ascii", errors="replace")

    try:
        cipher = get_cipher(key)
    except (TypeError, ValueError) as e:
        raise DecodeError(f"invalid picks key: {e}") from e

    try:
        plaintext = cipher.decrypt(encoded).decode()
    except (InvalidToken, UnicodeDecodeError) as e:
        raise DecodeError("pick token could not be decrypted") from e

    outcome = Outcome.from_choice(plaintext)
    if outcome is None:
        raise DecodeError(f"unknown pick value {plaintext!r}")
    return outcome


def try_decode_pick(encoded, pick_id=None, key=None):
    """Decode a stored pick, treating any failure as "no pick" """
    try:
        return decode_pick(encoded, key=key)
    except DecodeError as e:
        logger.warning(f"Ignoring undecodable pick id={pick_id}: {e}")
        return None
