"""
Link and user records on top of the key-value store.

Key space (the only keys this application writes):
    link:<shortName>  ->  JSON {"url": ..., "owner": ...}
    user:<email>      ->  raw token string (UTF-8)
"""

import logging
from typing import Dict, List

from pydantic import ValidationError

from shortener_app.exceptions import (
    AlreadyExistsError,
    KeyNotFoundError,
    NotFoundError,
    RecordDecodeError,
)
from shortener_app.models.records import LinkRecord
from shortener_app.storage.strategies import KeyValueStore

logger = logging.getLogger(__name__)

LINK_PREFIX = b"link:"
USER_PREFIX = b"user:"


def link_key(short_name: str) -> bytes:
    return LINK_PREFIX + short_name.encode("utf-8")


def user_key(email: str) -> bytes:
    return USER_PREFIX + email.encode("utf-8")


def decode_link(value: bytes) -> LinkRecord:
    try:
        return LinkRecord.model_validate_json(value)
    except ValidationError as e:
        raise RecordDecodeError(f"Corrupt link record: {e}") from e


class LinkRepository:
    """
    Repository for links and users.

    Every method runs in its own store transaction. Errors from the store
    propagate unchanged; nothing here retries.
    """

    def __init__(self, store: KeyValueStore):
        self.store = store

    def name_exists(self, short_name: str) -> bool:
        """
        Check whether a short name is taken.

        A pre-check only: two callers can both see False. save_link() is the
        authoritative check.
        """
        with self.store.view() as txn:
            return txn.exists(link_key(short_name))

    def email_exists(self, email: str) -> bool:
        with self.store.view() as txn:
            return txn.exists(user_key(email))

    def save_link(self, short_name: str, url: str, owner: str = "") -> None:
        """
        Create a link if the short name is free.

        The existence check and the write share one write transaction, so
        concurrent callers for the same name cannot both succeed.

        Raises:
            AlreadyExistsError: If the short name is taken
        """
        key = link_key(short_name)
        record = LinkRecord(url=url, owner=owner)

        with self.store.update() as txn:
            if txn.exists(key):
                raise AlreadyExistsError(f"Link name {short_name} already exists")
            txn.set(key, record.model_dump_json().encode("utf-8"))

    def get_link(self, short_name: str) -> str:
        """
        Get the target URL for a short name.

        Raises:
            NotFoundError: If the short name is unknown
        """
        try:
            with self.store.view() as txn:
                value = txn.get(link_key(short_name))
        except KeyNotFoundError:
            raise NotFoundError(f"Link {short_name} not found") from None
        return decode_link(value).url

    def save_token(self, email: str, token: str) -> None:
        """Store (or overwrite) the user's current token"""
        with self.store.update() as txn:
            txn.set(user_key(email), token.encode("utf-8"))

    def get_token(self, email: str) -> str:
        try:
            with self.store.view() as txn:
                value = txn.get(user_key(email))
        except KeyNotFoundError:
            raise NotFoundError(f"User {email} not found") from None
        return value.decode("utf-8")

    def delete_user(self, email: str) -> List[str]:
        """
        Delete a user and every link they own, atomically.

        The link namespace has no owner index, so this scans all links.
        A link record that cannot be decoded aborts the whole transaction.

        Returns:
            Short names of the deleted links
        """
        owned: List[str] = []

        with self.store.update() as txn:
            txn.delete(user_key(email))
            for key, value in txn.scan_prefix(LINK_PREFIX):
                if decode_link(value).owner == email:
                    txn.delete(key)
                    owned.append(key[len(LINK_PREFIX):].decode("utf-8"))

        logger.info("Deleted user with %d link(s)", len(owned))
        return owned

    def get_all_users(self) -> Dict[str, int]:
        """
        Count links per user.

        Users and links are read in two separate read transactions, so a
        write landing between them can make the counts slightly stale.
        Links whose owner is not a registered user are not counted.
        """
        with self.store.view() as txn:
            users = {
                key[len(USER_PREFIX):].decode("utf-8"): 0
                for key, _ in txn.scan_prefix(USER_PREFIX)
            }

        with self.store.view() as txn:
            links = txn.scan_prefix(LINK_PREFIX)

        for key, value in links:
            try:
                owner = decode_link(value).owner
            except RecordDecodeError:
                logger.warning("Skipping undecodable link record %r", key)
                continue
            if owner in users:
                users[owner] += 1

        return users
