"""
Forward-Link Chain Verifier

Authenticates a block by walking signed forward links from a genesis id
the caller already trusts.

State: (current_id, current_roster), starting at (genesis_id, genesis_roster).
For each link:
1. link.from must equal current_id
2. the collective signature over the link message must verify against
   current_roster
3. current_id = link.to; a roster announced by the link replaces
   current_roster for the NEXT link only

At the end current_id must be the id of ``latest``, and ``latest`` must
hash to its own id so the header cannot be swapped out from under it.

The genesis roster always comes from the caller (pinned configuration),
never from the proof: a forged chain must not get to supply its own
trust anchor. Any failure is fatal; there is no partial trust.
"""
from __future__ import annotations

import hashlib
import logging
from typing import Sequence

from core.crypto.hashing import HashFactory, to_hex
from core.crypto.signatures import SignatureVerifier, verify_collective
from core.schemas.encoding import short_hex
from core.schemas.errors import ChainBrokenException, InvalidInputException
from core.skipchain.models import DataHeader, ForwardLink, Roster, SkipBlock


logger = logging.getLogger(__name__)

NOT_EVOLVED = "stored skipblock is not properly evolved from genesis block"
SIGNATURE_FAILED = "signature verification failed"


def verify_chain(
    genesis_id: bytes,
    genesis_roster: Roster,
    links: Sequence[ForwardLink],
    latest: SkipBlock,
    *,
    hash_factory: HashFactory = hashlib.sha256,
    verify_signature: SignatureVerifier = verify_collective,
) -> DataHeader:
    """
    Verify that ``latest`` descends from ``genesis_id`` through ``links``.

    Args:
        genesis_id: Trusted genesis block identifier
        genesis_roster: Roster trusted to sign the first link
        links: Forward links, oldest first
        latest: The block whose header is being authenticated
        hash_factory: Hash constructor used for link messages and block ids
        verify_signature: Collective signature primitive

    Returns:
        The authenticated DataHeader of ``latest``

    Raises:
        InvalidInputException: If genesis_id is empty
        ChainBrokenException: On any continuity, signature or terminal failure
    """
    if not genesis_id:
        raise InvalidInputException("genesis id is empty")

    current_id = genesis_id
    current_roster = genesis_roster

    for index, link in enumerate(links):
        if link.from_id != current_id:
            logger.warning(
                f"Link {index} starts at {short_hex(link.from_id)}, "
                f"expected {short_hex(current_id)}"
            )
            raise ChainBrokenException(
                NOT_EVOLVED,
                link_index=index,
                details={"expected_from": to_hex(current_id), "actual_from": to_hex(link.from_id)},
            )

        message = link.message(hash_factory)
        if not verify_signature(message, link.signature, current_roster.public_keys):
            logger.warning(f"Link {index} signature rejected by a roster of {current_roster.size}")
            raise ChainBrokenException(SIGNATURE_FAILED, link_index=index)

        logger.debug(f"Link {index}: {short_hex(link.from_id)} -> {short_hex(link.to_id)} ok")
        current_id = link.to_id
        if link.new_roster is not None:
            logger.debug(f"Link {index} hands over to a roster of {link.new_roster.size}")
            current_roster = link.new_roster

    if not latest.is_intact(hash_factory):
        logger.warning(f"Block {short_hex(latest.hash)} does not hash to its id")
        raise ChainBrokenException(
            "latest block id does not match its content",
            details={"block_id": to_hex(latest.hash)},
        )

    if current_id != latest.hash:
        logger.warning(
            f"Chain ends at {short_hex(current_id)} but latest block is {short_hex(latest.hash)}"
        )
        raise ChainBrokenException(
            NOT_EVOLVED,
            details={"chain_end": to_hex(current_id), "latest": to_hex(latest.hash)},
        )

    return latest.header


class ChainVerifier:
    """
    Chain verification bound to one hash factory and signature primitive.

    Example:
        >>> verifier = ChainVerifier()
        >>> header = verifier.verify(genesis_id, roster, proof.links, proof.latest)
    """

    def __init__(
        self,
        hash_factory: HashFactory = hashlib.sha256,
        verify_signature: SignatureVerifier = verify_collective,
    ) -> None:
        self.hash_factory = hash_factory
        self.verify_signature = verify_signature

    def verify(
        self,
        genesis_id: bytes,
        genesis_roster: Roster,
        links: Sequence[ForwardLink],
        latest: SkipBlock,
    ) -> DataHeader:
        return verify_chain(
            genesis_id,
            genesis_roster,
            links,
            latest,
            hash_factory=self.hash_factory,
            verify_signature=self.verify_signature,
        )


__all__ = [
    "ChainVerifier",
    "verify_chain",
]
