"""
Typed views over indexer payloads.

The content indexer returns loosely-typed JSON. This module turns it into
dataclasses at the boundary so the rest of the code never reaches into raw
dicts:

- AuthorProfile: comment author with optional ENS / Farcaster identities
- Reference variants: one dataclass per reference kind (tagged union)
- CommentData: a single comment as returned by the comment-by-id endpoint
- CommentJob: message carried on the ``comments`` queue

Usage:
    comment = CommentData.from_api(payload)
    for address in comment.mentioned_addresses():
        ...
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union

COMMENT_TYPE_COMMENT = 0
COMMENT_TYPE_REACTION = 1


def truncate_address(address: str) -> str:
    """Shorten an address for display: ``0x1234...abcd``."""
    return f"{address[:6]}...{address[-4:]}"


# =============================================================================
# Author profiles
# =============================================================================


@dataclass
class EnsProfile:
    name: str
    avatar_url: str | None = None


@dataclass
class FarcasterProfile:
    fid: int | None = None
    username: str | None = None
    display_name: str | None = None
    pfp_url: str | None = None


@dataclass
class AuthorProfile:
    """
    Identity of a comment author.

    ``raw`` keeps the indexer's original JSON so it can be cached and
    returned to clients without loss.
    """

    address: str
    ens: EnsProfile | None = None
    farcaster: FarcasterProfile | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> AuthorProfile:
        ens = payload.get("ens") or None
        farcaster = payload.get("farcaster") or None
        return cls(
            address=payload["address"],
            ens=EnsProfile(name=ens["name"], avatar_url=ens.get("avatarUrl"))
            if ens and ens.get("name")
            else None,
            farcaster=FarcasterProfile(
                fid=farcaster.get("fid"),
                username=farcaster.get("username"),
                display_name=farcaster.get("displayName"),
                pfp_url=farcaster.get("pfpUrl"),
            )
            if farcaster
            else None,
            raw=payload,
        )

    @property
    def username(self) -> str:
        """ENS name, else Farcaster username, else the truncated address."""
        if self.ens is not None:
            return self.ens.name
        if self.farcaster is not None and self.farcaster.username:
            return self.farcaster.username
        return truncate_address(self.address)


# =============================================================================
# References
# =============================================================================


@dataclass
class Position:
    start: int
    end: int

    @classmethod
    def from_api(cls, payload: dict[str, Any] | None) -> Position | None:
        if not payload:
            return None
        return cls(start=payload.get("start", 0), end=payload.get("end", 0))


@dataclass
class EnsReference:
    address: str
    name: str | None = None
    avatar_url: str | None = None
    url: str | None = None
    position: Position | None = None
    type: str = "ens"

    @property
    def mentioned_address(self) -> str | None:
        return self.address.lower()


@dataclass
class FarcasterReference:
    address: str
    fid: int | None = None
    fname: str | None = None
    username: str | None = None
    display_name: str | None = None
    pfp_url: str | None = None
    url: str | None = None
    position: Position | None = None
    type: str = "farcaster"

    @property
    def mentioned_address(self) -> str | None:
        return self.address.lower()


@dataclass
class Erc20Reference:
    address: str
    symbol: str | None = None
    name: str | None = None
    decimals: int | None = None
    chain_id: int | None = None
    logo_uri: str | None = None
    position: Position | None = None
    type: str = "erc20"

    @property
    def mentioned_address(self) -> str | None:
        # Token contracts are referenced, not mentioned
        return None


@dataclass
class WebpageReference:
    url: str
    title: str | None = None
    position: Position | None = None
    type: str = "webpage"

    @property
    def mentioned_address(self) -> str | None:
        return None


@dataclass
class OtherReference:
    """Reference kinds this service does not interpret (images, files, ...)."""

    type: str
    url: str | None = None
    position: Position | None = None
    raw: dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def mentioned_address(self) -> str | None:
        return None


Reference = Union[
    EnsReference, FarcasterReference, Erc20Reference, WebpageReference, OtherReference
]


def parse_reference(payload: dict[str, Any]) -> Reference:
    """Build the reference variant matching ``payload["type"]``."""
    kind = payload.get("type", "")
    position = Position.from_api(payload.get("position"))

    if kind == "ens" and payload.get("address"):
        return EnsReference(
            address=payload["address"],
            name=payload.get("name"),
            avatar_url=payload.get("avatarUrl"),
            url=payload.get("url"),
            position=position,
        )
    if kind == "farcaster" and payload.get("address"):
        return FarcasterReference(
            address=payload["address"],
            fid=payload.get("fid"),
            fname=payload.get("fname"),
            username=payload.get("username"),
            display_name=payload.get("displayName"),
            pfp_url=payload.get("pfpUrl"),
            url=payload.get("url"),
            position=position,
        )
    if kind == "erc20" and payload.get("address"):
        return Erc20Reference(
            address=payload["address"],
            symbol=payload.get("symbol"),
            name=payload.get("name"),
            decimals=payload.get("decimals"),
            chain_id=payload.get("chainId"),
            logo_uri=payload.get("logoURI"),
            position=position,
        )
    if kind == "webpage" and payload.get("url"):
        return WebpageReference(
            url=payload["url"], title=payload.get("title"), position=position
        )
    return OtherReference(
        type=kind, url=payload.get("url"), position=position, raw=payload
    )


# =============================================================================
# Comments
# =============================================================================


@dataclass
class CommentData:
    """A comment as returned by the indexer's comment-by-id endpoint."""

    id: str
    author: AuthorProfile
    content: str
    chain_id: int | None = None
    parent_id: str | None = None
    comment_type: int | None = None
    references: list[Reference] = field(default_factory=list)
    created_at: str | None = None

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> CommentData:
        return cls(
            id=payload["id"],
            author=AuthorProfile.from_api(payload["author"]),
            content=payload.get("content") or "",
            chain_id=payload.get("chainId"),
            parent_id=payload.get("parentId") or None,
            comment_type=payload.get("commentType"),
            references=[parse_reference(r) for r in payload.get("references") or []],
            created_at=payload.get("createdAt"),
        )

    def mentioned_addresses(self) -> list[str]:
        """Distinct lowercased mentioned addresses in first-seen order."""
        seen: dict[str, None] = {}
        for reference in self.references:
            address = reference.mentioned_address
            if address:
                seen.setdefault(address, None)
        return list(seen)


@dataclass
class CommentJob:
    """
    Message consumed from the ``comments`` queue.

    The wire format uses the producer's camelCase keys.
    """

    comment_id: str
    chain_id: int
    content: str | None = None
    parent_id: str | None = None
    comment_type: int | None = None

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> CommentJob:
        return cls(
            comment_id=payload["commentId"],
            chain_id=int(payload["chainId"]),
            content=payload.get("content"),
            parent_id=payload.get("parentId") or None,
            comment_type=payload.get("commentType"),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"commentId": self.comment_id, "chainId": self.chain_id}
        if self.content is not None:
            data["content"] = self.content
        if self.parent_id is not None:
            data["parentId"] = self.parent_id
        if self.comment_type is not None:
            data["commentType"] = self.comment_type
        return data

    @property
    def is_reaction(self) -> bool:
        return self.comment_type == COMMENT_TYPE_REACTION
