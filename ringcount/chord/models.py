from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _parse_hex_id(value: Any) -> Any:
    if isinstance(value, str):
        text = value.strip().lower()
        if text.startswith("0x"):
            text = text[2:]
        if not text:
            raise ValueError("empty node id")
        return int(text, 16)
    return value


class PeerInfo(BaseModel):
    """
    A successor or predecessor entry as reported by a chord node.

    Attributes:
        addr (str): The peer's network address, e.g. tcp://1.2.3.4:30001.
        id (int): The peer's ring key. Sent as hex on the wire.
    """
    addr: str
    id: int = Field(ge=0)

    @field_validator("id", mode="before")
    @classmethod
    def parse_hex_id(cls, value: Any) -> Any:
        return _parse_hex_id(value)


class LocalNode(BaseModel):
    """
    The queried node's own counters.

    Attributes:
        id (int): The node's ring key.
        relay_message_count (int): Messages relayed on behalf of the network since start.
        uptime (int): Seconds since the node started.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(ge=0)
    relay_message_count: int = Field(default=0, ge=0, alias="relayMessageCount")
    uptime: int = Field(default=0, ge=0)

    @field_validator("id", mode="before")
    @classmethod
    def parse_hex_id(cls, value: Any) -> Any:
        return _parse_hex_id(value)


class ChordRingInfo(BaseModel):
    """Snapshot of one node: itself plus its ordered successor and predecessor lists."""
    model_config = ConfigDict(populate_by_name=True)

    local_node: LocalNode = Field(alias="localNode")
    successors: list[PeerInfo] = Field(default_factory=list)
    predecessors: list[PeerInfo] = Field(default_factory=list)

    def predecessor_index(self, node_id: int) -> int | None:
        for index, predecessor in enumerate(self.predecessors):
            if predecessor.id == node_id:
                return index
        return None


class RpcRequest(BaseModel):
    method: str
    params: dict[str, Any] = Field(default_factory=dict)


class SuccessorAddrsResponse(BaseModel):
    result: list[str]


class ChordRingInfoResponse(BaseModel):
    result: ChordRingInfo
