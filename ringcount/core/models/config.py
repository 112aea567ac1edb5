from dataclasses import dataclass

import httpx

from ringcount.ring.keyspace import RingSpace


@dataclass
class Config:
    rpc_address: str
    walks: int
    hops: int
    rpc_port: int
    ring: RingSpace
    request_timeout: float
    connect_timeout: float
    rpc_retries: int
    httpx_client: httpx.AsyncClient
