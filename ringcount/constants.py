RING_BITS = 256

DEFAULT_RPC_ADDRESS = "http://seed.nkn.org:30003"
RPC_PORT = 30003

DEFAULT_WALKS = 8
DEFAULT_HOPS = 8

REQUEST_TIMEOUT = 10.0
CONNECT_TIMEOUT = 5.0
RPC_RETRIES = 1

# Rpc methods
FIND_SUCCESSOR_ADDRS_METHOD = "findsuccessoraddrs"
GET_CHORD_RING_INFO_METHOD = "getchordringinfo"

# Successor indices probed around the jump-ahead point, relative to it
CANDIDATE_SPREAD = (-1, 0, 1)
