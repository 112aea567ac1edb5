import argparse
import asyncio
import json
import sys
import time

from ringcount import __version__
from ringcount import constants as rcst
from ringcount.chord.client import ChordRpcClient
from ringcount.core.configuration import factory_config
from ringcount.core.models.config import Config
from ringcount.estimation.errors import EstimationError
from ringcount.estimation.estimator import NetworkEstimate, estimate_network
from ringcount.logging_utils import get_logger
from ringcount.sampling.coordinator import sample_ring

logger = get_logger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Estimate the number of nodes in a chord ring by sampling it")
    parser.add_argument("--rpc", type=str, required=False, help=f"Initial RPC address (default {rcst.DEFAULT_RPC_ADDRESS})", default=None)
    parser.add_argument("-m", type=int, required=False, help="Number of concurrent walks", default=None)
    parser.add_argument("-n", type=int, required=False, help="Number of steps per walk", default=None)
    parser.add_argument("--rpc-port", type=int, required=False, help="RPC port of ring nodes", default=None)
    parser.add_argument("--timeout", type=float, required=False, help="Per request timeout (seconds)", default=None)
    parser.add_argument("--json", action="store_true", help="Print result as json")
    parser.add_argument("--version", action="store_true", help="Print version")
    return parser.parse_args(argv)


async def run(config: Config) -> NetworkEstimate:
    async with config.httpx_client as httpx_client:
        node_query = ChordRpcClient(httpx_client, rpc_port=config.rpc_port, retries=config.rpc_retries)
        aggregate = await sample_ring(
            node_query,
            config.ring,
            config.rpc_address,
            walks=config.walks,
            hops=config.hops,
        )
    return estimate_network(aggregate, config.ring.size)


def _print_estimate(estimate: NetworkEstimate, elapsed: float, as_json: bool) -> None:
    if as_json:
        print(json.dumps(estimate.to_output_dict(elapsed)))
        return

    print(f"Total nodes visited: {estimate.visited}")
    print(f"Total area covered: {estimate.coverage_percent:.2f}%")
    print(f"Estimated total number of nodes in the network: {estimate.estimated_total_nodes} +- {estimate.uncertainty}")
    print(f"Estimated network relay per second: {estimate.relay_per_second:.0f}")
    print(f"Time used: {elapsed:.3f}s")


def main(argv: list[str] | None = None) -> int:
    time_start = time.monotonic()
    args = _parse_args(argv)

    if args.version:
        print(__version__)
        return 0

    try:
        config = factory_config(
            rpc_address=args.rpc,
            walks=args.m,
            hops=args.n,
            rpc_port=args.rpc_port,
            request_timeout=args.timeout,
        )
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    if not config.rpc_address:
        logger.error("RPC address is required")
        asyncio.run(config.httpx_client.aclose())
        return 1

    try:
        estimate = asyncio.run(run(config))
    except EstimationError as e:
        logger.error(f"Error: {e}")
        return 1

    _print_estimate(estimate, time.monotonic() - time_start, args.json)
    return 0


if __name__ == "__main__":
    sys.exit(main())
