"""Entry point for running carrierfreq as a module: python -m carrierfreq."""

import logging
import sys

from .config import CarrierFreqConfig
from .server import create_server


def main() -> None:
    """Run the carrierfreq MCP server."""
    try:
        config = CarrierFreqConfig.from_env()
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        sys.exit(1)

    # stdout carries the MCP stdio protocol, so logs go to stderr
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    logging.getLogger(__name__).info(
        "Starting carrierfreq (%s transport, gnomAD %s)", config.transport, config.gnomad_version
    )

    server = create_server(config)
    server.run(transport=config.transport)  # type: ignore[arg-type]


if __name__ == "__main__":
    main()
