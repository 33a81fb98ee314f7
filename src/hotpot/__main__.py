"""Entry point for the hot pot simulator API."""

import argparse
import logging
import os
import sys


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Hot Pot Thermal Simulator",
    )
    parser.add_argument(
        "--host",
        default="0.0.0.0",
        help="Host to bind API server to (default: 0.0.0.0)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port to bind API server to (default: 8000)",
    )
    parser.add_argument(
        "--env",
        default=None,
        help="Configuration environment (default: HOTPOT_ENV or 'development')",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for the heater flicker, for reproducible sessions",
    )
    parser.add_argument(
        "--speed",
        type=float,
        default=None,
        help="Simulated seconds per wall-clock second (default: 10)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    # The app loads its config at startup, so pass overrides through the environment
    if args.env:
        os.environ["HOTPOT_ENV"] = args.env
    if args.seed is not None:
        os.environ["HOTPOT_SEED"] = str(args.seed)
    if args.speed is not None:
        os.environ["HOTPOT_SPEED"] = str(args.speed)

    import uvicorn

    uvicorn.run(
        "hotpot.api.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=args.log_level.lower(),
    )

    return 0


if __name__ == "__main__":
    sys.exit(main())
