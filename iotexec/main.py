#!/usr/bin/env python3
"""
iotexec - Main Entry Point

This is the thin orchestration layer that:
1. Parses options and loads configuration
2. Initializes the transport and the service context
3. Runs the command dispatcher until a termination signal arrives

All business logic is in the modules, following black box principles.
"""

import argparse
import logging
import logging.config
import signal
import sys
from typing import List, Optional

from dotenv import load_dotenv

from iotexec.config.provider import ConfigProvider, EnvConfigProvider
from iotexec.errors import TransportError
from iotexec.logging_config import get_logging_config
from iotexec.models import MAX_MESSAGE_LENGTH, MAX_PENDING_MESSAGES
from iotexec.modules.dispatcher import CommandDispatcher, ServiceContext
from iotexec.modules.executor import CommandExecutor
from iotexec.modules.transport import SSETransport

logger = logging.getLogger("iotexec")

USAGE = (
    "usage: {prog} [-v] [-h] [-e ENV_FILE]\n"
    " [-h] : display this help\n"
    " [-v] : verbose output\n"
    " [-e] : load environment variables from ENV_FILE\n"
)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line options. Unknown options are ignored."""
    parser = argparse.ArgumentParser(prog="iotexec", add_help=False)
    parser.add_argument("-v", dest="verbose", action="store_true")
    parser.add_argument("-h", dest="help", action="store_true")
    parser.add_argument("-e", dest="env_file", default=None)
    args, _unknown = parser.parse_known_args(argv)
    return args


def usage(prog: str = "iotexec") -> None:
    """Write the usage text to stderr."""
    sys.stderr.write(USAGE.format(prog=prog))


def install_signal_handlers(context: ServiceContext) -> None:
    """Request a cooperative shutdown on SIGTERM/SIGINT. The handler does not log."""

    def handler(signum, frame):
        context.request_shutdown(by_signal=True)

    signal.signal(signal.SIGTERM, handler)
    signal.signal(signal.SIGINT, handler)


def main(argv: Optional[List[str]] = None, config_provider: Optional[ConfigProvider] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    if args.help:
        usage()

    if args.env_file:
        load_dotenv(args.env_file, override=True)

    config_provider = config_provider or EnvConfigProvider()

    try:
        exec_config = config_provider.get_exec_config()
        transport_config = config_provider.get_transport_config()
    except ValueError as e:
        logging.basicConfig(level=logging.ERROR)
        logger.error(f"Invalid configuration: {e}")
        return 1

    logging.config.dictConfig(get_logging_config(args.verbose, exec_config.log_level))

    transport = SSETransport(transport_config, verbose=args.verbose)
    context = ServiceContext(transport=transport, verbose=args.verbose)
    install_signal_handlers(context)

    try:
        transport.create_receiver(
            transport_config.topic, MAX_PENDING_MESSAGES, MAX_MESSAGE_LENGTH
        )
    except TransportError as e:
        logger.error(f"Failed to create receiver: {e}")
        context.close()
        return 1

    executor = CommandExecutor(
        transport,
        shell=exec_config.shell,
        timeout=exec_config.command_timeout if exec_config.has_timeout else None,
        verbose=args.verbose,
    )
    context.add_shutdown_hook(executor.terminate)

    dispatcher = CommandDispatcher(
        context,
        executor,
        max_message_length=MAX_MESSAGE_LENGTH,
        poll_interval=exec_config.poll_interval,
    )

    try:
        dispatcher.run()
    finally:
        context.close()

    if context.terminated_by_signal:
        logger.error("Abnormal termination of iotexec")
        return 1
    return 0


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
