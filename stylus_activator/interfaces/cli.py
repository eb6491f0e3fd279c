#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""cli.py: Activate a deployed Stylus program

   Estimates the activation data fee with a spoofed eth_call, then pays it.
"""

import argparse
import json
import logging
import sys

import coloredlogs
import traceback

from argparse import ArgumentParser, Namespace
from stylus_activator.activation.activator import activate_stylus_program
from stylus_activator.activator_config import ActivatorConfig
from stylus_activator.ethereum.interface.rpc.exceptions import TransportError
from stylus_activator.exceptions import (
    ActivationNotConfirmed,
    ActivatorBaseException,
    CriticalError,
    EstimationError,
    FeeOverflowError,
)

from stylus_activator.__version__ import __version__ as VERSION

log = logging.getLogger(__name__)

LOG_LEVELS = [
    logging.NOTSET,
    logging.CRITICAL,
    logging.ERROR,
    logging.WARNING,
    logging.INFO,
    logging.DEBUG,
]


def exit_with_error(message, code=1):
    """
    Exits with error
    :param message: message
    :param code: process exit status
    """
    log.error(message)
    sys.exit(code)


def get_rpc_parser() -> ArgumentParser:
    """
    Get parser which handles RPC and signing flags
    :return: Parser which handles rpc inputs
    """
    parser = argparse.ArgumentParser(add_help=False)
    parser.add_argument(
        "--endpoint",
        help="JSON-RPC endpoint of the Arbitrum node (or STYLUS_RPC)",
        metavar="URL",
    )
    parser.add_argument(
        "--private-key",
        help="hex private key paying for the activation (or PRIVATE_KEY)",
        metavar="KEY",
    )
    return parser


def get_activation_parser() -> ArgumentParser:
    """
    Get parser which handles the activation flags
    :return: Parser which handles activation inputs
    """
    parser = argparse.ArgumentParser(add_help=False)
    parser.add_argument(
        "--address",
        help="address of the deployed Stylus program",
        metavar="PROGRAM_ADDRESS",
        required=True,
    )
    parser.add_argument(
        "--bump-fee-percent",
        type=int,
        help="increase the estimated data fee by this percentage",
        metavar="PERCENT",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="only estimate the activation data fee",
    )
    return parser


def create_parser() -> ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="activate-stylus-program",
        description="Activate a deployed Stylus program on an Arbitrum chain",
        parents=[get_rpc_parser(), get_activation_parser()],
    )
    parser.add_argument(
        "-v", type=int, help="log level (0-5)", metavar="LOG_LEVEL", default=4
    )
    parser.add_argument(
        "--version", action="version", version="%(prog)s " + VERSION
    )
    return parser


def validate_args(args: Namespace):
    """
    Validate cli args
    :param args:
    :return:
    """
    if 0 <= args.v < 6:
        coloredlogs.install(
            fmt="%(name)s [%(levelname)s]: %(message)s", level=LOG_LEVELS[args.v]
        )
    else:
        exit_with_error("Invalid -v value, you can find valid values in usage")


def set_config(args: Namespace) -> ActivatorConfig:
    """
    Set config based on args
    :param args:
    :return: modified config
    """
    config = ActivatorConfig()
    if args.endpoint:
        config.set_endpoint(args.endpoint)
    if args.private_key:
        config.set_private_key(args.private_key)
    if args.bump_fee_percent is not None:
        config.set_bump_fee_percent(args.bump_fee_percent)
    config.set_program_address(args.address)
    config.dry_run = args.dry_run
    config.validate()
    return config


def main(argv=None) -> None:
    """The main CLI interface entry point."""

    parser = create_parser()
    args = parser.parse_args(argv)
    validate_args(args)

    try:
        config = set_config(args)
        receipt = activate_stylus_program(config)
    except CriticalError as ce:
        exit_with_error(str(ce))
    except EstimationError as e:
        exit_with_error("Estimation failed: {}".format(e))
    except FeeOverflowError as e:
        exit_with_error("Fee bump failed: {}".format(e))
    except ActivationNotConfirmed as e:
        exit_with_error("Submission failed: {}".format(e))
    except TransportError as e:
        exit_with_error("RPC request failed: {}".format(e))
    except ActivatorBaseException as e:
        exit_with_error("Submission failed: {}".format(e))
    except Exception:
        exit_with_error(traceback.format_exc())

    if receipt is not None:
        print(receipt["transactionHash"])
        print(json.dumps(receipt, indent=4))


if __name__ == "__main__":
    main()
