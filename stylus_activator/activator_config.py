import codecs
import logging
import os

from configparser import ConfigParser
from typing import Optional

from eth_typing import Address

from stylus_activator.ethereum.interface.rpc.base_client import (
    DEFAULT_POLL_INTERVAL,
    NITRO_DEFAULT_RPC_PORT,
)
from stylus_activator.ethereum.util import safe_decode, to_canonical_address
from stylus_activator.exceptions import CriticalError

log = logging.getLogger(__name__)

PRIVATE_KEY_LENGTH = 32


class ActivatorConfig:
    """
    The activator configuration class
    Collects the settings of one activation run:
        - endpoint and signing key, from flags, environment or config.ini
        - the program to activate and the fee bump to apply
    """

    def __init__(self):
        self.activator_dir = self._init_activator_dir()
        self.config_path = os.path.join(self.activator_dir, "config.ini")
        self.endpoint = os.getenv("STYLUS_RPC")  # type: Optional[str]
        self.private_key = os.getenv("PRIVATE_KEY")  # type: Optional[str]
        self.program = None  # type: Optional[Address]
        self.bump_fee_percent = None  # type: Optional[int]
        self.dry_run = False
        self.poll_interval = DEFAULT_POLL_INTERVAL
        self._init_config()

    @staticmethod
    def _init_activator_dir() -> str:
        """
        Initializes the activator dir
        :return: The activator dir's path
        """

        try:
            activator_dir = os.environ["STYLUS_ACTIVATOR_DIR"]
        except KeyError:
            activator_dir = os.path.join(os.path.expanduser("~"), ".stylus_activator")

        if not os.path.exists(activator_dir):
            # Initialize data directory
            log.info("Creating activator data directory")
            os.makedirs(activator_dir)

        return activator_dir

    def _init_config(self):
        """If no config file exists, create it and add default options.
        Values already taken from the environment are left untouched.
        """

        if not os.path.exists(self.config_path):
            log.info("No config file found. Creating default: " + self.config_path)
            open(self.config_path, "a").close()

        config = ConfigParser(allow_no_value=True)

        config.optionxform = str
        config.read(self.config_path, "utf-8")
        if "defaults" not in config.sections():
            self._add_default_options(config)

        if not config.has_option("defaults", "endpoint"):
            self._add_endpoint_option(config)

        if not config.has_option("defaults", "bump_fee_percent"):
            config.set("defaults", "bump_fee_percent", "")

        with codecs.open(self.config_path, "w", "utf-8") as fp:
            config.write(fp)

        if not self.endpoint:
            self.endpoint = config.get("defaults", "endpoint", fallback="") or None

        bump_fee_percent = config.get("defaults", "bump_fee_percent", fallback="")
        if bump_fee_percent:
            self.set_bump_fee_percent(bump_fee_percent)

    @staticmethod
    def _add_default_options(config: ConfigParser) -> None:
        """
        Adds defaults option to config.ini
        :param config: The config file object
        :return: None
        """
        config.add_section("defaults")

    @staticmethod
    def _add_endpoint_option(config: ConfigParser) -> None:
        """
        Sets the endpoint config option in the config.ini file
        :param config: The config file object
        :return: None
        """
        config.set(
            "defaults",
            "#– To use a local nitro dev node use endpoint: "
            "http://localhost:{}".format(NITRO_DEFAULT_RPC_PORT),
            "",
        )
        config.set("defaults", "endpoint", "")

    def set_endpoint(self, endpoint: str) -> None:
        self.endpoint = endpoint

    def set_private_key(self, private_key: str) -> None:
        """
        Sets the signing key after checking it is 32 hex-encoded bytes
        :param private_key: hex string, with or without 0x
        """
        try:
            key_bytes = safe_decode(private_key.strip())
        except ValueError:
            raise CriticalError("Invalid private key, expected a hex string")
        if len(key_bytes) != PRIVATE_KEY_LENGTH:
            raise CriticalError(
                "Invalid private key, expected {} bytes".format(PRIVATE_KEY_LENGTH)
            )
        self.private_key = private_key.strip()

    def set_program_address(self, address: str) -> None:
        try:
            self.program = to_canonical_address(address)
        except (TypeError, ValueError):
            raise CriticalError("Invalid program address: {}".format(address))

    def set_bump_fee_percent(self, bump_fee_percent) -> None:
        try:
            percent = int(bump_fee_percent)
        except (TypeError, ValueError):
            raise CriticalError(
                "Invalid bump fee percentage: {}".format(bump_fee_percent)
            )
        if percent < 0:
            raise CriticalError("Bump fee percentage must not be negative")
        self.bump_fee_percent = percent

    def validate(self) -> None:
        """Check that every setting needed for an activation is present."""
        if not self.endpoint:
            raise CriticalError(
                "No RPC endpoint. Use --endpoint, set STYLUS_RPC "
                "or add endpoint to " + self.config_path
            )
        if self.program is None:
            raise CriticalError("No program address given, use --address")
        if self.dry_run:
            return
        if not self.private_key:
            raise CriticalError(
                "No private key. Use --private-key or set PRIVATE_KEY"
            )
        # keys from the environment have not been checked yet
        self.set_private_key(self.private_key)
