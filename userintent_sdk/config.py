"""
Network configuration for the UserIntent SDK.
"""
import importlib.resources
import json
import logging
import os
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class NetworkConfig:
    """
    Access to the packaged ``networks.json``.

    Values can be overridden per network through environment variables named
    after the network, e.g. ``SEPOLIA_RPC_URL`` and
    ``SEPOLIA_STANDARD_ADDRESS``.
    """
    _networks_cache: Optional[Dict[str, Dict[str, Any]]] = None

    @classmethod
    def load_networks(cls) -> Dict[str, Dict[str, Any]]:
        """Load network definitions, caching them after the first read"""
        if cls._networks_cache is not None:
            return cls._networks_cache

        path = os.environ.get("USERINTENT_NETWORKS_FILE")
        if path:
            with open(path, "r") as f:
                cls._networks_cache = json.load(f)
        else:
            resource = importlib.resources.files("userintent_sdk").joinpath("networks.json")
            cls._networks_cache = json.loads(resource.read_text())
        logger.debug(f"Loaded {len(cls._networks_cache)} network definitions")
        return cls._networks_cache

    @classmethod
    def get_network(cls, network: str) -> Dict[str, Any]:
        """
        Get the configuration of a named network

        Raises:
            ValueError: If the network is unknown
        """
        networks = cls.load_networks()
        if network not in networks:
            available = ", ".join(sorted(networks))
            raise ValueError(f"Unknown network '{network}'. Available networks: {available}")
        return networks[network]

    @classmethod
    def _env_name(cls, network: str, suffix: str) -> str:
        return f"{network.upper().replace('-', '_')}_{suffix}"

    @classmethod
    def get_rpc_url(cls, network: str, override: Optional[str] = None) -> str:
        if override:
            return override
        env_value = os.environ.get(cls._env_name(network, "RPC_URL"))
        if env_value:
            return env_value
        return cls.get_network(network)["rpc"]

    @classmethod
    def get_chain_id(cls, network: str) -> int:
        return int(cls.get_network(network)["chainId"])

    @classmethod
    def get_standard_address(cls, network: str) -> str:
        """
        Get the relayed-execution standard address for a network

        Raises:
            ValueError: If no address is configured or set in the environment
        """
        env_value = os.environ.get(cls._env_name(network, "STANDARD_ADDRESS"))
        if env_value:
            return env_value
        address = cls.get_network(network).get("relayedExecutionStandard")
        if not address:
            raise ValueError(
                f"No relayed execution standard configured for '{network}'. "
                f"Set {cls._env_name(network, 'STANDARD_ADDRESS')}"
            )
        return address
