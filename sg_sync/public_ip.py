import ipaddress

import requests

from sg_sync.errors import SetupError
from sg_sync.pylog import get_logger

logger = get_logger("public_ip")

IP_SERVICE_URL = "https://checkip.amazonaws.com/"


class AddressResolver:
    def __init__(self, url=IP_SERVICE_URL, timeout=10, session=None):
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()

    def resolve(self):
        """Return the caller's public address as an ipaddress object."""
        try:
            response = self.session.get(self.url, timeout=self.timeout)
        except requests.RequestException as e:
            raise SetupError(f"failed to get public IP from {self.url}: {e}") from e

        if not response.ok:
            raise SetupError(
                f"failed to get public IP: service {self.url} returned status {response.status_code}"
            )

        text = response.text.strip()
        try:
            address = ipaddress.ip_address(text)
        except ValueError as e:
            raise SetupError(f"invalid IP address received: {text!r}") from e

        logger.info("Discovered public IP: %s", address)
        return address


def host_cidr(address):
    """Single-host CIDR for an address: /32 for IPv4, /128 for IPv6."""
    address = ipaddress.ip_address(address)
    return f"{address}/{address.max_prefixlen}"
