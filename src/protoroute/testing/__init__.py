"""Testing utilities for protoroute transports.

Usage::

    from protoroute.testing import TestClient

    async with TestClient(transport) as client:
        response = await client.get("app://records/user/42")
        assert response.status == 200
"""

from protoroute.testing.client import TestClient

__all__ = ["TestClient"]
