"""
Process-wide configuration: bearer token, root CA, timeout.

Changes are visible to every client and every request submitted afterwards.
"""

import sys

from duplex_http import (
    HTTPClient,
    GlobalConfig,
    ConfigurationError,
    set_bearer_token,
    set_root_ca,
    set_global_timeout,
    reset_global_timeout,
)


def shared_token():
    print("\n=== Shared bearer token ===")

    users = HTTPClient()
    orders = HTTPClient()

    set_bearer_token("demo-token")
    print(users.get_sync("https://httpbin.org/bearer").decode())
    print(orders.get_sync("https://httpbin.org/bearer").decode())

    set_bearer_token("")  # next requests carry no Authorization
    users.close()
    orders.close()


def private_ca(path: str):
    print("\n=== Private root CA ===")
    try:
        set_root_ca(path)
    except ConfigurationError as e:
        print(f"Not loaded: {e.message} ({e.path})")


def timeout():
    print("\n=== Global timeout ===")
    set_global_timeout(1.5)
    with HTTPClient() as client:
        outcome = client.request_outcome("GET", "https://httpbin.org/delay/5")
        print(f"status={outcome.status_code} error={type(outcome.error).__name__}")
    reset_global_timeout()


def isolated_config():
    """Explicit GlobalConfig instead of the process-wide one."""
    print("\n=== Isolated config ===")
    config = GlobalConfig()
    config.set_bearer_token("tenant-a")
    with HTTPClient(global_config=config) as client:
        print(client.get_sync("https://httpbin.org/headers").decode())


if __name__ == "__main__":
    shared_token()
    private_ca(sys.argv[1] if len(sys.argv) > 1 else "/nonexistent/ca.pem")
    timeout()
    isolated_config()
