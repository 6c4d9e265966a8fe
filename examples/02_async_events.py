"""
Event-driven requests.

Async methods return immediately. Results arrive through the ``success`` /
``error`` events (on the transport thread) and through the returned Future.
"""

import concurrent.futures

from duplex_http import HTTPClient


def on_success(body: bytes):
    print(f"[success] {len(body)} bytes")


def on_error(body: bytes):
    print(f"[error] body={body[:60]!r}")


def fire_and_forget():
    """Observers only."""
    print("\n=== Events ===")

    with HTTPClient() as client:
        client.success.connect(on_success)
        client.error.connect(on_error)

        futures = [
            client.get("https://httpbin.org/get"),
            client.get("https://httpbin.org/status/503"),
            client.post("https://httpbin.org/post", b"payload"),
        ]
        # Closing would cancel the requests still running
        concurrent.futures.wait(futures, timeout=30)


def with_futures():
    """Future resolves with the Outcome after observers ran."""
    print("\n=== Futures ===")

    with HTTPClient() as client:
        future = client.get("https://httpbin.org/uuid")
        outcome = future.result(timeout=30)

        if outcome.ok:
            print(f"Body: {outcome.body.decode()}")
        else:
            print(f"Failed: {outcome.status_code} {outcome.error}")


if __name__ == "__main__":
    fire_and_forget()
    with_futures()
