"""
Basic HTTP Client Usage Examples

Demonstrates blocking GET, POST, PUT, DELETE requests.
"""

import json

from duplex_http import HTTPClient, NetworkError, ClientConfig


def basic_get_request():
    """Simple GET request."""
    print("\n=== Basic GET Request ===")

    config = ClientConfig.create(base_url="https://jsonplaceholder.typicode.com")
    with HTTPClient(config=config) as client:
        body = client.get_sync("/posts/1")

    print(f"Data: {json.loads(body)}")


def post_with_json():
    """POST request with JSON body."""
    print("\n=== POST with JSON ===")

    data = {
        "title": "My Post",
        "body": "This is the content",
        "userId": 1
    }

    with HTTPClient(headers={"Content-Type": "application/json"}) as client:
        body = client.post_sync("https://jsonplaceholder.typicode.com/posts", json.dumps(data))

    print(f"Created: {json.loads(body)}")


def put_and_delete():
    """PUT then DELETE."""
    print("\n=== PUT / DELETE ===")

    config = ClientConfig.create(
        base_url="https://jsonplaceholder.typicode.com",
        headers={"Content-Type": "application/json"},
    )
    with HTTPClient(config=config) as client:
        updated = client.put_sync("/posts/1", json.dumps({"id": 1, "title": "Updated"}))
        print(f"Updated: {json.loads(updated)}")

        client.delete_sync("/posts/1")
        print("Deleted")


def error_handling():
    """Non-2xx responses raise NetworkError with the body as message."""
    print("\n=== Error Handling ===")

    with HTTPClient() as client:
        try:
            client.get_sync("https://httpbin.org/status/404")
        except NetworkError as e:
            print(f"Status: {e.status_code}, message: {e.message!r}")

        # Same call without exceptions
        outcome = client.request_outcome("GET", "https://httpbin.org/status/500")
        if not outcome.ok:
            print(f"Failed with {outcome.status_code}")


if __name__ == "__main__":
    basic_get_request()
    post_with_json()
    put_and_delete()
    error_handling()
