"""
File Download Example
"""

import sys

from duplex_http import HTTPClient, NetworkError


def download(url: str, target: str):
    with HTTPClient() as client:
        try:
            written = client.download_sync(url, target)
        except NetworkError as e:
            print(f"Download failed ({e.status_code}): {e}")
            return
    print(f"Saved {written} bytes to {target}")


if __name__ == "__main__":
    url = sys.argv[1] if len(sys.argv) > 1 else "https://httpbin.org/image/png"
    target = sys.argv[2] if len(sys.argv) > 2 else "image.png"
    download(url, target)
