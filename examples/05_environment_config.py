"""
Environment Configuration Example.

    DUPLEX_HTTP_BASE_URL=https://httpbin.org
    DUPLEX_HTTP_HEADERS={"Accept": "application/json"}
    DUPLEX_HTTP_BEARER_TOKEN=...
    DUPLEX_HTTP_TIMEOUT=10
    DUPLEX_HTTP_LOG_LEVEL=INFO
    DUPLEX_HTTP_LOG_FORMAT=json
"""

from duplex_http import HTTPClient, apply_global_settings, load_from_env


def main():
    # Token, root CA and timeout go to the process-wide config
    global_config = apply_global_settings()
    print(global_config)

    config = load_from_env()
    print(f"base_url={config.base_url} headers={dict(config.headers)}")

    with HTTPClient(config=config) as client:
        print(client.get_sync("/get").decode())


if __name__ == "__main__":
    main()
