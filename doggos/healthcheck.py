from __future__ import annotations

import sys

from .dog_api import FetchError, fetch_random_image


def main() -> None:
    try:
        url = fetch_random_image()
    except FetchError as exc:
        print(f"FAILED: {exc}")
        sys.exit(1)
    print(f"OK {url}")


if __name__ == "__main__":
    main()
