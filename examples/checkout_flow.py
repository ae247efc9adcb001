from __future__ import annotations

import sys
import tempfile

import httpx

from reqsnap import HttpxRequestCapture, SnapConfig, SnapSession, URLRequestFilter

SHOP_URL = "https://shop.example"
ANALYTICS_URL = "https://analytics.example"


def fake_backend(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json={"path": request.url.path})


def checkout(client: httpx.Client, token: str):
    client.get(f"{SHOP_URL}/items", params={"page": "1"})
    client.get(f"{ANALYTICS_URL}/track")
    client.post(f"{SHOP_URL}/cart", data={"item": "42"}, headers={"Authorization": f"Bearer {token}"})


def main():
    capture = HttpxRequestCapture(transport=httpx.MockTransport(fake_backend))
    session = SnapSession(capture, config=SnapConfig(reference_dir=tempfile.mkdtemp(), report="rich"))
    ignore_analytics = URLRequestFilter(ANALYTICS_URL)

    with httpx.Client(transport=capture.transport) as client:
        session.start()
        checkout(client, token="first-token")
        session.record("checkout", ignore_analytics)

        # Tokens change every run, so the reference accepts any of them
        path = session.storage.path_for("checkout")
        path.write_text(path.read_text().replace("Bearer first-token", "^Bearer [\\\\w-]+$"))

        session.start()
        checkout(client, token=sys.argv[1] if len(sys.argv) > 1 else "second-token")
        print(session.validate("checkout", ignore_analytics).message)


if __name__ == "__main__":
    main()
