"""Streaming loader for static JSON assets (country borders, settlements)."""

import os
from typing import Callable, Dict, Optional

import aiohttp
from dotenv import load_dotenv

load_dotenv()

ProgressCallback = Callable[[int, int], None]


class AssetError(Exception):
    """Raised when an asset cannot be downloaded."""


def resolve_asset_url(url: str) -> str:
    """Resolve an asset path against WANDERER_ASSET_BASE.

    Absolute http(s) URLs are returned unchanged.
    """
    if url.startswith(("http://", "https://")):
        return url
    base = os.getenv("WANDERER_ASSET_BASE", "")
    return f"{base.rstrip('/')}{url}" if base else url


class Asset:
    """A remote file downloaded once and kept in memory.

    The download is streamed so observers can follow progress through
    ``progress`` (``{"done": bytes_read, "total": content_length}``) or the
    ``on_progress`` callback. A failed download is remembered: further calls
    to ``load()`` re-raise the same error until ``reset()`` is called.
    """

    def __init__(
        self,
        url: str,
        session_factory: Optional[Callable[[], aiohttp.ClientSession]] = None,
        on_progress: Optional[ProgressCallback] = None,
        chunk_size: int = 64 * 1024,
    ):
        """Initialize the asset.

        Args:
            url: Asset path (resolved against WANDERER_ASSET_BASE) or absolute URL
            session_factory: Callable returning an aiohttp session, mainly for tests
            on_progress: Called with (done, total) after every chunk
            chunk_size: Bytes to request per read
        """
        self.url = url
        self.session_factory = session_factory or aiohttp.ClientSession
        self.on_progress = on_progress
        self.chunk_size = chunk_size

        self.data: Optional[bytes] = None
        self.ready = False
        self.loading = False
        self.error: Optional[Exception] = None
        self.progress: Dict[str, int] = {"done": 0, "total": 0}

    async def load(self, verbose: bool = False) -> bytes:
        """Download the asset, or return the cached bytes.

        Args:
            verbose: If True, print download status

        Returns:
            Raw asset bytes

        Raises:
            AssetError: If the download failed now or on an earlier call
        """
        if self.ready and self.data is not None:
            return self.data
        if self.error is not None:
            raise self.error

        self.loading = True
        self.error = None
        url = resolve_asset_url(self.url)

        try:
            if verbose:
                print(f"📥 Downloading {url}")

            chunks = []
            async with self.session_factory() as session:
                async with session.get(url) as response:
                    if response.status >= 400:
                        raise AssetError(f"HTTP {response.status}: {response.reason}")

                    self.progress["total"] = _content_length(response.headers)

                    if response.content is None:
                        raise AssetError("Response body is null")

                    async for chunk in response.content.iter_chunked(self.chunk_size):
                        chunks.append(chunk)
                        self.progress["done"] += len(chunk)
                        if self.on_progress:
                            self.on_progress(self.progress["done"], self.progress["total"])

            self.data = b"".join(chunks)
            self.ready = True

            if verbose:
                print(f"✅ Downloaded {url} ({self.progress['done']} bytes)")

            return self.data

        except AssetError as e:
            self.error = e
            if verbose:
                print(f"❌ Failed to download {url}: {e}")
            raise
        except Exception as e:
            self.error = AssetError(f"{type(e).__name__}: {e}")
            if verbose:
                print(f"❌ Failed to download {url}: {e}")
            raise self.error from e
        finally:
            self.loading = False

    def reset(self) -> None:
        """Forget downloaded data and any cached error."""
        self.data = None
        self.ready = False
        self.error = None
        self.progress = {"done": 0, "total": 0}


def _content_length(headers) -> int:
    try:
        return int(headers.get("Content-Length") or 0)
    except ValueError:
        return 0
