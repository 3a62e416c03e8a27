"""
Advanced usage - Proxy, config, batch uploads
"""
import asyncio
import logging
from pathlib import Path

from cwupload import (
    LibraryClient,
    Credentials,
    APIConfig,
    ProxyConfig,
    RetryConfig,
    TimeoutConfig,
    ServerProfile,
    UploadPayload,
    setup_logging,
)


async def main():
    logging.basicConfig(level=logging.INFO)
    setup_logging(logging.INFO)

    # Custom configuration
    config = APIConfig(
        proxy=ProxyConfig(url="http://proxy.example.com:8080", username="user", password="pass"),
        timeout=TimeoutConfig(total=60),
        retry=RetryConfig(max_retries=2),
        # Server mounted behind a reverse proxy with a different upload route
        server=ServerProfile(upload_path="/upload")
    )
    credentials = Credentials("admin", "admin123", "https://books.example.com/calibre")

    async with LibraryClient(credentials, config=config) as library:

        # Batch upload every epub in a folder, 3 logins in flight
        payloads = [
            await UploadPayload.from_path(path)
            for path in sorted(Path("./inbox").glob("*.epub"))
        ]
        outcomes = await library.upload_many(payloads, concurrency=3, continue_on_fail=True)

        for outcome in outcomes:
            if outcome.success:
                print(f"{outcome.file_name}: {outcome.result.location}")
            else:
                print(f"{outcome.file_name}: {outcome.error or 'no location returned'}")


if __name__ == "__main__":
    asyncio.run(main())
