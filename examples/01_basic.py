"""
Basic usage - Check credentials and upload one book
"""
import asyncio
from cwupload import LibraryClient, Credentials, BookMetadata


async def main():
    credentials = Credentials("admin", "admin123", "http://localhost:8083")

    async with LibraryClient(credentials) as library:

        # Login only
        if not await library.check_credentials():
            print("Wrong username or password")
            return

        # Upload a file with metadata
        result = await library.upload_file(
            "dune.epub",
            BookMetadata(title="Dune", author="Frank Herbert", tags="scifi,classic")
        )
        print(f"Uploaded: {result.location}")


if __name__ == "__main__":
    asyncio.run(main())
