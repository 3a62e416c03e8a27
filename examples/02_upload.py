"""
Upload from memory - Payloads, cycle states and errors
"""
import asyncio
from cwupload import (
    LibraryClient,
    UploadPayload,
    EnvCredentialSource,
    AuthenticationError,
    NetworkError,
    LibraryError,
)


async def main():
    with open("notes.pdf", "rb") as f:
        payload = UploadPayload(
            content=f.read(),
            file_name="notes.pdf",
            mime_type="application/pdf",
            metadata={"title": "Lecture notes", "series": "Physics", "series_index": 2}
        )

    # Credentials come from CWUPLOAD_URL, CWUPLOAD_USERNAME, CWUPLOAD_PASSWORD
    async with LibraryClient() as library:

        try:
            result = await library.upload(payload)
            print(f"Uploaded: {result.location}")
        except AuthenticationError as e:
            print(f"Rejected at {e.step.value}: {e.message}")
        except NetworkError as e:
            print(f"Server error {e.status}: {e.body}")

        # One cycle by hand, to see where it stops
        cycle = library.new_cycle()
        credentials = await EnvCredentialSource().get_credentials()
        try:
            await cycle.run(credentials, payload)
        except LibraryError as e:
            print(f"Cycle failed after {cycle.failed_state.value}: {e}")


if __name__ == "__main__":
    asyncio.run(main())
