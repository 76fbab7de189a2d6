import asyncio

import click

from streamform import build_multipart


async def main() -> None:
    def numbers():
        for i in range(5):
            yield f"row {i}\n".encode()

    ctype, body = build_multipart({"kind": "report"}, {"rows": ("rows.txt", numbers(), "text/plain")})
    click.secho(ctype, fg="cyan")
    async for chunk in body.aiter_bytes(chunk_size=32):
        click.echo(repr(chunk))


if __name__ == "__main__":
    asyncio.run(main())
