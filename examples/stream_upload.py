import http.client
import io

import click

from streamform import FieldSet


def main() -> None:
    form = FieldSet()
    form.add_text("foo", "bar")
    form.add_stream("file", io.BytesIO(b"hello stream"), filename="hello.txt", content_type="text/plain")

    with form.prepare() as body:
        conn = http.client.HTTPSConnection("httpbin.org", timeout=10)
        conn.request(
            "POST",
            "/post",
            body=body.iter_bytes(),
            headers={"Content-Type": body.content_type},
            encode_chunked=True,
        )
        r = conn.getresponse()
        click.secho(f"Streamed upload status: {r.status}", fg="green")
        click.echo(r.read().decode()[:300])
        conn.close()


if __name__ == "__main__":
    main()
