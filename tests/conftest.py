import io
import tarfile

import httpx
import pytest
from click.testing import CliRunner


@pytest.fixture
def runner():
    """Click CLI runner fixture."""
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Point the cache at a temp dir and clear env that changes behaviour."""
    home = tmp_path / "ghdir-home"
    monkeypatch.setenv("GHDIR_HOME", str(home))
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.delenv("GHDIR_LARGE_DOWNLOAD_BYTES", raising=False)
    return home


def build_archive(entries):
    """Build .tar.gz bytes from (name, content) pairs; content None = directory."""
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz") as tar:
        for name, content in entries:
            info = tarfile.TarInfo(name)
            if content is None:
                info.type = tarfile.DIRTYPE
                info.mode = 0o755
                tar.addfile(info)
            else:
                info.size = len(content)
                info.mode = 0o644
                tar.addfile(info, io.BytesIO(content))
    return buf.getvalue()


@pytest.fixture
def archive_bytes():
    return build_archive([
        ("repo-main/", None),
        ("repo-main/README.md", b"# repo\n"),
        ("repo-main/docs/", None),
        ("repo-main/docs/guide/", None),
        ("repo-main/docs/guide/intro.md", b"intro\n"),
        ("repo-main/docs/guide/deep/notes.txt", b"notes"),
        ("repo-main/src/app.py", b"print('hi')\n"),
    ])


class FakeGitHub:
    """httpx.MockTransport handler serving one archive with an ETag."""

    def __init__(self, body: bytes, etag: str = '"v1"', status: int = 200):
        self.body = body
        self.etag = etag
        self.status = status
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.status != 200:
            return httpx.Response(self.status)
        if request.headers.get("if-none-match") == self.etag:
            return httpx.Response(304, headers={"ETag": self.etag})
        headers = {"ETag": self.etag, "Content-Length": str(len(self.body))}
        if request.method == "HEAD":
            return httpx.Response(200, headers=headers)
        return httpx.Response(200, headers=headers, content=self.body)

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self))


@pytest.fixture
def fake_github(archive_bytes):
    return FakeGitHub(archive_bytes)


@pytest.fixture
def make_archive():
    return build_archive
