import asyncio
import gc
import gzip
import warnings
import zlib

import pytest
from conftest import SAMPLE_BYTES, token

from webfs.core.exceptions import RangeNotSatisfiableError
from webfs.services.streaming_service import (ByteRange, ContentEncoding,
                                              StreamingService, StreamMode,
                                              attachment_disposition,
                                              choose_encoding,
                                              iter_compressed,
                                              iter_file_range, parse_range)

IDENTITY = {"Accept-Encoding": "identity"}


def resource_warnings(coro_fn):
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always", ResourceWarning)
        asyncio.run(coro_fn())
        gc.collect()
    return [w for w in caught if issubclass(w.category, ResourceWarning)]


class TestParseRange:
    def test_absent_header(self):
        assert parse_range(None, 500) is None
        assert parse_range("", 500) is None

    def test_other_unit_is_ignored(self):
        assert parse_range("items=0-5", 500) is None

    def test_closed_range(self):
        r = parse_range("bytes=0-99", 500)
        assert r == ByteRange(0, 100)
        assert r.length == 100
        assert r.content_range(500) == "bytes 0-99/500"

    def test_open_ended(self):
        assert parse_range("bytes=100-", 500) == ByteRange(100, 500)

    def test_suffix(self):
        r = parse_range("bytes=-100", 500)
        assert r == ByteRange(400, 500)
        assert r.content_range(500) == "bytes 400-499/500"

    def test_suffix_longer_than_file(self):
        assert parse_range("bytes=-9000", 500) == ByteRange(0, 500)

    def test_end_clamped_to_size(self):
        assert parse_range("bytes=450-9999", 500) == ByteRange(450, 500)

    @pytest.mark.parametrize(
        "header, expected",
        [
            ("bytes=abc-99", ByteRange(0, 100)),
            ("bytes=10-xyz", ByteRange(10, 500)),
            ("bytes=foo-bar", ByteRange(0, 500)),
            ("bytes=-", ByteRange(0, 500)),
            ("bytes=", ByteRange(0, 500)),
            ("bytes=-zz", ByteRange(0, 500)),
            ("bytes=50-10", ByteRange(50, 500)),
        ],
    )
    def test_malformed_bounds_fall_back_to_defaults(self, header, expected):
        assert parse_range(header, 500) == expected

    def test_first_of_multiple_ranges(self):
        assert parse_range("bytes=0-9, 20-29", 500) == ByteRange(0, 10)

    def test_start_past_end_is_unsatisfiable(self):
        with pytest.raises(RangeNotSatisfiableError) as excinfo:
            parse_range("bytes=500-", 500)
        assert excinfo.value.file_size == 500

    def test_any_range_of_empty_file_is_unsatisfiable(self):
        with pytest.raises(RangeNotSatisfiableError):
            parse_range("bytes=0-", 0)
        assert parse_range(None, 0) is None


class TestChooseEncoding:
    @pytest.mark.parametrize(
        "header, expected",
        [
            (None, ContentEncoding.IDENTITY),
            ("", ContentEncoding.IDENTITY),
            ("gzip", ContentEncoding.GZIP),
            ("deflate, gzip", ContentEncoding.DEFLATE),
            ("br, gzip;q=0.8, deflate", ContentEncoding.GZIP),
            ("GZIP", ContentEncoding.GZIP),
            ("br, identity", ContentEncoding.IDENTITY),
            ("gzip;q=0, deflate", ContentEncoding.DEFLATE),
        ],
    )
    def test_first_supported_in_client_order(self, header, expected):
        assert choose_encoding(header) is expected


def test_attachment_disposition():
    assert attachment_disposition("f.txt") == 'attachment; filename="f.txt"'
    assert attachment_disposition("résumé.txt") == "attachment; filename*=UTF-8''r%C3%A9sum%C3%A9.txt"


class TestIterators:
    def test_range_iterator_copies_exact_length(self, tree):
        async def run():
            return [c async for c in iter_file_range(str(tree / "sample.bin"), 10, 25, chunk_size=7)]

        assert b"".join(asyncio.run(run())) == SAMPLE_BYTES[10:35]

    def test_consumer_stopping_early_closes_file(self, tree):
        async def run():
            body = iter_compressed(iter_file_range(str(tree / "sample.bin"), 0, 500, chunk_size=16), ContentEncoding.GZIP)
            await body.__anext__()
            await body.aclose()

        assert resource_warnings(run) == []

    def test_body_closed_before_first_chunk_leaves_no_open_file(self, tree):
        async def run():
            plan = await StreamingService().open(token(tree / "sample.bin"), StreamMode.VIEW, accept_encoding="gzip")
            await plan.body.aclose()

        assert resource_warnings(run) == []

    def test_deflate_uses_zlib_container(self, tree):
        async def run():
            body = iter_compressed(iter_file_range(str(tree / "sample.bin"), 0, 500), ContentEncoding.DEFLATE)
            return b"".join([c async for c in body])

        assert zlib.decompress(asyncio.run(run())) == SAMPLE_BYTES


class TestDownloadRoute:
    def test_full_download(self, client, tree):
        resp = client.get(f"/fs/download/@{token(tree / 'sample.bin')}")
        assert resp.status_code == 200
        assert resp.content == SAMPLE_BYTES
        assert resp.headers["content-length"] == "500"
        assert resp.headers["content-disposition"] == 'attachment; filename="sample.bin"'
        assert "content-encoding" not in resp.headers

    def test_download_ignores_accept_encoding(self, client, tree):
        resp = client.get(f"/fs/download/@{token(tree / 'sample.bin')}", headers={"Accept-Encoding": "gzip"})
        assert "content-encoding" not in resp.headers
        assert resp.content == SAMPLE_BYTES

    def test_leading_range(self, client, tree):
        resp = client.get(f"/fs/download/@{token(tree / 'sample.bin')}", headers={"Range": "bytes=0-99"})
        assert resp.status_code == 206
        assert resp.headers["content-range"] == "bytes 0-99/500"
        assert resp.headers["content-length"] == "100"
        assert resp.content == SAMPLE_BYTES[:100]

    def test_suffix_range(self, client, tree):
        resp = client.get(f"/fs/download/@{token(tree / 'sample.bin')}", headers={"Range": "bytes=-100"})
        assert resp.status_code == 206
        assert resp.headers["content-range"] == "bytes 400-499/500"
        assert resp.content == SAMPLE_BYTES[400:]

    def test_malformed_range_streams_whole_file(self, client, tree):
        resp = client.get(f"/fs/download/@{token(tree / 'sample.bin')}", headers={"Range": "bytes=x-y"})
        assert resp.status_code == 206
        assert resp.headers["content-range"] == "bytes 0-499/500"
        assert resp.content == SAMPLE_BYTES

    def test_unsatisfiable_range(self, client, tree):
        resp = client.get(f"/fs/download/@{token(tree / 'sample.bin')}", headers={"Range": "bytes=900-"})
        assert resp.status_code == 416
        assert resp.headers["content-range"] == "bytes */500"

    def test_range_on_empty_file(self, client, tree):
        empty = tree / "empty.txt"
        empty.write_bytes(b"")
        resp = client.get(f"/fs/download/@{token(empty)}", headers={"Range": "bytes=0-"})
        assert resp.status_code == 416
        assert resp.headers["content-range"] == "bytes */0"
        assert client.get(f"/fs/download/@{token(empty)}").content == b""

    def test_missing_file_is_plain_404(self, client, tree):
        resp = client.get(f"/fs/download/@{token(tree / 'ghost.bin')}")
        assert resp.status_code == 404
        assert resp.text == "Not Found"

    def test_directory_download_is_404(self, client, tree):
        resp = client.get(f"/fs/download/@{token(tree / 'sub')}")
        assert resp.status_code == 404


class TestViewRoute:
    def test_uncompressed_view(self, client, tree):
        resp = client.get(f"/fs/view/@{token(tree / 'sub' / 'A.txt')}", headers=IDENTITY)
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/plain")
        assert resp.headers["content-length"] == "10"
        assert "content-disposition" not in resp.headers
        assert resp.text == "0123456789"

    def test_gzip_view(self, client, tree):
        url = f"/fs/view/@{token(tree / 'sample.bin')}"
        with client.stream("GET", url, headers={"Accept-Encoding": "gzip"}) as resp:
            raw = b"".join(resp.iter_raw())
            assert resp.headers["content-encoding"] == "gzip"
            assert "content-length" not in resp.headers
        assert gzip.decompress(raw) == SAMPLE_BYTES

    def test_gzip_view_decoded_by_client(self, client, tree):
        resp = client.get(f"/fs/view/@{token(tree / 'sample.bin')}", headers={"Accept-Encoding": "gzip"})
        assert resp.headers["content-encoding"] == "gzip"
        assert resp.content == SAMPLE_BYTES

    def test_deflate_view(self, client, tree):
        url = f"/fs/view/@{token(tree / 'sample.bin')}"
        with client.stream("GET", url, headers={"Accept-Encoding": "br, deflate, gzip"}) as resp:
            raw = b"".join(resp.iter_raw())
            assert resp.headers["content-encoding"] == "deflate"
        assert zlib.decompress(raw) == SAMPLE_BYTES

    def test_range_view_is_not_compressed(self, client, tree):
        resp = client.get(
            f"/fs/view/@{token(tree / 'sample.bin')}",
            headers={"Accept-Encoding": "gzip", "Range": "bytes=0-99"},
        )
        assert resp.status_code == 206
        assert "content-encoding" not in resp.headers
        assert resp.content == SAMPLE_BYTES[:100]

    def test_directory_redirects_to_listing(self, client, tree):
        sub = tree / "sub"
        resp = client.get(f"/fs/view/@{token(sub)}", follow_redirects=False)
        assert resp.status_code == 302
        assert resp.headers["location"] == f"/fs/list/@{sub}"

    def test_missing_file_is_plain_404(self, client, tree):
        resp = client.get(f"/fs/view/@{token(tree / 'ghost.txt')}")
        assert resp.status_code == 404
        assert resp.text == "Not Found"
