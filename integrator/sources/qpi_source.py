import codecs
import csv
import logging
from pathlib import Path

import requests
from django.conf import settings

from integrator.exceptions import SourceUnavailable, SystemicSourceFailure

from .base import BaseSource

logger = logging.getLogger(__name__)


def _is_url(location):
    return str(location).lower().startswith(('http://', 'https://'))


def _feed_encoding(response):
    """Charset named by the server, else UTF-8 with an optional BOM.

    requests falls back to ISO-8859-1 for ``text/*`` without a charset, so
    only an explicit charset parameter is trusted.
    """
    content_type = response.headers.get('Content-Type', '').lower()
    if 'charset=' not in content_type or codecs.lookup(response.encoding).name == 'utf-8':
        return 'utf-8-sig'
    return response.encoding


class QpiCsvSource(BaseSource):
    """Validation extract: one rolling CSV file, local or served over HTTP."""

    tag = 'qpi'

    def __init__(self, location=None, timeout=None):
        self.location = str(location or settings.SYNC_QPI_PATH)
        self.timeout = timeout if timeout is not None else settings.SYNC_HTTP_TIMEOUT

    def make_session(self) -> requests.Session:
        session = requests.Session()
        session.headers.update({'Accept': 'text/csv'})
        return session

    def locate(self):
        if _is_url(self.location):
            # Presence of a remote feed is only known once it is fetched.
            return self.location
        path = Path(self.location)
        if not path.is_file():
            return None
        return path

    def read(self, handle):
        if _is_url(handle):
            yield from self._read_remote(handle)
        else:
            yield from self._read_local(handle)

    def _read_local(self, path):
        try:
            with open(path, 'r', encoding='utf-8-sig', newline='') as f:
                yield from csv.DictReader(f)
        except (OSError, UnicodeDecodeError, csv.Error) as exc:
            raise SystemicSourceFailure(f"cannot read {path}: {exc}") from exc

    def _read_remote(self, url):
        session = self.make_session()
        try:
            with session.get(url, stream=True, timeout=self.timeout) as response:
                if response.status_code == 404:
                    raise SourceUnavailable(f"{url} returned 404")
                response.raise_for_status()
                lines = codecs.iterdecode(response.iter_lines(), _feed_encoding(response))
                yield from csv.DictReader(lines)
        except requests.exceptions.RequestException as exc:
            logger.error("Failed to fetch QPI feed %s: %s", url, exc)
            raise SystemicSourceFailure(f"cannot fetch {url}: {exc}") from exc
        except (UnicodeDecodeError, LookupError, csv.Error) as exc:
            raise SystemicSourceFailure(f"cannot parse {url}: {exc}") from exc
        finally:
            session.close()
