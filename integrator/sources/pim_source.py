import zipfile
from pathlib import Path

from django.conf import settings
from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from integrator.exceptions import SystemicSourceFailure

from .base import BaseSource


class PimWorkbookSource(BaseSource):
    """PIM extract: the first sheet of a single workbook, header in row 1."""

    tag = 'pim'

    def __init__(self, path=None):
        self.path = Path(path or settings.SYNC_PIM_PATH)

    def locate(self):
        return self.path if self.path.is_file() else None

    def read(self, handle):
        try:
            wb = load_workbook(handle, read_only=True, data_only=True)
        except (OSError, KeyError, InvalidFileException, zipfile.BadZipFile) as exc:
            raise SystemicSourceFailure(f"cannot open workbook {handle}: {exc}") from exc

        try:
            ws = wb[wb.sheetnames[0]]
            rows = ws.iter_rows(values_only=True)
            header = next(rows, None)
            if header is None:
                return
            columns = [str(h).strip() if h is not None else None for h in header]
            for values in rows:
                if all(v is None or v == '' for v in values):
                    continue
                yield {col: val for col, val in zip(columns, values) if col}
        finally:
            wb.close()
