"""
XLSX reader using openpyxl.
"""

from typing import Any

from openpyxl import load_workbook


class XLSXReader:
    """
    Reads the first worksheet of a workbook; the first row is the header.
    """

    def read_rows(self, file_path: str) -> list[dict[str, Any]]:
        """
        Read a workbook into row dictionaries in sheet order.

        Columns with a blank header and rows with no values are skipped.
        """
        workbook = load_workbook(file_path, read_only=True, data_only=True)
        try:
            sheet = workbook.worksheets[0]
            rows = sheet.iter_rows(values_only=True)

            header = next(rows, None)
            if header is None:
                return []
            headers = [str(h).strip() if h is not None else "" for h in header]

            records = []
            for values in rows:
                if values is None or all(v is None or v == "" for v in values):
                    continue
                records.append({
                    name: value
                    for name, value in zip(headers, values)
                    if name
                })
            return records
        finally:
            workbook.close()
