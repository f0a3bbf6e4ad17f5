"""
Subscriber spreadsheet export.

Builds the workbook in memory with openpyxl; the route streams the bytes.
"""

from io import BytesIO

from openpyxl import Workbook
from openpyxl.styles import Font

SHEET_TITLE = 'Newsletter Subscribers'
HEADERS = ['S.No', 'Email', 'Subscribed Date', 'Subscribed Time']
COLUMN_WIDTHS = {'A': 8, 'B': 30, 'C': 15, 'D': 15}

XLSX_MIMETYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'


def build_subscribers_workbook(subscribers):
    """Return xlsx bytes with one row per subscriber, numbered from 1"""
    workbook = Workbook()
    sheet = workbook.active
    sheet.title = SHEET_TITLE

    sheet.append(HEADERS)
    for cell in sheet[1]:
        cell.font = Font(bold=True)

    for index, subscriber in enumerate(subscribers, start=1):
        sheet.append([
            index,
            subscriber.email,
            subscriber.subscribed_at.strftime('%Y-%m-%d'),
            subscriber.subscribed_at.strftime('%H:%M:%S'),
        ])

    for column, width in COLUMN_WIDTHS.items():
        sheet.column_dimensions[column].width = width

    buffer = BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


def export_filename(today):
    return f'newsletter-subscribers-{today.strftime("%Y-%m-%d")}.xlsx'
