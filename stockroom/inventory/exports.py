"""
CSV export of device search results.
"""

import csv
import io

from django.http import HttpResponse
from django.utils import timezone

CSV_HEADER = ['设备名称', '序列号', '一级标签', '二级标签', '位置', '创建时间', '更新时间']

# Spreadsheet tools need the BOM to read UTF-8 Chinese headers correctly
UTF8_BOM = '\ufeff'


def _format_datetime(value):
    return timezone.localtime(value).strftime('%Y-%m-%d %H:%M:%S')


def devices_to_csv(devices):
    """Render ``devices`` as CSV text with every field quoted."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator='\n')
    writer.writerow(CSV_HEADER)
    for device in devices:
        writer.writerow([
            device.name,
            device.serial_number,
            device.primary_tag.name,
            device.secondary_tag.name,
            device.location,
            _format_datetime(device.created_at),
            _format_datetime(device.updated_at),
        ])
    return buffer.getvalue()


def export_filename():
    return f"devices-{timezone.localdate().isoformat()}.csv"


def csv_response(devices):
    """Build the attachment response for ``devices``."""
    content = UTF8_BOM + devices_to_csv(devices)
    response = HttpResponse(content.encode('utf-8'), content_type='text/csv; charset=utf-8')
    response['Content-Disposition'] = f'attachment; filename="{export_filename()}"'
    return response
