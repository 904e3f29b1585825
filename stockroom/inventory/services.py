"""
Inventory write operations.

Every operation that touches devices appends the matching DeviceLog rows
inside the same transaction, so a failure leaves neither the change nor
its audit entry behind.
"""

import logging
from dataclasses import dataclass, field

from django.conf import settings
from django.db import IntegrityError, transaction

from .exceptions import InventoryError, TagInUseError, DuplicateSerialNumberError
from .models import PrimaryTag, SecondaryTag, Device, DeviceLog
from .serials import parse_serial_numbers

logger = logging.getLogger('stockroom.inventory')


@dataclass
class EntryRow:
    """One row of the bulk entry form."""

    location: str
    primary_tag_id: int
    secondary_tag_id: int
    serial_numbers: str

    @property
    def is_complete(self):
        return bool(
            (self.location or '').strip() and self.primary_tag_id
            and self.secondary_tag_id and (self.serial_numbers or '').strip()
        )


@dataclass
class EntryResult:
    created: list = field(default_factory=list)
    updated: list = field(default_factory=list)

    @property
    def total(self):
        return len(self.created) + len(self.updated)


def resolve_tags(primary_tag_id, secondary_tag_id):
    """Return the (primary, secondary) tag pair, checking that they belong together."""
    if not str(secondary_tag_id or '').isdigit():
        raise InventoryError('标签不存在')
    secondary_tag = SecondaryTag.objects.select_related('primary_tag').filter(pk=secondary_tag_id).first()
    if secondary_tag is None:
        raise InventoryError('标签不存在')
    if str(secondary_tag.primary_tag_id) != str(primary_tag_id):
        raise InventoryError(f'二级标签 "{secondary_tag.name}" 不属于所选一级标签')
    return secondary_tag.primary_tag, secondary_tag


def register_devices(rows, user):
    """
    Register a batch of devices from bulk entry rows.

    Incomplete rows are skipped. For each serial number in a row, a device
    already registered under the same secondary tag has its location moved;
    otherwise a new device is created. Either every serial number in the
    batch is persisted or none is.
    """
    rows = [row for row in rows if row and row.is_complete]
    if not rows:
        raise InventoryError('至少需要一条有效的设备记录')

    limit = settings.STOCKROOM_MAX_SERIALS_PER_ENTRY
    result = EntryResult()

    with transaction.atomic():
        pending = 0
        for row in rows:
            primary_tag, secondary_tag = resolve_tags(row.primary_tag_id, row.secondary_tag_id)
            serial_numbers = parse_serial_numbers(row.serial_numbers, limit=limit)
            pending += len(serial_numbers)
            if pending > limit:
                raise InventoryError(f'单次录入的设备数量不能超过 {limit} 台')

            location = row.location.strip()
            existing = {
                device.serial_number: device
                for device in Device.objects.filter(
                    secondary_tag=secondary_tag, serial_number__in=serial_numbers
                )
            }

            for serial_number in serial_numbers:
                device = existing.get(serial_number)
                if device is not None:
                    device.location = location
                    device.save(update_fields=['location', 'updated_at'])
                    DeviceLog.record(device, user, DeviceLog.Action.UPDATE, f'更新设备位置: {location}')
                    result.updated.append(device)
                else:
                    device = Device.objects.create(
                        serial_number=serial_number,
                        location=location,
                        primary_tag=primary_tag,
                        secondary_tag=secondary_tag,
                    )
                    DeviceLog.record(device, user, DeviceLog.Action.CREATE, f'创建设备，位置: {location}')
                    result.created.append(device)

    logger.info(
        "Bulk entry by %s: %d created, %d updated",
        user.username, len(result.created), len(result.updated)
    )
    return result


def update_device(device, user, serial_number, location, primary_tag_id, secondary_tag_id):
    """Apply an edit to ``device`` and log the fields that changed."""
    serial_number = (serial_number or '').strip()
    location = (location or '').strip()
    if not serial_number or not location or not primary_tag_id or not secondary_tag_id:
        raise InventoryError('所有字段都是必填的')

    primary_tag, secondary_tag = resolve_tags(primary_tag_id, secondary_tag_id)

    duplicate = Device.objects.filter(
        secondary_tag=secondary_tag, serial_number=serial_number
    ).exclude(pk=device.pk).exists()
    if duplicate:
        raise DuplicateSerialNumberError(f'该二级标签下已存在序列号 {serial_number}')

    changes = []
    if device.serial_number != serial_number:
        changes.append(f'序列号: {device.serial_number} → {serial_number}')
    if device.location != location:
        changes.append(f'位置: {device.location} → {location}')
    if device.secondary_tag_id != secondary_tag.pk:
        changes.append(f'类型: {device.name} → {secondary_tag.name}')

    device.serial_number = serial_number
    device.location = location
    device.primary_tag = primary_tag
    device.secondary_tag = secondary_tag

    try:
        with transaction.atomic():
            device.save()
            DeviceLog.record(
                device, user, DeviceLog.Action.UPDATE,
                '更新设备信息: ' + '; '.join(changes) if changes else '更新设备信息'
            )
    except IntegrityError:
        device.refresh_from_db()
        raise DuplicateSerialNumberError(f'该二级标签下已存在序列号 {serial_number}')

    logger.info("Device %s updated by %s", device.pk, user.username)
    return device


def delete_device(device, user):
    """Delete ``device``; its log entry is written first, in the same transaction."""
    with transaction.atomic():
        DeviceLog.record(device, user, DeviceLog.Action.DELETE, '删除设备')
        device_id = device.pk
        device.delete()
    logger.info("Device %s (%s #%s) deleted by %s", device_id, device.name, device.serial_number, user.username)


def create_primary_tag(name):
    name = (name or '').strip()
    if not name:
        raise InventoryError('标签名称不能为空')
    if PrimaryTag.objects.filter(name=name).exists():
        raise InventoryError(f'一级标签 "{name}" 已存在')
    tag = PrimaryTag.objects.create(name=name)
    logger.info("Primary tag %r created", name)
    return tag


def delete_primary_tag(tag):
    if tag.secondary_tags.exists():
        raise TagInUseError('该一级标签下还有二级标签，无法删除')
    logger.info("Primary tag %r deleted", tag.name)
    tag.delete()


def create_secondary_tag(primary_tag_id, name):
    name = (name or '').strip()
    if not name or not primary_tag_id:
        raise InventoryError('标签名称和一级标签ID不能为空')
    primary_tag = PrimaryTag.objects.filter(pk=primary_tag_id).first() if str(primary_tag_id).isdigit() else None
    if primary_tag is None:
        raise InventoryError('标签不存在')
    if primary_tag.secondary_tags.filter(name=name).exists():
        raise InventoryError(f'二级标签 "{name}" 已存在')
    tag = SecondaryTag.objects.create(primary_tag=primary_tag, name=name)
    logger.info("Secondary tag %r created under %r", name, primary_tag.name)
    return tag


def rename_secondary_tag(tag, name, user):
    """
    Rename ``tag`` and carry the new name onto its devices.

    Each renamed device gets an ``update`` log entry.
    """
    name = (name or '').strip()
    if not name:
        raise InventoryError('标签名称和ID不能为空')
    if name == tag.name:
        return tag
    if SecondaryTag.objects.filter(primary_tag_id=tag.primary_tag_id, name=name).exclude(pk=tag.pk).exists():
        raise InventoryError(f'二级标签 "{name}" 已存在')

    old_name = tag.name
    with transaction.atomic():
        tag.name = name
        tag.save(update_fields=['name', 'updated_at'])
        devices = list(tag.devices.all())
        for device in devices:
            device.secondary_tag = tag
            device.save(update_fields=['name', 'updated_at'])
        DeviceLog.objects.bulk_create([
            DeviceLog(
                device_id=device.pk,
                device_name=device.name,
                serial_number=device.serial_number,
                user=user,
                action=DeviceLog.Action.UPDATE,
                details=f'二级标签更名: {old_name} → {name}',
            )
            for device in devices
        ])

    logger.info("Secondary tag %r renamed to %r (%d devices)", old_name, name, len(devices))
    return tag


def delete_secondary_tag(tag):
    """Delete ``tag`` unless devices are still registered under it."""
    if tag.devices.exists():
        logger.warning("Refused to delete secondary tag %r: devices attached", tag.name)
        raise TagInUseError('该标签下还有关联的设备，无法删除')
    logger.info("Secondary tag %r deleted", tag.name)
    tag.delete()
