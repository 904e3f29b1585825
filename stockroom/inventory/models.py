"""
Inventory models - Tags, Devices, Device logs
"""

from django.db import models
from django.conf import settings


class PrimaryTag(models.Model):
    """
    Top-level device category (e.g. 视频, 音频, 网络).
    """

    name = models.CharField('一级标签', max_length=50, unique=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'Primary Tag'
        verbose_name_plural = 'Primary Tags'
        ordering = ['id']

    def __str__(self):
        return self.name


class SecondaryTag(models.Model):
    """
    Device type within a category (e.g. 摄像机 under 视频).
    Its name is the display name of every device registered under it.
    """

    name = models.CharField('二级标签', max_length=50)
    primary_tag = models.ForeignKey(
        PrimaryTag,
        on_delete=models.PROTECT,
        related_name='secondary_tags',
        verbose_name='一级标签',
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'Secondary Tag'
        verbose_name_plural = 'Secondary Tags'
        ordering = ['primary_tag_id', 'id']
        unique_together = ['primary_tag', 'name']

    def __str__(self):
        return f"{self.primary_tag.name} / {self.name}"


class Device(models.Model):
    """
    A physical piece of equipment.

    ``name`` is a copy of the secondary tag's name and is kept in step with
    it on every save; ``primary_tag`` must be the secondary tag's parent.
    """

    name = models.CharField('设备名称', max_length=50, editable=False)
    serial_number = models.CharField('序列号', max_length=64)
    location = models.CharField('位置', max_length=200)

    primary_tag = models.ForeignKey(
        PrimaryTag,
        on_delete=models.PROTECT,
        related_name='devices',
        verbose_name='一级标签',
    )
    secondary_tag = models.ForeignKey(
        SecondaryTag,
        on_delete=models.PROTECT,
        related_name='devices',
        verbose_name='二级标签',
    )

    created_at = models.DateTimeField('创建时间', auto_now_add=True)
    updated_at = models.DateTimeField('更新时间', auto_now=True)

    class Meta:
        verbose_name = 'Device'
        verbose_name_plural = 'Devices'
        ordering = ['-id']
        unique_together = ['secondary_tag', 'serial_number']
        indexes = [
            models.Index(fields=['location'], name='device_location_idx'),
            models.Index(fields=['updated_at'], name='device_updated_at_idx'),
        ]

    def __str__(self):
        return f"{self.name} #{self.serial_number}"

    def save(self, *args, **kwargs):
        self.name = self.secondary_tag.name
        update_fields = kwargs.get('update_fields')
        if update_fields is not None and 'secondary_tag' in update_fields:
            kwargs['update_fields'] = set(update_fields) | {'name'}
        super().save(*args, **kwargs)


class DeviceLogQuerySet(models.QuerySet):

    def delete(self):
        raise TypeError('Device logs are append-only')

    def update(self, **kwargs):
        raise TypeError('Device logs are append-only')


class DeviceLog(models.Model):
    """
    Append-only audit trail of device changes.

    The device reference carries no database constraint so the trail
    outlives the device; ``device_name`` and ``serial_number`` snapshot the
    device at the time of the change.
    """

    class Action(models.TextChoices):
        CREATE = 'create', '创建'
        UPDATE = 'update', '更新'
        DELETE = 'delete', '删除'

    device = models.ForeignKey(
        Device,
        on_delete=models.DO_NOTHING,
        db_constraint=False,
        related_name='logs',
    )
    device_name = models.CharField(max_length=50)
    serial_number = models.CharField(max_length=64)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='device_logs',
    )
    action = models.CharField(max_length=10, choices=Action.choices, db_index=True)
    details = models.TextField(blank=True, default='')

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)

    objects = DeviceLogQuerySet.as_manager()

    class Meta:
        verbose_name = 'Device Log'
        verbose_name_plural = 'Device Logs'
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['device', 'created_at'], name='devicelog_device_created_idx'),
        ]

    def __str__(self):
        return f"[{self.action}] {self.device_name} #{self.serial_number}"

    def save(self, *args, **kwargs):
        if self.pk is not None:
            raise TypeError('Device logs are append-only')
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise TypeError('Device logs are append-only')

    @classmethod
    def record(cls, device, user, action, details=''):
        """
        Append a log entry for ``device``.

        Usage:
            DeviceLog.record(device, request.user, DeviceLog.Action.CREATE, '创建设备，位置: 3F')
        """
        return cls.objects.create(
            device_id=device.pk,
            device_name=device.name,
            serial_number=device.serial_number,
            user=user,
            action=action,
            details=details,
        )
