import pytest

from stockroom.inventory.models import Device, DeviceLog


@pytest.mark.django_db
def test_device_name_follows_secondary_tag(camera, recorder):
    device = Device.objects.create(
        serial_number='1', location='A', primary_tag=camera.primary_tag, secondary_tag=camera,
    )
    assert device.name == '摄像机'

    device.secondary_tag = recorder
    device.save(update_fields=['secondary_tag'])
    device.refresh_from_db()
    assert device.name == '录像机'


@pytest.mark.django_db
def test_device_log_cannot_be_changed(device):
    log = device.logs.get()
    log.details = 'tampered'
    with pytest.raises(TypeError):
        log.save()
    with pytest.raises(TypeError):
        log.delete()
    with pytest.raises(TypeError):
        DeviceLog.objects.filter(pk=log.pk).update(details='tampered')
    with pytest.raises(TypeError):
        DeviceLog.objects.all().delete()
    assert DeviceLog.objects.get(pk=log.pk).details == '创建设备，位置: 3F 机房'


@pytest.mark.django_db
def test_device_log_record_snapshots_device(device, super_admin):
    log = DeviceLog.record(device, super_admin, DeviceLog.Action.UPDATE, 'x')
    assert log.device_id == device.pk
    assert log.device_name == '摄像机'
    assert log.serial_number == '100'
    assert str(log) == '[update] 摄像机 #100'


@pytest.mark.django_db
def test_user_roles(super_admin, admin_user, plain_user):
    assert super_admin.can_manage_devices() and super_admin.can_enter_devices()
    assert admin_user.can_enter_devices() and not admin_user.can_manage_devices()
    assert not plain_user.can_enter_devices()
    assert plain_user.has_role('user') and not plain_user.has_role('admin')
