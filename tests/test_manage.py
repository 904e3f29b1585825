import pytest
from django.contrib.messages import get_messages
from django.urls import reverse

from stockroom.inventory.models import Device, DeviceLog, PrimaryTag, SecondaryTag

pytestmark = pytest.mark.django_db


def messages_of(response):
    return [str(m) for m in get_messages(response.wsgi_request)]


def manage(client, **data):
    return client.post(reverse('inventory:manage'), data)


# ============== Device list / edit / logs ==============

def test_device_list_filter(super_client, make_devices, camera, speaker):
    make_devices(camera, '1-3')
    make_devices(speaker, '1', location='礼堂')
    response = super_client.get(reverse('inventory:device_list'), {'q': '礼堂'})
    assert [d.name for d in response.context['devices']] == ['音箱']


def test_delete_device_from_list(super_client, device):
    url = reverse('inventory:device_list')
    response = super_client.post(url, {'intent': 'deleteDevice', 'device_id': device.pk})
    assert response.status_code == 302
    assert response.url == url
    assert not Device.objects.filter(pk=device.pk).exists()
    assert DeviceLog.objects.filter(device_id=device.pk, action=DeviceLog.Action.DELETE).exists()


def test_delete_missing_device_is_404(super_client):
    response = super_client.post(reverse('inventory:device_list'), {'intent': 'deleteDevice', 'device_id': 'abc'})
    assert response.status_code == 404


def test_unknown_intent(super_client):
    response = super_client.post(reverse('inventory:device_list'), {'intent': 'explode'})
    assert response.status_code == 302
    assert messages_of(response)[-1] == '无效的操作'


def test_edit_device(super_client, device, recorder):
    response = super_client.post(reverse('inventory:device_edit', args=[device.pk]), {
        'serial_number': '200',
        'location': '库房',
        'primary_tag': recorder.primary_tag_id,
        'secondary_tag': recorder.pk,
    })
    assert response.status_code == 302
    device.refresh_from_db()
    assert (device.name, device.serial_number, device.location) == ('录像机', '200', '库房')
    assert device.logs.filter(action=DeviceLog.Action.UPDATE).count() == 1


def test_edit_device_duplicate_serial(super_client, make_devices, camera):
    make_devices(camera, '1-2')
    device = Device.objects.get(serial_number='1')
    response = super_client.post(reverse('inventory:device_edit', args=[device.pk]), {
        'serial_number': '2',
        'location': 'A',
        'primary_tag': camera.primary_tag_id,
        'secondary_tag': camera.pk,
    })
    assert response.status_code == 200
    assert '该二级标签下已存在序列号 2' in response.content.decode()
    assert response.context['form'].errors['serial_number'] == ['该二级标签下已存在序列号 2']
    device.refresh_from_db()
    assert device.serial_number == '1'


def test_device_logs_survive_deletion(super_client, device, super_admin):
    url = reverse('inventory:device_logs', args=[device.pk])
    assert super_client.get(url).status_code == 200

    device.delete()
    response = super_client.get(url)
    assert response.status_code == 200
    assert response.context['device'] is None
    assert response.context['serial_number'] == '100'


def test_device_logs_unknown_device_is_404(super_client):
    assert super_client.get(reverse('inventory:device_logs', args=[9999])).status_code == 404


def test_log_list_filters(super_client, device, super_admin, plain_user):
    DeviceLog.record(device, plain_user, DeviceLog.Action.UPDATE, 'x')
    url = reverse('inventory:log_list')

    assert len(super_client.get(url).context['logs']) == 2
    assert [log.user for log in super_client.get(url, {'action': 'update'}).context['logs']] == [plain_user]
    assert [log.action for log in super_client.get(url, {'user': super_admin.pk}).context['logs']] == ['create']


# ============== Tag management ==============

def test_manage_page_counts_devices(super_client, make_devices, camera, recorder):
    make_devices(camera, '1-3')
    response = super_client.get(reverse('inventory:manage'))
    primary = response.context['primary_tags'][0]
    assert primary.device_count == 3
    assert {t.name: t.device_count for t in primary.secondary_tags.all()} == {'摄像机': 3, '录像机': 0}


def test_manage_filter_by_tag(super_client, make_devices, camera, recorder):
    make_devices(camera, '1-3')
    make_devices(recorder, '9')
    response = super_client.get(reverse('inventory:manage'), {'tag': recorder.pk})
    assert [d.serial_number for d in response.context['devices']] == ['9']


def test_primary_tag_lifecycle(super_client):
    manage(super_client, intent='createPrimaryTag', name='网络')
    tag = PrimaryTag.objects.get(name='网络')

    response = manage(super_client, intent='createPrimaryTag', name='网络')
    assert messages_of(response)[-1] == '一级标签 "网络" 已存在'

    manage(super_client, intent='deletePrimaryTag', tag_id=tag.pk)
    assert not PrimaryTag.objects.filter(name='网络').exists()


def test_delete_primary_tag_in_use(super_client, camera, video):
    response = manage(super_client, intent='deletePrimaryTag', tag_id=video.pk)
    assert messages_of(response)[-1] == '该一级标签下还有二级标签，无法删除'
    assert PrimaryTag.objects.filter(pk=video.pk).exists()


def test_secondary_tag_lifecycle(super_client, video):
    manage(super_client, intent='createTag', primary_tag_id=video.pk, name='解码器')
    tag = SecondaryTag.objects.get(name='解码器')

    manage(super_client, intent='updateTag', tag_id=tag.pk, name='编码器')
    tag.refresh_from_db()
    assert tag.name == '编码器'

    manage(super_client, intent='deleteTag', tag_id=tag.pk)
    assert not SecondaryTag.objects.filter(pk=tag.pk).exists()


def test_rename_tag_renames_devices(super_client, make_devices, camera):
    make_devices(camera, '1-2')
    manage(super_client, intent='updateTag', tag_id=camera.pk, name='球机')
    assert set(Device.objects.values_list('name', flat=True)) == {'球机'}


def test_delete_tag_in_use(super_client, device, camera):
    response = manage(super_client, intent='deleteTag', tag_id=camera.pk)
    assert messages_of(response)[-1] == '该标签下还有关联的设备，无法删除'
    assert SecondaryTag.objects.filter(pk=camera.pk).exists()


def test_update_device_from_manage(super_client, device, camera):
    manage(
        super_client, intent='updateDevice', device_id=device.pk, serial_number='101',
        location='B1', primary_tag_id=camera.primary_tag_id, secondary_tag_id=camera.pk,
    )
    device.refresh_from_db()
    assert (device.serial_number, device.location) == ('101', 'B1')


def test_update_device_from_manage_with_bad_tag(super_client, device, audio, camera):
    response = manage(
        super_client, intent='updateDevice', device_id=device.pk, serial_number='101',
        location='B1', primary_tag_id=audio.pk, secondary_tag_id=camera.pk,
    )
    assert '不属于所选一级标签' in messages_of(response)[-1]
    device.refresh_from_db()
    assert device.serial_number == '100'


def test_delete_device_from_manage(super_client, device):
    manage(super_client, intent='deleteDevice', device_id=device.pk)
    assert not Device.objects.filter(pk=device.pk).exists()
