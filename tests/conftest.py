"""
Shared fixtures: one user per role, a small tag tree and logged-in clients.
"""

import pytest

from stockroom.accounts.models import User
from stockroom.inventory.models import PrimaryTag, SecondaryTag, Device
from stockroom.inventory.services import EntryRow, register_devices

PASSWORD = 'secret123'


@pytest.fixture
def super_admin(db):
    return User.objects.create_user('root', PASSWORD, role=User.Role.SUPER_ADMIN, full_name='超管')


@pytest.fixture
def admin_user(db):
    return User.objects.create_user('keeper', PASSWORD, role=User.Role.ADMIN)


@pytest.fixture
def plain_user(db):
    return User.objects.create_user('viewer', PASSWORD, role=User.Role.USER)


@pytest.fixture
def video(db):
    return PrimaryTag.objects.create(name='视频')


@pytest.fixture
def audio(db):
    return PrimaryTag.objects.create(name='音频')


@pytest.fixture
def camera(video):
    return SecondaryTag.objects.create(primary_tag=video, name='摄像机')


@pytest.fixture
def recorder(video):
    return SecondaryTag.objects.create(primary_tag=video, name='录像机')


@pytest.fixture
def speaker(audio):
    return SecondaryTag.objects.create(primary_tag=audio, name='音箱')


@pytest.fixture
def make_devices(super_admin):
    """Register devices through the bulk entry service."""
    def _make(tag, serials, location='3F 机房', user=None):
        row = EntryRow(location, tag.primary_tag_id, tag.pk, serials)
        return register_devices([row], user or super_admin)
    return _make


@pytest.fixture
def device(make_devices, camera):
    make_devices(camera, '100')
    return Device.objects.get(secondary_tag=camera, serial_number='100')


def _client_for(client, user):
    client.force_login(user)
    return client


@pytest.fixture
def super_client(client, super_admin):
    return _client_for(client, super_admin)


@pytest.fixture
def keeper_client(client, admin_user):
    return _client_for(client, admin_user)


@pytest.fixture
def user_client(client, plain_user):
    return _client_for(client, plain_user)
