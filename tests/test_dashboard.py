import pytest
from django.urls import reverse

pytestmark = pytest.mark.django_db


@pytest.fixture
def stock(make_devices, camera, recorder, speaker):
    make_devices(camera, '1-3', location='2F')
    make_devices(recorder, '1', location='3F')
    make_devices(speaker, '1-2', location='2F')


def test_dashboard_aggregates(user_client, stock):
    response = user_client.get(reverse('dashboard'))
    context = response.context

    assert context['stats']['total_devices'] == 6
    assert context['stats']['locations'] == 2
    assert list(context['devices_by_location']) == [
        {'location': '2F', 'count': 5},
        {'location': '3F', 'count': 1},
    ]
    assert list(context['devices_by_primary_tag']) == [
        {'primary_tag__name': '视频', 'count': 4},
        {'primary_tag__name': '音频', 'count': 2},
    ]
    assert len(context['recent_devices']) == 6


def test_dashboard_recent_devices_paginate(settings, user_client, stock):
    settings.STOCKROOM_DASHBOARD_PAGE_SIZE = 4
    response = user_client.get(reverse('dashboard'), {'page': 2})
    assert len(response.context['recent_devices']) == 2


def test_recent_logs_only_for_super_admin(user_client, stock):
    response = user_client.get(reverse('dashboard'))
    assert not response.context['show_logs']
    assert 'recent_logs' not in response.context


def test_super_admin_sees_recent_logs(super_client, stock):
    response = super_client.get(reverse('dashboard'))
    assert response.context['show_logs']
    assert len(response.context['recent_logs']) == 6


def test_nav_follows_role(user_client):
    nav = [item['url_name'] for item in user_client.get(reverse('dashboard')).context['nav_items']]
    assert nav == ['dashboard', 'inventory:search']
