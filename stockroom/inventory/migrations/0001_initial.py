# Generated manually for version control
# Stockroom - Inventory Initial Migration

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='PrimaryTag',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=50, unique=True, verbose_name='一级标签')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Primary Tag',
                'verbose_name_plural': 'Primary Tags',
                'ordering': ['id'],
            },
        ),
        migrations.CreateModel(
            name='SecondaryTag',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=50, verbose_name='二级标签')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('primary_tag', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='secondary_tags', to='inventory.primarytag', verbose_name='一级标签')),
            ],
            options={
                'verbose_name': 'Secondary Tag',
                'verbose_name_plural': 'Secondary Tags',
                'ordering': ['primary_tag_id', 'id'],
                'unique_together': {('primary_tag', 'name')},
            },
        ),
        migrations.CreateModel(
            name='Device',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(editable=False, max_length=50, verbose_name='设备名称')),
                ('serial_number', models.CharField(max_length=64, verbose_name='序列号')),
                ('location', models.CharField(max_length=200, verbose_name='位置')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='创建时间')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='更新时间')),
                ('primary_tag', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='devices', to='inventory.primarytag', verbose_name='一级标签')),
                ('secondary_tag', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='devices', to='inventory.secondarytag', verbose_name='二级标签')),
            ],
            options={
                'verbose_name': 'Device',
                'verbose_name_plural': 'Devices',
                'ordering': ['-id'],
                'unique_together': {('secondary_tag', 'serial_number')},
                'indexes': [
                    models.Index(fields=['location'], name='device_location_idx'),
                    models.Index(fields=['updated_at'], name='device_updated_at_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='DeviceLog',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('device_name', models.CharField(max_length=50)),
                ('serial_number', models.CharField(max_length=64)),
                ('action', models.CharField(choices=[('create', '创建'), ('update', '更新'), ('delete', '删除')], db_index=True, max_length=10)),
                ('details', models.TextField(blank=True, default='')),
                ('created_at', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('device', models.ForeignKey(db_constraint=False, on_delete=django.db.models.deletion.DO_NOTHING, related_name='logs', to='inventory.device')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='device_logs', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Device Log',
                'verbose_name_plural': 'Device Logs',
                'ordering': ['-created_at', '-id'],
                'indexes': [
                    models.Index(fields=['device', 'created_at'], name='devicelog_device_created_idx'),
                ],
            },
        ),
    ]
