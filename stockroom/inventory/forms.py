from django import forms
from django.conf import settings
from crispy_forms.helper import FormHelper
from crispy_forms.layout import Layout, Submit, Row, Column, Fieldset, HTML, Div

from .exceptions import SerialNumberError
from .models import Device, PrimaryTag, SecondaryTag
from .serials import count_serial_numbers, parse_serial_numbers
from .services import EntryRow


class TagChoiceMixin:
    """Shared tag fields setup and the primary/secondary consistency check."""

    def setup_tag_fields(self):
        self.fields['primary_tag'].queryset = PrimaryTag.objects.all()
        self.fields['secondary_tag'].queryset = SecondaryTag.objects.select_related('primary_tag')
        self.fields['secondary_tag'].label_from_instance = lambda tag: tag.name
        self.fields['primary_tag'].widget.attrs['class'] = 'form-select js-primary-tag'
        self.fields['secondary_tag'].widget.attrs['class'] = 'form-select js-secondary-tag'

    def check_tag_pair(self, cleaned_data):
        primary_tag = cleaned_data.get('primary_tag')
        secondary_tag = cleaned_data.get('secondary_tag')
        if primary_tag and secondary_tag and secondary_tag.primary_tag_id != primary_tag.pk:
            self.add_error('secondary_tag', f'二级标签 "{secondary_tag.name}" 不属于所选一级标签')


class DeviceEntryForm(TagChoiceMixin, forms.Form):
    """
    One row of the bulk entry form.

    A row missing any of its four values is skipped rather than rejected,
    so only complete rows are validated and registered.
    """

    row_fields = ('location', 'primary_tag', 'secondary_tag', 'serial_numbers')

    location = forms.CharField(
        label='位置',
        max_length=200,
        required=False,
        widget=forms.TextInput(attrs={'class': 'form-control js-location', 'placeholder': '例如: 3F 机房'}),
    )
    primary_tag = forms.ModelChoiceField(
        queryset=PrimaryTag.objects.none(), label='一级标签', empty_label='请选择', required=False,
    )
    secondary_tag = forms.ModelChoiceField(
        queryset=SecondaryTag.objects.none(), label='二级标签', empty_label='请选择', required=False,
    )
    serial_numbers = forms.CharField(
        label='序列号',
        max_length=2000,
        required=False,
        help_text='支持 1-5,7,9-11 格式，中英文逗号均可',
        widget=forms.TextInput(attrs={'class': 'form-control js-serial-numbers', 'placeholder': '1-5,7,9-11'}),
    )

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.setup_tag_fields()

    def clean(self):
        cleaned_data = super().clean()
        if not all(cleaned_data.get(name) for name in self.row_fields):
            return cleaned_data

        self.check_tag_pair(cleaned_data)
        try:
            serial_numbers = parse_serial_numbers(
                cleaned_data['serial_numbers'], limit=settings.STOCKROOM_MAX_SERIALS_PER_ENTRY
            )
        except SerialNumberError as exc:
            self.add_error('serial_numbers', exc.message)
        else:
            if not serial_numbers:
                self.add_error('serial_numbers', '请输入序列号')
        return cleaned_data

    def is_complete(self):
        data = getattr(self, 'cleaned_data', None) or {}
        return all(data.get(name) for name in self.row_fields)

    def to_row(self):
        data = self.cleaned_data
        return EntryRow(
            location=data['location'],
            primary_tag_id=data['primary_tag'].pk,
            secondary_tag_id=data['secondary_tag'].pk,
            serial_numbers=data['serial_numbers'],
        )


class BaseDeviceEntryFormSet(forms.BaseFormSet):

    def clean(self):
        super().clean()
        if any(self.errors):
            return
        rows = self.rows()
        if not rows:
            raise forms.ValidationError('至少需要一条有效的设备记录')
        limit = settings.STOCKROOM_MAX_SERIALS_PER_ENTRY
        total = sum(count_serial_numbers(row.serial_numbers) for row in rows)
        if total > limit:
            raise forms.ValidationError(f'单次录入的设备数量不能超过 {limit} 台')

    def rows(self):
        return [form.to_row() for form in self.forms if form.is_complete()]


DeviceEntryFormSet = forms.formset_factory(
    DeviceEntryForm,
    formset=BaseDeviceEntryFormSet,
    extra=1,
    max_num=50,
    validate_max=True,
)


class DeviceForm(TagChoiceMixin, forms.ModelForm):
    """Form for editing a single device."""

    class Meta:
        model = Device
        fields = ['serial_number', 'location', 'primary_tag', 'secondary_tag']

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.setup_tag_fields()
        self.fields['serial_number'].widget.attrs['class'] = 'form-control'
        self.fields['location'].widget.attrs['class'] = 'form-control'

        self.helper = FormHelper()
        self.helper.layout = Layout(
            Fieldset(
                '设备信息',
                Row(
                    Column('primary_tag', css_class='col-md-6'),
                    Column('secondary_tag', css_class='col-md-6'),
                ),
                Row(
                    Column('serial_number', css_class='col-md-6'),
                    Column('location', css_class='col-md-6'),
                ),
            ),
            Div(
                Submit('submit', '保存', css_class='btn-primary'),
                HTML('<a href="{% url \'inventory:device_list\' %}" class="btn btn-secondary ms-2">取消</a>'),
                css_class='mt-4'
            ),
        )

    def clean(self):
        cleaned_data = super().clean()
        self.check_tag_pair(cleaned_data)

        serial_number = cleaned_data.get('serial_number')
        secondary_tag = cleaned_data.get('secondary_tag')
        if serial_number and secondary_tag and not self.has_error('secondary_tag'):
            duplicate = Device.objects.filter(
                secondary_tag=secondary_tag, serial_number=serial_number
            ).exclude(pk=self.instance.pk).exists()
            if duplicate:
                self.add_error('serial_number', f'该二级标签下已存在序列号 {serial_number}')
        return cleaned_data
