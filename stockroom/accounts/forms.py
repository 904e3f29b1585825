from django import forms
from django.contrib.auth.forms import AuthenticationForm, UserCreationForm, UserChangeForm
from crispy_forms.helper import FormHelper
from crispy_forms.layout import Layout, Submit, Row, Column, Fieldset, Div

from .models import User


class LoginForm(AuthenticationForm):
    """Custom login form."""

    username = forms.CharField(
        label='用户名',
        widget=forms.TextInput(attrs={
            'class': 'form-control',
            'placeholder': '请输入用户名',
            'autofocus': True,
        })
    )
    password = forms.CharField(
        label='密码',
        strip=False,
        widget=forms.PasswordInput(attrs={
            'class': 'form-control',
            'placeholder': '请输入密码',
        })
    )

    error_messages = {
        'invalid_login': '用户名或密码错误',
        'inactive': '该账号已停用',
    }

    def clean_username(self):
        return self.cleaned_data['username'].strip().lower()


class UserCreateForm(UserCreationForm):
    """Form for creating new users."""

    class Meta:
        model = User
        fields = ['username', 'full_name', 'role']

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        for field in self.fields.values():
            field.widget.attrs['class'] = 'form-control'
        self.fields['role'].widget.attrs['class'] = 'form-select'
        self.helper = FormHelper()
        self.helper.layout = Layout(
            Fieldset(
                '账号信息',
                Row(
                    Column('username', css_class='col-md-6'),
                    Column('full_name', css_class='col-md-6'),
                ),
                'role',
            ),
            Fieldset(
                '密码',
                Row(
                    Column('password1', css_class='col-md-6'),
                    Column('password2', css_class='col-md-6'),
                ),
            ),
            Div(Submit('submit', '保存', css_class='btn-primary'), css_class='mt-4'),
        )

    def clean_username(self):
        username = self.cleaned_data['username'].strip().lower()
        if User.objects.filter(username=username).exists():
            raise forms.ValidationError('该用户名已存在')
        return username


class UserUpdateForm(UserChangeForm):
    """Form for updating a user; users are deactivated rather than deleted."""

    password = None  # Remove password field

    class Meta:
        model = User
        fields = ['full_name', 'role', 'is_active']

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        for field in self.fields.values():
            if isinstance(field.widget, forms.CheckboxInput):
                field.widget.attrs['class'] = 'form-check-input'
            else:
                field.widget.attrs['class'] = 'form-control'
        self.fields['role'].widget.attrs['class'] = 'form-select'
        self.helper = FormHelper()
        self.helper.layout = Layout(
            'full_name',
            'role',
            'is_active',
            Div(Submit('submit', '保存', css_class='btn-primary'), css_class='mt-4'),
        )
