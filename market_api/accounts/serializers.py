from rest_framework import serializers
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer
from django.conf import settings
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError

from market_api.storage import IMAGE_EXTENSIONS, public_url, validate_upload
from . import services
from .models import CustomUser
from .utils import user_from_link


def _check_password_strength(password, user, field):
    try:
        validate_password(password, user=user)
    except DjangoValidationError as exc:
        raise serializers.ValidationError({field: list(exc.messages)})


class PasswordPairMixin(serializers.Serializer):
    """
    A new password entered twice. Subclasses call `check_password_pair`
    from `validate` once they know which user the password is for.
    """
    new_password = serializers.CharField(write_only=True, style={'input_type': 'password'})
    confirm_password = serializers.CharField(write_only=True, style={'input_type': 'password'})

    def check_password_pair(self, attrs, user):
        if attrs['new_password'] != attrs['confirm_password']:
            raise serializers.ValidationError({'confirm_password': ["Passwords do not match."]})
        _check_password_strength(attrs['new_password'], user, 'new_password')


class EmailLinkMixin(serializers.Serializer):
    """
    `uid` and `token` taken from a link emailed by `accounts.utils.frontend_link`.
    """
    uid = serializers.CharField()
    token = serializers.CharField()

    link_queryset = CustomUser.objects.all()

    def user_from_link(self, attrs):
        user = user_from_link(attrs['uid'], attrs['token'], self.link_queryset)
        if user is None:
            raise serializers.ValidationError("This link is invalid or has expired.")
        return user


class MarketTokenObtainPairSerializer(TokenObtainPairSerializer):
    """
    Email/password sign-in. The access token and the response both carry
    `user_type` so the web app can route to the right dashboard.
    Deactivated accounts are told to reactivate instead of getting a
    generic credentials error.
    """
    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['email'] = user.email
        token['user_type'] = user.user_type
        return token

    def validate(self, attrs):
        account = CustomUser.objects.filter(email__iexact=attrs.get(self.username_field)).first()
        if account is not None and account.deleted_at is not None:
            raise AuthenticationFailed("Your account is deactivated. Reactivate it to sign in.")

        data = super().validate(attrs)
        data['user_type'] = self.user.user_type
        return data


class RegistrationSerializer(serializers.ModelSerializer):
    """
    Sign-up for clients and contractors. Admin accounts are never self-registered.

    Fields:
        required: email, password, confirm_password, first_name, last_name, user_type
        optional: company_name, phone_number, country
    """
    password = serializers.CharField(write_only=True, style={'input_type': 'password'})
    confirm_password = serializers.CharField(write_only=True, style={'input_type': 'password'})
    user_type = serializers.ChoiceField(choices=[CustomUser.CLIENT, CustomUser.CONTRACTOR])

    class Meta:
        model = CustomUser
        fields = ['id', 'email', 'first_name', 'last_name', 'user_type', 'company_name', 'phone_number', 'country', 'password', 'confirm_password']
        read_only_fields = ['id']
        extra_kwargs = {
            'first_name': {'required': True, 'allow_blank': False},
            'last_name': {'required': True, 'allow_blank': False},
        }

    def validate(self, attrs):
        if attrs['password'] != attrs.pop('confirm_password'):
            raise serializers.ValidationError({'confirm_password': ["Passwords do not match."]})

        candidate = CustomUser(**{key: value for key, value in attrs.items() if key != 'password'})
        _check_password_strength(attrs['password'], candidate, 'password')
        return attrs

    def create(self, validated_data):
        return services.register(validated_data)


class UserProfileSerializer(serializers.ModelSerializer):
    avatar_url = serializers.SerializerMethodField()

    class Meta:
        model = CustomUser
        fields = ['id', 'email', 'first_name', 'last_name', 'user_type', 'company_name', 'phone_number', 'country', 'bio', 'avatar_url', 'verified', 'created_at']
        read_only_fields = ['id', 'email', 'user_type', 'verified', 'created_at']

    def get_avatar_url(self, obj):
        return public_url(obj.avatar, self.context.get('request'))


class UserSummarySerializer(serializers.ModelSerializer):
    """
    Lightweight user reference embedded in project, bid, contract, dispute and message payloads.
    """
    name = serializers.CharField(source='display_name', read_only=True)

    class Meta:
        model = CustomUser
        fields = ['id', 'name', 'email', 'company_name', 'user_type', 'verified']
        read_only_fields = fields


class PublicProfileSerializer(serializers.ModelSerializer):
    """
    Profile as other users see it. Contractors also expose their skills.
    """
    name = serializers.CharField(source='display_name', read_only=True)
    avatar_url = serializers.SerializerMethodField()
    skills = serializers.SerializerMethodField()

    class Meta:
        model = CustomUser
        fields = ['id', 'name', 'company_name', 'bio', 'user_type', 'country', 'verified', 'avatar_url', 'skills', 'created_at']
        read_only_fields = fields

    def get_avatar_url(self, obj):
        return public_url(obj.avatar, self.context.get('request'))

    def get_skills(self, obj):
        if obj.user_type != CustomUser.CONTRACTOR:
            return []
        return list(obj.contractor_skills.values_list('skill__name', flat=True))


class AvatarUploadSerializer(serializers.ModelSerializer):
    avatar = serializers.FileField()

    class Meta:
        model = CustomUser
        fields = ['avatar']

    def validate_avatar(self, value):
        return validate_upload(value, settings.AVATAR_MAX_SIZE, IMAGE_EXTENSIONS)

    def update(self, instance, validated_data):
        if instance.avatar:
            instance.avatar.delete(save=False)
        instance.avatar = validated_data['avatar']
        instance.save(update_fields=['avatar', 'updated_at'])
        return instance


class ChangePasswordSerializer(PasswordPairMixin):
    old_password = serializers.CharField(write_only=True, style={'input_type': 'password'})

    def validate(self, attrs):
        user = self.context['request'].user
        if not user.check_password(attrs['old_password']):
            raise serializers.ValidationError({'old_password': ["Incorrect password."]})

        self.check_password_pair(attrs, user)
        return attrs

    def save(self, **kwargs):
        return services.set_password(self.context['request'].user, self.validated_data['new_password'])


class LogoutSerializer(serializers.Serializer):
    refresh = serializers.CharField()

    def save(self, **kwargs):
        if not services.blacklist(self.validated_data['refresh']):
            raise serializers.ValidationError({'refresh': ["Token is invalid or expired."]})


class PasswordResetRequestSerializer(serializers.Serializer):
    email = serializers.EmailField()

    def validate_email(self, value):
        user = CustomUser.active_objects.filter(email__iexact=value).first()
        if user is None:
            raise serializers.ValidationError("No active account uses this email.")
        self.context['user'] = user
        return value


class PasswordResetConfirmSerializer(EmailLinkMixin, PasswordPairMixin):
    """
    Completes a password reset from the emailed link.

    Fields (all required): uid, token, new_password, confirm_password
    """
    def validate(self, attrs):
        user = self.user_from_link(attrs)
        self.check_password_pair(attrs, user)
        attrs['user'] = user
        return attrs

    def save(self, **kwargs):
        return services.set_password(self.validated_data['user'], self.validated_data['new_password'])


class UserListSerializer(serializers.ModelSerializer):
    class Meta:
        model = CustomUser
        fields = ['id', 'email', 'first_name', 'last_name', 'company_name', 'user_type', 'verified', 'is_active', 'created_at', 'updated_at', 'deleted_at']
        read_only_fields = fields


class VerifyUserSerializer(serializers.ModelSerializer):
    class Meta:
        model = CustomUser
        fields = ['id', 'email', 'verified']
        read_only_fields = ['id', 'email']
        extra_kwargs = {'verified': {'required': True}}


class ReactivationRequestSerializer(serializers.Serializer):
    """
    Asks for a reactivation link. `CanReactivate` has already checked the
    account and the window by the time this runs.
    """
    email = serializers.EmailField()

    def validate_email(self, value):
        self.context['user'] = CustomUser.objects.get(email__iexact=value)
        return value


class AccountReactivationConfirmSerializer(EmailLinkMixin):
    """
    Reactivates a deactivated account from the emailed link.

    Fields (all required): uid, token
    """
    def validate(self, attrs):
        user = self.user_from_link(attrs)
        if not user.can_reactivate():
            raise serializers.ValidationError("This account cannot be reactivated.")
        attrs['user'] = user
        return attrs

    def save(self, **kwargs):
        return services.reactivate(self.validated_data['user'])
