from rest_framework import serializers
from .models import User, Profile


class UserSerializer(serializers.ModelSerializer):
    """Current session user."""

    class Meta:
        model = User
        fields = [
            'id',
            'email',
            'created_at',
            'last_login',
        ]
        read_only_fields = fields


class UserLoginSerializer(serializers.Serializer):
    """Serializer for the sign-in-or-register credential pair."""

    email = serializers.EmailField(required=True)
    password = serializers.CharField(
        required=True,
        write_only=True,
        min_length=6,
        style={'input_type': 'password'}
    )


class ProfileSerializer(serializers.ModelSerializer):
    """Profile display and upsert."""

    class Meta:
        model = Profile
        fields = ['name', 'bio', 'avatar', 'updated_at']
        read_only_fields = ['updated_at']
        extra_kwargs = {
            'name': {'required': False},
            'bio': {'required': False},
            'avatar': {'required': False},
        }


class ImageUploadSerializer(serializers.Serializer):
    """Multipart image upload."""

    image = serializers.FileField(required=True)
