from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer
from .models import User


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):

    def validate(self, attrs):
        data = super().validate(attrs)

        data["id"] = str(self.user.id)
        data["username"] = self.user.username
        data["role"] = self.user.role
        return data


class UserSerializer(serializers.ModelSerializer):

    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "email",
            "phone",
            "role",
            "is_active",
            "date_joined",
        ]
        read_only_fields = fields


class RegisterSerializer(serializers.ModelSerializer):
    """
    Creates a user. Who may create which role:
    - DEVELOPER accounts only by developers
    - ADMIN accounts by admins or developers
    - STAFF accounts by any signed-in user
    """
    password = serializers.CharField(write_only=True, min_length=6)

    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "email",
            "phone",
            "role",
            "password",
        ]
        read_only_fields = ["id"]

    def validate_role(self, value):
        request = self.context.get("request")
        current_role = getattr(getattr(request, "user", None), "role", None)

        if value == "DEVELOPER" and current_role != "DEVELOPER":
            raise serializers.ValidationError("Only developers can create developer accounts.")

        if value == "ADMIN" and current_role not in User.ADMIN_ROLES:
            raise serializers.ValidationError("Only admins or developers can create admin accounts.")

        return value

    def validate_email(self, value):
        value = value.lower()
        if value and User.objects.filter(email=value).exists():
            raise serializers.ValidationError("User already exists.")
        return value

    def create(self, validated_data):
        password = validated_data.pop("password")
        user = User(**validated_data)
        user.set_password(password)
        user.save()
        return user


class MeProfileSerializer(serializers.ModelSerializer):
    """
    The signed-in user's own profile. Role and username stay fixed;
    a new password needs the current one.
    """
    current_password = serializers.CharField(write_only=True, required=False)
    new_password = serializers.CharField(write_only=True, required=False, min_length=6)

    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "first_name",
            "last_name",
            "email",
            "phone",
            "role",
            "last_login",
            "current_password",
            "new_password",
        ]
        read_only_fields = ["id", "username", "role", "last_login"]

    def validate(self, attrs):
        if "new_password" in attrs:
            current = attrs.get("current_password") or ""
            if not self.instance.check_password(current):
                raise serializers.ValidationError({"current_password": "Current password is incorrect."})
        return attrs

    def update(self, instance, validated_data):
        validated_data.pop("current_password", None)
        new_password = validated_data.pop("new_password", None)

        instance = super().update(instance, validated_data)

        if new_password:
            instance.set_password(new_password)
            instance.save(update_fields=["password"])
        return instance
