from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

User = get_user_model()


class OwnerSerializer(serializers.ModelSerializer):

    class Meta:
        model = User
        fields = ('id', 'email', 'name', 'receive_email_reminders', 'date_joined')
        read_only_fields = fields


class OwnerUpdateSerializer(serializers.ModelSerializer):
    """Only the display name and the reminder preference are editable"""

    class Meta:
        model = User
        fields = ('name', 'receive_email_reminders')


class OwnerRegistrationSerializer(serializers.Serializer):
    """
    New farm owner. Emails are stored lower-cased and double as the
    username.
    """
    email = serializers.EmailField()
    name = serializers.CharField(max_length=150)
    password = serializers.CharField(write_only=True, style={'input_type': 'password'})
    receive_email_reminders = serializers.BooleanField(default=True)

    def validate_email(self, value):
        email = value.strip().lower()
        if User.objects.filter(email__iexact=email).exists():
            raise serializers.ValidationError("An account with this email already exists.")
        return email

    def validate(self, attrs):
        candidate = User(email=attrs['email'], username=attrs['email'], name=attrs['name'])
        validate_password(attrs['password'], user=candidate)
        return attrs

    def create(self, validated_data):
        return User.objects.create_user(
            username=validated_data['email'],
            email=validated_data['email'],
            password=validated_data['password'],
            name=validated_data['name'],
            receive_email_reminders=validated_data['receive_email_reminders'],
        )


class EmailTokenObtainPairSerializer(TokenObtainPairSerializer):

    def validate(self, attrs):
        data = super().validate(attrs)
        data['user'] = OwnerSerializer(self.user).data
        return data
