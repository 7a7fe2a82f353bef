from rest_framework import serializers
from django.contrib.auth import get_user_model
from rest_framework_simplejwt.tokens import RefreshToken

User = get_user_model()


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ('id', 'username', 'email', 'first_name', 'last_name', 'role')


class RegisterSerializer(serializers.ModelSerializer):
    """Self-registration always creates a student account.

    Faculty and admin accounts are created by an administrator.
    """
    password = serializers.CharField(write_only=True, min_length=6)

    class Meta:
        model = User
        fields = ('username', 'email', 'password', 'first_name', 'last_name')

    def create(self, validated_data):
        # stays inactive until an admin approves the registration
        user = User.objects.create_user(
            username=validated_data['username'],
            email=validated_data.get('email'),
            password=validated_data['password'],
            first_name=validated_data.get('first_name', ''),
            last_name=validated_data.get('last_name', ''),
            role=User.Role.STUDENT,
            registration_status=User.RegistrationStatus.PENDING,
            is_active=False,
        )
        return user


class RegistrationSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = (
            'id', 'username', 'email', 'first_name', 'last_name', 'date_joined', 'registration_status',
            'registration_reviewed_by', 'registration_reviewed_at', 'registration_note',
        )
        read_only_fields = fields


class RegistrationRejectSerializer(serializers.Serializer):
    reason = serializers.CharField(max_length=500)


class MeSerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    username = serializers.CharField(read_only=True)
    email = serializers.EmailField(read_only=True)
    role = serializers.SerializerMethodField()
    profile_id = serializers.SerializerMethodField()

    def get_role(self, obj):
        return 'admin' if obj.is_superuser else obj.role

    def get_profile_id(self, obj):
        # Profiles are created lazily; an absent one is reported as null here.
        if obj.role == User.Role.STUDENT:
            profile = getattr(obj, 'student_profile', None)
        elif obj.role == User.Role.FACULTY:
            profile = getattr(obj, 'faculty_profile', None)
        else:
            profile = None
        return getattr(profile, 'pk', None)


class IdentifierTokenObtainPairSerializer(serializers.Serializer):
    """Authenticate using `identifier` + `password` and return JWT pair.

    `identifier` may be an email (contains '@'), a username, a student
    `roll_number` or a faculty `employee_code`.
    """
    identifier = serializers.CharField(write_only=True)
    password = serializers.CharField(write_only=True)

    def validate(self, attrs):
        identifier = attrs.get('identifier')
        password = attrs.get('password')

        if not identifier or not password:
            raise serializers.ValidationError('Must include "identifier" and "password".')

        user = None

        if '@' in identifier:
            user = User.objects.filter(email__iexact=identifier).first()

        if user is None:
            user = User.objects.filter(username__iexact=identifier).first()

        if user is None:
            from academics.models import StudentProfile, FacultyProfile

            sp = StudentProfile.objects.filter(roll_number__iexact=identifier).select_related('user').first()
            if sp:
                user = sp.user
            else:
                fp = FacultyProfile.objects.filter(employee_code__iexact=identifier).select_related('user').first()
                if fp:
                    user = fp.user

        # generic error message to avoid leaking which part failed
        invalid_msg = 'Unable to log in with provided credentials.'

        if user is None or not user.check_password(password):
            raise serializers.ValidationError(invalid_msg)

        if user.registration_status == User.RegistrationStatus.PENDING:
            raise serializers.ValidationError('Registration is awaiting approval.')
        if user.registration_status == User.RegistrationStatus.REJECTED:
            raise serializers.ValidationError('Registration was rejected.')

        if not getattr(user, 'is_active', True):
            raise serializers.ValidationError('User account is disabled.')

        refresh = RefreshToken.for_user(user)
        refresh['role'] = 'admin' if user.is_superuser else user.role

        return {
            'refresh': str(refresh),
            'access': str(refresh.access_token),
        }
