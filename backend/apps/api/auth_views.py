import logging

from django.contrib.auth import authenticate, login, logout, get_user_model
from django.contrib.auth.forms import PasswordResetForm
from django.contrib.auth.tokens import default_token_generator
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from django.utils.encoding import force_str
from django.utils.http import urlsafe_base64_decode
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status

logger = logging.getLogger(__name__)


def _user_payload(user):
    return {
        'id': user.id,
        'username': user.username,
        'email': user.email,
        'full_name': user.get_full_name() or user.username,
    }


class LoginAPIView(APIView):
    """
    Session-based login (JWT clients use /api/auth/token/)
    """
    permission_classes = []  # Allow unauthenticated access

    def post(self, request):
        username = request.data.get('username') or request.data.get('email')
        password = request.data.get('password')

        if not username or not password:
            return Response(
                {'detail': 'Username and password required'},
                status=status.HTTP_400_BAD_REQUEST
            )

        user = authenticate(request, username=username, password=password)

        if user is not None:
            login(request, user)
            return Response({'success': True, **_user_payload(user)})
        else:
            logger.warning(f"Failed login attempt for '{username}' from {request.META.get('REMOTE_ADDR')}")
            return Response(
                {'detail': 'Invalid credentials'},
                status=status.HTTP_401_UNAUTHORIZED
            )


class LogoutAPIView(APIView):
    """
    Session-based logout
    """
    def post(self, request):
        logout(request)
        return Response({'success': True})


class CheckAuthAPIView(APIView):
    """
    Check if user is authenticated
    """
    permission_classes = []

    def get(self, request):
        if request.user.is_authenticated:
            return Response({'authenticated': True, **_user_payload(request.user)})
        else:
            return Response({
                'authenticated': False
            })


class RegisterAPIView(APIView):
    """
    Create an account from email, password and full name, then log in.
    The email doubles as the username.
    """
    permission_classes = []

    def post(self, request):
        email = (request.data.get('email') or '').strip().lower()
        password = request.data.get('password') or ''
        full_name = (request.data.get('full_name') or '').strip()

        errors = {}
        if not email:
            errors['email'] = 'Email is required'
        if not password:
            errors['password'] = 'Password is required'
        if errors:
            return Response(errors, status=status.HTTP_400_BAD_REQUEST)

        User = get_user_model()
        if User.objects.filter(username=email).exists():
            return Response(
                {'email': 'An account with this email already exists'},
                status=status.HTTP_400_BAD_REQUEST
            )

        first_name, _, last_name = full_name.partition(' ')
        user = User(username=email, email=email, first_name=first_name, last_name=last_name)

        try:
            validate_password(password, user=user)
        except DjangoValidationError as e:
            return Response({'password': list(e.messages)}, status=status.HTTP_400_BAD_REQUEST)

        user.set_password(password)
        user.save()
        logger.info(f"Registered user {user.username}")

        login(request, user, backend='django.contrib.auth.backends.ModelBackend')
        return Response({'success': True, **_user_payload(user)}, status=status.HTTP_201_CREATED)


class PasswordResetAPIView(APIView):
    """
    Email a password reset link. Always answers 200 so the endpoint cannot be
    used to find out which emails have accounts.
    """
    permission_classes = []

    def post(self, request):
        form = PasswordResetForm({'email': (request.data.get('email') or '').strip()})
        if not form.is_valid():
            return Response({'email': list(form.errors['email'])}, status=status.HTTP_400_BAD_REQUEST)

        form.save(
            request=request,
            use_https=request.is_secure(),
            subject_template_name='api/password_reset_subject.txt',
            email_template_name='api/password_reset_email.txt',
        )
        logger.info(f"Password reset requested from {request.META.get('REMOTE_ADDR')}")
        return Response({'detail': 'If an account exists for this email, a reset link has been sent.'})


class PasswordResetConfirmAPIView(APIView):
    """
    Set a new password from the uid and token of a reset link
    """
    permission_classes = []

    def post(self, request):
        uid = request.data.get('uid') or ''
        token = request.data.get('token') or ''
        new_password = request.data.get('new_password') or ''

        if not new_password:
            return Response({'new_password': 'New password is required'}, status=status.HTTP_400_BAD_REQUEST)

        User = get_user_model()
        try:
            user = User.objects.get(pk=force_str(urlsafe_base64_decode(uid)))
        except (TypeError, ValueError, OverflowError, DjangoValidationError, User.DoesNotExist):
            user = None

        if user is None or not default_token_generator.check_token(user, token):
            logger.warning(f"Invalid password reset link used from {request.META.get('REMOTE_ADDR')}")
            return Response(
                {'detail': 'The reset link is invalid or has expired'},
                status=status.HTTP_400_BAD_REQUEST
            )

        try:
            validate_password(new_password, user=user)
        except DjangoValidationError as e:
            return Response({'new_password': list(e.messages)}, status=status.HTTP_400_BAD_REQUEST)

        user.set_password(new_password)
        user.save(update_fields=['password'])
        logger.info(f"Password reset completed for user {user.username}")
        return Response({'success': True})
