import pytest
from django.contrib.auth import get_user_model
from django.contrib.auth.tokens import default_token_generator
from django.utils.encoding import force_bytes
from django.utils.http import urlsafe_base64_encode


@pytest.mark.django_db
class TestHealthEndpoints:

    def test_health_is_public(self, anon_client):
        response = anon_client.get('/api/health/')
        assert response.status_code == 200
        assert response.data['checks']['database'] == 'ok'

    def test_liveness(self, anon_client):
        response = anon_client.get('/api/health/live/')
        assert response.status_code == 200


@pytest.mark.django_db
class TestSessionAuth:

    def test_register_creates_user_and_logs_in(self, anon_client):
        response = anon_client.post('/api/auth/register/', {
            'email': 'New.Owner@Example.com',
            'password': 'Another-str0ng-pass',
            'full_name': 'Ada Lovelace',
        }, format='json')

        assert response.status_code == 201
        user = get_user_model().objects.get(username='new.owner@example.com')
        assert user.first_name == 'Ada'
        assert user.last_name == 'Lovelace'

        check = anon_client.get('/api/auth/check/')
        assert check.data['authenticated'] is True

    def test_register_rejects_duplicate_email(self, anon_client, user):
        response = anon_client.post('/api/auth/register/', {
            'email': user.email, 'password': 'Another-str0ng-pass', 'full_name': 'Dup'
        }, format='json')
        assert response.status_code == 400
        assert 'email' in response.data

    def test_register_rejects_weak_password(self, anon_client):
        response = anon_client.post('/api/auth/register/', {
            'email': 'weak@example.com', 'password': '123', 'full_name': 'Weak'
        }, format='json')
        assert response.status_code == 400
        assert 'password' in response.data

    def test_login_and_logout(self, anon_client, user):
        response = anon_client.post('/api/auth/login/', {
            'username': user.username, 'password': 'Str0ng-pass-123'
        }, format='json')
        assert response.status_code == 200
        assert response.data['success'] is True

        response = anon_client.post('/api/auth/logout/')
        assert response.status_code == 200
        assert anon_client.get('/api/auth/check/').data == {'authenticated': False}

    def test_login_with_bad_password(self, anon_client, user):
        response = anon_client.post('/api/auth/login/', {
            'username': user.username, 'password': 'wrong'
        }, format='json')
        assert response.status_code == 401


@pytest.mark.django_db
class TestTokenAuth:

    def test_token_grants_api_access(self, anon_client, user, business):
        response = anon_client.post('/api/auth/token/', {
            'username': user.username, 'password': 'Str0ng-pass-123'
        }, format='json')
        assert response.status_code == 200

        anon_client.credentials(HTTP_AUTHORIZATION=f"Bearer {response.data['access']}")
        response = anon_client.get('/api/v1/businesses/')
        assert response.status_code == 200
        assert response.data['results'][0]['name'] == business.name

    def test_api_requires_authentication(self, anon_client):
        response = anon_client.get('/api/v1/businesses/')
        assert response.status_code in (401, 403)


@pytest.mark.django_db
class TestPasswordReset:

    def reset_link_parts(self, user):
        return urlsafe_base64_encode(force_bytes(user.pk)), default_token_generator.make_token(user)

    def test_request_emails_a_reset_link(self, anon_client, user, mailoutbox):
        response = anon_client.post('/api/auth/password-reset/', {'email': user.email}, format='json')

        assert response.status_code == 200
        assert len(mailoutbox) == 1
        message = mailoutbox[0]
        assert message.to == [user.email]
        assert message.subject == 'Reset your AccuBooks password'
        uid, _ = self.reset_link_parts(user)
        assert f'http://testserver/reset-password/{uid}/' in message.body

    def test_unknown_email_gets_the_same_answer(self, anon_client, user, mailoutbox):
        response = anon_client.post('/api/auth/password-reset/', {'email': 'nobody@example.com'}, format='json')
        assert response.status_code == 200
        assert mailoutbox == []

    def test_request_needs_a_valid_email(self, anon_client):
        response = anon_client.post('/api/auth/password-reset/', {'email': 'not-an-email'}, format='json')
        assert response.status_code == 400
        assert 'email' in response.data

    def test_confirm_sets_new_password_once(self, anon_client, user):
        uid, token = self.reset_link_parts(user)

        response = anon_client.post('/api/auth/password-reset/confirm/', {
            'uid': uid, 'token': token, 'new_password': 'Brand-new-pass-456'
        }, format='json')
        assert response.status_code == 200

        user.refresh_from_db()
        assert user.check_password('Brand-new-pass-456')

        # The token is bound to the old password hash
        reused = anon_client.post('/api/auth/password-reset/confirm/', {
            'uid': uid, 'token': token, 'new_password': 'Yet-another-pass-789'
        }, format='json')
        assert reused.status_code == 400

    @pytest.mark.parametrize('uid,token', [('garbage', 'bad-token'), (None, 'bad-token')])
    def test_confirm_rejects_bad_links(self, anon_client, user, uid, token):
        if uid is None:
            uid, _ = self.reset_link_parts(user)
        response = anon_client.post('/api/auth/password-reset/confirm/', {
            'uid': uid, 'token': token, 'new_password': 'Brand-new-pass-456'
        }, format='json')
        assert response.status_code == 400
        user.refresh_from_db()
        assert user.check_password('Str0ng-pass-123')

    def test_confirm_validates_new_password(self, anon_client, user):
        uid, token = self.reset_link_parts(user)
        response = anon_client.post('/api/auth/password-reset/confirm/', {
            'uid': uid, 'token': token, 'new_password': '123'
        }, format='json')
        assert response.status_code == 400
        assert 'new_password' in response.data
