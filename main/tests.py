import json
from io import StringIO

from django.conf import settings
from django.contrib.auth.models import User
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase, Client, override_settings
from django.urls import reverse

from .context_processors import LANGUAGE_SESSION_KEY, THEME_COOKIE, THEME_SESSION_KEY
from .forms import UserRegisterForm
from .models import Profile, is_admin_user
from .translations import TRANSLATIONS, translate, translations_for


class BaseTestCase(TestCase):
    def setUp(self):
        self.client = Client()
        self.password = 'testpassword123'
        self.user = User.objects.create_user(
            username='player', email='player@test.com', password=self.password)
        self.admin = User.objects.create_user(
            username='moderator', email='moderator@test.com', password=self.password)
        self.admin.profile.is_admin = True
        self.admin.profile.save()

    def post_json(self, url, payload):
        return self.client.post(url, data=json.dumps(payload), content_type='application/json')


class ProfileModelTest(BaseTestCase):
    def test_profile_created_by_signal(self):
        user = User.objects.create_user(username='fresh', password='pass12345')
        profile = Profile.objects.get(user=user)
        self.assertEqual(profile.credits, settings.SCORELINE['INITIAL_CREDITS'])
        self.assertFalse(profile.is_admin)

    def test_superuser_profile_is_admin(self):
        root = User.objects.create_superuser(username='root', email='root@test.com', password='pass12345')
        self.assertTrue(root.profile.is_admin)

    @override_settings(SCORELINE={**settings.SCORELINE, 'INITIAL_CREDITS': 7})
    def test_initial_credits_follow_settings(self):
        user = User.objects.create_user(username='rich', password='pass12345')
        self.assertEqual(user.profile.credits, 7)

    def test_add_credits(self):
        balance = self.user.profile.add_credits(2)
        self.assertEqual(balance, settings.SCORELINE['INITIAL_CREDITS'] + 2)
        self.assertEqual(Profile.objects.get(user=self.user).credits, balance)

    def test_is_admin_user(self):
        self.assertFalse(is_admin_user(self.user))
        self.assertTrue(is_admin_user(self.admin))
        superuser = User.objects.create_superuser(username='boss', email='b@test.com', password='pass12345')
        Profile.objects.filter(user=superuser).update(is_admin=False)
        superuser.refresh_from_db()
        self.assertTrue(is_admin_user(superuser))


class RegisterFormTest(BaseTestCase):
    def test_duplicate_email_rejected(self):
        form = UserRegisterForm(data={
            'username': 'another', 'email': 'PLAYER@test.com',
            'password1': 'S3cure-pass!', 'password2': 'S3cure-pass!',
        })
        self.assertFalse(form.is_valid())
        self.assertIn('email', form.errors)


class AuthViewsTest(BaseTestCase):
    def test_register_page_renders(self):
        response = self.client.get(reverse('main:register'))
        self.assertEqual(response.status_code, 200)
        self.assertTemplateUsed(response, 'main/register.html')

    def test_register_success(self):
        response = self.client.post(reverse('main:register'), {
            'username': 'newbie', 'email': 'newbie@test.com',
            'password1': 'S3cure-pass!', 'password2': 'S3cure-pass!',
        })
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()['status'], 'success')
        self.assertTrue(Profile.objects.filter(user__username='newbie').exists())

    def test_register_invalid(self):
        response = self.client.post(reverse('main:register'), {
            'username': 'newbie', 'email': 'newbie@test.com',
            'password1': 'S3cure-pass!', 'password2': 'different',
        })
        self.assertEqual(response.status_code, 400)
        self.assertIn('password2', response.json()['errors'])

    def test_login_success_and_failure(self):
        response = self.client.post(reverse('main:login'), {'username': 'player', 'password': 'wrong'})
        self.assertEqual(response.status_code, 401)

        response = self.client.post(reverse('main:login'), {'username': 'player', 'password': self.password})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['redirect_url'], reverse('main:home'))

    def test_logout(self):
        self.client.login(username='player', password=self.password)
        response = self.client.post(reverse('main:logout'))
        self.assertEqual(response.status_code, 200)
        self.assertNotIn('_auth_user_id', self.client.session)

    def test_api_login_and_register(self):
        response = self.post_json(reverse('main:register_api'), {
            'username': 'mobile', 'email': 'mobile@test.com',
            'password': 'S3cure-pass!', 'password_confirmation': 'S3cure-pass!',
        })
        self.assertEqual(response.status_code, 201)
        self.assertTrue(response.json()['status'])

        response = self.post_json(reverse('main:login_api'), {'username': 'mobile', 'password': 'S3cure-pass!'})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['username'], 'mobile')
        self.assertFalse(response.json()['is_admin'])

        response = self.client.post(reverse('main:logout_api'))
        self.assertEqual(response.status_code, 200)

    def test_api_register_password_mismatch(self):
        response = self.post_json(reverse('main:register_api'), {
            'username': 'mobile', 'email': 'mobile@test.com',
            'password': 'S3cure-pass!', 'password_confirmation': 'nope',
        })
        self.assertEqual(response.status_code, 400)
        self.assertFalse(User.objects.filter(username='mobile').exists())

    def test_api_login_bad_credentials(self):
        response = self.post_json(reverse('main:login_api'), {'username': 'player', 'password': 'bad'})
        self.assertEqual(response.status_code, 401)
        self.assertFalse(response.json()['status'])


class HomeViewTest(BaseTestCase):
    def test_home_anonymous(self):
        response = self.client.get(reverse('main:home'))
        self.assertEqual(response.status_code, 200)
        self.assertTemplateUsed(response, 'main/home.html')
        self.assertIsNone(response.context['user_rank'])

    def test_home_authenticated(self):
        self.client.login(username='player', password=self.password)
        response = self.client.get(reverse('main:home'))
        self.assertEqual(response.context['user_rank'], 1)
        self.assertEqual(response.context['user_credits'], settings.SCORELINE['INITIAL_CREDITS'])

    def test_home_json(self):
        self.client.login(username='player', password=self.password)
        data = self.client.get(reverse('main:show_home_json')).json()
        self.assertEqual(data['status'], 'success')
        self.assertEqual(data['user_data']['username'], 'player')
        self.assertIn('stats', data)


class PreferencesTest(BaseTestCase):
    def test_set_language(self):
        response = self.post_json(reverse('main:set_language'), {'language': 'vi'})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.client.session[LANGUAGE_SESSION_KEY], 'vi')

        response = self.client.get(reverse('main:home'))
        self.assertEqual(response.context['t']['home'], 'Trang chủ')

    def test_set_language_invalid(self):
        response = self.post_json(reverse('main:set_language'), {'language': 'fr'})
        self.assertEqual(response.status_code, 400)

    def test_theme_toggle(self):
        response = self.post_json(reverse('main:set_theme'), {})
        self.assertEqual(response.json()['theme'], 'dark')
        self.assertEqual(response.cookies[THEME_COOKIE].value, 'dark')
        self.assertEqual(self.client.session[THEME_SESSION_KEY], 'dark')

        response = self.post_json(reverse('main:set_theme'), {})
        self.assertEqual(response.json()['theme'], 'light')

    def test_theme_explicit_and_invalid(self):
        response = self.post_json(reverse('main:set_theme'), {'theme': 'dark'})
        self.assertEqual(response.status_code, 200)
        response = self.post_json(reverse('main:set_theme'), {'theme': 'neon'})
        self.assertEqual(response.status_code, 400)

    def test_context_defaults(self):
        response = self.client.get(reverse('main:home'))
        self.assertEqual(response.context['language'], 'en')
        self.assertEqual(response.context['theme'], 'light')
        self.assertIsNone(response.context['user_credits'])


class TranslationTest(TestCase):
    def test_translate(self):
        self.assertEqual(translate('leaderboard', 'vi'), 'Bảng xếp hạng')
        self.assertEqual(translate('leaderboard', 'de'), 'Leaderboard')

    def test_missing_key_returns_key(self):
        with self.assertLogs('main.translations', level='WARNING'):
            self.assertEqual(translate('does_not_exist'), 'does_not_exist')

    def test_every_key_has_both_languages(self):
        for key, entry in TRANSLATIONS.items():
            self.assertEqual(set(entry), {'en', 'vi'}, key)
        self.assertEqual(len(translations_for('vi')), len(TRANSLATIONS))


class AdminViewsTest(BaseTestCase):
    def test_check_admin(self):
        response = self.client.get(reverse('main:check_admin'))
        self.assertEqual(response.status_code, 401)

        self.client.login(username='player', password=self.password)
        self.assertFalse(self.client.get(reverse('main:check_admin')).json()['is_admin'])

        self.client.login(username='moderator', password=self.password)
        self.assertTrue(self.client.get(reverse('main:check_admin')).json()['is_admin'])

    def test_admin_users_forbidden_for_players(self):
        self.client.login(username='player', password=self.password)
        response = self.client.get(reverse('main:admin_users'))
        self.assertEqual(response.status_code, 403)

    def test_admin_users_list(self):
        self.client.login(username='moderator', password=self.password)
        data = self.client.get(reverse('main:admin_users')).json()
        usernames = [u['username'] for u in data['users']]
        self.assertEqual(usernames, ['moderator', 'player'])

    def test_grant_and_revoke_admin(self):
        self.client.login(username='moderator', password=self.password)
        response = self.post_json(reverse('main:admin_users'), {'user_id': self.user.pk, 'is_admin': True})
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()['user']['is_admin'])
        self.assertTrue(Profile.objects.get(user=self.user).is_admin)

        response = self.post_json(reverse('main:admin_users'), {'user_id': self.user.pk, 'is_admin': False})
        self.assertFalse(Profile.objects.get(user=self.user).is_admin)

    def test_cannot_revoke_own_admin(self):
        self.client.login(username='moderator', password=self.password)
        response = self.post_json(reverse('main:admin_users'), {'user_id': self.admin.pk, 'is_admin': False})
        self.assertEqual(response.status_code, 400)
        self.assertTrue(Profile.objects.get(user=self.admin).is_admin)

    def test_grant_admin_with_form_post(self):
        self.client.login(username='moderator', password=self.password)
        response = self.client.post(reverse('main:admin_users'), {'user_id': str(self.user.pk), 'is_admin': 'true'})
        self.assertEqual(response.status_code, 200)
        self.assertTrue(Profile.objects.get(user=self.user).is_admin)

    def test_admin_users_rejects_non_boolean_flag(self):
        self.client.login(username='moderator', password=self.password)
        response = self.post_json(reverse('main:admin_users'), {'user_id': self.user.pk, 'is_admin': 'maybe'})
        self.assertEqual(response.status_code, 400)
        self.assertIn('is_admin', response.json()['errors'])
        response = self.post_json(reverse('main:admin_users'), {'user_id': True, 'is_admin': True})
        self.assertEqual(response.status_code, 400)

    def test_admin_users_bad_payload(self):
        self.client.login(username='moderator', password=self.password)
        response = self.post_json(reverse('main:admin_users'), {'user_id': 'abc', 'is_admin': True})
        self.assertEqual(response.status_code, 400)
        response = self.post_json(reverse('main:admin_users'), {'user_id': 9999, 'is_admin': True})
        self.assertEqual(response.status_code, 404)

    def test_admin_dashboard(self):
        self.client.login(username='player', password=self.password)
        response = self.client.get(reverse('main:admin_dashboard'))
        self.assertRedirects(response, reverse('main:home'))

        self.client.login(username='moderator', password=self.password)
        response = self.client.get(reverse('main:admin_dashboard'))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context['users_count'], 2)


class GrantAdminCommandTest(BaseTestCase):
    def test_grant_by_email(self):
        out = StringIO()
        call_command('grant_admin', 'player@test.com', stdout=out)
        self.assertIn('Granted admin access to player', out.getvalue())
        self.assertTrue(Profile.objects.get(user=self.user).is_admin)

    def test_revoke_by_username(self):
        call_command('grant_admin', 'moderator', '--revoke', stdout=StringIO())
        self.assertFalse(Profile.objects.get(user=self.admin).is_admin)

    def test_unknown_user(self):
        with self.assertRaises(CommandError):
            call_command('grant_admin', 'ghost@test.com', stdout=StringIO())
