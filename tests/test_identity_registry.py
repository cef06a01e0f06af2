import unittest

from food_rescue.application.app_state import AppState
from food_rescue.core.exceptions import NotFoundError, ValidationError
from food_rescue.domain.schemas.user import Role

from _support import make_store


class TestIdentityRegistry(unittest.TestCase):
    def setUp(self) -> None:
        self.store, self.db = make_store()
        self.state = AppState.load(self.store)
        self.identity = self.state.identity

    def tearDown(self) -> None:
        self.db.close()

    def test_first_login_registers_user_without_role(self) -> None:
        user = self.identity.login("Dana", "dana@example.org", "1234")
        self.assertTrue(user.id.startswith("U-"))
        self.assertIsNone(user.role)
        self.assertEqual([u.id for u in self.state.users.list()], [user.id])

    def test_same_identity_returns_same_user(self) -> None:
        first = self.identity.login("Dana", "dana@example.org", "1234")
        again = self.identity.login("  Dana ", "dana@example.org", "1234 ")
        self.assertEqual(first.id, again.id)
        self.assertEqual(len(self.state.users.list()), 1)

    def test_any_field_difference_is_a_new_user(self) -> None:
        base = self.identity.login("Dana", "dana@example.org", "1234")
        other_contact = self.identity.login("Dana", "dana@other.org", "1234")
        other_secret = self.identity.login("Dana", "dana@example.org", "12345")
        self.assertEqual(len({base.id, other_contact.id, other_secret.id}), 3)

    def test_login_validation(self) -> None:
        with self.assertRaises(ValidationError):
            self.identity.login("", "x@example.org", "1234")
        with self.assertRaises(ValidationError):
            self.identity.login("Dana", "x@example.org", "123")
        self.assertEqual(self.state.users.list(), [])
        self.assertIsNone(self.identity.current_user())

    def test_contact_is_optional(self) -> None:
        user = self.identity.login("Dana", "", "1234")
        self.assertEqual(user.contact, "")

    def test_assign_role_persists(self) -> None:
        user = self.identity.login("Dana", "dana@example.org", "1234")
        updated = self.identity.assign_role(user.id, Role.DONOR)
        self.assertEqual(updated.role, Role.DONOR)

        reloaded = AppState.load(self.store)
        self.assertEqual(reloaded.users.get_by_id(user.id).role, Role.DONOR)
        self.assertEqual(reloaded.identity.current_user().role, Role.DONOR)

    def test_role_can_be_reassigned(self) -> None:
        user = self.identity.login("Dana", "dana@example.org", "1234")
        self.identity.assign_role(user.id, Role.DONOR)
        updated = self.identity.assign_role(user.id, Role.CHARITY)
        self.assertEqual(updated.role, Role.CHARITY)

    def test_assign_role_unknown_user(self) -> None:
        with self.assertRaises(NotFoundError):
            self.identity.assign_role("U-missing", Role.DONOR)

    def test_login_restarts_session_without_role(self) -> None:
        user = self.identity.login("Dana", "dana@example.org", "1234")
        self.identity.assign_role(user.id, Role.DONOR)

        returned = self.identity.login("Dana", "dana@example.org", "1234")
        self.assertEqual(returned.role, Role.DONOR)
        self.assertEqual(self.identity.current_user().id, user.id)
        self.assertIsNone(self.identity.current_user().role)

    def test_session_survives_reload_and_logout_clears_it(self) -> None:
        user = self.identity.login("Dana", "dana@example.org", "1234")
        self.assertEqual(AppState.load(self.store).identity.current_user().id, user.id)

        self.identity.logout()
        self.assertIsNone(self.identity.current_user())
        self.assertIsNone(AppState.load(self.store).identity.current_user())


if __name__ == "__main__":
    unittest.main(verbosity=2)
