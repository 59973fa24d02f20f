import pytest

from leave_tracker.core.enums import Role
from leave_tracker.core.exceptions import AuthenticationError, ValidationError
from leave_tracker.users.service import AuthService, UserService


def test_register_then_authenticate(users_repo):
    users = UserService(users_repo)
    auth = AuthService(users_repo)

    uid = users.register(full_name="Ana Lee", username="ana", password="secret1")
    s_user = auth.authenticate("ana", "secret1")

    assert s_user.user_id == uid
    assert s_user.role == Role.USER
    assert not s_user.is_admin


def test_wrong_password_raises(users_repo):
    users_repo.add("ana", "secret1")

    with pytest.raises(AuthenticationError):
        AuthService(users_repo).authenticate("ana", "nope")
    with pytest.raises(AuthenticationError):
        AuthService(users_repo).authenticate("ghost", "secret1")


@pytest.mark.parametrize(
    "full_name,username,password",
    [("", "ana", "secret1"), ("Ana", "  ", "secret1"), ("Ana", "ana", "123")],
)
def test_register_validation(users_repo, full_name, username, password):
    with pytest.raises(ValidationError):
        UserService(users_repo).register(full_name=full_name, username=username, password=password)


def test_register_duplicate_username(users_repo):
    users_repo.add("ana", "secret1")

    with pytest.raises(ValidationError):
        UserService(users_repo).register(full_name="Other Ana", username="ana", password="secret2")


def test_make_admin(users_repo):
    uid = users_repo.add("ana", "secret1")
    svc = UserService(users_repo)

    assert not svc.is_admin(uid)
    assert svc.make_admin("ana") == uid
    assert svc.is_admin(uid)

    with pytest.raises(ValidationError):
        svc.make_admin("ghost")
