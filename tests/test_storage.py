import pytest
from keyring.errors import KeyringError, PasswordDeleteError

from conftest import MemorySecretStore, build_jwt, token_expiring_in
from forgerock.errors import StorageError
from forgerock.models import TokenPair
from utils import storage as storage_module
from utils.storage import KeyringSecretStore, TokenStorage


def test_round_trip_through_secret_store(memory_store):
    storage = TokenStorage(memory_store, entry_name="OAuth2 Credentials")
    tokens = TokenPair(access_token="access", refresh_token="refresh")

    storage.save_tokens(tokens)

    assert storage.load_tokens() == tokens
    assert memory_store.writes == 1
    assert set(memory_store.secrets) == {"OAuth2 Credentials"}


def test_missing_record_loads_as_none(memory_store):
    assert TokenStorage(memory_store).load_tokens() is None


@pytest.mark.parametrize(
    "contents",
    [
        "not json",
        '{"access_token": "only"}',
        '["access", "refresh"]',
        '{"access_token": 1, "refresh_token": 2}',
        '{"access_token": "", "refresh_token": "refresh"}',
    ],
)
def test_unreadable_record_is_storage_error(contents):
    store = MemorySecretStore({"OAuth2 Credentials": contents})

    with pytest.raises(StorageError):
        TokenStorage(store, entry_name="OAuth2 Credentials").load_tokens()


def test_clear_removes_record(memory_store):
    storage = TokenStorage(memory_store)
    storage.save_tokens(TokenPair(access_token="access", refresh_token="refresh"))

    storage.clear_tokens()

    assert storage.load_tokens() is None


def test_status_describes_tokens_without_secrets(memory_store):
    access_token = token_expiring_in(2 * 3600, sub="guid-status")
    refresh_token = token_expiring_in(-3 * 3600, sub="guid-status")
    storage = TokenStorage(memory_store)
    storage.save_tokens(TokenPair(access_token=access_token, refresh_token=refresh_token))

    status = storage.get_status()

    assert status["has_tokens"] is True
    assert status["subject"] == "guid-status"
    assert status["access_token"]["is_expired"] is False
    assert status["access_token"]["time_until_expiry"] in ("1h 59m", "2h 0m")
    assert status["refresh_token"]["is_expired"] is True
    assert status["refresh_token"]["time_until_expiry"].endswith("ago")
    assert access_token not in str(status)


def test_status_reports_unreadable_record():
    store = MemorySecretStore({"OAuth2 Credentials": "garbage"})

    status = TokenStorage(store, entry_name="OAuth2 Credentials").get_status()

    assert status["has_tokens"] is False
    assert status["error"]


def test_status_with_malformed_token(memory_store):
    storage = TokenStorage(memory_store)
    storage.save_tokens(TokenPair(access_token="not-a-jwt", refresh_token="also.not.jwt"))

    status = storage.get_status()

    assert status["has_tokens"] is True
    assert status["access_token"]["time_until_expiry"] == "Malformed"
    assert status["access_token"]["is_expired"] is True


def test_location_names_service_and_entry(memory_store):
    assert TokenStorage(memory_store, entry_name="OAuth2 Credentials").location == "memory / OAuth2 Credentials"


class FakeKeyring:
    def __init__(self):
        self.passwords = {}

    def get_password(self, service, name):
        return self.passwords.get((service, name))

    def set_password(self, service, name, value):
        self.passwords[(service, name)] = value

    def delete_password(self, service, name):
        if (service, name) not in self.passwords:
            raise PasswordDeleteError("not found")
        del self.passwords[(service, name)]


@pytest.fixture
def fake_keyring(monkeypatch):
    fake = FakeKeyring()
    monkeypatch.setattr(storage_module.keyring, "get_password", fake.get_password)
    monkeypatch.setattr(storage_module.keyring, "set_password", fake.set_password)
    monkeypatch.setattr(storage_module.keyring, "delete_password", fake.delete_password)
    return fake


def test_keyring_store_uses_service_name(fake_keyring):
    store = KeyringSecretStore("toyotactl")

    store.set_secret("OAuth2 Credentials", "record")

    assert fake_keyring.passwords == {("toyotactl", "OAuth2 Credentials"): "record"}
    assert store.get_secret("OAuth2 Credentials") == "record"
    assert store.get_secret("missing") is None


def test_keyring_delete_of_missing_entry_is_ignored(fake_keyring):
    KeyringSecretStore("toyotactl").delete_secret("OAuth2 Credentials")


def test_keyring_failures_become_storage_errors(monkeypatch):
    def broken(*args):
        raise KeyringError("no backend available")

    monkeypatch.setattr(storage_module.keyring, "get_password", broken)
    monkeypatch.setattr(storage_module.keyring, "set_password", broken)

    store = KeyringSecretStore("toyotactl")

    with pytest.raises(StorageError):
        store.get_secret("OAuth2 Credentials")
    with pytest.raises(StorageError):
        store.set_secret("OAuth2 Credentials", "record")


def test_token_storage_defaults_to_keyring(fake_keyring):
    storage = TokenStorage()
    storage.save_tokens(TokenPair(access_token="access", refresh_token="refresh"))

    assert storage.location == "toyotactl / OAuth2 Credentials"
    assert storage.load_tokens() == TokenPair(access_token="access", refresh_token="refresh")


@pytest.mark.parametrize("expiry", [1e20, float("nan"), float("inf"), -1e20])
def test_status_with_out_of_range_expiry(memory_store, expiry):
    storage = TokenStorage(memory_store)
    storage.save_tokens(TokenPair(
        access_token=build_jwt({"sub": "guid-status", "exp": expiry}),
        refresh_token="refresh",
    ))

    status = storage.get_status()

    assert status["access_token"]["time_until_expiry"] == "Unknown"
    assert status["access_token"]["is_expired"] is True
    assert status["subject"] == "guid-status"
