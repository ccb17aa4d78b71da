"""Tests for the error hierarchy - codes, statuses, not-found detection, envelopes."""

from repostore.core.errors import (
    DatabaseError,
    ErrorCategory,
    ErrorContext,
    NameNotAllowedError,
    PermissionDeniedError,
    RepoAlreadyExistsError,
    RepoNotFoundError,
    RepostoreError,
    is_not_found,
)


def test_not_found_is_discriminable():
    err = RepoNotFoundError({"repo_id": 3})
    assert err.is_not_found is True
    assert is_not_found(err)
    assert not is_not_found(RepoAlreadyExistsError({"owner_id": 1, "name": "x"}))


def test_not_found_detected_through_cause_chain():
    try:
        try:
            raise RepoNotFoundError({"repo_id": 3})
        except RepoNotFoundError as e:
            raise RuntimeError("wrapped") from e
    except RuntimeError as wrapped:
        assert is_not_found(wrapped)


def test_messages_include_identifying_arguments():
    err = RepoNotFoundError({"owner_id": 1, "name": "demo"})
    assert str(err) == "repository does not exist: owner_id=1, name='demo'"
    assert str(NameNotAllowedError({"reason": "reserved", "name": ".."})) == (
        "name is not allowed: reason='reserved', name='..'"
    )


def test_kinds_and_statuses():
    cases = [
        (RepoNotFoundError({}), "REPO_NOT_FOUND", 404),
        (RepoAlreadyExistsError({}), "REPO_ALREADY_EXISTS", 409),
        (NameNotAllowedError({}), "NAME_NOT_ALLOWED", 400),
        (PermissionDeniedError("no"), "PERMISSION_DENIED", 403),
        (DatabaseError("boom", "upsert"), "DATABASE_ERROR", 503),
    ]
    for err, code, status in cases:
        assert isinstance(err, RepostoreError)
        assert err.code == code
        assert err.http_status == status


def test_database_error_keeps_stage():
    err = DatabaseError("boom", 'update "repository.num_stars"')
    assert err.operation == 'update "repository.num_stars"'
    assert err.detail == "boom"
    assert err.category == ErrorCategory.DATABASE


def test_to_response_envelope():
    err = PermissionDeniedError(
        "user does not have access to the repository",
        ErrorContext(repo_id=3, user_id=2, owner_id=1),
    )
    body = err.to_response()["error"]
    assert body["code"] == "PERMISSION_DENIED"
    assert body["category"] == "permission"
    assert body["severity"] == "warning"
    assert body["context"] == {"repo_id": 3, "user_id": 2, "owner_id": 1}
