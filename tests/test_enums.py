import json

import pytest

from tasks_api.enums import StatusType


@pytest.mark.parametrize("token, member", [
    ("todo", StatusType.TODO),
    ("done", StatusType.DONE),
])
def test_parse_known_tokens(token, member):
    assert StatusType.parse(token) is member
    assert str(member) == token


@pytest.mark.parametrize("token", ["", "Todo", "DONE", "in_progress", " done"])
def test_parse_rejects_unknown_tokens(token):
    with pytest.raises(ValueError) as exc:
        StatusType.parse(token)
    assert f"{token} does not belong to StatusType values" == str(exc.value)


def test_json_encoding_uses_lowercase_tokens():
    assert json.dumps([StatusType.TODO, StatusType.DONE]) == '["todo", "done"]'
