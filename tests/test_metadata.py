import mock
import pytest

from tracebridge.metadata import default_metadata


def _request(**kwargs):
    attrs = dict(
        method="post",
        path="/users/42/café",
        query_string=b"page=2&sort=name",
        url_rule=mock.Mock(rule="/users/<int:user_id>/<name>"),
        user_agent=mock.Mock(string="curl/8.0"),
    )
    attrs.update(kwargs)
    return mock.Mock(spec=list(attrs), **attrs)


def test_default_metadata():
    assert default_metadata(_request()) == {
        "http": {
            "method": "POST",
            "query_string": "page=2&sort=name",
            "url": "/users/42/café",
            "user_agent": "curl/8.0",
        },
        "resource": "POST /users/<int:user_id>/<name>",
        "type": "web",
    }


def test_default_metadata_without_matched_rule():
    metadata = default_metadata(_request(url_rule=None, path="/missing"))
    assert metadata["resource"] == "POST /missing"


def test_default_metadata_without_user_agent():
    metadata = default_metadata(_request(user_agent=mock.Mock(string="")))
    assert metadata["http"]["user_agent"] is None


def test_default_metadata_with_text_query_string():
    metadata = default_metadata(_request(query_string="a=1"))
    assert metadata["http"]["query_string"] == "a=1"


def test_default_metadata_keeps_decoded_flask_path():
    flask = pytest.importorskip("flask")
    app = flask.Flask(__name__)

    with app.test_request_context("/files/a%2520b?q=%41"):
        metadata = default_metadata(flask.request)

        assert metadata["http"]["url"] == flask.request.path == "/files/a%20b"
        assert metadata["http"]["query_string"] == "q=%41"
        assert metadata["resource"] == "GET /files/a%20b"
