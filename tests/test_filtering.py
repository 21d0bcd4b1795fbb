from __future__ import annotations

import json

import phpserialize
import pytest

from remote_updater.config import UpdaterConfig
from remote_updater.filtering import filter_outbound_request, remove_component_entry
from remote_updater.models.identity import ClientIdentity

CHECK_URL = "https://api.wordpress.org/plugins/update-check/1.1/"


def _legacy(data: dict[str, object]) -> str:
    return phpserialize.dumps(phpserialize.phpobject("stdClass", data)).decode("utf-8")


def _load_legacy(raw: str) -> dict[str, object]:
    value = phpserialize.loads(raw.encode("utf-8"), decode_strings=True, object_hook=phpserialize.phpobject)
    assert isinstance(value, phpserialize.phpobject)
    return value._asdict()


def _request(plugins: str) -> dict[str, object]:
    return {
        "method": "POST",
        "timeout": 30,
        "body": {"plugins": plugins, "translations": "[]", "locale": '["en_US"]'},
    }


def test_json_body_drops_this_plugin(identity: ClientIdentity) -> None:
    request = _request('{"plugins":{"a/a.php":{},"my-slug/my-slug.php":{}},"active":["a/a.php"]}')

    filtered = filter_outbound_request(request, CHECK_URL, identity)

    decoded = json.loads(filtered["body"]["plugins"])
    assert decoded == {"plugins": {"a/a.php": {}}, "active": ["a/a.php"]}


def test_legacy_body_stays_legacy(identity: ClientIdentity) -> None:
    request = _request(
        _legacy({"plugins": {"a/a.php": {"Version": "1.0"}, "my-slug/my-slug.php": {"Version": "1.2.0"}}})
    )

    filtered = filter_outbound_request(request, CHECK_URL, identity)

    raw = filtered["body"]["plugins"]
    assert raw.startswith('O:8:"stdClass":')
    assert _load_legacy(raw)["plugins"] == {"a/a.php": {"Version": "1.0"}}


def test_other_urls_are_returned_untouched(identity: ClientIdentity) -> None:
    request = _request('{"plugins":{"my-slug/my-slug.php":{}}}')

    filtered = filter_outbound_request(request, "https://api.wordpress.org/themes/update-check/1.1/", identity)

    assert filtered is request
    assert request["body"]["plugins"] == '{"plugins":{"my-slug/my-slug.php":{}}}'


def test_custom_registry_check_path(identity: ClientIdentity) -> None:
    request = _request('{"plugins":{"my-slug/my-slug.php":{}}}')

    assert filter_outbound_request(request, CHECK_URL, identity, registry_check_path="mirror.local/check") is request

    filtered = filter_outbound_request(
        request, "https://mirror.local/check", identity, registry_check_path="mirror.local/check"
    )
    assert json.loads(filtered["body"]["plugins"]) == {"plugins": {}}


def test_missing_or_empty_plugins_field(identity: ClientIdentity) -> None:
    no_plugins = {"body": {"locale": "en_US"}}
    empty_plugins = {"body": {"plugins": ""}}
    no_body = {"method": "GET"}

    assert filter_outbound_request(no_plugins, CHECK_URL, identity) is no_plugins
    assert filter_outbound_request(empty_plugins, CHECK_URL, identity) is empty_plugins
    assert filter_outbound_request(no_body, CHECK_URL, identity) is no_body


def test_malformed_legacy_body_is_emptied_without_raising(identity: ClientIdentity) -> None:
    request = _request('O:8:"stdClass":1:{s:7:"plugins";a:1:{broken}')

    filtered = filter_outbound_request(request, CHECK_URL, identity)

    assert filtered["body"]["plugins"] == 'O:8:"stdClass":0:{}'
    assert filtered["method"] == "POST"
    assert filtered["timeout"] == 30
    assert filtered["body"]["translations"] == "[]"
    assert filtered["body"]["locale"] == '["en_US"]'


def test_legacy_body_with_unhashable_key_is_emptied_without_raising(identity: ClientIdentity) -> None:
    request = _request('O:8:"stdClass":1:{a:0:{}i:1;}')

    filtered = filter_outbound_request(request, CHECK_URL, identity)

    assert filtered["body"]["plugins"] == 'O:8:"stdClass":0:{}'
    assert filtered["body"]["locale"] == '["en_US"]'


def test_deeply_nested_legacy_body_is_emptied_without_raising(identity: ClientIdentity) -> None:
    request = _request("a:1:{" * 3000 + "}" * 3000)

    filtered = filter_outbound_request(request, CHECK_URL, identity)

    assert filtered["body"]["plugins"] == 'O:8:"stdClass":0:{}'


@pytest.mark.parametrize(
    "raw",
    [
        '{"plugins": {"a/a.php": {}, "my-slug/my-slug.php": {}}',
        "[" * 100_000 + "]" * 100_000,
    ],
)
def test_undecodable_json_body_is_sent_as_is(identity: ClientIdentity, raw: str) -> None:
    request = _request(raw)

    filtered = filter_outbound_request(request, CHECK_URL, identity)

    assert filtered is request
    assert filtered["body"]["plugins"] == raw


def test_input_request_is_not_mutated(identity: ClientIdentity) -> None:
    original = '{"plugins":{"a/a.php":{},"my-slug/my-slug.php":{}}}'
    request = _request(original)

    filter_outbound_request(request, CHECK_URL, identity)

    assert request["body"]["plugins"] == original


def test_filter_is_idempotent(identity: ClientIdentity) -> None:
    for raw in (
        '{"plugins": {"a/a.php": {}, "my-slug/my-slug.php": {}}}',
        _legacy({"plugins": {"a/a.php": {}, "my-slug/my-slug.php": {}}}),
    ):
        once = filter_outbound_request(_request(raw), CHECK_URL, identity)
        twice = filter_outbound_request(once, CHECK_URL, identity)

        assert twice == once


def test_entry_is_matched_by_folder(identity: ClientIdentity) -> None:
    plugins = {"a/a.php": {}, "my-slug/renamed-main.php": {}}

    assert remove_component_entry(plugins, identity) == {"a/a.php": {}}


def test_only_last_folder_match_is_removed(identity: ClientIdentity) -> None:
    plugins = {"my-slug/old.php": {}, "a/a.php": {}, "my-slug/my-slug.php": {}}

    remaining = remove_component_entry(plugins, identity)

    assert remaining == {"my-slug/old.php": {}, "a/a.php": {}}


def test_no_match_leaves_entries_intact(identity: ClientIdentity) -> None:
    plugins = {"a/a.php": {}, "my-slugger/my-slugger.php": {}}

    remaining = remove_component_entry(plugins, identity)

    assert remaining == plugins
    assert remaining is not plugins


def test_single_file_plugin_matched_on_full_id() -> None:
    identity = ClientIdentity.from_config(
        UpdaterConfig(
            api_url="https://updates.example.com/api",
            plugin_file="/srv/www/wp-content/plugins/hello.php",
            api_data={"version": "1.0"},
            plugins_dir="/srv/www/wp-content/plugins",
        )
    )
    plugins = {"hello.php": {}, "other.php": {}, "a/a.php": {}}

    assert identity.folder == ""
    assert remove_component_entry(plugins, identity) == {"other.php": {}, "a/a.php": {}}
