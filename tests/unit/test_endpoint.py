from __future__ import annotations

import pytest

from logshipper import DEFAULT_INTAKE_URL, InvalidURL, Options, build_endpoint


def test_build_endpoint_with_all_options():
    url = build_endpoint(
        "https://base.url/",
        Options(
            source="zadog",
            service="unittest",
            hostname="unittest-hostname",
            tags=["tag1:one", "tag2:two"],
        ),
    )
    assert url == (
        "https://base.url/?ddsource=zadog&ddtags=tag1%3Aone%2Ctag2%3Atwo"
        "&hostname=unittest-hostname&service=unittest"
    )


@pytest.mark.parametrize(
    ("options", "expected"),
    [
        (Options(), "https://base.url/"),
        (Options(source="app"), "https://base.url/?ddsource=app"),
        (Options(service="api", source=""), "https://base.url/?service=api"),
        (Options(hostname="h1", tags=()), "https://base.url/?hostname=h1"),
        (Options(tags=["b", "a"]), "https://base.url/?ddtags=b%2Ca"),
        (Options(service="api", hostname="h1"), "https://base.url/?hostname=h1&service=api"),
    ],
)
def test_build_endpoint_only_non_empty_fields(options: Options, expected: str):
    assert build_endpoint("https://base.url/", options) == expected


def test_build_endpoint_defaults_to_intake_url():
    assert build_endpoint(None, Options()) == DEFAULT_INTAKE_URL
    assert build_endpoint("", Options(service="svc")) == DEFAULT_INTAKE_URL + "?service=svc"


def test_build_endpoint_keeps_existing_query_sorted():
    url = build_endpoint("https://base.url/v2/logs?zeta=1&service=old", Options(service="new", source="src"))
    assert url == "https://base.url/v2/logs?ddsource=src&service=new&zeta=1"


def test_build_endpoint_without_trailing_slash():
    assert build_endpoint("https://base.url", Options()) == "https://base.url"


@pytest.mark.parametrize("base", ["not a url", "ftp://base.url/", "https://", "http://[::1"])
def test_build_endpoint_rejects_invalid_base(base: str):
    with pytest.raises(InvalidURL):
        build_endpoint(base, Options())


def test_options_accept_comma_separated_tags():
    assert Options(tags="env:prod, team:core,,").tags == ("env:prod", "team:core")
