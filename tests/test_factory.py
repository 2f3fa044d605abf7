import logging
from io import StringIO
from unittest import mock
import pytest
from urifactory.config import Config
from urifactory.factory import (Factory, SchemeRegistry, InvalidBaseURI, InvalidScheme, InvalidTargetType,
                                get_uri_type, check_scheme_type, create)
from urifactory.uri import URI, Http, Ftp, Ws, Data, File, InvalidComponent, MalformedURI

BASE = "http://a/b/c/d;p?q"


@pytest.mark.parametrize("reference, expected", [
    ("g:h", "g:h"),
    ("g", "http://a/b/c/g"),
    ("./g", "http://a/b/c/g"),
    ("g/", "http://a/b/c/g/"),
    ("/g", "http://a/g"),
    ("//g", "http://g"),
    ("?y", "http://a/b/c/d;p?y"),
    ("g?y", "http://a/b/c/g?y"),
    ("#s", "http://a/b/c/d;p?q#s"),
    ("g#s", "http://a/b/c/g#s"),
    ("g?y#s", "http://a/b/c/g?y#s"),
    (";x", "http://a/b/c/;x"),
    ("g;x", "http://a/b/c/g;x"),
    ("g;x?y#s", "http://a/b/c/g;x?y#s"),
    ("", "http://a/b/c/d;p?q"),
    (".", "http://a/b/c/"),
    ("./", "http://a/b/c/"),
    ("..", "http://a/b/"),
    ("../", "http://a/b/"),
    ("../g", "http://a/b/g"),
    ("../..", "http://a/"),
    ("../../", "http://a/"),
    ("../../g", "http://a/g"),
])
def test_rfc3986_normal_examples(reference, expected):
    assert str(Factory().create(reference, BASE)) == expected


@pytest.mark.parametrize("reference, expected", [
    ("../../../g", "http://a/g"),
    ("../../../../g", "http://a/g"),
    ("/./g", "http://a/g"),
    ("/../g", "http://a/g"),
    ("g.", "http://a/b/c/g."),
    (".g", "http://a/b/c/.g"),
    ("g..", "http://a/b/c/g.."),
    ("..g", "http://a/b/c/..g"),
    ("./../g", "http://a/b/g"),
    ("./g/.", "http://a/b/c/g/"),
    ("g/./h", "http://a/b/c/g/h"),
    ("g/../h", "http://a/b/c/h"),
    ("g;x=1/./y", "http://a/b/c/g;x=1/y"),
    ("g;x=1/../y", "http://a/b/c/y"),
    ("g?y/./x", "http://a/b/c/g?y/./x"),
    ("g?y/../x", "http://a/b/c/g?y/../x"),
    ("g#s/./x", "http://a/b/c/g#s/./x"),
    ("g#s/../x", "http://a/b/c/g#s/../x"),
])
def test_rfc3986_abnormal_examples(reference, expected):
    assert str(Factory().create(reference, BASE)) == expected


def test_http_reference_without_host_is_rejected():
    with pytest.raises(InvalidComponent):
        Factory().create("http:g", BASE)


def test_create_without_base_selects_type_from_scheme():
    factory = Factory()
    uri = factory.create("HTTP://Example.com:80/a")
    assert type(uri) is Http
    assert str(uri) == "http://Example.com/a"
    assert type(factory.create("wss://h/x")) is Ws
    assert type(factory.create("ftp://h/x")) is Ftp
    assert type(factory.create("data:,x")) is Data
    assert type(factory.create("file:///x")) is File
    assert type(factory.create("svn+ssh://h/x")) is URI
    assert type(factory.create("g")) is URI


def test_create_without_base_rejects_invalid_type_components():
    with pytest.raises(InvalidComponent):
        Factory().create("ftp://h/x?y")


def test_create_with_malformed_uri():
    with pytest.raises(MalformedURI):
        Factory().create("http://h:port/")
    with pytest.raises(MalformedURI):
        Factory().create("g", "http://h:port/")


def test_create_keeps_base_type():
    assert type(Factory().create("g", BASE)) is Http


def test_create_falls_back_to_reference_scheme_type(caplog):
    caplog.set_level(logging.DEBUG, logger="urifactory.factory")
    uri = Factory().create("ftp://x/../y", BASE)
    assert type(uri) is Ftp
    assert str(uri) == "ftp://x/y"
    assert "Falling back to Ftp URI" in caplog.text


def test_create_falls_back_to_generic_type():
    uri = Factory().create("mailto:a@b", BASE)
    assert type(uri) is URI
    assert str(uri) == "mailto:a@b"


def test_create_falls_back_for_data_base():
    uri = Factory().create("#frag", "data:text/plain,abc")
    assert type(uri) is URI
    assert str(uri) == "data:text/plain,abc#frag"


def test_create_fallback_failure_propagates():
    with pytest.raises(InvalidComponent):
        Factory().create("wss://h/x#frag", BASE)


@mock.patch("urifactory.factory.resolve")
def test_create_retries_once(resolve):
    resolved = mock.Mock()
    resolve.side_effect = [InvalidComponent("first"), resolved]
    assert Factory().create("g", BASE) is resolved
    assert resolve.call_count == 2


@mock.patch("urifactory.factory.resolve")
def test_create_does_not_retry_twice(resolve):
    resolve.side_effect = [InvalidComponent("first"), InvalidComponent("second")]
    with pytest.raises(InvalidComponent, match="second"):
        Factory().create("g", BASE)
    assert resolve.call_count == 2


@mock.patch("urifactory.factory.resolve")
def test_create_retries_after_any_error(resolve):
    resolved = mock.Mock()
    resolve.side_effect = [RuntimeError("boom"), resolved]
    assert Factory().create("g", BASE) is resolved
    assert resolve.call_count == 2


class StrictURI(URI):
    def _validate(self) -> None:
        super()._validate()
        if self.scheme not in ("", "strict"):
            raise ValueError("Strict URIs only hold the strict scheme")


def test_create_falls_back_when_base_type_raises_value_error():
    factory = Factory(schemes={"strict": StrictURI})
    uri = factory.create("http://x/../y", "strict://h/p")
    assert type(uri) is Http
    assert str(uri) == "http://x/y"


def test_create_with_base_object():
    base = Http.from_string("http://a/b/c")
    assert str(Factory().create("g", base)) == "http://a/b/g"
    assert str(base) == "http://a/b/c"


@pytest.mark.parametrize("base", ["//h/p", "g", "", URI(path="/p")])
def test_create_with_relative_base(base):
    with pytest.raises(InvalidBaseURI):
        Factory().create("g", base)


def test_create_with_invalid_base_type():
    with pytest.raises(InvalidBaseURI):
        Factory().create("g", 42)


def test_module_create():
    assert str(create("../g", BASE)) == "http://a/b/g"


def test_registry_defaults():
    registry = SchemeRegistry()
    assert registry.lookup("https") is Http
    assert registry.lookup("WSS") is Ws
    assert registry.lookup("gopher") is None
    assert "file" in registry
    assert list(registry) == ["data", "file", "ftp", "http", "https", "ws", "wss"]
    assert len(SchemeRegistry(include_defaults=False)) == 0


def test_register_scheme():
    registry = SchemeRegistry()
    registry.register("SVN+SSH", URI)
    assert registry.lookup("svn+ssh") is URI
    assert ("svn+ssh", URI) in list(registry.items())


def test_register_invalid_scheme_leaves_registry_unchanged():
    registry = SchemeRegistry()
    with pytest.raises(InvalidScheme):
        registry.register("1http", URI)
    assert registry.lookup("1http") is None
    assert len(registry) == 7


@pytest.mark.parametrize("uri_type", [str, object(), "URI", None])
def test_register_invalid_type_leaves_registry_unchanged(uri_type):
    registry = SchemeRegistry()
    with pytest.raises(InvalidTargetType):
        registry.register("http", uri_type)
    assert registry.lookup("http") is Http


def test_factory_scheme_overrides():
    factory = Factory(schemes={"http": URI})
    assert type(factory.create("http://a/b")) is URI
    assert type(Factory().create("http://a/b")) is Http


def test_factory_copies_registry():
    registry = SchemeRegistry()
    factory = Factory(registry=registry)
    registry.register("gopher", Http)
    assert factory.registry.lookup("gopher") is None


def test_get_uri_type():
    assert get_uri_type("HTTP") is Http
    assert get_uri_type("generic") is URI
    with pytest.raises(InvalidTargetType):
        get_uri_type("gopher")



def test_check_scheme_type():
    assert check_scheme_type("SVN+SSH", "generic") is URI
    with pytest.raises(InvalidScheme):
        check_scheme_type("1http", "generic")
    with pytest.raises(InvalidTargetType):
        check_scheme_type("git", "gopher")

def test_factory_from_config():
    config = Config()
    config.load(file=StringIO('[scheme "svn+ssh"]\ntype = generic\n\n[scheme "ws"]\ntype = generic\n'))
    factory = Factory.from_config(config)
    assert factory.registry.lookup("svn+ssh") is URI
    assert type(factory.create("ws://h/x#f")) is URI


def test_factory_from_config_with_unknown_type():
    config = Config()
    config.load(file=StringIO('[scheme "svn+ssh"]\ntype = gopher\n'))
    with pytest.raises(InvalidTargetType):
        Factory.from_config(config)
