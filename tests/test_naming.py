import pytest

from serverhub.errors import HandlerNameError
from serverhub.handler.cgi import CGI
from serverhub.handler.naming import class_from_string, underscore


@pytest.mark.parametrize(
    "name, expected",
    [
        ("Foo", "foo"),
        ("FooBar", "foo_bar"),
        ("FooBarBaz", "foo_bar_baz"),
        ("WEBrick", "webrick"),
        ("FastCGI", "fastcgi"),
        ("EventedMongrel", "evented_mongrel"),
        ("UnRegistered", "un_registered"),
        ("UnregisteredLongOne", "unregistered_long_one"),
        ("registering_myself", "registering_myself"),
    ],
)
def test_underscore_follows_module_naming_convention(name: str, expected: str) -> None:
    assert underscore(name) == expected


def test_class_from_string_walks_packages_and_attributes() -> None:
    assert class_from_string("serverhub.handler.cgi.CGI") is CGI
    assert class_from_string("collections.OrderedDict").__name__ == "OrderedDict"


def test_class_from_string_imports_submodules_on_demand() -> None:
    cls = class_from_string("xml.dom.minidom.Document")
    assert cls.__name__ == "Document"


@pytest.mark.parametrize(
    "path",
    [
        "serverhub_no_such_package.Handler",
        "serverhub.handler.no_such_module.Handler",
        "serverhub.handler.cgi.NoSuchHandler",
        "serverhub.handler.cgi.CGI.run.missing",
        "serverhub..cgi",
    ],
)
def test_class_from_string_raises_name_error_for_unknown_paths(path: str) -> None:
    with pytest.raises(HandlerNameError):
        class_from_string(path)


def test_class_from_string_rejects_non_classes() -> None:
    with pytest.raises(HandlerNameError):
        class_from_string("serverhub.handler.naming.underscore")
