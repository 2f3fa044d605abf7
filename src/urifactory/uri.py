import re
from urllib.parse import urlsplit, SplitResult
from typing import Any, Dict, Optional, Tuple, Type


class UriError(ValueError):
    pass


class MalformedURI(UriError):
    pass


class InvalidComponent(UriError):
    pass


SCHEME_REGEX = re.compile(r"[a-z][a-z0-9+.\-]*", re.IGNORECASE)

MAX_PORT: int = 65535


def is_scheme(value: str) -> bool:
    return SCHEME_REGEX.fullmatch(value) is not None


def _parse_port(port: str, uri: str) -> Optional[int]:
    if port == "":
        return None
    if not (port.isascii() and port.isdigit()) or int(port) > MAX_PORT:
        raise MalformedURI(f"Invalid port `{port}` in URI {uri}")
    return int(port)


def _split_authority(netloc: str, uri: str) -> Tuple[str, Optional[str], str, Optional[int]]:
    user_info, at, host_port = netloc.rpartition("@")
    user, password = "", None
    if at:
        user, colon, pwd = user_info.partition(":")
        if colon:
            password = pwd

    if host_port.startswith("["):
        host, bracket, port = host_port.partition("]")
        if not bracket or (port and not port.startswith(":")):
            raise MalformedURI(f"Invalid IP literal host in URI {uri}")
        host += bracket
        port = port[1:]
    else:
        host, _, port = host_port.partition(":")

    return user, password, host, _parse_port(port, uri)


def parse(uri: str) -> Dict[str, Any]:
    """
    Split a URI string into its components.

    An empty authority is not kept apart from a missing one, so `foo:///x` gives the same components as `foo:/x`.
    The `file` type writes the empty authority back when it renders the URI.

    :param uri: The URI string to parse.
    :return: A dictionary with the scheme, user, password, host, port, path, query and fragment components. Missing
        components are returned as empty strings, except for the password and port which are None when absent.
    :raises MalformedURI: If the string cannot be decomposed into URI components or holds spaces or control
        characters.
    """
    if not isinstance(uri, str):
        raise MalformedURI(f"Cannot parse a URI from {type(uri).__name__}")
    if any(ord(c) <= 0x20 or c == "\x7f" for c in uri):
        raise MalformedURI(f"URI {uri!r} contains spaces or control characters")
    try:
        result: SplitResult = urlsplit(uri)
    except ValueError as ex:
        raise MalformedURI(f"Cannot parse URI {uri}: {ex}") from ex

    user, password, host, port = _split_authority(result.netloc, uri)
    return {
        "scheme": result.scheme,
        "user": user,
        "password": password,
        "host": host,
        "port": port,
        "path": result.path,
        "query": result.query,
        "fragment": result.fragment,
    }


class URI:
    """
    Class representing an immutable RFC 3986 URI.

    Values are validated when they are created. Every ``with_*`` method returns a new value with one component
    replaced and leaves the original untouched. Subclasses narrow the accepted schemes and component combinations.
    """

    Name: str = "generic"
    SupportedSchemes: Optional[Tuple[str, ...]] = None
    DefaultPorts: Dict[str, int] = {}
    HostRequired: bool = False

    _scheme: str
    _user: str
    _password: Optional[str]
    _host: str
    _port: Optional[int]
    _path: str
    _query: str
    _fragment: str

    def __init__(self, scheme: str = "", user: str = "", password: Optional[str] = None, host: str = "",
                 port: Optional[int] = None, path: str = "", query: str = "", fragment: str = "") -> None:
        """
        Create a URI from its components, normalising and validating them in one pass.

        :param scheme: The URI scheme, stored lowercase. Empty for a relative reference.
        :param user: The user part of the user info.
        :param password: The password part of the user info, or None if the user info has no password.
        :param host: The URI host.
        :param port: The URI port, or None. A port equal to the default port of the scheme is dropped.
        :param path: The URI path.
        :param query: The URI query, without the leading ``?``.
        :param fragment: The URI fragment, without the leading ``#``.
        :raises InvalidComponent: If the components do not form a valid URI of this type.
        """
        scheme = scheme.lower()
        if port is not None and self.DefaultPorts.get(scheme) == port:
            port = None
        self._scheme = scheme
        self._user = user
        self._password = password
        self._host = host
        self._port = port
        self._path = path
        self._query = query
        self._fragment = fragment
        self._validate()

    @classmethod
    def from_components(cls, components: Dict[str, Any]) -> "URI":
        return cls(**components)

    @classmethod
    def from_string(cls, uri: str) -> "URI":
        return cls(**parse(uri))

    def _validate(self) -> None:
        if self._scheme and not is_scheme(self._scheme):
            raise InvalidComponent(f"Invalid scheme `{self._scheme}`")
        if self.SupportedSchemes is not None and self._scheme not in self.SupportedSchemes:
            raise InvalidComponent(f"Scheme `{self._scheme}` is not supported by {type(self).__name__} URIs")
        if self._port is not None:
            if not isinstance(self._port, int) or isinstance(self._port, bool) or not 0 <= self._port <= MAX_PORT:
                raise InvalidComponent(f"Invalid port `{self._port}`")
        if self.HostRequired and self._scheme and not self._host:
            raise InvalidComponent(f"{type(self).__name__} URIs with a scheme must have a host")

        if self.authority:
            if self._path and not self._path.startswith("/"):
                raise InvalidComponent("The path of a URI with an authority must be empty or start with a slash")
        elif self._path.startswith("//"):
            raise InvalidComponent("The path of a URI without an authority must not start with two slashes")
        elif not self._scheme and ":" in self._path.split("/", 1)[0]:
            raise InvalidComponent("The first segment of a relative path must not contain a colon")

    @property
    def scheme(self) -> str:
        return self._scheme

    @property
    def user(self) -> str:
        return self._user

    @property
    def password(self) -> Optional[str]:
        return self._password

    @property
    def user_info(self) -> str:
        if self._password is None:
            return self._user
        return f"{self._user}:{self._password}"

    @property
    def host(self) -> str:
        return self._host

    @property
    def port(self) -> Optional[int]:
        return self._port

    @property
    def authority(self) -> str:
        authority = self._host
        if self._user or self._password is not None:
            authority = f"{self.user_info}@{authority}"
        if self._port is not None:
            authority += f":{self._port}"
        return authority

    @property
    def path(self) -> str:
        return self._path

    @property
    def query(self) -> str:
        return self._query

    @property
    def fragment(self) -> str:
        return self._fragment

    def components(self) -> Dict[str, Any]:
        return {
            "scheme": self._scheme,
            "user": self._user,
            "password": self._password,
            "host": self._host,
            "port": self._port,
            "path": self._path,
            "query": self._query,
            "fragment": self._fragment,
        }

    def replace(self, **changes: Any) -> "URI":
        """
        Return a new URI of the same type with the given components replaced.

        All changes are applied before the new value is validated, so intermediate combinations are never checked.

        :param changes: Component values keyed by component name.
        :return: The new URI.
        """
        components = self.components()
        components.update(changes)
        return type(self)(**components)

    def with_scheme(self, scheme: str) -> "URI":
        return self.replace(scheme=scheme)

    def with_user_info(self, user: str, password: Optional[str] = None) -> "URI":
        return self.replace(user=user, password=password)

    def with_host(self, host: str) -> "URI":
        return self.replace(host=host)

    def with_port(self, port: Optional[int]) -> "URI":
        return self.replace(port=port)

    def with_path(self, path: str) -> "URI":
        return self.replace(path=path)

    def with_query(self, query: str) -> "URI":
        return self.replace(query=query)

    def with_fragment(self, fragment: str) -> "URI":
        return self.replace(fragment=fragment)

    def _has_empty_authority(self) -> bool:
        return False

    @property
    def uri(self) -> str:
        """
        Return the URI object as a URI string.

        :return: A string representation of the URI.
        """
        uri = f"{self._scheme}:" if self._scheme else ""
        authority = self.authority
        if authority or self._has_empty_authority():
            uri += f"//{authority}"
        uri += self._path
        if self._query:
            uri += f"?{self._query}"
        if self._fragment:
            uri += f"#{self._fragment}"
        return uri

    def __repr__(self):
        return f"{type(self).__name__}({self.uri})"

    def __str__(self):
        return self.uri

    def __eq__(self, other):
        if not isinstance(other, URI):
            return NotImplemented
        return type(self) is type(other) and self.uri == other.uri

    def __hash__(self):
        return hash((type(self), self.uri))


class Http(URI):
    Name = "http"
    SupportedSchemes = ("", "http", "https")
    DefaultPorts = {"http": 80, "https": 443}
    HostRequired = True


class Ftp(URI):
    Name = "ftp"
    SupportedSchemes = ("", "ftp")
    DefaultPorts = {"ftp": 21}
    HostRequired = True

    def _validate(self) -> None:
        super()._validate()
        if self._query:
            raise InvalidComponent("FTP URIs must not have a query")


class Ws(URI):
    Name = "ws"
    SupportedSchemes = ("", "ws", "wss")
    DefaultPorts = {"ws": 80, "wss": 443}
    HostRequired = True

    def _validate(self) -> None:
        super()._validate()
        if self._fragment:
            raise InvalidComponent("WebSocket URIs must not have a fragment")


class Data(URI):
    """
    Class representing an RFC 2397 data URI, ``data:[<mediatype>][;base64],<data>``.
    """

    Name = "data"
    SupportedSchemes = ("data",)

    def _validate(self) -> None:
        super()._validate()
        if self.authority:
            raise InvalidComponent("Data URIs must not have an authority")
        if "," not in self._path:
            raise InvalidComponent(f"Data URI path `{self._path}` must be of the form [<mediatype>][;base64],<data>")

    @property
    def media_type(self) -> str:
        media_type, _, _ = self._path.partition(",")
        if media_type.endswith(";base64"):
            media_type = media_type[:-len(";base64")]
        return media_type or "text/plain;charset=US-ASCII"

    @property
    def is_base64(self) -> bool:
        media_type, _, _ = self._path.partition(",")
        return media_type.endswith(";base64")


class File(URI):
    Name = "file"
    SupportedSchemes = ("", "file")

    def _validate(self) -> None:
        super()._validate()
        if self._user or self._password is not None:
            raise InvalidComponent("File URIs must not have user info")
        if self._port is not None:
            raise InvalidComponent("File URIs must not have a port")

    def _has_empty_authority(self) -> bool:
        return self._scheme == "file" and self._path.startswith("/")


URI_TYPES: Dict[str, Type[URI]] = {
    URI.Name: URI,
    Http.Name: Http,
    Ftp.Name: Ftp,
    Ws.Name: Ws,
    Data.Name: Data,
    File.Name: File,
}
