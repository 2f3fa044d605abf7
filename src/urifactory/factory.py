# -*- coding: utf-8 -*-
"""URI factory.

The factory turns a URI string, optionally relative to a base URI, into a concrete URI value. The type of the value is
chosen by looking up the URI scheme in a scheme registry.
"""
import logging
from typing import Any, Dict, Iterator, Optional, Tuple, Type, Union, TYPE_CHECKING

from .uri import URI, Http, Ftp, Ws, Data, File, URI_TYPES, UriError, parse, is_scheme
from .resolver import resolve

if TYPE_CHECKING:
    from .config import Config

logger = logging.getLogger(__name__)


class InvalidBaseURI(UriError):
    pass


class InvalidScheme(UriError):
    pass


class InvalidTargetType(UriError):
    pass


DEFAULT_SCHEMES: Dict[str, Type[URI]] = {
    "http": Http,
    "https": Http,
    "ftp": Ftp,
    "ws": Ws,
    "wss": Ws,
    "data": Data,
    "file": File,
}


def get_uri_type(name: str) -> Type[URI]:
    """
    Find the URI class for the given type name.

    :param name: The name of the URI type, i.e. ``generic``, ``http``, ``ftp``, ``ws``, ``data`` or ``file``.
    :return: The URI class.
    """
    try:
        return URI_TYPES[name.lower()]
    except KeyError:
        raise InvalidTargetType(f"Unknown URI type `{name}`, expected one of {', '.join(URI_TYPES)}")


def check_scheme_type(scheme: str, name: str) -> Type[URI]:
    """
    Check that a scheme can be mapped to the URI type with the given name, as stored in the configuration.

    :param scheme: The URI scheme.
    :param name: The name of the URI type.
    :return: The URI class.
    :raises InvalidScheme: If the scheme is not a valid URI scheme.
    :raises InvalidTargetType: If the name is not a known URI type.
    """
    if not is_scheme(scheme):
        raise InvalidScheme(f"Please verify the submitted scheme `{scheme}`")
    uri_type = get_uri_type(name)
    SchemeRegistry(include_defaults=False).register(scheme, uri_type)
    return uri_type


class SchemeRegistry:
    """
    Mapping of lowercase URI schemes to the URI classes used to represent them.

    The registry is meant to be filled when it is created and only read afterwards. It has no locking.
    """

    _map: Dict[str, Type[URI]]

    def __init__(self, schemes: Optional[Dict[str, Type[URI]]] = None, include_defaults: bool = True) -> None:
        self._map = dict(DEFAULT_SCHEMES) if include_defaults else {}
        for scheme, uri_type in (schemes or {}).items():
            self.register(scheme, uri_type)

    def register(self, scheme: str, uri_type: Type[URI]) -> None:
        """
        Add or replace the URI class used for the given scheme.

        :param scheme: A valid URI scheme.
        :param uri_type: A subclass of URI.
        :raises InvalidScheme: If the scheme is not a valid URI scheme. The registry is left unchanged.
        :raises InvalidTargetType: If the type is not a URI class. The registry is left unchanged.
        """
        scheme = scheme.lower()
        if not is_scheme(scheme):
            raise InvalidScheme(f"Please verify the submitted scheme `{scheme}`")
        if not isinstance(uri_type, type) or not issubclass(uri_type, URI):
            raise InvalidTargetType(f"Please verify the submitted class `{uri_type!r}`")
        self._map[scheme] = uri_type

    def lookup(self, scheme: str) -> Optional[Type[URI]]:
        return self._map.get(scheme.lower())

    def items(self) -> Iterator[Tuple[str, Type[URI]]]:
        return iter(sorted(self._map.items()))

    def copy(self) -> "SchemeRegistry":
        registry = SchemeRegistry(include_defaults=False)
        registry._map = dict(self._map)
        return registry

    def __contains__(self, scheme: str) -> bool:
        return scheme.lower() in self._map

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._map))

    def __len__(self) -> int:
        return len(self._map)


class Factory:
    """
    Class to create URI values from strings, optionally resolved against a base URI.
    """

    _registry: SchemeRegistry

    def __init__(self, schemes: Optional[Dict[str, Type[URI]]] = None,
                 registry: Optional[SchemeRegistry] = None) -> None:
        """
        Create a new Factory.

        :param schemes: URI classes indexed by scheme, overriding the registry entries.
        :param registry: The scheme registry to start from. It is copied, so later changes to it do not affect the
            factory. Defaults to a registry with the default schemes.
        """
        self._registry = registry.copy() if registry is not None else SchemeRegistry()
        for scheme, uri_type in (schemes or {}).items():
            self._registry.register(scheme, uri_type)

    @classmethod
    def from_config(cls, config: "Config") -> "Factory":
        """
        Create a Factory which also uses the schemes mapped in the ``scheme`` sections of the configuration.

        :param config: The loaded configuration.
        :return: A new Factory.
        """
        schemes = {scheme: get_uri_type(name) for scheme, name in config.schemes.items()}
        return cls(schemes)

    @property
    def registry(self) -> SchemeRegistry:
        return self._registry

    def _uri_type(self, components: Dict[str, Any]) -> Type[URI]:
        return self._registry.lookup(components["scheme"]) or URI

    def _try_resolve(self, components: Dict[str, Any], uri_type: Type[URI], base_uri: URI) -> Optional[URI]:
        try:
            return resolve(uri_type.from_components(components), base_uri)
        except Exception as ex:
            logger.debug("Cannot resolve as %s URI: %s", uri_type.__name__, ex)
            return None

    def create(self, uri: str, base_uri: Union[str, URI, None] = None) -> URI:
        """
        Create a new URI, optionally resolved against a base URI.

        When a base URI is given the reference is first built with the class of the base URI. If that class cannot
        hold the result, the class registered for the scheme of the reference is used instead.

        :param uri: The URI string.
        :param base_uri: The base URI, either a string or a URI object.
        :return: The new URI.
        :raises MalformedURI: If the URI or base URI string cannot be parsed.
        :raises InvalidBaseURI: If the base URI is not an absolute URI.
        :raises InvalidComponent: If no URI class can hold the resolved components.
        """
        components = parse(uri)

        if base_uri is None:
            return self._uri_type(components).from_components(components)

        if isinstance(base_uri, str):
            base_uri = self.create(base_uri)
        elif not isinstance(base_uri, URI):
            raise InvalidBaseURI(f"The submitted base URI must be a string or a URI, not {type(base_uri).__name__}")

        if base_uri.scheme == "":
            raise InvalidBaseURI(f"The submitted base URI {base_uri} must be an absolute URI")

        resolved = self._try_resolve(components, type(base_uri), base_uri)
        if resolved is None:
            uri_type = self._uri_type(components)
            logger.debug("Falling back to %s URI for %s", uri_type.__name__, uri)
            resolved = resolve(uri_type.from_components(components), base_uri)

        return resolved


def create(uri: str, base_uri: Union[str, URI, None] = None) -> URI:
    """
    Create a new URI using a Factory with the default schemes.

    :param uri: The URI string.
    :param base_uri: The optional base URI.
    :return: The new URI.
    """
    return Factory().create(uri, base_uri)
