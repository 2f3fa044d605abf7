import configparser
import appdirs
import os
from pathlib import Path
from typing import Dict, Tuple, List, Optional, TextIO, Union


ENV_PREFIX: str = 'URIFACTORY_'


def _parse_name(arg: str) -> Tuple[str, str]:
    if '.' in arg:
        section, *name, option = arg.split('.')
        if name:
            section = '{} "{}"'.format(section, '.'.join(name))
    else:
        section = 'DEFAULT'
        option = arg
    return section, option


def _parse_section(arg: str) -> str:
    if '.' in arg:
        section, *name = arg.split('.')
        if name:
            section = '{} "{}"'.format(section, '.'.join(name))
    else:
        section = arg
    return section


def _section_name(section: str) -> Tuple[str, Optional[str]]:
    sec_name, *name = section.split(" ", 1)
    if name:
        return sec_name, name[0][1:-1]
    return sec_name, None


def _set(parser: configparser.ConfigParser, name: str, value: str) -> None:
    section, option = _parse_name(name)
    if not parser.has_section(section) and section != 'DEFAULT':
        parser.add_section(section)
    parser.set(section, option, value)


def _isdecimal(v: str):
    return len(v) == 0 or v.isdecimal()


def _isfloat(value: str) -> bool:
    l, *r = value.split('.')
    return _isdecimal(l) and (len(r) == 0 or (len(r) == 1 and _isdecimal(r[0])))


def _convert(value: str) -> Union[int, float, str, bool]:
    if value == "":
        return value
    elif value.isdecimal():
        return int(value)
    elif value != '.' and _isfloat(value):
        return float(value)
    elif value.lower() in configparser.ConfigParser.BOOLEAN_STATES:
        return configparser.ConfigParser.BOOLEAN_STATES[value.lower()]
    else:
        return value


class Config:
    class Nothing:
        pass

    NOTHING = Nothing()
    CONFIG_FILE_NAME: str = 'urifactory.cfg'

    _parser: configparser.ConfigParser
    _user_parser: configparser.ConfigParser
    _site_config_dir: Path
    _site_config_path: Path
    _user_config_dir: Path
    _user_config_path: Path
    _debug: bool
    _verbose: bool

    def __init__(self, file_name=None) -> None:
        if file_name is None:
            file_name = Config.CONFIG_FILE_NAME
        self._parser = configparser.ConfigParser(interpolation=None)
        self._user_parser = configparser.ConfigParser(interpolation=None)
        self._site_config_dir = Path(appdirs.site_config_dir('urifactory'))
        self._site_config_path = self._site_config_dir / file_name
        self._user_config_dir = Path(appdirs.user_config_dir('urifactory'))
        self._user_config_path = self._user_config_dir / file_name
        self._debug = False
        self._verbose = False

    @property
    def user_config_path(self) -> Path:
        return self._user_config_path

    @property
    def site_config_path(self) -> Path:
        return self._site_config_path

    def _load_environmental_vars(self):
        path = os.environ.get(ENV_PREFIX + 'USER_CONFIG_PATH')
        if path:
            self._user_config_path = Path(path)
            self._user_config_dir = self._user_config_path.parent

        path = os.environ.get(ENV_PREFIX + 'SITE_CONFIG_PATH')
        if path:
            self._site_config_path = Path(path)
            self._site_config_dir = self._site_config_path.parent

        vars = [v for v in os.environ if v.startswith(ENV_PREFIX) and not v.endswith('_CONFIG_PATH')]
        for var in vars:
            name = var.replace(ENV_PREFIX, '', 1).replace('_', '.').lower()
            _set(self._parser, name, os.environ[var])

    def _load_site_config(self):
        self._parser.read(self._site_config_path)

    def _load_user_config(self):
        if self._user_config_path.exists() and self._user_config_path.stat().st_mode & 0o777 != 0o600:
            raise Exception(f'User configuration file {self._user_config_path} has incorrect permissions.')
        self._parser.read(self._user_config_path)
        self._user_parser.read(self._user_config_path)

    def load(self, file: TextIO=None) -> None:
        """
        Load the configuration.

        This loads the configuration from the environment and either the given file or the site and user config files.

        The location of these files are either specified by the URIFACTORY_USER_CONFIG_PATH and
        URIFACTORY_SITE_CONFIG_PATH environmental variables or in the appdirs.site_config_dir('urifactory') and
        appdirs.user_config_dir('urifactory').

        Any other URIFACTORY_ environmental variable sets the option of the same name, i.e. URIFACTORY_RESOLVE_BASE
        sets resolve.base. The user config file is loaded after the site config file and will overwrite any settings
        specified.

        Only the user config file and the options changed afterwards are written back by save.

        :param file: The location of a config file to load.
        """
        self._load_environmental_vars()

        if file is not None:
            self._parser.read_file(file)
            self._user_parser.read(self._user_config_path)
        else:
            self._load_site_config()
            self._load_user_config()

    @property
    def debug(self) -> bool:
        return self._debug

    def set_debug(self, debug: bool) -> None:
        self._debug = debug

    @property
    def verbose(self) -> bool:
        return self._verbose

    def set_verbose(self, verbose: bool) -> None:
        self._verbose = verbose

    @property
    def config_directory(self) -> Path:
        return self._user_config_dir

    @property
    def schemes(self) -> Dict[str, str]:
        """
        The URI type names mapped to schemes by the ``[scheme "<name>"]`` sections.
        """
        schemes = {}
        for section in self._parser.sections():
            sec_name, name = _section_name(section)
            if sec_name == 'scheme' and name and self._parser.has_option(section, 'type'):
                schemes[name] = self._parser.get(section, 'type')
        return schemes

    def save(self) -> None:
        os.makedirs(self._user_config_dir, exist_ok=True)
        with open(self._user_config_path, 'w') as file:
            self._user_parser.write(file)
        self._user_config_path.chmod(0o600)

    def get_section(self, name: str, default: Optional[List[Tuple[str, str]]]=None)\
            -> List[Tuple[str, Union[int, float, bool, str]]]:
        try:
            items = self._parser.items(_parse_section(name))
            return [(k, _convert(v)) for (k, v) in items]
        except (configparser.NoSectionError,):
            if default is not None:
                return default
            raise KeyError(f'Section {name} not found in configuration')

    def get_option(self, name: str, default: Optional[str]=NOTHING) -> Union[int, float, bool, str]:
        section, option = _parse_name(name)
        try:
            return _convert(self._parser.get(section, option))
        except (configparser.NoSectionError, configparser.NoOptionError):
            if default is not Config.NOTHING:
                return default
            raise KeyError(f'Option {name} not found in configuration')

    def delete_option(self, name: str) -> None:
        section, option = _parse_name(name)
        removed = False
        for parser in (self._user_parser, self._parser):
            try:
                removed = parser.remove_option(section, option)
            except configparser.NoSectionError:
                removed = False
        if not removed:
            raise KeyError(f"Option {name} not found in configuration")

    def delete_section(self, name: str) -> None:
        section = _parse_section(name)
        self._user_parser.remove_section(section)
        if not self._parser.remove_section(section):
            raise KeyError(f"Section {name} not found in configuration")

    def set_option(self, name: str, value: str) -> None:
        _set(self._user_parser, name, value)
        _set(self._parser, name, value)

    def list_options(self) -> List[str]:
        options = []
        for option, value in self._parser.defaults().items():
            options.append(f'{option}: {value}')
        for section in self._parser.sections():
            for option in self._parser.options(section):
                if option in self._parser.defaults():
                    continue
                value = self._parser.get(section, option)
                sec_name, name = _section_name(section)
                if name:
                    sec_name = sec_name + '.' + name
                options.append(f'{sec_name}.{option}: {value}')
        return options
