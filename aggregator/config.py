import configparser
import os

RC_FILE_HELP = """\
Sample rcfile:
    [network]
    home site = 1  # default=1
    [links]
    scheme = https|http  # default=https
    admin path = /wp-admin/  # default=/wp-admin/
"""


class ConfigEnum(object):
    __slots__ = (
        'defaultName',
        '_enumVals',
    )

    def __init__(self, default, **enumVals):
        self._enumVals = enumVals
        assert default in enumVals
        self.defaultName = default
        for enumName in enumVals:
            assert enumName not in self.__slots__

    def names(self):
        return iter(self._enumVals.keys())

    def values(self):
        return iter(self._enumVals.values())

    @property
    def defaultVal(self):
        return self._enumVals[self.defaultName]

    def __getattr__(self, attr):
        assert attr != '_enumVals'
        if attr in self._enumVals:
            return self._enumVals[attr]
        else:
            return object.__getattribute__(self, attr)


LINK_SCHEME = ConfigEnum(
    'HTTPS',  # default
    HTTPS='https',
    HTTP='http',
)

DEFAULT_HOME_SITE = 1
DEFAULT_ADMIN_PATH = "/wp-admin/"
DB_FILE_NAME = "aggregator.db"


def _getConfig(cfgParser, section, option, defaultValue=None):
    if not cfgParser.has_section(section):
        return defaultValue
    if not cfgParser.has_option(section, option):
        return defaultValue
    return cfgParser.get(section, option)


def _getEnumConfig(cfgParser, section, option, enum):
    optionVal = _getConfig(
        cfgParser, section, option, enum.defaultVal)
    if optionVal not in list(enum.values()):
        raise ConfigError(
            "RC file has invalid \"{section}.{option}\" setting {optionVal}.  Valid "
            "options: {allowedVals}".format(
                section=section,
                option=option,
                optionVal=optionVal,
                allowedVals=", ".join(list(enum.values()))))

    return optionVal


def _getIntConfig(cfgParser, section, option, default):
    val = _getConfig(cfgParser, section, option, None)
    if val is None:
        return default
    try:
        intVal = int(val)
    except ValueError:
        intVal = 0
    if intVal <= 0:
        raise ConfigError(
            "RC file has invalid \"{section}.{option}\" setting {optionVal}.  Expected "
            "a positive integer".format(
                section=section,
                option=option,
                optionVal=val))
    return intVal


class ConfigError(Exception):
    pass


class Config(object):
    validConfig = {
        'network': {'home site'},
        'links': {'scheme', 'admin path'},
    }

    def _validateConfigParser(self, cfgParser):
        cfgSections = set(cfgParser.sections())
        unknownSections = cfgSections - set(self.validConfig.keys())
        if unknownSections:
            raise ConfigError(
                "RC file has unknown configuration sections: {}".format(
                    ", ".join(sorted(unknownSections))))
        for section in cfgSections:
            cfgValues = set(cfgParser.options(section))
            unknownOptions = cfgValues - self.validConfig[section]
            if unknownOptions:
                raise ConfigError(
                    "RC file has unknown configuration options in "
                    "section \"{}\": {}".format(
                        section, ", ".join(sorted(unknownOptions))))

    def __init__(self, options):
        stateDir = options.stateDir
        self.options = options
        self._dbDir = os.path.expanduser(stateDir) + "/db/"
        self._logDir = os.path.expanduser(stateDir) + "/log/"

        rcFile = os.path.expanduser(options.rcFile)
        cfgParser = configparser.RawConfigParser()
        cfgParser.read(rcFile)

        self._validateConfigParser(cfgParser)

        self._homeSite = _getIntConfig(
            cfgParser, 'network', 'home site', DEFAULT_HOME_SITE)
        self._linkScheme = _getEnumConfig(
            cfgParser, 'links', 'scheme', LINK_SCHEME)
        self._adminPath = _getConfig(
            cfgParser, 'links', 'admin path', DEFAULT_ADMIN_PATH)

    @property
    def verbose(self):
        return self.options.verbose

    @staticmethod
    def checkDir(dirName):
        if not os.access(dirName, os.W_OK | os.X_OK | os.R_OK):
            os.makedirs(dirName)
        return dirName

    @property
    def dbDir(self):
        return self.checkDir(self._dbDir)

    @property
    def dbFile(self):
        return os.path.join(self.dbDir, DB_FILE_NAME)

    @property
    def logDir(self):
        return self.checkDir(self._logDir)

    @property
    def homeSite(self):
        return self._homeSite

    @property
    def linkScheme(self):
        return self._linkScheme

    @property
    def adminPath(self):
        return self._adminPath
