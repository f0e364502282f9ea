import os


def addArgumentParserBaseFlags(parser, logfileName):
    '''
    Adds the flags shared by every aggregator command: state directory,
    rc-file override, verbosity and debug logging.

    Provides ALL flags required by the Config class.
    '''
    parser.add_argument(
        "-v",
        dest="verbose",
        help="Increase verbosity (multiple times for more verbose)",
        action="append_const",
        const=1)
    parser.add_argument(
        "-d",
        "--state-dir",
        dest='stateDir',
        metavar="DIR",
        help="Specify state directory (default='%(default)s')",
        default=os.getenv('AGGREGATOR_STATE_DIR', "~/.local/share/aggregator"))
    parser.add_argument("--rc-file", dest="rcFile",
                        help="Specify path to rc-file (default=\"%(default)s\")",
                        default="~/.config/aggregatorrc")
    parser.add_argument(
        "--debug",
        nargs="?",
        const=True,
        default=False,
        metavar="FILE",
        help="enable debug output to <state-dir>/log/%s.log, or to FILE" % logfileName)
