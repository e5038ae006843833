from tcprobe.bootstrap.config.loader import get_cli_args
from tcprobe.bootstrap.deps import get_dispatcher
from tcprobe.core.helpers.utils import setup_logging, scan


@scan("tcprobe.bootstrap.commands")
def main():
    args = get_cli_args()
    setup_logging(args.log_level)

    get_dispatcher().dispatch(args.command, args)


if __name__ == "__main__":
    main()
