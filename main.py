from rich.pretty import pprint

from argscan import *

config = (
    ConfigBuilder()
    .add_option("output", "o", "output", Exact(1))
    .add_long_option("include", "include", More(0))
    .add_flag("verbose", "v", "verbose")
    .add_subcommand("build", Less(3))
    .build(strict=True)
)


if __name__ == '__main__':
    pprint(parse_args(config, shell=True, fancy=True))
