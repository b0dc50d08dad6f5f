from pathlib import Path

from rich.pretty import pprint

from argstick import *

__prog__ = "deploy"


class Deploy:
    __ignorecase__ = True

    action: str = Argument(action=True, position=0, required=True, description="what to do")
    target: str = Argument(description="environment", hooks=[StickyArg(Path.home() / ".deploy-sticky.txt")])
    replicas: int = Argument(default=1, description="instances to start")
    dry_run: bool = Argument(shortcut="n", default=False)


if __name__ == '__main__':
    pprint(vars(parse(Deploy, shell=True, fancy=True)))
