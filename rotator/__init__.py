"""Auto scaling group instance rotator package."""
import argparse as _argparse

from rotator import _runner


def parse() -> dict:
    """Parse command line arguments to invoke the rotator."""
    parser = _argparse.ArgumentParser(prog="asg-rotator")
    parser.add_argument("--stack-name")
    parser.add_argument("--group-name")
    parser.add_argument("-p", "--profile", dest="aws_profile")
    parser.add_argument("--region", dest="aws_region")
    parser.add_argument("--ssh-user")
    parser.add_argument("--log-file")
    parser.add_argument("--live", action="store_true")
    parser.add_argument("--pretty-print", action="store_true")
    parser.add_argument("--config-path")
    return vars(parser.parse_args())


def main():
    """Execute the auto scaling group instance rotator."""
    return 1 if _runner.main(parse()) else 0
