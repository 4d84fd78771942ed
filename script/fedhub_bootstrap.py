#!/usr/bin/env python3
import json
import sys

from fedhub.bootstrap import start
from fedhub.configure import HubConfiguration
from fedhub.exception import FedHubError

if __name__ == '__main__':
    import argparse

    parser = argparse.ArgumentParser()
    parser.add_argument('-b', dest='base_path', default="",
                        help="Directory relative paths in the configuration are relative to")
    parser.add_argument('-r', dest='report', action='store_true',
                        help="Print what was created")
    parser.add_argument('config_file')
    args = parser.parse_args()

    config = HubConfiguration.create_from_config_file(args.config_file, base_path=args.base_path)
    try:
        store, report = start(config)
    except FedHubError as err:
        print(f"Bootstrap failed: {err}", file=sys.stderr)
        sys.exit(1)

    if args.report:
        print(json.dumps(report, indent=2))
