#!/usr/bin/python3

# usage: launcher.py <job>   e.g. launcher.py quickstart

import sys
from importlib import import_module

mod = import_module(sys.argv[1] + '.' + sys.argv[1])
main = getattr(mod,'main')

sys.exit(main())
