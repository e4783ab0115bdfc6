import sys

from xml_subset_parser.cli import main

sys.exit(main())
