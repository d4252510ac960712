import sys

from mnist_converter.cli import main

sys.exit(main())
