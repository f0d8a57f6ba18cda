import sys

from reflection_generator.cli import main

sys.exit(main())
